"""In-memory workflow engine for sequential process definitions.

Only supports what the order bridge relies on: one active step per
instance, message subscriptions per step, and a business key per
instance. Useful for tests and for running the CLI without a Camunda
server.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from itertools import count

from ..domain.errors import DuplicateBusinessKeyError, NotFoundError, NotWaitingError
from ..domain.models import ORDER_PROCESS_KEY, OrderMessage
from ..domain.workflow import ActivityInstance, EventSubscription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """A wait state. Receiving any of ``messages`` moves to the next step."""

    activity_name: str
    messages: tuple[str, ...] = ()

    @property
    def activity_id(self) -> str:
        return "Activity_" + self.activity_name.replace(" ", "")


@dataclass(frozen=True)
class ProcessDefinition:
    key: str
    steps: tuple[Step, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError(f"Process {self.key!r} needs at least one step")


ORDER_PROCESS = ProcessDefinition(
    key=ORDER_PROCESS_KEY,
    steps=(
        Step("Payment expected", (OrderMessage.PAYMENT.value,)),
        Step("Paid", (OrderMessage.START_PREPARATION.value,)),
        Step("In preparation", (OrderMessage.PREPARED.value,)),
        Step("Ready", (OrderMessage.TAKEN.value,)),
        Step("Taken"),
    ),
)


@dataclass
class _Instance:
    id: str
    definition: ProcessDefinition
    business_key: str
    position: int = 0

    @property
    def step(self) -> Step:
        return self.definition.steps[self.position]


class InMemoryWorkflowEngine:
    """Workflow client running sequential definitions in process memory.

    Implements the ``WorkflowClient`` protocol. Instances that move past
    their last step end and disappear, as they would in a real engine.
    All access to the instance tables goes through one lock, so the engine
    can be shared between threads.
    """

    def __init__(self, definitions: list[ProcessDefinition] | None = None):
        self._definitions = {
            d.key: d for d in (definitions if definitions is not None else [ORDER_PROCESS])
        }
        self._instances: dict[str, _Instance] = {}
        self._instances_by_id: dict[str, _Instance] = {}
        self._ids = count(1)
        self._lock = threading.Lock()

    @property
    def engine(self) -> str:
        return "memory"

    def deploy(self, definition: ProcessDefinition) -> None:
        with self._lock:
            self._definitions[definition.key] = definition

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # ------------------------------------------------------------------ #
    #  WorkflowClient                                                      #
    # ------------------------------------------------------------------ #

    def start_instance(self, definition_key: str, business_key: str) -> str:
        with self._lock:
            definition = self._definitions.get(definition_key)
            if definition is None:
                raise NotFoundError(business_key, f"unknown process definition {definition_key!r}")
            if business_key in self._instances:
                raise DuplicateBusinessKeyError(business_key)
            instance = _Instance(
                id=f"{definition_key}:{next(self._ids)}",
                definition=definition,
                business_key=business_key,
            )
            self._instances[business_key] = instance
            self._instances_by_id[instance.id] = instance
            entered = instance.step.activity_name
        logger.debug("Instance %s entered %r", instance.id, entered)
        return instance.id

    def correlate_message(self, message_name: str, business_key: str) -> None:
        with self._lock:
            instance = self._instances.get(business_key)
            if instance is None:
                raise NotFoundError(business_key)
            if message_name not in instance.step.messages:
                raise NotWaitingError(business_key, message_name)
            instance.position += 1
            if instance.position >= len(instance.definition.steps):
                del self._instances[business_key]
                del self._instances_by_id[instance.id]
                entered = None
            else:
                entered = instance.step.activity_name
        if entered is None:
            logger.debug("Instance %s ended", instance.id)
        else:
            logger.debug("Instance %s entered %r", instance.id, entered)

    def find_instance_by_business_key(self, business_key: str) -> str:
        with self._lock:
            instance = self._instances.get(business_key)
        if instance is None:
            raise NotFoundError(business_key)
        return instance.id

    def get_activity_tree(self, instance_id: str) -> ActivityInstance:
        with self._lock:
            instance = self._by_id(instance_id)
            step = instance.step
        return ActivityInstance(
            activity_id=instance.definition.key,
            activity_name=instance.definition.key,
            children=(ActivityInstance(step.activity_id, step.activity_name),),
        )

    def list_pending_message_subscriptions(
        self, instance_id: str,
    ) -> list[EventSubscription]:
        with self._lock:
            step = self._by_id(instance_id).step
        return [EventSubscription(name) for name in step.messages]

    def _by_id(self, instance_id: str) -> _Instance:
        instance = self._instances_by_id.get(instance_id)
        if instance is None:
            raise NotFoundError(instance_id, "unknown process instance id")
        return instance
