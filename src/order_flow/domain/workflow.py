"""Workflow engine client protocol (interface).

Every engine adapter (Camunda REST, in-memory, ...) must implement this
protocol so that the application layer can drive an order's process
without knowing which engine runs it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class ActivityInstance:
    """A node of the engine's execution-position tree.

    The root is the process instance itself; its children are the
    activities currently active.
    """

    activity_id: str
    activity_name: str | None = None
    children: tuple[ActivityInstance, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EventSubscription:
    """A pending "waiting for message ``event_name``" registration."""

    event_name: str
    event_type: str = "message"


class WorkflowClient(Protocol):
    """The narrow slice of a workflow engine that the order bridge uses."""

    def start_instance(self, definition_key: str, business_key: str) -> str:
        """Start a new instance of ``definition_key`` and return its id.

        Raises:
            DuplicateBusinessKeyError: If the engine rejects the key.
            TransportError: If the engine cannot be reached.
        """
        ...

    def correlate_message(self, message_name: str, business_key: str) -> None:
        """Deliver ``message_name`` to the instance for ``business_key``.

        Raises:
            NotFoundError: If no instance exists for the key.
            NotWaitingError: If the instance is not subscribed to the message.
        """
        ...

    def find_instance_by_business_key(self, business_key: str) -> str:
        """Return the id of the active instance for ``business_key``.

        Raises:
            NotFoundError: If there is none.
        """
        ...

    def get_activity_tree(self, instance_id: str) -> ActivityInstance:
        ...

    def list_pending_message_subscriptions(
        self, instance_id: str,
    ) -> list[EventSubscription]:
        """Message subscriptions of the instance, in engine listing order."""
        ...
