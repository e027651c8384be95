"""Failures reported by the workflow engine and the bridge around it.

None of these are retried inside ``order_flow``. ``TransportError`` is
the only one a caller might reasonably retry, and only for queries:
starting an instance or correlating a message twice is not safe.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for everything raised by the workflow bridge."""


class CorrelationError(WorkflowError):
    """A message or query could not be tied to a process instance."""


class NotFoundError(CorrelationError):
    """No process instance exists for the business key.

    The order's workflow was never started or has already ended.
    """

    def __init__(self, business_key: str, detail: str | None = None):
        self.business_key = business_key
        msg = f"No process instance for business key {business_key!r}"
        super().__init__(f"{msg}: {detail}" if detail else msg)


class NotWaitingError(CorrelationError):
    """The instance exists but is not subscribed to the message.

    This is an attempted illegal transition, e.g. taking an order that has
    not been prepared yet.
    """

    def __init__(self, business_key: str, message_name: str):
        self.business_key = business_key
        self.message_name = message_name
        super().__init__(
            f"Process instance {business_key!r} is not waiting for {message_name!r}"
        )


class DuplicateBusinessKeyError(WorkflowError):
    """More than one process instance carries the same business key."""

    def __init__(self, business_key: str):
        self.business_key = business_key
        super().__init__(f"Business key {business_key!r} is already in use")


class ModelInvariantViolation(WorkflowError):
    """The activity tree does not have exactly one active child.

    The status projection assumes a strictly sequential process model.
    Seeing anything else means the model and the code disagree, which a
    retry will not fix.
    """

    def __init__(self, instance_id: str, active: list[str]):
        self.instance_id = instance_id
        self.active = active
        super().__init__(
            f"Expected exactly one active activity in process instance "
            f"{instance_id!r}, found {len(active)}: {active}. "
            "Adjust the status projection when changing the process model."
        )


class TransportError(WorkflowError):
    """The engine could not be reached or sent an unusable response."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class WorkflowNotConfiguredError(WorkflowError):
    """An engine operation was requested but no workflow client is wired."""


class MalformedSubscriptionNameError(WorkflowError, ValueError):
    """A subscription name does not follow ``Message_<ResourceType>_<LinkName>``."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"Malformed subscription name {name!r}: {reason}")
