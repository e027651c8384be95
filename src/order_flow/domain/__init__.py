"""Domain layer: the order aggregate, engine protocol and error types."""

from .errors import (
    CorrelationError,
    DuplicateBusinessKeyError,
    MalformedSubscriptionNameError,
    ModelInvariantViolation,
    NotFoundError,
    NotWaitingError,
    TransportError,
    WorkflowError,
    WorkflowNotConfiguredError,
)
from .links import SubscriptionName, extract_link_name, parse_subscription_name
from .models import (
    ORDER_PROCESS_KEY,
    LineItem,
    Location,
    Money,
    Order,
    OrderId,
    OrderMessage,
    OrderPaid,
)
from .workflow import ActivityInstance, EventSubscription, WorkflowClient

__all__ = [
    "ORDER_PROCESS_KEY",
    "ActivityInstance",
    "CorrelationError",
    "DuplicateBusinessKeyError",
    "EventSubscription",
    "LineItem",
    "Location",
    "MalformedSubscriptionNameError",
    "ModelInvariantViolation",
    "Money",
    "NotFoundError",
    "NotWaitingError",
    "Order",
    "OrderId",
    "OrderMessage",
    "OrderPaid",
    "SubscriptionName",
    "TransportError",
    "WorkflowClient",
    "WorkflowError",
    "WorkflowNotConfiguredError",
    "extract_link_name",
    "parse_subscription_name",
]
