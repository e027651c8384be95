"""Application layer: correlation, projections and order use cases."""

from .correlation import CorrelationBridge
from .orders import EventPublisher, OrderService
from .projection import AffordanceDiscovery, StatusProjector, project_activity_tree

__all__ = [
    "AffordanceDiscovery",
    "CorrelationBridge",
    "EventPublisher",
    "OrderService",
    "StatusProjector",
    "project_activity_tree",
]
