"""Order use cases: place an order and drive it through its lifecycle.

Usage:
    from order_flow import OrderService, create_workflow_client
    from order_flow.domain import LineItem, Money

    service = OrderService(create_workflow_client("memory"))
    order = service.place_order([LineItem("Latte", Money.of("2.50"))])
    service.mark_paid(order)
    service.status(order)  # 'Paid'
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from ..domain.errors import WorkflowNotConfiguredError
from ..domain.models import (
    ORDER_PROCESS_KEY,
    DomainEvent,
    LineItem,
    Location,
    Order,
    OrderMessage,
    OrderPaid,
)
from ..domain.workflow import WorkflowClient
from .correlation import CorrelationBridge
from .projection import AffordanceDiscovery, StatusProjector

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    """Hands domain events to whatever dispatches them outside the core."""

    def publish(self, event: DomainEvent) -> None:
        ...


class OrderService:
    """Application service tying the order aggregate to its process.

    ``workflow`` is optional: without it orders can still be built (e.g.
    for pricing), but every engine operation raises
    ``WorkflowNotConfiguredError``.
    """

    def __init__(
        self,
        workflow: WorkflowClient | None = None,
        publisher: EventPublisher | None = None,
        process_key: str = ORDER_PROCESS_KEY,
    ):
        self._publisher = publisher
        if workflow is None:
            self._bridge = None
            self._projector = None
            self._discovery = None
        else:
            self._bridge = CorrelationBridge(workflow, process_key)
            self._projector = StatusProjector(workflow)
            self._discovery = AffordanceDiscovery(workflow)

    @property
    def has_workflow(self) -> bool:
        return self._bridge is not None

    # ------------------------------------------------------------------ #
    #  Commands                                                            #
    # ------------------------------------------------------------------ #

    def place_order(
        self,
        line_items: Iterable[LineItem],
        location: Location | None = None,
    ) -> Order:
        """Build an order, then start its process instance if possible."""
        order = Order(line_items, location)
        if self._bridge is None:
            logger.debug("No workflow client configured; order %s not registered", order.id)
        else:
            self._bridge.start(order.business_key)
        return order

    def mark_paid(self, order: Order) -> Order:
        """Send the payment message, then record ``OrderPaid`` on the order.

        The event is only recorded once correlation returned. Publishing it
        is a separate step, see ``publish_events``.
        """
        self._correlate(order, OrderMessage.PAYMENT)
        order.register_event(OrderPaid(order_id=order.id))
        return order

    def mark_in_preparation(self, order: Order) -> Order:
        self._correlate(order, OrderMessage.START_PREPARATION)
        return order

    def mark_prepared(self, order: Order) -> Order:
        self._correlate(order, OrderMessage.PREPARED)
        return order

    def mark_taken(self, order: Order) -> Order:
        self._correlate(order, OrderMessage.TAKEN)
        return order

    def publish_events(self, order: Order) -> int:
        """Drain the order's domain events into the publisher.

        Returns the number of events published. Without a publisher the
        events stay on the order and 0 is returned.
        """
        if self._publisher is None:
            return 0
        events = order.pull_events()
        for event in events:
            self._publisher.publish(event)
        logger.debug("Published %d event(s) for order %s", len(events), order.id)
        return len(events)

    # ------------------------------------------------------------------ #
    #  Queries                                                             #
    # ------------------------------------------------------------------ #

    def status(self, order: Order) -> str:
        return self._require(self._projector).status(order.business_key)

    def available_links(self, order: Order, resource_type: str) -> list[str]:
        return self._require(self._discovery).available_links(
            order.business_key, resource_type,
        )

    # ------------------------------------------------------------------ #
    #  Internal                                                            #
    # ------------------------------------------------------------------ #

    def _correlate(self, order: Order, message: OrderMessage) -> None:
        self._require(self._bridge).correlate(order.business_key, message)

    @staticmethod
    def _require(collaborator):
        if collaborator is None:
            raise WorkflowNotConfiguredError(
                "This operation needs a workflow client; pass one to OrderService"
            )
        return collaborator
