"""Order aggregate and the value objects it is built from.

The order carries no status of its own. Where it is in its lifecycle is
always read from the workflow engine (see ``order_flow.application``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable
from uuid import uuid4

DEFAULT_CURRENCY = "EUR"

ORDER_PROCESS_KEY = "order"


class CurrencyMismatchError(ValueError):
    """Raised when adding amounts in different currencies."""


@dataclass(frozen=True)
class Money:
    """Monetary amount in a single currency.

    Amounts are kept as ``Decimal`` so that ``2.50 + 1.20`` is exactly
    ``3.70``. Floats and ints are converted through ``str`` on creation.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if not self.currency:
            raise ValueError("Currency code is required")

    @classmethod
    def of(cls, amount: Decimal | float | int | str, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(Decimal(str(amount)), currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(Decimal("0"), currency)

    def add(self, other: Money) -> Money:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"Cannot add {other.currency} to {self.currency}"
            )
        return Money(self.amount + other.amount, self.currency)

    def __add__(self, other: Money) -> Money:
        return self.add(other)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


class Location(Enum):
    """Where the customer consumes the order."""

    TAKE_AWAY = "take_away"
    IN_STORE = "in_store"


class Milk(Enum):
    SKIMMED = "skimmed"
    SEMI = "semi"
    WHOLE = "whole"


class Size(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True)
class LineItem:
    """A single drink on an order. ``price`` is the price of the line."""

    name: str
    price: Money
    milk: Milk = Milk.SEMI
    size: Size = Size.LARGE


class OrderMessage(Enum):
    """Messages the order process waits for, one per lifecycle transition."""

    PAYMENT = "Message_PAYMENT"
    START_PREPARATION = "Message_START_PREPARATION"
    PREPARED = "Message_PREPARED"
    TAKEN = "Message_TAKEN"


@dataclass(frozen=True)
class OrderId:
    """Opaque order identity."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Order id must not be empty")

    @classmethod
    def generate(cls) -> OrderId:
        return cls(uuid4().hex)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DomainEvent:
    occurred_on: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True, kw_only=True)
class OrderPaid(DomainEvent):
    """Raised once payment for an order has been accepted."""

    order_id: OrderId


class Order:
    """Aggregate root for a customer order.

    Line items are copied on construction, so the caller's collection can
    be reused or mutated without affecting the order. Creating an order has
    no side effects; registering it with the workflow engine is a separate
    step performed by ``OrderService.place_order``.
    """

    def __init__(
        self,
        line_items: Iterable[LineItem] = (),
        location: Location | None = None,
        *,
        order_id: OrderId | None = None,
        ordered_date: datetime | None = None,
    ) -> None:
        self._id = order_id or OrderId.generate()
        self._location = location if location is not None else Location.TAKE_AWAY
        self._line_items: list[LineItem] = list(line_items)
        self._ordered_date = ordered_date or datetime.now()
        self._domain_events: list[DomainEvent] = []

    @property
    def id(self) -> OrderId:
        return self._id

    @property
    def business_key(self) -> str:
        """The id as text, used to find this order's process instance."""
        return str(self._id)

    @property
    def location(self) -> Location:
        return self._location

    @property
    def ordered_date(self) -> datetime:
        return self._ordered_date

    @property
    def line_items(self) -> tuple[LineItem, ...]:
        return tuple(self._line_items)

    @property
    def price(self) -> Money:
        """Sum of the line item prices, ``0 EUR`` for an empty order."""
        total: Money | None = None
        for item in self._line_items:
            total = item.price if total is None else total.add(item.price)
        return total if total is not None else Money.zero()

    # ------------------------------------------------------------------ #
    #  Domain events                                                       #
    # ------------------------------------------------------------------ #

    def register_event(self, event: DomainEvent) -> DomainEvent:
        self._domain_events.append(event)
        return event

    @property
    def domain_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._domain_events)

    def pull_events(self) -> list[DomainEvent]:
        """Return the recorded events and forget them."""
        events, self._domain_events = self._domain_events, []
        return events

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Order):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Order(id={self._id}, location={self._location.name}, "
            f"ordered_date={self._ordered_date.isoformat()}, price={self.price})"
        )
