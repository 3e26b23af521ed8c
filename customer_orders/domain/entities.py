"""
Entities - Objects With Identity

An Order is identified by its id, not by its contents. It is owned
exclusively by CustomerAggregateRoot: created only through
``place_new_order`` and mutated only through ``add_item_to_order``.
Orders are never deleted, only accumulated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from customer_orders.domain.exceptions import NullArgumentError, ValidationError
from customer_orders.domain.value_objects import Address, OrderItem


def is_empty_id(value: UUID | None) -> bool:
    """True for None and for the nil UUID."""
    return value is None or value.int == 0


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@dataclass(eq=False)
class Order:
    """
    Order entity.

    Invariant: no two items share both product and price. Adding such an
    item merges quantities instead of appending a second line.
    """

    id: UUID
    order_date: datetime
    shipping_address: Address | None = None
    billing_address: Address | None = None
    _items: list[OrderItem] = field(default_factory=list, repr=False)

    @classmethod
    def create(
        cls,
        order_id: UUID,
        order_date: datetime,
        shipping_address: Address | None = None,
        billing_address: Address | None = None,
        *,
        require_addresses: bool = False,
    ) -> Order:
        """
        Factory method: create a new order, enforcing creation invariants.

        Raises:
            ValidationError: empty id, future order date, or missing
                addresses when ``require_addresses`` is set.
        """
        if is_empty_id(order_id):
            raise ValidationError("Order ID cannot be empty.")

        order_date = _as_utc(order_date)
        if order_date > datetime.now(timezone.utc):
            raise ValidationError("Order date cannot be in the future.", order_id=order_id)

        if require_addresses:
            if shipping_address is None:
                raise ValidationError("Shipping address is required.", order_id=order_id)
            if billing_address is None:
                raise ValidationError("Billing address is required.", order_id=order_id)

        return cls(
            id=order_id,
            order_date=order_date,
            shipping_address=shipping_address,
            billing_address=billing_address,
        )

    @classmethod
    def reconstruct(
        cls,
        order_id: UUID,
        order_date: datetime,
        items: Iterable[OrderItem] = (),
        shipping_address: Address | None = None,
        billing_address: Address | None = None,
    ) -> Order:
        """
        Rebuild an order from persisted fields.

        Creation checks are not re-run: a persisted order date is in the
        past by the time it is loaded, and items were merged when added.
        """
        return cls(
            id=order_id,
            order_date=_as_utc(order_date),
            shipping_address=shipping_address,
            billing_address=billing_address,
            _items=list(items),
        )

    @property
    def items(self) -> tuple[OrderItem, ...]:
        return tuple(self._items)

    def add_item(self, item: OrderItem | None) -> None:
        """
        Add an item, combining it with an existing line of the same
        product and price.

        The combined line keeps the newer item's product and price and
        moves to the end of the list.
        """
        if item is None:
            raise NullArgumentError("item")

        existing = next((i for i in self._items if i.is_same_line(item)), None)
        if existing is not None:
            self._items.remove(existing)
            self._items.append(existing.combined_with(item))
        else:
            self._items.append(item)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.line_total for item in self._items), Decimal("0"))

    def is_outstanding(self, days: int, now: datetime | None = None) -> bool:
        """True while ``order_date + days`` is still later than ``now``."""
        now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        return self.order_date + timedelta(days=days) > now

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
