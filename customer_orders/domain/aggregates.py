"""
Aggregates - Consistency Boundaries

An aggregate is a cluster of domain objects that must be consistent.

Key concepts:
1. Aggregate Root: The entry point (CustomerAggregateRoot)
2. Invariants: Rules that must ALWAYS be true
3. Events: Every mutation records a domain event in a pending buffer
4. Consistency: One aggregate = one transaction boundary

Invariant enforced here:
"A customer cannot have max_outstanding_orders or more orders placed within
the last outstanding_order_days when placing a new one."

Orders are never removed, so the outstanding count only grows until older
orders age out of the window.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

from customer_orders.domain.entities import Order, is_empty_id
from customer_orders.domain.events import (
    CustomerAddressUpdatedEvent,
    CustomerCreatedEvent,
    DomainEvent,
    OrderItemAddedEvent,
    OrderPlacedEvent,
)
from customer_orders.domain.exceptions import (
    InvalidStateError,
    LimitExceededError,
    NullArgumentError,
    ValidationError,
)
from customer_orders.domain.rules import CustomerBusinessRules
from customer_orders.domain.value_objects import Address, OrderItem


@dataclass(eq=False)
class CustomerAggregateRoot:
    """
    Customer Aggregate Root.

    The only object a repository loads or saves. Orders and their items
    are reachable exclusively through it.

    The optional logger is a side channel: whether it is present never
    changes what the aggregate does.
    """

    id: uuid.UUID
    name: str
    business_rules: CustomerBusinessRules
    default_shipping_address: Address | None = None
    default_billing_address: Address | None = None

    _orders: list[Order] = field(default_factory=list, repr=False)
    _domain_events: list[DomainEvent] = field(default_factory=list, repr=False)
    _logger: Any = field(default=None, repr=False)

    @classmethod
    def create(
        cls,
        customer_id: uuid.UUID,
        name: str,
        business_rules: CustomerBusinessRules | None,
        logger: Any = None,
    ) -> CustomerAggregateRoot:
        """
        Factory method: register a new customer.

        This is the ONLY way to create a customer (enforces invariants).
        The new aggregate starts with a CustomerCreatedEvent in its buffer.
        """
        if is_empty_id(customer_id):
            raise ValidationError("Customer ID cannot be empty.")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(
                "Customer name cannot be null or empty.", customer_id=customer_id
            )
        if business_rules is None:
            raise NullArgumentError("business_rules")

        customer = cls(
            id=customer_id,
            name=name.strip(),
            business_rules=business_rules,
            _logger=logger,
        )
        customer._record(
            CustomerCreatedEvent(customer_id=customer.id, customer_name=customer.name)
        )
        return customer

    @classmethod
    def reconstruct(
        cls,
        customer_id: uuid.UUID,
        name: str,
        business_rules: CustomerBusinessRules,
        orders: Iterable[Order] = (),
        default_shipping_address: Address | None = None,
        default_billing_address: Address | None = None,
        logger: Any = None,
    ) -> CustomerAggregateRoot:
        """
        Rebuild a customer from persisted state.

        No events are recorded: nothing new happened, the aggregate was
        only loaded.
        """
        return cls(
            id=customer_id,
            name=name,
            business_rules=business_rules,
            default_shipping_address=default_shipping_address,
            default_billing_address=default_billing_address,
            _orders=list(orders),
            _logger=logger,
        )

    @property
    def orders(self) -> tuple[Order, ...]:
        return tuple(self._orders)

    @property
    def domain_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._domain_events)

    def outstanding_order_count(self, now: datetime | None = None) -> int:
        days = self.business_rules.outstanding_order_days
        return sum(1 for order in self._orders if order.is_outstanding(days, now))

    def place_new_order(
        self,
        shipping_address: Address | None = None,
        billing_address: Address | None = None,
    ) -> Order:
        """
        Place a new, empty order.

        Addresses fall back to the customer's defaults. Nothing is mutated
        unless every check passes.

        Raises:
            InvalidStateError: addresses are required and cannot be resolved.
            LimitExceededError: the outstanding-orders cap has been reached.
        """
        shipping = (
            shipping_address if shipping_address is not None else self.default_shipping_address
        )
        billing = (
            billing_address if billing_address is not None else self.default_billing_address
        )

        if self.business_rules.require_order_addresses and (
            shipping is None or billing is None
        ):
            missing = "shipping" if shipping is None else "billing"
            self._log("warning", "order_placement_failed", reason="missing_address")
            raise InvalidStateError(
                f"Customer '{self.name}' has no {missing} address for the new order.",
                customer_id=self.id,
            )

        max_orders = self.business_rules.max_outstanding_orders
        if self.outstanding_order_count() >= max_orders:
            self._log(
                "warning",
                "order_placement_failed",
                reason="limit_exceeded",
                max_outstanding_orders=max_orders,
            )
            raise LimitExceededError(
                f"Customer '{self.name}' has reached the maximum of "
                f"{max_orders} outstanding orders.",
                max_outstanding_orders=max_orders,
                customer_id=self.id,
            )

        order = Order.create(
            uuid.uuid4(),
            datetime.now(timezone.utc),
            shipping,
            billing,
            require_addresses=self.business_rules.require_order_addresses,
        )
        self._orders.append(order)
        self._record(
            OrderPlacedEvent(
                customer_id=self.id, order_id=order.id, order_date=order.order_date
            )
        )
        self._log("info", "order_placed", customer_name=self.name, order_id=str(order.id))
        return order

    def get_order(self, order_id: uuid.UUID) -> Order | None:
        return next((o for o in self._orders if o.id == order_id), None)

    def add_item_to_order(self, order_id: uuid.UUID, item: OrderItem | None) -> None:
        """Add an item to one of this customer's orders."""
        order = self.get_order(order_id)
        if order is None:
            self._log("warning", "add_item_failed", order_id=str(order_id))
            raise InvalidStateError(
                f"Order {order_id} not found for customer {self.id}",
                customer_id=self.id,
                order_id=order_id,
            )

        order.add_item(item)
        self._record(
            OrderItemAddedEvent(customer_id=self.id, order_id=order_id, item=item)
        )
        self._log("info", "item_added", product=item.product, order_id=str(order_id))

    def update_default_addresses(
        self,
        shipping_address: Address | None,
        billing_address: Address | None,
    ) -> None:
        """
        Overwrite the default addresses.

        One CustomerAddressUpdatedEvent is recorded per address whose value
        changed, clearing an address included. Unchanged addresses record
        nothing.
        """
        changes: list[tuple[str, Address | None]] = []
        if shipping_address != self.default_shipping_address:
            changes.append(("shipping", shipping_address))
        if billing_address != self.default_billing_address:
            changes.append(("billing", billing_address))

        self.default_shipping_address = shipping_address
        self.default_billing_address = billing_address

        for address_type, address in changes:
            self._record(
                CustomerAddressUpdatedEvent(
                    customer_id=self.id,
                    address_type=address_type,  # type: ignore[arg-type]
                    address=address,
                )
            )
            self._log(
                "info",
                "default_address_updated",
                address_type=address_type,
                cleared=address is None,
            )

    def clear_domain_events(self) -> None:
        """Empty the pending buffer once the events have been dispatched."""
        self._domain_events.clear()

    def _record(self, event: DomainEvent) -> None:
        self._domain_events.append(event)

    def _log(self, level: str, event: str, **fields: Any) -> None:
        if self._logger is None:
            return
        getattr(self._logger, level)(event, customer_id=str(self.id), **fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CustomerAggregateRoot):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
