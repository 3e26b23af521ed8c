"""
In-memory customer repository.

Useful for:
- Unit tests (fast, no DB required)
- Local development (no infrastructure needed)

The store is an explicit object handed to each repository, never
process-wide state, so tests get isolated instances. Aggregates are
stored as snapshots: callers never share an instance with the store.
"""

from __future__ import annotations

import threading
from typing import Any
from uuid import UUID

import structlog

from customer_orders.domain.aggregates import CustomerAggregateRoot
from customer_orders.domain.entities import Order
from customer_orders.domain.exceptions import NullArgumentError

logger = structlog.get_logger(__name__)


def _snapshot(customer: CustomerAggregateRoot, customer_logger: Any) -> CustomerAggregateRoot:
    """Copy the persistent state of an aggregate, leaving pending events behind."""
    return CustomerAggregateRoot.reconstruct(
        customer_id=customer.id,
        name=customer.name,
        business_rules=customer.business_rules,
        orders=[
            Order.reconstruct(
                order_id=order.id,
                order_date=order.order_date,
                items=order.items,
                shipping_address=order.shipping_address,
                billing_address=order.billing_address,
            )
            for order in customer.orders
        ],
        default_shipping_address=customer.default_shipping_address,
        default_billing_address=customer.default_billing_address,
        logger=customer_logger,
    )


class InMemoryCustomerStore:
    """Dictionary of customer snapshots guarded by a lock."""

    def __init__(self):
        self._customers: dict[UUID, CustomerAggregateRoot] = {}
        self._lock = threading.Lock()

    def get(self, customer_id: UUID) -> CustomerAggregateRoot | None:
        with self._lock:
            return self._customers.get(customer_id)

    def put(self, customer: CustomerAggregateRoot) -> bool:
        """Store a snapshot. Returns True if it replaced an existing customer."""
        with self._lock:
            existed = customer.id in self._customers
            self._customers[customer.id] = customer
            return existed

    def __len__(self) -> int:
        with self._lock:
            return len(self._customers)

    def __contains__(self, customer_id: object) -> bool:
        with self._lock:
            return customer_id in self._customers


class InMemoryCustomerRepository:
    """CustomerRepository backed by an InMemoryCustomerStore."""

    def __init__(self, store: InMemoryCustomerStore | None, customer_logger: Any = None):
        if store is None:
            raise NullArgumentError("store")
        self.store = store
        self.customer_logger = customer_logger

    async def get_by_id(self, customer_id: UUID) -> CustomerAggregateRoot | None:
        logger.debug("customer_lookup", customer_id=str(customer_id))

        stored = self.store.get(customer_id)
        if stored is None:
            logger.warning("customer_not_found", customer_id=str(customer_id))
            return None

        logger.debug(
            "customer_found", customer_id=str(customer_id), customer_name=stored.name
        )
        return _snapshot(stored, self.customer_logger)

    async def save(self, customer: CustomerAggregateRoot | None) -> None:
        if customer is None:
            raise NullArgumentError("customer")

        existed = self.store.put(_snapshot(customer, None))

        logger.info(
            "customer_saved",
            action="updated" if existed else "created",
            customer_id=str(customer.id),
            customer_name=customer.name,
        )
