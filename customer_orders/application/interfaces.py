"""
Ports consumed by the application service.

The core depends only on these contracts; it does not care whether the
backing store is an in-memory map or a relational database.
"""

from __future__ import annotations

from typing import Iterable, Protocol
from uuid import UUID

from customer_orders.domain.aggregates import CustomerAggregateRoot
from customer_orders.domain.events import DomainEvent


class CustomerRepository(Protocol):
    """Interface for customer aggregate persistence (in-memory, PostgreSQL, ...)."""

    async def get_by_id(self, customer_id: UUID) -> CustomerAggregateRoot | None:
        """Load the whole aggregate, or None if the customer is unknown."""
        ...

    async def save(self, customer: CustomerAggregateRoot) -> None:
        """
        Upsert the aggregate.

        Inserts the customer if absent, otherwise overwrites its fields and
        replaces its order item rows.
        """
        ...


class DomainEventDispatcher(Protocol):
    """Interface for notifying the outside world about domain events."""

    async def dispatch(self, events: Iterable[DomainEvent]) -> None:
        """Fire-and-forget notification for each event, in order."""
        ...
