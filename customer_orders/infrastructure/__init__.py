"""
Infrastructure Layer - External Dependencies

This layer contains:
- Repositories (in-memory store, PostgreSQL via SQLAlchemy)
- Domain event dispatcher (structured logging)
- Transactional outbox relay

Key principle: All infrastructure is REPLACEABLE.
Domain layer knows nothing about this layer (dependency inversion).
"""

from customer_orders.infrastructure.dispatcher import LoggingDomainEventDispatcher
from customer_orders.infrastructure.memory import (
    InMemoryCustomerRepository,
    InMemoryCustomerStore,
)

__all__ = [
    "InMemoryCustomerRepository",
    "InMemoryCustomerStore",
    "LoggingDomainEventDispatcher",
]
