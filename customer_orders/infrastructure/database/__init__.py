"""PostgreSQL persistence for the customer aggregate (SQLAlchemy async)."""

from .connection import create_engine, create_session_factory, init_db
from .models import (
    Base,
    CustomerRecord,
    DomainEventRecord,
    OrderItemRecord,
    OrderRecord,
)
from .outbox import OutboxRelay, get_unprocessed_events
from .repository import SqlAlchemyCustomerRepository

__all__ = [
    "Base",
    "CustomerRecord",
    "DomainEventRecord",
    "OrderItemRecord",
    "OrderRecord",
    "OutboxRelay",
    "SqlAlchemyCustomerRepository",
    "create_engine",
    "create_session_factory",
    "get_unprocessed_events",
    "init_db",
]
