"""
Wiring: build a ready-to-use CustomerApplicationService from settings.

Usage:
    from customer_orders.config import get_settings
    from customer_orders.container import build_customer_service

    service = build_customer_service(get_settings())
    customer_id = await service.create_customer_and_place_order(
        "John Doe", [("Widget", 2, Decimal("9.99"))]
    )
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from customer_orders.application.interfaces import CustomerRepository
from customer_orders.application.service import CustomerApplicationService
from customer_orders.config import Settings
from customer_orders.infrastructure.database.connection import (
    create_engine,
    create_session_factory,
)
from customer_orders.infrastructure.database.repository import (
    SqlAlchemyCustomerRepository,
)
from customer_orders.infrastructure.dispatcher import LoggingDomainEventDispatcher
from customer_orders.infrastructure.memory import (
    InMemoryCustomerRepository,
    InMemoryCustomerStore,
)

logger = structlog.get_logger(__name__)


def build_repository(
    settings: Settings,
    *,
    store: InMemoryCustomerStore | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    customer_logger: Any = None,
) -> CustomerRepository:
    """
    Create the repository selected by ``settings.repository_backend``.

    Raises:
        ValueError: If the backend is not supported.
    """
    backend = settings.repository_backend
    if backend == "memory":
        if store is None:
            store = InMemoryCustomerStore()
        return InMemoryCustomerRepository(store, customer_logger)
    if backend == "postgres":
        if session_factory is None:
            session_factory = create_session_factory(create_engine(settings))
        return SqlAlchemyCustomerRepository(
            session_factory, settings.business_rules(), customer_logger
        )
    raise ValueError(f"Unsupported repository backend: {backend!r}. Supported: memory, postgres")


def build_customer_service(
    settings: Settings,
    *,
    store: InMemoryCustomerStore | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> CustomerApplicationService:
    """Compose repository, dispatcher and business rules into the service."""
    customer_logger = structlog.get_logger("customer_orders.customer")
    repository = build_repository(
        settings,
        store=store,
        session_factory=session_factory,
        customer_logger=customer_logger,
    )

    logger.info(
        "customer_service_built",
        backend=settings.repository_backend,
        max_outstanding_orders=settings.max_outstanding_orders,
        outstanding_order_days=settings.outstanding_order_days,
    )

    return CustomerApplicationService(
        repository=repository,
        dispatcher=LoggingDomainEventDispatcher(),
        business_rules=settings.business_rules(),
        customer_logger=customer_logger,
    )
