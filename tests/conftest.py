"""
Pytest configuration and fixtures for customer order tests.
"""

import uuid
from decimal import Decimal
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from customer_orders.domain.aggregates import CustomerAggregateRoot
from customer_orders.domain.rules import CustomerBusinessRules
from customer_orders.domain.value_objects import Address, OrderItem
from customer_orders.infrastructure.database.connection import (
    create_session_factory,
    init_db,
)
from customer_orders.infrastructure.memory import InMemoryCustomerStore


@pytest.fixture
def business_rules() -> CustomerBusinessRules:
    """Small limit so tests can hit it quickly."""
    return CustomerBusinessRules(max_outstanding_orders=3, outstanding_order_days=30)


@pytest.fixture
def customer_logger() -> Any:
    """Structlog logger whose output can be captured with capture_logs()."""
    return structlog.get_logger("tests.customer")


@pytest.fixture
def customer(business_rules: CustomerBusinessRules, customer_logger: Any) -> CustomerAggregateRoot:
    return CustomerAggregateRoot.create(
        uuid.uuid4(), "John Doe", business_rules, customer_logger
    )


@pytest.fixture
def shipping_address() -> Address:
    return Address(
        street="1 Main Street",
        city="Springfield",
        state="IL",
        postal_code="62701",
        country="USA",
    )


@pytest.fixture
def billing_address() -> Address:
    return Address(
        street="500 Market Street",
        city="San Francisco",
        state="CA",
        postal_code="94105",
        country="USA",
    )


@pytest.fixture
def order_item() -> OrderItem:
    return OrderItem(product="Product 1", quantity=2, price=Decimal("25.00"))


@pytest.fixture
def store() -> InMemoryCustomerStore:
    return InMemoryCustomerStore()


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], Any]:
    """In-memory SQLite database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)

    yield create_session_factory(engine)

    await engine.dispose()
