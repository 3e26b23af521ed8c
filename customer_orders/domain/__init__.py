"""
Domain Layer - Pure Business Logic

This layer contains:
- Value objects (Address, OrderItem)
- Entities (Order)
- The aggregate root (CustomerAggregateRoot)
- Domain events (immutable facts about what happened)
- Business rules configuration

Key principle: ZERO dependencies on infrastructure.
"""

from customer_orders.domain.aggregates import CustomerAggregateRoot
from customer_orders.domain.entities import Order
from customer_orders.domain.events import (
    CustomerAddressUpdatedEvent,
    CustomerCreatedEvent,
    DomainEvent,
    OrderItemAddedEvent,
    OrderPlacedEvent,
)
from customer_orders.domain.exceptions import (
    CustomerDomainError,
    InvalidStateError,
    LimitExceededError,
    NullArgumentError,
    ValidationError,
)
from customer_orders.domain.rules import CustomerBusinessRules
from customer_orders.domain.value_objects import Address, OrderItem

__all__ = [
    "Address",
    "CustomerAddressUpdatedEvent",
    "CustomerAggregateRoot",
    "CustomerBusinessRules",
    "CustomerCreatedEvent",
    "CustomerDomainError",
    "DomainEvent",
    "InvalidStateError",
    "LimitExceededError",
    "NullArgumentError",
    "Order",
    "OrderItem",
    "OrderItemAddedEvent",
    "OrderPlacedEvent",
    "ValidationError",
]
