"""
Application Layer - Use Case Orchestration

Every use case follows the same sequence:
mutate aggregate -> save aggregate -> dispatch buffered events -> clear buffer.
"""

from customer_orders.application.interfaces import (
    CustomerRepository,
    DomainEventDispatcher,
)
from customer_orders.application.service import CustomerApplicationService

__all__ = [
    "CustomerApplicationService",
    "CustomerRepository",
    "DomainEventDispatcher",
]
