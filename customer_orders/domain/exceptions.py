"""
Domain exception taxonomy.

Every failure raised by the domain falls into one of four buckets:
- ValidationError: malformed constructor input, never retried
- InvalidStateError: the aggregate cannot honor the request in its current state
- LimitExceededError: a configured business limit has been reached
- NullArgumentError: a required collaborator or argument is missing

The application layer logs these with their context and re-raises them unchanged.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID


class CustomerDomainError(Exception):
    """
    Base exception for all customer domain errors.

    Carries optional identifiers so log entries can be correlated
    with the customer and order that triggered them.
    """

    def __init__(
        self,
        message: str,
        customer_id: UUID | None = None,
        order_id: UUID | None = None,
        **context: Any,
    ):
        super().__init__(message)
        self.message = message
        self.customer_id = customer_id
        self.order_id = order_id
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "customer_id": str(self.customer_id) if self.customer_id else None,
            "order_id": str(self.order_id) if self.order_id else None,
            **self.context,
        }


class ValidationError(CustomerDomainError):
    """Malformed input: empty id, blank name, non-positive amount, future date."""


class InvalidStateError(CustomerDomainError):
    """Unknown order or customer, or no resolvable address where one is required."""


class LimitExceededError(CustomerDomainError):
    """Raised when a customer has reached the outstanding-orders cap."""

    def __init__(
        self,
        message: str,
        max_outstanding_orders: int,
        customer_id: UUID | None = None,
    ):
        super().__init__(
            message,
            customer_id=customer_id,
            max_outstanding_orders=max_outstanding_orders,
        )
        self.max_outstanding_orders = max_outstanding_orders


class NullArgumentError(CustomerDomainError):
    """A required collaborator or argument was None."""

    def __init__(self, argument: str):
        super().__init__(f"Argument '{argument}' cannot be None.", argument=argument)
        self.argument = argument
