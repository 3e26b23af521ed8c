"""Business rules configuration consumed by the customer aggregate."""

from pydantic import BaseModel, ConfigDict, Field


class CustomerBusinessRules(BaseModel):
    """
    Limits the aggregate enforces when placing orders.

    Supplied by the caller at construction time and read-only from the
    aggregate's perspective.

    Attributes:
        max_outstanding_orders: Orders allowed inside the recency window.
        outstanding_order_days: Size of the recency window in days.
        require_order_addresses: Orders must carry shipping and billing addresses.
    """

    model_config = ConfigDict(frozen=True)

    max_outstanding_orders: int = Field(default=10, ge=0)
    outstanding_order_days: int = Field(default=30, ge=0)
    require_order_addresses: bool = False
