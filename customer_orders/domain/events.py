"""
Domain Events - Immutable Facts About What Happened

The aggregate records an event for every state change and buffers it.
It never dispatches anything itself: the application layer saves the
aggregate, dispatches the buffered events, then clears the buffer.

Design principle: Events describe PAST FACTS.
- Good: OrderPlacedEvent (past tense, immutable fact)
- Bad: PlaceOrder (command, not event)
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from customer_orders.domain.value_objects import Address, OrderItem


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DomainEvent(BaseModel):
    """
    Base class for all domain events.

    Every event carries its own id and occurrence timestamp. ``event_type``
    is the discriminator used when events are stored in the outbox table.
    """

    model_config = ConfigDict(frozen=True)

    event_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    occurred_on: datetime = Field(default_factory=utc_now)

    @field_validator("occurred_on")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Naive timestamps coming back from storage are UTC."""
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


class CustomerCreatedEvent(DomainEvent):
    """A new customer aggregate came into existence."""

    event_type: Literal["CustomerCreatedEvent"] = "CustomerCreatedEvent"
    customer_id: uuid.UUID
    customer_name: str


class OrderPlacedEvent(DomainEvent):
    """A customer placed a new (empty) order."""

    event_type: Literal["OrderPlacedEvent"] = "OrderPlacedEvent"
    customer_id: uuid.UUID
    order_id: uuid.UUID
    order_date: datetime


class OrderItemAddedEvent(DomainEvent):
    """
    An item was added to an order.

    ``item`` is the item as supplied by the caller, not the merged line
    the order may have produced from it.
    """

    event_type: Literal["OrderItemAddedEvent"] = "OrderItemAddedEvent"
    customer_id: uuid.UUID
    order_id: uuid.UUID
    item: OrderItem


class CustomerAddressUpdatedEvent(DomainEvent):
    """A default address changed. ``address`` is None when it was cleared."""

    event_type: Literal["CustomerAddressUpdatedEvent"] = "CustomerAddressUpdatedEvent"
    customer_id: uuid.UUID
    address_type: Literal["shipping", "billing"]
    address: Address | None = None


AnyDomainEvent = Annotated[
    Union[
        CustomerCreatedEvent,
        OrderPlacedEvent,
        OrderItemAddedEvent,
        CustomerAddressUpdatedEvent,
    ],
    Field(discriminator="event_type"),
]

_event_adapter: TypeAdapter[DomainEvent] = TypeAdapter(AnyDomainEvent)


def serialize_event(event: DomainEvent) -> str:
    """Serialize an event to the JSON payload stored in the outbox."""
    return event.model_dump_json()


def deserialize_event(payload: str | bytes) -> DomainEvent:
    """Rebuild a concrete event from its outbox payload."""
    return _event_adapter.validate_json(payload)
