"""SQLAlchemy database models for the customer aggregate and its outbox."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TypeDecorator,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class DecimalText(TypeDecorator):
    """
    Decimal stored as its exact string form.

    Prices keep whatever scale the domain accepted, on every dialect.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else Decimal(value)


class CustomerRecord(Base):
    """
    Customers table.

    Default addresses are stored as JSON-encoded text, one column each.
    """

    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    default_shipping_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_billing_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        """String representation of CustomerRecord."""
        return f"<CustomerRecord(id={self.id}, name={self.name})>"


class OrderRecord(Base):
    """Orders table. Rows are only ever inserted or updated, never deleted."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id"), nullable=False, index=True
    )
    order_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    shipping_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    billing_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_orders_customer_date", "customer_id", "order_date"),)

    def __repr__(self) -> str:
        """String representation of OrderRecord."""
        return f"<OrderRecord(id={self.id}, customer_id={self.customer_id})>"


class OrderItemRecord(Base):
    """
    Order line items table.

    ``position`` preserves item order within an order; rows for an order are
    replaced wholesale on every save.
    """

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    product: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(DecimalText, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="positive_quantity"),
        CheckConstraint("CAST(price AS NUMERIC) > 0", name="positive_price"),
    )

    def __repr__(self) -> str:
        """String representation of OrderItemRecord."""
        return (
            f"<OrderItemRecord(order_id={self.order_id}, product={self.product}, "
            f"quantity={self.quantity})>"
        )


class DomainEventRecord(Base):
    """
    Transactional outbox table.

    Events are written in the same transaction as the aggregate, then
    relayed by OutboxRelay. ``retry_count`` and ``last_error`` track
    failed relay attempts.
    """

    __tablename__ = "domain_events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    aggregate_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    occurred_on: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    retry_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_domain_events_unprocessed", "processed", "occurred_on"),
        Index("idx_domain_events_aggregate", "aggregate_id"),
    )

    def __repr__(self) -> str:
        """String representation of DomainEventRecord."""
        return (
            f"<DomainEventRecord(id={self.id}, type={self.event_type}, "
            f"processed={self.processed})>"
        )
