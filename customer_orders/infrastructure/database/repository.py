"""
SQLAlchemy customer repository.

Persists the whole aggregate graph in one transaction:
1. Upsert the customer row
2. Upsert every order row (orders are never deleted)
3. Replace the item rows of every order
4. Append pending domain events to the outbox table

Loading goes through the explicit ``reconstruct`` factories on Order and
CustomerAggregateRoot; no constructor is bypassed.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from customer_orders.domain.aggregates import CustomerAggregateRoot
from customer_orders.domain.entities import Order
from customer_orders.domain.events import serialize_event
from customer_orders.domain.exceptions import NullArgumentError
from customer_orders.domain.rules import CustomerBusinessRules
from customer_orders.domain.value_objects import OrderItem, decode_address, encode_address
from customer_orders.infrastructure.database.models import (
    CustomerRecord,
    DomainEventRecord,
    OrderItemRecord,
    OrderRecord,
)

logger = structlog.get_logger(__name__)


class SqlAlchemyCustomerRepository:
    """CustomerRepository backed by PostgreSQL (or any SQLAlchemy async dialect)."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None,
        business_rules: CustomerBusinessRules | None,
        customer_logger: Any = None,
    ):
        """
        Initialize repository.

        Args:
            session_factory: Async session factory
            business_rules: Rules attached to every aggregate loaded
            customer_logger: Optional logger injected into loaded aggregates
        """
        if session_factory is None:
            raise NullArgumentError("session_factory")
        if business_rules is None:
            raise NullArgumentError("business_rules")

        self.session_factory = session_factory
        self.business_rules = business_rules
        self.customer_logger = customer_logger

    async def get_by_id(self, customer_id: UUID) -> CustomerAggregateRoot | None:
        logger.debug("customer_lookup", customer_id=str(customer_id))

        async with self.session_factory() as session:
            record = await session.get(CustomerRecord, customer_id)
            if record is None:
                logger.warning("customer_not_found", customer_id=str(customer_id))
                return None

            order_records = (
                await session.scalars(
                    select(OrderRecord)
                    .where(OrderRecord.customer_id == customer_id)
                    .order_by(OrderRecord.order_date, OrderRecord.id)
                )
            ).all()

            items_by_order: dict[UUID, list[OrderItem]] = {r.id: [] for r in order_records}
            if order_records:
                item_records = (
                    await session.scalars(
                        select(OrderItemRecord)
                        .where(OrderItemRecord.order_id.in_(list(items_by_order)))
                        .order_by(OrderItemRecord.order_id, OrderItemRecord.position)
                    )
                ).all()
                for item in item_records:
                    items_by_order[item.order_id].append(
                        OrderItem(product=item.product, quantity=item.quantity, price=item.price)
                    )

        orders = [
            Order.reconstruct(
                order_id=r.id,
                order_date=r.order_date,
                items=items_by_order[r.id],
                shipping_address=decode_address(r.shipping_address),
                billing_address=decode_address(r.billing_address),
            )
            for r in order_records
        ]

        logger.debug(
            "customer_found",
            customer_id=str(customer_id),
            customer_name=record.name,
            orders=len(orders),
        )

        return CustomerAggregateRoot.reconstruct(
            customer_id=record.id,
            name=record.name,
            business_rules=self.business_rules,
            orders=orders,
            default_shipping_address=decode_address(record.default_shipping_address),
            default_billing_address=decode_address(record.default_billing_address),
            logger=self.customer_logger,
        )

    async def save(self, customer: CustomerAggregateRoot | None) -> None:
        if customer is None:
            raise NullArgumentError("customer")

        async with self.session_factory() as session:
            async with session.begin():
                existed = await self._upsert_customer(session, customer)
                await session.flush()

                await self._upsert_orders(session, customer)
                await session.flush()

                await self._replace_items(session, customer)
                pending = await self._append_events(session, customer)

        logger.info(
            "customer_saved",
            action="updated" if existed else "created",
            customer_id=str(customer.id),
            customer_name=customer.name,
            events_stored=pending,
        )

    @staticmethod
    async def _upsert_customer(session: AsyncSession, customer: CustomerAggregateRoot) -> bool:
        record = await session.get(CustomerRecord, customer.id)
        shipping = encode_address(customer.default_shipping_address)
        billing = encode_address(customer.default_billing_address)

        if record is None:
            session.add(
                CustomerRecord(
                    id=customer.id,
                    name=customer.name,
                    default_shipping_address=shipping,
                    default_billing_address=billing,
                )
            )
            return False

        record.name = customer.name
        record.default_shipping_address = shipping
        record.default_billing_address = billing
        return True

    @staticmethod
    async def _upsert_orders(session: AsyncSession, customer: CustomerAggregateRoot) -> None:
        for order in customer.orders:
            record = await session.get(OrderRecord, order.id)
            if record is None:
                session.add(
                    OrderRecord(
                        id=order.id,
                        customer_id=customer.id,
                        order_date=order.order_date,
                        shipping_address=encode_address(order.shipping_address),
                        billing_address=encode_address(order.billing_address),
                    )
                )
            else:
                record.shipping_address = encode_address(order.shipping_address)
                record.billing_address = encode_address(order.billing_address)

    @staticmethod
    async def _replace_items(session: AsyncSession, customer: CustomerAggregateRoot) -> None:
        order_ids = [order.id for order in customer.orders]
        if not order_ids:
            return

        await session.execute(
            delete(OrderItemRecord).where(OrderItemRecord.order_id.in_(order_ids))
        )
        session.add_all(
            OrderItemRecord(
                order_id=order.id,
                position=position,
                product=item.product,
                quantity=item.quantity,
                price=item.price,
            )
            for order in customer.orders
            for position, item in enumerate(order.items)
        )

    @staticmethod
    async def _append_events(session: AsyncSession, customer: CustomerAggregateRoot) -> int:
        """Write pending events to the outbox, skipping ones already stored."""
        events = customer.domain_events
        if not events:
            return 0

        stored = set(
            (
                await session.scalars(
                    select(DomainEventRecord.id).where(
                        DomainEventRecord.id.in_([e.event_id for e in events])
                    )
                )
            ).all()
        )
        new_events = [e for e in events if e.event_id not in stored]
        session.add_all(
            DomainEventRecord(
                id=event.event_id,
                aggregate_id=customer.id,
                event_type=type(event).__name__,
                payload=serialize_event(event),
                occurred_on=event.occurred_on,
                processed=False,
                retry_count=0,
            )
            for event in new_events
        )
        return len(new_events)
