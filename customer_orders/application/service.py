"""
Customer application service.

Orchestrates use cases against the customer aggregate. Nothing is recovered
locally: every failure is logged with its context and re-raised unchanged.

Sequence for every use case:
1. Load or create the aggregate
2. Mutate it (the aggregate enforces all invariants)
3. Save it through the repository
4. Dispatch the buffered domain events
5. Clear the buffer

If the save fails, no event is dispatched. If dispatch fails after a
successful save, the mutation is durable but its events are not delivered
by this service; the SQL repository's outbox table still holds them.
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any, Iterable, Sequence, Tuple

import structlog

from customer_orders.application.interfaces import (
    CustomerRepository,
    DomainEventDispatcher,
)
from customer_orders.domain.aggregates import CustomerAggregateRoot
from customer_orders.domain.exceptions import InvalidStateError, NullArgumentError
from customer_orders.domain.rules import CustomerBusinessRules
from customer_orders.domain.value_objects import Address, OrderItem

logger = structlog.get_logger(__name__)

OrderItemData = Tuple[str, int, Decimal]


class CustomerApplicationService:
    """Use cases for customers and their orders."""

    def __init__(
        self,
        repository: CustomerRepository | None,
        dispatcher: DomainEventDispatcher | None,
        business_rules: CustomerBusinessRules | None,
        customer_logger: Any = None,
    ):
        """
        Initialize the service.

        Args:
            repository: Customer aggregate repository
            dispatcher: Domain event dispatcher
            business_rules: Rules handed to every aggregate this service creates
            customer_logger: Optional logger injected into aggregates
        """
        if repository is None:
            raise NullArgumentError("repository")
        if dispatcher is None:
            raise NullArgumentError("dispatcher")
        if business_rules is None:
            raise NullArgumentError("business_rules")

        self.repository = repository
        self.dispatcher = dispatcher
        self.business_rules = business_rules
        self.customer_logger = customer_logger

    async def create_customer_and_place_order(
        self,
        customer_name: str,
        order_items: Iterable[OrderItemData],
        shipping_address: Address | None = None,
        billing_address: Address | None = None,
    ) -> uuid.UUID:
        """
        Register a customer and place their first order.

        Addresses, when given, become the customer's defaults before the
        order is placed.

        Returns:
            uuid.UUID: The new customer's id
        """
        try:
            customer = CustomerAggregateRoot.create(
                uuid.uuid4(), customer_name, self.business_rules, self.customer_logger
            )
            if shipping_address is not None or billing_address is not None:
                customer.update_default_addresses(shipping_address, billing_address)

            order = customer.place_new_order()
            for item in self._to_items(order_items):
                customer.add_item_to_order(order.id, item)

            await self._commit(customer)

            logger.info(
                "customer_created_with_order",
                customer_id=str(customer.id),
                customer_name=customer.name,
                order_id=str(order.id),
            )
            return customer.id
        except Exception:
            logger.error(
                "create_customer_and_place_order_failed",
                customer_name=customer_name,
                exc_info=True,
            )
            raise

    async def add_order_items_to_existing_order(
        self,
        customer_id: uuid.UUID,
        order_id: uuid.UUID,
        order_items: Iterable[OrderItemData],
    ) -> None:
        """Add items to an order the customer already has."""
        try:
            customer = await self._load(customer_id)
            for item in self._to_items(order_items):
                customer.add_item_to_order(order_id, item)

            await self._commit(customer)

            logger.info(
                "order_items_added",
                customer_id=str(customer_id),
                order_id=str(order_id),
            )
        except Exception:
            logger.error(
                "add_order_items_failed",
                customer_id=str(customer_id),
                order_id=str(order_id),
                exc_info=True,
            )
            raise

    async def place_order(
        self,
        customer_id: uuid.UUID,
        shipping_address: Address | None = None,
        billing_address: Address | None = None,
    ) -> uuid.UUID:
        """Place a new empty order for an existing customer."""
        try:
            customer = await self._load(customer_id)
            order = customer.place_new_order(shipping_address, billing_address)

            await self._commit(customer)

            logger.info("order_placed", customer_id=str(customer_id), order_id=str(order.id))
            return order.id
        except Exception:
            logger.error("place_order_failed", customer_id=str(customer_id), exc_info=True)
            raise

    async def update_default_addresses(
        self,
        customer_id: uuid.UUID,
        shipping_address: Address | None,
        billing_address: Address | None,
    ) -> None:
        """Replace the customer's default shipping and billing addresses."""
        try:
            customer = await self._load(customer_id)
            customer.update_default_addresses(shipping_address, billing_address)

            await self._commit(customer)

            logger.info("default_addresses_updated", customer_id=str(customer_id))
        except Exception:
            logger.error(
                "update_default_addresses_failed",
                customer_id=str(customer_id),
                exc_info=True,
            )
            raise

    async def _load(self, customer_id: uuid.UUID) -> CustomerAggregateRoot:
        customer = await self.repository.get_by_id(customer_id)
        if customer is None:
            logger.warning("customer_not_found", customer_id=str(customer_id))
            raise InvalidStateError(
                f"Customer {customer_id} not found", customer_id=customer_id
            )
        return customer

    async def _commit(self, customer: CustomerAggregateRoot) -> None:
        """Save, then dispatch and clear the pending events."""
        await self.repository.save(customer)
        await self.dispatcher.dispatch(customer.domain_events)
        customer.clear_domain_events()

    @staticmethod
    def _to_items(order_items: Iterable[OrderItemData]) -> Sequence[OrderItem]:
        # Built up front so a malformed line aborts before any mutation.
        return [
            OrderItem(product=product, quantity=quantity, price=price)
            for product, quantity, price in order_items
        ]
