"""
Tests for the Order entity.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from customer_orders.domain.entities import Order
from customer_orders.domain.exceptions import NullArgumentError, ValidationError
from customer_orders.domain.value_objects import Address, OrderItem


def make_order(**kwargs) -> Order:
    return Order.create(uuid.uuid4(), datetime.now(timezone.utc), **kwargs)


class TestOrderCreation:
    """Creation invariants."""

    @pytest.mark.unit
    def test_valid_order(self) -> None:
        order_id = uuid.uuid4()
        order_date = datetime.now(timezone.utc) - timedelta(hours=1)

        order = Order.create(order_id, order_date)

        assert order.id == order_id
        assert order.order_date == order_date
        assert order.items == ()
        assert order.total_amount == Decimal("0")
        assert order.shipping_address is None

    @pytest.mark.unit
    @pytest.mark.parametrize("order_id", [None, uuid.UUID(int=0)])
    def test_empty_id_rejected(self, order_id) -> None:
        with pytest.raises(ValidationError, match="Order ID cannot be empty"):
            Order.create(order_id, datetime.now(timezone.utc))

    @pytest.mark.unit
    def test_future_date_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Order date cannot be in the future"):
            Order.create(uuid.uuid4(), datetime.now(timezone.utc) + timedelta(days=1))

    @pytest.mark.unit
    def test_naive_dates_are_treated_as_utc(self) -> None:
        naive = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=5)

        order = Order.create(uuid.uuid4(), naive)

        assert order.order_date.tzinfo is timezone.utc

    @pytest.mark.unit
    def test_required_addresses_missing(self, shipping_address: Address) -> None:
        with pytest.raises(ValidationError, match="Shipping address is required"):
            make_order(require_addresses=True)

        with pytest.raises(ValidationError, match="Billing address is required"):
            make_order(shipping_address=shipping_address, require_addresses=True)

    @pytest.mark.unit
    def test_required_addresses_present(
        self, shipping_address: Address, billing_address: Address
    ) -> None:
        order = make_order(
            shipping_address=shipping_address,
            billing_address=billing_address,
            require_addresses=True,
        )

        assert order.shipping_address == shipping_address
        assert order.billing_address == billing_address


class TestOrderItems:
    """Item handling and the duplicate-line invariant."""

    @pytest.mark.unit
    def test_add_item_appends(self, order_item: OrderItem) -> None:
        order = make_order()

        order.add_item(order_item)

        assert order.items == (order_item,)

    @pytest.mark.unit
    def test_add_none_raises(self) -> None:
        order = make_order()

        with pytest.raises(NullArgumentError):
            order.add_item(None)

    @pytest.mark.unit
    def test_same_product_and_price_are_combined(self) -> None:
        order = make_order()
        order.add_item(OrderItem(product="Widget", quantity=2, price=Decimal("10.00")))
        order.add_item(OrderItem(product="Widget", quantity=3, price=Decimal("10.00")))

        assert len(order.items) == 1
        assert order.items[0].quantity == 5
        assert order.items[0].price == Decimal("10.00")

    @pytest.mark.unit
    def test_same_product_different_price_kept_separate(self) -> None:
        order = make_order()
        order.add_item(OrderItem(product="Widget", quantity=2, price=Decimal("10.00")))
        order.add_item(OrderItem(product="Widget", quantity=1, price=Decimal("12.00")))

        assert len(order.items) == 2

    @pytest.mark.unit
    def test_combined_line_moves_to_end(self) -> None:
        order = make_order()
        order.add_item(OrderItem(product="Widget", quantity=1, price=Decimal("10.00")))
        order.add_item(OrderItem(product="Gadget", quantity=1, price=Decimal("5.00")))
        order.add_item(OrderItem(product="Widget", quantity=4, price=Decimal("10.00")))

        assert [i.product for i in order.items] == ["Gadget", "Widget"]
        assert order.items[-1].quantity == 5

    @pytest.mark.unit
    def test_total_amount_recomputed(self) -> None:
        order = make_order()
        order.add_item(OrderItem(product="Widget", quantity=2, price=Decimal("10.00")))
        assert order.total_amount == Decimal("20.00")

        order.add_item(OrderItem(product="Gadget", quantity=3, price=Decimal("1.50")))
        assert order.total_amount == Decimal("24.50")

    @pytest.mark.unit
    def test_items_snapshot_is_read_only(self, order_item: OrderItem) -> None:
        order = make_order()
        order.add_item(order_item)

        snapshot = order.items
        order.add_item(OrderItem(product="Other", quantity=1, price=Decimal("1")))

        assert snapshot == (order_item,)


class TestIsOutstanding:
    """``order_date + days > now``, strictly."""

    @pytest.mark.unit
    def test_recent_order_is_outstanding(self) -> None:
        assert make_order().is_outstanding(30)

    @pytest.mark.unit
    def test_order_exactly_days_old_is_not_outstanding(self) -> None:
        now = datetime.now(timezone.utc)
        order = Order.reconstruct(uuid.uuid4(), now - timedelta(days=30))

        assert not order.is_outstanding(30, now=now)

    @pytest.mark.unit
    def test_order_just_inside_window_is_outstanding(self) -> None:
        now = datetime.now(timezone.utc)
        order = Order.reconstruct(uuid.uuid4(), now - timedelta(days=30) + timedelta(seconds=1))

        assert order.is_outstanding(30, now=now)

    @pytest.mark.unit
    def test_zero_day_window(self) -> None:
        now = datetime.now(timezone.utc)
        order = Order.reconstruct(uuid.uuid4(), now)

        assert not order.is_outstanding(0, now=now)

    @pytest.mark.unit
    def test_predicate_does_not_mutate(self, order_item: OrderItem) -> None:
        order = make_order()
        order.add_item(order_item)

        order.is_outstanding(1)

        assert order.items == (order_item,)


class TestOrderReconstruct:
    """Rebuilding from persisted fields."""

    @pytest.mark.unit
    def test_reconstruct_keeps_items_in_order(self) -> None:
        items = [
            OrderItem(product="A", quantity=1, price=Decimal("1")),
            OrderItem(product="B", quantity=2, price=Decimal("2")),
        ]
        order_date = datetime.now(timezone.utc) - timedelta(days=400)

        order = Order.reconstruct(uuid.uuid4(), order_date, items)

        assert order.items == tuple(items)
        assert order.order_date == order_date

    @pytest.mark.unit
    def test_identity_equality(self) -> None:
        order_id = uuid.uuid4()
        now = datetime.now(timezone.utc)

        assert Order.reconstruct(order_id, now) == Order.reconstruct(order_id, now - timedelta(days=1))
        assert Order.reconstruct(order_id, now) != Order.reconstruct(uuid.uuid4(), now)
