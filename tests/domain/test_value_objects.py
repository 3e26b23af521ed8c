"""
Tests for Address and OrderItem value objects.
"""

from decimal import Decimal

import pytest

from customer_orders.domain.exceptions import ValidationError
from customer_orders.domain.value_objects import (
    Address,
    OrderItem,
    decode_address,
    encode_address,
)


class TestOrderItem:
    """Test suite for OrderItem."""

    @pytest.mark.unit
    def test_valid_item_trims_product(self) -> None:
        item = OrderItem(product="  Widget  ", quantity=3, price=Decimal("9.99"))

        assert item.product == "Widget"
        assert item.quantity == 3
        assert item.price == Decimal("9.99")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "quantity,price",
        [(1, Decimal("0.01")), (3, Decimal("9.99")), (250, Decimal("1200.50"))],
    )
    def test_line_total_is_quantity_times_price(self, quantity: int, price: Decimal) -> None:
        item = OrderItem(product="Widget", quantity=quantity, price=price)

        assert item.line_total == quantity * price

    @pytest.mark.unit
    @pytest.mark.parametrize("product", ["", "   "])
    def test_blank_product_rejected(self, product: str) -> None:
        with pytest.raises(ValidationError, match="Product cannot be null or empty"):
            OrderItem(product=product, quantity=1, price=Decimal("1"))

    @pytest.mark.unit
    def test_missing_product_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OrderItem(product=None, quantity=1, price=Decimal("1"))

    @pytest.mark.unit
    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity: int) -> None:
        with pytest.raises(ValidationError, match="Quantity must be positive"):
            OrderItem(product="Widget", quantity=quantity, price=Decimal("1"))

    @pytest.mark.unit
    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-5.00")])
    def test_non_positive_price_rejected(self, price: Decimal) -> None:
        with pytest.raises(ValidationError, match="Price must be positive"):
            OrderItem(product="Widget", quantity=1, price=price)

    @pytest.mark.unit
    def test_value_equality(self) -> None:
        a = OrderItem(product="Widget", quantity=2, price=Decimal("10.00"))
        b = OrderItem(product="Widget", quantity=2, price=Decimal("10.00"))
        c = OrderItem(product="Widget", quantity=3, price=Decimal("10.00"))

        assert a == b
        assert hash(a) == hash(b)
        assert a != c

    @pytest.mark.unit
    def test_item_is_immutable(self, order_item: OrderItem) -> None:
        with pytest.raises(Exception):
            order_item.quantity = 10  # type: ignore[misc]

    @pytest.mark.unit
    def test_storage_round_trip(self) -> None:
        item = OrderItem(product="Widget", quantity=4, price=Decimal("19.99"))

        assert OrderItem.from_json(item.model_dump_json()) == item


class TestAddress:
    """Test suite for Address."""

    @pytest.mark.unit
    def test_fields_are_trimmed(self) -> None:
        address = Address(
            street=" 1 Main Street ",
            city=" Springfield",
            state="IL ",
            postal_code=" 62701 ",
            country="USA",
        )

        assert address.street == "1 Main Street"
        assert address.city == "Springfield"
        assert address.state == "IL"
        assert address.postal_code == "62701"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "field,label",
        [
            ("street", "Street"),
            ("city", "City"),
            ("state", "State"),
            ("postal_code", "Postal code"),
            ("country", "Country"),
        ],
    )
    def test_blank_field_rejected(self, shipping_address: Address, field: str, label: str) -> None:
        data = shipping_address.model_dump()
        data[field] = "  "

        with pytest.raises(ValidationError, match=f"{label} cannot be null or empty"):
            Address(**data)

    @pytest.mark.unit
    def test_value_equality(self, shipping_address: Address, billing_address: Address) -> None:
        copy = Address(**shipping_address.model_dump())

        assert copy == shipping_address
        assert copy != billing_address

    @pytest.mark.unit
    def test_storage_round_trip(self, shipping_address: Address) -> None:
        encoded = encode_address(shipping_address)

        assert isinstance(encoded, str)
        assert decode_address(encoded) == shipping_address

    @pytest.mark.unit
    def test_absent_address_encodes_to_none(self) -> None:
        assert encode_address(None) is None
        assert decode_address(None) is None

    @pytest.mark.unit
    def test_corrupt_storage_value_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            decode_address('{"street": "1 Main Street"}')
