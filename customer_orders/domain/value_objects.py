"""
Value Objects - Immutable Domain Concepts

Value objects have no identity - two value objects are equal if their values are equal.

Example:
- OrderItem(product="Widget", quantity=2, price=Decimal("9.99")) compares equal to an identical one
- Order(id=a) != Order(id=b) even with identical items

Validation happens once, at construction. A value object that exists is valid,
so entities and aggregates never re-check it.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from customer_orders.domain.exceptions import ValidationError


def _describe(error: PydanticValidationError) -> str:
    """Turn the first pydantic error into a plain domain message."""
    first = error.errors()[0]
    original = first.get("ctx", {}).get("error")
    if original is not None:
        return str(original)
    field = ".".join(str(part) for part in first["loc"]) or "value"
    return f"{field}: {first['msg']}"


class _ValueObject(BaseModel):
    """
    Base for frozen value objects.

    Pydantic validation failures surface as the domain ValidationError
    so callers only deal with one error taxonomy.
    """

    model_config = ConfigDict(frozen=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise ValidationError(_describe(e)) from e

    @classmethod
    def from_json(cls, raw: str | bytes) -> Any:
        """Decode the storage representation produced by ``model_dump_json``."""
        try:
            return cls.model_validate_json(raw)
        except PydanticValidationError as e:
            raise ValidationError(_describe(e)) from e


class Address(_ValueObject):
    """
    Postal address used for shipping and billing.

    Every component is required and trimmed.
    """

    street: str
    city: str
    state: str
    postal_code: str
    country: str

    @field_validator("street", "city", "state", "postal_code", "country")
    @classmethod
    def validate_not_blank(cls, v: str, info: ValidationInfo) -> str:
        if not v or not v.strip():
            label = info.field_name.replace("_", " ").capitalize()
            raise ValueError(f"{label} cannot be null or empty.")
        return v.strip()

    def __str__(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.postal_code}, {self.country}"


class OrderItem(_ValueObject):
    """
    A product line on an order.

    Quantity and price must both be strictly positive. Money is Decimal,
    never float.
    """

    product: str
    quantity: int
    price: Decimal

    @field_validator("product")
    @classmethod
    def validate_product(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Product cannot be null or empty.")
        return v.strip()

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantity must be positive.")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be positive.")
        return v

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.price

    def combined_with(self, other: OrderItem) -> OrderItem:
        """Merge a duplicate line (same product and price) by summing quantities."""
        return OrderItem(
            product=other.product,
            quantity=self.quantity + other.quantity,
            price=other.price,
        )

    def is_same_line(self, other: OrderItem) -> bool:
        return self.product == other.product and self.price == other.price


# ============================================================================
# STORAGE CODEC
# ============================================================================


def encode_address(address: Address | None) -> str | None:
    """Encode an address to the JSON text stored in address columns."""
    if address is None:
        return None
    return address.model_dump_json()


def decode_address(raw: str | None) -> Address | None:
    """Decode an address column back into an Address (None stays None)."""
    if raw is None or raw == "":
        return None
    return Address.from_json(raw)
