"""
Value Objects - Immutable Domain Concepts

Value objects have no identity - two value objects are equal if their values are equal.

Example:
- ProductCode("ABCD123") == ProductCode("ABCD123") ✓
- Usable as dict keys (frozen models are hashable)

Validation happens in the constructor. There is no way to get hold of an
invalid ProductCode or ProductQuantity.
"""

from __future__ import annotations

import re
import uuid
from typing import Any, Mapping, Self

from pydantic import BaseModel, ConfigDict, StrictInt, field_validator
from pydantic import ValidationError as PydanticValidationError

from invoicing.exceptions import InvalidArgumentError, ValidationError

PRODUCT_CODE_LENGTH = 7
PRODUCT_CODE_PATTERN = re.compile(r"^[A-Z]{4}[0-9]{3}$")

MIN_QUANTITY_EXCLUSIVE = 0
MAX_QUANTITY = 200


def _reason(exc: PydanticValidationError) -> str:
    """First human-readable reason from a pydantic error."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    return errors[0]["msg"].removeprefix("Value error, ")


class SingleValueObject(BaseModel):
    """
    Base for value objects wrapping one validated ``value``.

    pydantic's model_copy(update=...) and model_construct skip validation.
    Both are routed back through the subclass constructor here.
    """

    model_config = ConfigDict(frozen=True)

    def model_copy(
        self, *, update: Mapping[str, Any] | None = None, deep: bool = False
    ) -> Self:
        values = {"value": self.value, **(update or {})}
        return type(self)(**values)

    @classmethod
    def model_construct(cls, _fields_set: set[str] | None = None, **values: Any) -> Self:
        return cls(**values)


class ProductCode(SingleValueObject):
    """
    Product code value object.

    Format: 4 uppercase letters followed by 3 digits
    Example: ABCD123
    """

    value: str

    def __init__(self, value: str) -> None:
        if value is None:
            raise InvalidArgumentError("Product code is required", field="product_code")
        try:
            super().__init__(value=value)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid product code {value!r}: {_reason(exc)}",
                field="product_code",
                value=value,
            ) from exc

    @field_validator("value")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if len(v) != PRODUCT_CODE_LENGTH:
            raise ValueError(
                f"length should be {PRODUCT_CODE_LENGTH}, got {len(v)}"
            )
        if not PRODUCT_CODE_PATTERN.fullmatch(v):
            raise ValueError("expected 4 uppercase letters followed by 3 digits")
        return v

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"ProductCode({self.value})"


class ProductQuantity(SingleValueObject):
    """
    Quantity of a product on an invoice line.

    Range: 0 < quantity <= 200

    Adding two quantities builds a new validated quantity, so
    ProductQuantity(150) + ProductQuantity(100) fails instead of
    clamping to 200.
    """

    value: StrictInt

    def __init__(self, value: int) -> None:
        if value is None:
            raise InvalidArgumentError("Product quantity is required", field="quantity")
        try:
            super().__init__(value=value)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid product quantity {value!r}: {_reason(exc)}",
                field="quantity",
                value=value,
            ) from exc

    @field_validator("value")
    @classmethod
    def validate_range(cls, v: int) -> int:
        if v <= MIN_QUANTITY_EXCLUSIVE or v > MAX_QUANTITY:
            raise ValueError(
                f"must be greater than {MIN_QUANTITY_EXCLUSIVE} and at most {MAX_QUANTITY}"
            )
        return v

    def __add__(self, other: object) -> ProductQuantity:
        """Add quantities. The sum goes through the same range check."""
        if not isinstance(other, ProductQuantity):
            return NotImplemented
        return ProductQuantity(self.value + other.value)

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"ProductQuantity({self.value})"


def ensure_identity(value: uuid.UUID | str | None, name: str) -> uuid.UUID:
    """
    Normalize an aggregate identity to a UUID.

    Rejects absent values, unparseable strings and the nil UUID
    (00000000-0000-0000-0000-000000000000), which is never a real id.
    """
    if value is None:
        raise InvalidArgumentError(f"{name} is required", field=name)

    if isinstance(value, uuid.UUID):
        identity = value
    elif isinstance(value, str):
        try:
            identity = uuid.UUID(value)
        except ValueError as exc:
            raise InvalidArgumentError(
                f"{name} is not a valid UUID: {value!r}", field=name
            ) from exc
    else:
        raise InvalidArgumentError(
            f"{name} must be a UUID, got {type(value).__name__}", field=name
        )

    if identity.int == 0:
        raise InvalidArgumentError(f"{name} must not be the nil UUID", field=name)
    return identity
