"""
Aggregates - Consistency Boundaries

An aggregate is a cluster of domain objects that must be consistent.

Key concepts:
1. Aggregate Root: The entry point (Invoice)
2. Invariants: Rules that must ALWAYS be true
3. Ownership: Lines are created and replaced only by the root

Invariant enforced here:
"An invoice has at most one line per product code"

Every accessor returns immutable objects (InvoiceItem, ProductQuantity),
so nothing outside the aggregate can change a line behind its back.
"""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict

from invoicing.domain.value_objects import ProductCode, ProductQuantity, ensure_identity
from invoicing.domain.visitor import InvoiceVisitor
from invoicing.exceptions import (
    InvalidArgumentError,
    InvariantViolationError,
    NotFoundError,
)

logger = structlog.get_logger()


class InvoiceItem(BaseModel):
    """
    A single invoice line: product code plus quantity.

    Immutable. Changing a quantity means the aggregate swaps in a new line.
    """

    model_config = ConfigDict(frozen=True)

    product_code: ProductCode
    quantity: ProductQuantity

    def __init__(
        self, product_code: ProductCode, quantity: ProductQuantity, **data: Any
    ) -> None:
        if product_code is None:
            raise InvalidArgumentError("Product code is required", field="product_code")
        if quantity is None:
            raise InvalidArgumentError("Product quantity is required", field="quantity")
        super().__init__(product_code=product_code, quantity=quantity, **data)

    def accept(self, visitor: InvoiceVisitor) -> None:
        visitor.visit_invoice_item(self)


class Invoice:
    """
    Invoice Aggregate Root.

    Owns its lines, keyed by product code. The key set is the invariant:
    add_line rejects a second line for the same code instead of merging
    quantities. increase_quantity is the explicit way to grow a line.

    Lines are kept in a dict but no order is promised; anything exposed
    to callers (lines, traversal) is sorted by product code.
    """

    def __init__(self, invoice_id: uuid.UUID | str, customer_id: uuid.UUID | str):
        self._id = ensure_identity(invoice_id, "invoice_id")
        self._customer_id = ensure_identity(customer_id, "customer_id")
        self._items: dict[ProductCode, InvoiceItem] = {}

    @classmethod
    def create(cls, customer_id: uuid.UUID | str) -> Invoice:
        """Factory method: new invoice with a freshly generated id."""
        return cls(uuid.uuid4(), customer_id)

    @property
    def id(self) -> uuid.UUID:
        return self._id

    @property
    def customer_id(self) -> uuid.UUID:
        return self._customer_id

    @property
    def lines(self) -> tuple[InvoiceItem, ...]:
        """All lines, sorted by product code."""
        return tuple(self._items[code] for code in self._sorted_codes())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_code: object) -> bool:
        return product_code in self._items

    def add_line(self, product_code: ProductCode, quantity: ProductQuantity) -> InvoiceItem:
        """
        Add a line for a product not yet on the invoice.

        Invariant: At most one line per product code.
        Duplicates are rejected, never summed.
        """
        _require_product_code(product_code)
        _require_quantity(quantity)

        if self._find_line(product_code) is not None:
            logger.warning(
                "invoice.duplicate_line_rejected",
                invoice_id=str(self._id),
                product_code=str(product_code),
            )
            raise InvariantViolationError(
                f"Invoice item already exists for product code {product_code}",
                invoice_id=self._id,
                product_code=product_code,
            )

        item = InvoiceItem(product_code, quantity)
        self._items[product_code] = item

        logger.info(
            "invoice.line_added",
            invoice_id=str(self._id),
            product_code=str(product_code),
            quantity=quantity.value,
        )
        return item

    def increase_quantity(
        self, product_code: ProductCode, additional: ProductQuantity
    ) -> InvoiceItem:
        """
        Grow an existing line by ``additional``.

        The new quantity is built with ProductQuantity addition, so it is
        range-checked. On failure the existing line is left untouched.
        """
        _require_product_code(product_code)
        _require_quantity(additional)

        current = self.get_line(product_code)
        updated = InvoiceItem(product_code, current.quantity + additional)
        self._items[product_code] = updated

        logger.info(
            "invoice.quantity_increased",
            invoice_id=str(self._id),
            product_code=str(product_code),
            previous_quantity=current.quantity.value,
            quantity=updated.quantity.value,
        )
        return updated

    def get_line(self, product_code: ProductCode) -> InvoiceItem:
        """Line for ``product_code`` (immutable)."""
        _require_product_code(product_code)

        item = self._find_line(product_code)
        if item is None:
            raise NotFoundError(
                f"No invoice item found for product code {product_code}",
                invoice_id=self._id,
                product_code=product_code,
            )
        return item

    def get_quantity(self, product_code: ProductCode) -> ProductQuantity:
        """Quantity on the line for ``product_code`` (immutable)."""
        return self.get_line(product_code).quantity

    def accept(self, visitor: InvoiceVisitor) -> None:
        """
        Drive ``visitor`` over the aggregate.

        Order: root first, then every line by product code, then
        leave_invoice. Traversal never mutates the invoice.
        """
        visitor.visit_invoice(self)
        for code in self._sorted_codes():
            self._items[code].accept(visitor)
        visitor.leave_invoice(self)

    def _find_line(self, product_code: ProductCode) -> InvoiceItem | None:
        return self._items.get(product_code)

    def _sorted_codes(self) -> list[ProductCode]:
        return sorted(self._items, key=lambda code: code.value)

    def __repr__(self) -> str:
        return (
            f"Invoice(id={self._id}, customer_id={self._customer_id}, "
            f"lines={len(self._items)})"
        )


def _require_product_code(product_code: Any) -> None:
    if product_code is None:
        raise InvalidArgumentError("Product code is required", field="product_code")
    if not isinstance(product_code, ProductCode):
        raise InvalidArgumentError(
            f"Expected ProductCode, got {type(product_code).__name__}",
            field="product_code",
        )


def _require_quantity(quantity: Any) -> None:
    if quantity is None:
        raise InvalidArgumentError("Product quantity is required", field="quantity")
    if not isinstance(quantity, ProductQuantity):
        raise InvalidArgumentError(
            f"Expected ProductQuantity, got {type(quantity).__name__}",
            field="quantity",
        )
