"""
Snapshot Mappers - Aggregate -> Flat Snapshot

Two interchangeable strategies behind the same call:

    mapper.map(invoice, InvoiceDto) -> InvoiceDto

1. VisitorSnapshotMapper: the aggregate drives a SnapshotVisitor over
   itself (double dispatch). The aggregate never exposes its line
   storage; the visitor only sees what accept() hands it.
2. FieldMapper: explicit mapping functions registered per
   (source type, snapshot type) pair. No introspection, so a missing
   source field is a MappingError instead of a silently empty column.

Both produce equal snapshots for the same invoice.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Type, TypeVar

import structlog
from pydantic import BaseModel

from invoicing.domain.aggregates import Invoice, InvoiceItem
from invoicing.domain.snapshots import InvoiceDto, InvoiceItemDto
from invoicing.domain.visitor import InvoiceVisitor, Visitable
from invoicing.exceptions import (
    InvalidArgumentError,
    MappingError,
    TypeMismatchError,
    UnsupportedOperationError,
)

logger = structlog.get_logger()

S = TypeVar("S", bound=BaseModel)


class SnapshotMapper(Protocol):
    """Interface for mapping a domain object to its snapshot."""

    def map(self, domain_object: Any, snapshot_type: Type[S] = InvoiceDto) -> S:
        ...


# ============================================================================
# VISITOR STRATEGY
# ============================================================================


class SnapshotVisitor(InvoiceVisitor):
    """
    Builds an InvoiceDto while the invoice walks it.

    Protocol:
    1. visit_invoice: start a fresh snapshot from the root's ids
    2. visit_invoice_item: append one item per line (1-based item ids)
    3. leave_invoice: mark the snapshot complete
    4. get_snapshot: hand the finished snapshot out
    """

    def __init__(self) -> None:
        self._current_snapshot: InvoiceDto | None = None
        self._complete = False

    def visit_invoice(self, invoice: Invoice) -> None:
        self._current_snapshot = InvoiceDto(
            id=invoice.id,
            customer_id=invoice.customer_id,
        )
        self._complete = False

    def visit_invoice_item(self, item: InvoiceItem) -> None:
        if self._current_snapshot is None:
            raise MappingError(
                "Invoice item visited before its invoice",
                product_code=item.product_code,
            )

        items = self._current_snapshot.items
        items.append(
            InvoiceItemDto(
                invoice_item_id=len(items) + 1,
                product_code=item.product_code.value,
                quantity=item.quantity.value,
            )
        )

    def leave_invoice(self, invoice: Invoice) -> None:
        self._complete = True

    def get_snapshot(self, snapshot_type: Type[S] = InvoiceDto) -> S:
        """Finished snapshot, checked against ``snapshot_type``."""
        if self._current_snapshot is None or not self._complete:
            raise MappingError("Snapshot requested before traversal completed")

        if not isinstance(self._current_snapshot, snapshot_type):
            raise TypeMismatchError(
                f"Snapshot is {type(self._current_snapshot).__name__}, "
                f"not {snapshot_type.__name__}",
                requested=snapshot_type.__name__,
            )
        return self._current_snapshot


class VisitorSnapshotMapper:
    """Maps any Visitable domain object through a fresh SnapshotVisitor."""

    def map(self, domain_object: Any, snapshot_type: Type[S] = InvoiceDto) -> S:
        if domain_object is None:
            raise InvalidArgumentError("Domain object is required", field="domain_object")

        if not isinstance(domain_object, Visitable):
            raise UnsupportedOperationError(
                f"Cannot map {type(domain_object).__name__}: it is not visitable",
                source_type=type(domain_object).__name__,
            )

        visitor = SnapshotVisitor()
        domain_object.accept(visitor)
        snapshot = visitor.get_snapshot(snapshot_type)

        logger.debug(
            "mapper.snapshot_built",
            strategy="visitor",
            snapshot_type=snapshot_type.__name__,
        )
        return snapshot


# ============================================================================
# EXPLICIT FIELD MAPPING STRATEGY
# ============================================================================


def invoice_item_to_snapshot(item: InvoiceItem) -> InvoiceItemDto:
    return InvoiceItemDto(
        product_code=item.product_code.value,
        quantity=item.quantity.value,
    )


def invoice_to_snapshot(invoice: Invoice) -> InvoiceDto:
    items = []
    for position, line in enumerate(invoice.lines, start=1):
        item = invoice_item_to_snapshot(line)
        item.invoice_item_id = position
        items.append(item)

    return InvoiceDto(id=invoice.id, customer_id=invoice.customer_id, items=items)


MappingFunction = Callable[[Any], BaseModel]


class FieldMapper:
    """
    Field-by-field copy driven by explicit mapping functions.

    Each (source type, snapshot type) pair has exactly one function.
    Lookup is by exact source type; subclasses need their own entry.
    """

    def __init__(self) -> None:
        self._mappings: dict[tuple[type, type], MappingFunction] = {}
        self.register(Invoice, InvoiceDto, invoice_to_snapshot)
        self.register(InvoiceItem, InvoiceItemDto, invoice_item_to_snapshot)

    def register(
        self,
        source_type: type,
        snapshot_type: Type[BaseModel],
        mapping: MappingFunction,
    ) -> None:
        """Register (or replace) the mapping for a pair of types."""
        self._mappings[(source_type, snapshot_type)] = mapping

    def map(self, domain_object: Any, snapshot_type: Type[S] = InvoiceDto) -> S:
        if domain_object is None:
            raise InvalidArgumentError("Domain object is required", field="domain_object")

        source_type = type(domain_object)
        mapping = self._mappings.get((source_type, snapshot_type))
        if mapping is None:
            raise MappingError(
                f"No mapping registered from {source_type.__name__} "
                f"to {snapshot_type.__name__}",
                source_type=source_type.__name__,
                snapshot_type=snapshot_type.__name__,
            )

        try:
            snapshot = mapping(domain_object)
        except AttributeError as exc:
            raise MappingError(
                f"Cannot map {source_type.__name__} to {snapshot_type.__name__}: {exc}",
                source_type=source_type.__name__,
                snapshot_type=snapshot_type.__name__,
            ) from exc

        logger.debug(
            "mapper.snapshot_built",
            strategy="field",
            snapshot_type=snapshot_type.__name__,
        )
        return snapshot


MAPPERS: dict[str, Callable[[], SnapshotMapper]] = {
    "visitor": VisitorSnapshotMapper,
    "field": FieldMapper,
}


def create_mapper(kind: str) -> SnapshotMapper:
    """Build the mapper registered under ``kind`` ("visitor" or "field")."""
    factory = MAPPERS.get(kind)
    if factory is None:
        raise InvalidArgumentError(
            f"Unknown snapshot mapper {kind!r}. Must be one of: {sorted(MAPPERS)}",
            field="snapshot_mapper",
        )
    return factory()
