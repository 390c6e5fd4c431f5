"""
Visitor protocol for walking the invoice aggregate.

The aggregate never hands out its internals generically. Instead it
accepts a visitor and calls back one method per node kind (double
dispatch). The set of node kinds is closed:

    Invoice      -> visit_invoice(...), children..., leave_invoice(...)
    InvoiceItem  -> visit_invoice_item(...)

Adding a node kind means adding a method here, so every visitor is
forced to decide what to do with it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from invoicing.domain.aggregates import Invoice, InvoiceItem


@runtime_checkable
class Visitable(Protocol):
    """Anything that can drive a visitor over itself."""

    def accept(self, visitor: InvoiceVisitor) -> None:
        ...


class InvoiceVisitor(ABC):
    """Callbacks for each node kind of the invoice aggregate."""

    @abstractmethod
    def visit_invoice(self, invoice: Invoice) -> None:
        """Called when the root is entered, before any line."""

    @abstractmethod
    def visit_invoice_item(self, item: InvoiceItem) -> None:
        """Called once per invoice line."""

    def leave_invoice(self, invoice: Invoice) -> None:
        """Called after the last line of the root has been visited."""
