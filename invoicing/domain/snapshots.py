"""
Snapshots - flat, persistence-shaped copies of the invoice aggregate.

Plain mutable data with no invariants of their own. They only hold
strings, ints and UUIDs, so nothing in a snapshot aliases the aggregate.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class InvoiceItemDto(BaseModel):
    """One invoice line."""

    # Unique only together with InvoiceDto.id
    invoice_item_id: int = 0
    product_code: str
    quantity: int


class InvoiceDto(BaseModel):
    """Invoice header plus its lines."""

    id: UUID
    customer_id: UUID
    items: list[InvoiceItemDto] = Field(default_factory=list)
