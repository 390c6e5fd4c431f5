"""
Invoice repository - the narrow door between the aggregate and storage.

save(invoice):
1. Reject absent input
2. Map the invoice to its snapshot (strategy injected)
3. Hand the snapshot to the storage backend

Loading is not supported: there is no query capability behind this
boundary, so find_by_customer_id is declared but raises.
"""

from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

import structlog

from invoicing.config import Settings, get_settings
from invoicing.domain.aggregates import Invoice
from invoicing.domain.snapshots import InvoiceDto
from invoicing.exceptions import InvalidArgumentError
from invoicing.infrastructure.mappers import SnapshotMapper, create_mapper
from invoicing.infrastructure.storage import InMemorySnapshotStorage, SnapshotStorageBackend

logger = structlog.get_logger()


class InvoiceRepository(Protocol):
    """Interface for invoice persistence."""

    def save(self, invoice: Invoice) -> None:
        ...

    def find_by_customer_id(self, customer_id: UUID) -> Invoice:
        ...


class SnapshotInvoiceRepository:
    """Persists invoices as snapshots through a pluggable mapper."""

    def __init__(self, mapper: SnapshotMapper, storage: SnapshotStorageBackend):
        self.mapper = mapper
        self.storage = storage

    def save(self, invoice: Invoice) -> None:
        if invoice is None:
            raise InvalidArgumentError("Invoice is required", field="invoice")

        snapshot = self.mapper.map(invoice, InvoiceDto)
        self.storage.store(snapshot)

        logger.info(
            "repository.invoice_saved",
            invoice_id=str(snapshot.id),
            customer_id=str(snapshot.customer_id),
            lines=len(snapshot.items),
            mapper=type(self.mapper).__name__,
        )

    def find_by_customer_id(self, customer_id: UUID) -> Invoice:
        raise NotImplementedError("Loading invoices is not supported")


def create_invoice_repository(
    settings: Optional[Settings] = None,
    storage: Optional[SnapshotStorageBackend] = None,
) -> SnapshotInvoiceRepository:
    """
    Wire a repository from settings.

    The mapper strategy comes from ``settings.snapshot_mapper``; storage
    defaults to a fresh in-memory backend.
    """
    settings = settings or get_settings()
    mapper = create_mapper(settings.snapshot_mapper)
    return SnapshotInvoiceRepository(
        mapper=mapper,
        storage=storage if storage is not None else InMemorySnapshotStorage(),
    )
