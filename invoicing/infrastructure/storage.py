"""
Snapshot storage - where mapped invoices end up.

The repository only needs something with ``store(snapshot)``. Bytes
produced by serialize_snapshot are opaque: JSON today, but no layout is
promised and nothing should parse them except this module.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

import structlog
from pydantic import BaseModel

from invoicing.domain.snapshots import InvoiceDto
from invoicing.exceptions import InvalidArgumentError

logger = structlog.get_logger()


def serialize_snapshot(snapshot: BaseModel) -> bytes:
    """Encode any snapshot model to bytes."""
    if snapshot is None:
        raise InvalidArgumentError("Snapshot is required", field="snapshot")
    return snapshot.model_dump_json().encode("utf-8")


class SnapshotStorageBackend(Protocol):
    """Interface for snapshot storage (database, object store, etc.)."""

    def store(self, snapshot: InvoiceDto) -> None:
        """Persist the snapshot, replacing any earlier one for the same invoice."""
        ...


# ============================================================================
# IN-MEMORY IMPLEMENTATION (for testing and local development)
# ============================================================================


class InMemorySnapshotStorage:
    """
    In-memory snapshot storage.

    Keeps the serialized bytes per invoice id (last write wins), so
    stored data never aliases the snapshot the caller still holds.
    """

    def __init__(self) -> None:
        self._snapshots: dict[UUID, bytes] = {}

    def store(self, snapshot: InvoiceDto) -> None:
        payload = serialize_snapshot(snapshot)
        self._snapshots[snapshot.id] = payload

        logger.debug(
            "storage.snapshot_stored",
            invoice_id=str(snapshot.id),
            size_bytes=len(payload),
        )

    def get(self, invoice_id: UUID) -> InvoiceDto | None:
        """Helper for testing: decoded copy of the stored snapshot."""
        payload = self._snapshots.get(invoice_id)
        if payload is None:
            return None
        return InvoiceDto.model_validate_json(payload)

    def __len__(self) -> int:
        return len(self._snapshots)
