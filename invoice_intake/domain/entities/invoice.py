"""Domain entity for uploaded invoices and their processing lifecycle."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class InvoiceStatus(str, Enum):
    """Lifecycle states of an uploaded invoice.

    Transitions only move forward:
    ``Pending → Processing → Processed | Failed``.
    """

    PENDING = "Pending"
    PROCESSING = "Processing"
    PROCESSED = "Processed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (InvoiceStatus.PROCESSED, InvoiceStatus.FAILED)

    def can_transition_to(self, target: "InvoiceStatus") -> bool:
        """Return True if ``target`` is a legal next state from this one."""
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.PENDING: frozenset({InvoiceStatus.PROCESSING}),
    InvoiceStatus.PROCESSING: frozenset({InvoiceStatus.PROCESSED, InvoiceStatus.FAILED}),
    InvoiceStatus.PROCESSED: frozenset(),
    InvoiceStatus.FAILED: frozenset(),
}


@dataclass
class InvoiceDraft:
    """Everything needed to create an invoice record except its identifier."""

    file_name: str
    file_size: int
    file_path: str  # storage name inside the upload dir, never the original name
    client_name: str
    amount: float
    status: InvoiceStatus = InvoiceStatus.PENDING
    upload_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    processing_start_time: datetime | None = None
    processing_end_time: datetime | None = None


@dataclass
class Invoice:
    """A tracked invoice upload.

    Instances handed out by the repository are detached copies; the only
    way to change a stored invoice is ``InvoiceRepository.update``.
    """

    id: str
    file_name: str
    file_size: int
    file_path: str
    client_name: str
    amount: float
    upload_date: datetime
    status: InvoiceStatus = InvoiceStatus.PENDING
    processing_start_time: datetime | None = None
    processing_end_time: datetime | None = None

    @classmethod
    def from_draft(cls, invoice_id: str, draft: InvoiceDraft) -> "Invoice":
        return cls(
            id=invoice_id,
            file_name=draft.file_name,
            file_size=draft.file_size,
            file_path=draft.file_path,
            client_name=draft.client_name,
            amount=draft.amount,
            upload_date=draft.upload_date,
            status=draft.status,
            processing_start_time=draft.processing_start_time,
            processing_end_time=draft.processing_end_time,
        )

