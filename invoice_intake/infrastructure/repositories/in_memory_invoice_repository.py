"""In-memory implementation of the InvoiceRepository — lives as long as the process."""

import asyncio
import dataclasses
import logging
import uuid
from typing import Any

from invoice_intake.application.interfaces import InvoiceRepository
from invoice_intake.domain.entities import Invoice, InvoiceDraft

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(f.name for f in dataclasses.fields(Invoice)) - {"id"}


class InMemoryInvoiceRepository(InvoiceRepository):
    """Implements the InvoiceRepository port with a lock-guarded dict.

    Every method returns copies of the stored invoices, so callers can never
    mutate the map behind the repository's back.
    """

    def __init__(self) -> None:
        self._invoices: dict[str, Invoice] = {}
        self._lock = asyncio.Lock()

    async def create(self, draft: InvoiceDraft) -> Invoice:
        async with self._lock:
            invoice_id = str(uuid.uuid4())
            while invoice_id in self._invoices:
                invoice_id = str(uuid.uuid4())

            invoice = Invoice.from_draft(invoice_id, draft)
            self._invoices[invoice_id] = invoice
            logger.debug("Created invoice %s (%s)", invoice_id, draft.file_name)
            return dataclasses.replace(invoice)

    async def get_by_id(self, invoice_id: str) -> Invoice | None:
        async with self._lock:
            invoice = self._invoices.get(invoice_id)
            return dataclasses.replace(invoice) if invoice else None

    async def update(self, invoice_id: str, **fields: Any) -> Invoice | None:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update invoice field(s): {', '.join(sorted(unknown))}")

        async with self._lock:
            current = self._invoices.get(invoice_id)
            if current is None:
                return None

            merged = dataclasses.replace(current, **fields)
            self._invoices[invoice_id] = merged
            return dataclasses.replace(merged)

    async def get_all(self) -> list[Invoice]:
        async with self._lock:
            return [dataclasses.replace(inv) for inv in self._invoices.values()]

    async def count(self) -> int:
        async with self._lock:
            return len(self._invoices)
