"""Abstract repository interface (port) for invoice records."""

from abc import ABC, abstractmethod
from typing import Any

from invoice_intake.domain.entities import Invoice, InvoiceDraft


class InvoiceRepository(ABC):
    """Port for invoice record storage — implemented in the infrastructure layer."""

    @abstractmethod
    async def create(self, draft: InvoiceDraft) -> Invoice:
        """Store a new invoice under a freshly generated identifier and return it."""
        ...

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Invoice | None:
        """Retrieve a single invoice by its ID. ``None`` means not found."""
        ...

    @abstractmethod
    async def update(self, invoice_id: str, **fields: Any) -> Invoice | None:
        """Shallow-merge ``fields`` into the stored invoice.

        Returns the merged invoice, or ``None`` if the ID does not exist.
        Lifecycle rules are not checked here; callers own that discipline.
        """
        ...

    @abstractmethod
    async def get_all(self) -> list[Invoice]:
        """Return every stored invoice in insertion order."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of stored invoices."""
        ...
