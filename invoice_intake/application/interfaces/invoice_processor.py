"""Port for the processing step that runs after an invoice is created."""

from abc import ABC, abstractmethod


class InvoiceProcessor(ABC):
    """Moves a freshly created invoice through its processing lifecycle.

    Implementations may simulate the work, parse the document, or hand the
    invoice to a queue. ``start`` must return promptly; the terminal status
    is written back through the repository when the work finishes.
    """

    @abstractmethod
    async def start(self, invoice_id: str) -> None:
        """Begin processing the invoice with the given ID."""
        ...

    async def shutdown(self) -> None:
        """Release any pending work. Default: nothing to release."""
