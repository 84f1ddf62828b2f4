from .in_memory_invoice_repository import InMemoryInvoiceRepository

__all__ = [
    "InMemoryInvoiceRepository",
]
