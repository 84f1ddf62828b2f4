from .invoice import Invoice, InvoiceDraft, InvoiceStatus
from .query import InvoicePage, InvoiceQuery, SortField, SortOrder

__all__ = [
    "Invoice",
    "InvoiceDraft",
    "InvoiceStatus",
    "InvoicePage",
    "InvoiceQuery",
    "SortField",
    "SortOrder",
]
