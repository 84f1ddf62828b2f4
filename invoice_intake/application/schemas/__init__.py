from .invoices import ErrorSchema, InvoicePageSchema, InvoiceSchema, UploadResultSchema

__all__ = [
    "ErrorSchema",
    "InvoicePageSchema",
    "InvoiceSchema",
    "UploadResultSchema",
]
