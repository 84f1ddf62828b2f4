from .invoice_repository import InvoiceRepository
from .invoice_processor import InvoiceProcessor
from .metadata_generator import InvoiceMetadata, InvoiceMetadataGenerator

__all__ = [
    "InvoiceRepository",
    "InvoiceProcessor",
    "InvoiceMetadata",
    "InvoiceMetadataGenerator",
]
