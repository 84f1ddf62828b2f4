from .invoice_intake_service import InvoiceIntakeService, IntakeResult, UploadedInvoiceFile
from .invoice_query_service import InvoiceQueryService, query_invoices
from .processing_simulator import ProcessingSimulator
from .sse_manager import SSEManager

__all__ = [
    "InvoiceIntakeService",
    "IntakeResult",
    "UploadedInvoiceFile",
    "InvoiceQueryService",
    "query_invoices",
    "ProcessingSimulator",
    "SSEManager",
]
