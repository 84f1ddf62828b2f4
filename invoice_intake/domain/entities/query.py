"""Domain value objects for listing invoices — filter, sort and page."""

from dataclasses import dataclass, field
from enum import Enum

from .invoice import Invoice, InvoiceStatus


class SortField(str, Enum):
    """Closed set of invoice attributes the list view can be ordered by.

    Values match the public JSON field names.
    """

    UPLOAD_DATE = "uploadDate"
    FILE_NAME = "fileName"
    FILE_SIZE = "fileSize"
    CLIENT_NAME = "clientName"
    AMOUNT = "amount"
    STATUS = "status"
    PROCESSING_START_TIME = "processingStartTime"
    PROCESSING_END_TIME = "processingEndTime"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class InvoiceQuery:
    """Parameters of a single list request."""

    status: InvoiceStatus | None = None
    search: str | None = None
    sort_by: SortField = SortField.UPLOAD_DATE
    sort_order: SortOrder = SortOrder.DESC
    page: int = 1
    limit: int = 10


@dataclass
class InvoicePage:
    """One page of a filtered, sorted invoice listing."""

    data: list[Invoice] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
