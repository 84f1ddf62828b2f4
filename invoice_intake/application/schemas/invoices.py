"""Pydantic schemas for the invoice API — camelCase on the wire."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from invoice_intake.domain.entities import Invoice, InvoicePage, InvoiceStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InvoiceSchema(_CamelModel):
    """Public representation of an invoice record."""

    id: str
    file_name: str
    file_size: int
    client_name: str
    amount: float
    upload_date: datetime
    status: InvoiceStatus
    file_path: str
    processing_start_time: datetime | None = None
    processing_end_time: datetime | None = None

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "InvoiceSchema":
        return cls(
            id=invoice.id,
            file_name=invoice.file_name,
            file_size=invoice.file_size,
            client_name=invoice.client_name,
            amount=invoice.amount,
            upload_date=invoice.upload_date,
            status=invoice.status,
            file_path=invoice.file_path,
            processing_start_time=invoice.processing_start_time,
            processing_end_time=invoice.processing_end_time,
        )

    def to_event_payload(self) -> dict:
        """JSON-ready dict used for SSE broadcasts."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InvoicePageSchema(_CamelModel):
    """One page of the invoice list view."""

    data: list[InvoiceSchema]
    total: int
    page: int
    limit: int

    @classmethod
    def from_page(cls, page: InvoicePage) -> "InvoicePageSchema":
        return cls(
            data=[InvoiceSchema.from_entity(inv) for inv in page.data],
            total=page.total,
            page=page.page,
            limit=page.limit,
        )


class UploadResultSchema(_CamelModel):
    """Response after uploading file(s)."""

    success: bool
    invoice_ids: list[str] = []
    message: str


class ErrorSchema(BaseModel):
    error: str
