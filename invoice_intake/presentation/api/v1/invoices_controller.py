"""Invoices API controller — upload PDFs and query the invoice list."""

import logging

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse

from invoice_intake.application.schemas.invoices import (
    ErrorSchema,
    InvoicePageSchema,
    InvoiceSchema,
    UploadResultSchema,
)
from invoice_intake.application.services import (
    InvoiceIntakeService,
    InvoiceQueryService,
    SSEManager,
    UploadedInvoiceFile,
)
from invoice_intake.domain.entities import InvoiceStatus, SortField, SortOrder
from invoice_intake.domain.exceptions import EntityNotFoundError, InvalidQueryError
from invoice_intake.infrastructure.dependencies import (
    get_file_storage,
    get_invoice_intake_service,
    get_invoice_query_service,
    get_sse_manager,
)
from invoice_intake.infrastructure.storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _upload_failure(status_code: int, message: str) -> JSONResponse:
    body = UploadResultSchema(success=False, message=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude={"invoice_ids"}),
    )


def _fetch_failure(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorSchema(error=message).model_dump(),
    )


# ── Endpoints ────────────────────────────────────────────────────────

@router.get(
    "",
    response_model=InvoicePageSchema,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorSchema}},
)
async def list_invoices(
    page: int = Query(1, description="1-based page number; values below 1 mean 1"),
    limit: int | None = Query(None, ge=1, le=100),
    sort_by: SortField = Query(SortField.UPLOAD_DATE, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
    invoice_status: InvoiceStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, description="Case-insensitive match on file or client name"),
    service: InvoiceQueryService = Depends(get_invoice_query_service),
):
    """List invoices with status filter, search, sorting and pagination."""
    try:
        result = await service.list_invoices(
            status=invoice_status,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
    except InvalidQueryError:
        raise
    except Exception:
        logger.exception("Error fetching invoices")
        return _fetch_failure("Failed to fetch invoices")

    return InvoicePageSchema.from_page(result)


@router.get("/events")
async def invoice_event_stream(
    sse: SSEManager = Depends(get_sse_manager),
) -> StreamingResponse:
    """SSE endpoint for real-time invoice status updates.

    Clients connect via EventSource and receive 'invoice_update' events
    whenever an invoice is created or changes status.
    """
    return StreamingResponse(
        sse.subscribe(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post(
    "/upload",
    response_model=UploadResultSchema,
    responses={400: {"model": UploadResultSchema}, 500: {"model": UploadResultSchema}},
)
async def upload_invoices(
    files: list[UploadFile] | None = File(None),
    service: InvoiceIntakeService = Depends(get_invoice_intake_service),
):
    """Upload one or more PDF invoices. Non-PDF files are skipped."""
    if not files:
        return _upload_failure(status.HTTP_400_BAD_REQUEST, "No files provided")

    try:
        uploads = [
            UploadedInvoiceFile(filename=f.filename or "untitled", content=await f.read())
            for f in files
        ]
        result = await service.upload_files(uploads)
    except Exception:
        logger.exception("Error uploading files")
        return _upload_failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to upload files")

    return UploadResultSchema(
        success=True,
        invoice_ids=result.invoice_ids,
        message=f"Successfully uploaded {len(result.invoices)} invoice(s)",
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceSchema,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorSchema}, 500: {"model": ErrorSchema}},
)
async def get_invoice(
    invoice_id: str,
    service: InvoiceQueryService = Depends(get_invoice_query_service),
):
    """Get a single invoice by ID."""
    try:
        invoice = await service.get_invoice(invoice_id)
    except EntityNotFoundError:
        raise
    except Exception:
        logger.exception("Error fetching invoice %s", invoice_id)
        return _fetch_failure("Failed to fetch invoice")

    return InvoiceSchema.from_entity(invoice)


@router.get("/{invoice_id}/file", responses={404: {"model": ErrorSchema}})
async def download_invoice_file(
    invoice_id: str,
    service: InvoiceQueryService = Depends(get_invoice_query_service),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    """Download the original uploaded PDF."""
    invoice = await service.get_invoice(invoice_id)

    if not storage.file_exists(invoice.file_path):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorSchema(error="File no longer exists on disk").model_dump(),
        )

    return FileResponse(
        path=str(storage.get_file_path(invoice.file_path)),
        filename=invoice.file_name,
        media_type="application/pdf",
    )
