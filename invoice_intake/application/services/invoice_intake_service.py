"""Invoice intake service — turns uploaded PDFs into tracked invoice records."""

import logging
from dataclasses import dataclass, field

from invoice_intake.application.interfaces import (
    InvoiceMetadataGenerator,
    InvoiceProcessor,
    InvoiceRepository,
)
from invoice_intake.application.schemas.invoices import InvoiceSchema
from invoice_intake.application.services.sse_manager import INVOICE_UPDATE, SSEManager
from invoice_intake.domain.entities import Invoice, InvoiceDraft, InvoiceStatus
from invoice_intake.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage
from invoice_intake.infrastructure.storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)
plog = PipelineLogger("InvoiceIntakeService")

ACCEPTED_EXTENSION = ".pdf"


@dataclass
class UploadedInvoiceFile:
    """One file received from the client."""

    filename: str
    content: bytes


@dataclass
class IntakeResult:
    invoices: list[Invoice] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def invoice_ids(self) -> list[str]:
        return [inv.id for inv in self.invoices]


def is_accepted_file(filename: str) -> bool:
    return filename.lower().endswith(ACCEPTED_EXTENSION)


class InvoiceIntakeService:
    """Application service for the upload pipeline.

    Pipeline per file: Check extension → Store → Generate metadata →
    Create Pending record → Hand to processor.

    Files that are not PDFs are skipped, not rejected. A storage failure
    (``OSError``) aborts the whole batch.
    """

    def __init__(
        self,
        repository: InvoiceRepository,
        file_storage: LocalFileStorage,
        metadata_generator: InvoiceMetadataGenerator,
        processor: InvoiceProcessor,
        sse_manager: SSEManager | None = None,
    ):
        self._repository = repository
        self._storage = file_storage
        self._metadata = metadata_generator
        self._processor = processor
        self._sse = sse_manager

    async def upload_files(self, files: list[UploadedInvoiceFile]) -> IntakeResult:
        result = IntakeResult()

        for upload in files:
            if not is_accepted_file(upload.filename):
                plog.step_start(PipelineStage.SKIP, f"Skipping '{upload.filename}' (not a PDF)")
                result.skipped.append(upload.filename)
                continue

            invoice = await self._intake_one(upload)
            result.invoices.append(invoice)

        logger.info(
            "Upload batch finished: %d created, %d skipped",
            len(result.invoices),
            len(result.skipped),
        )
        return result

    async def _intake_one(self, upload: UploadedInvoiceFile) -> Invoice:
        plog.step_start(
            PipelineStage.UPLOAD, f"Received '{upload.filename}'", size_bytes=len(upload.content)
        )

        stored = await self._storage.store_file(upload.content, upload.filename)
        plog.step_complete(PipelineStage.STORAGE, f"Stored '{upload.filename}'", name=stored.stored_name)

        metadata = self._metadata.generate(upload.filename, upload.content)
        invoice = await self._repository.create(
            InvoiceDraft(
                file_name=upload.filename,
                file_size=stored.file_size,
                file_path=stored.stored_name,
                client_name=metadata.client_name,
                amount=metadata.amount,
                status=InvoiceStatus.PENDING,
            )
        )
        plog.detail("Invoice record created", id=invoice.id, client=invoice.client_name)

        if self._sse is not None:
            await self._sse.broadcast(
                INVOICE_UPDATE, InvoiceSchema.from_entity(invoice).to_event_payload()
            )

        await self._processor.start(invoice.id)
        return invoice
