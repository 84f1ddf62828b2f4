"""FastAPI dependency injection — wires infrastructure to application layer.

Long-lived objects (repository, storage, simulator, SSE manager) are built
once per application in ``build_runtime`` and kept on ``app.state``; the
providers below hand them to request handlers.
"""

import random
from collections.abc import AsyncGenerator
from dataclasses import dataclass

from fastapi import Request

from invoice_intake.config import Settings
from invoice_intake.application.interfaces import InvoiceRepository
from invoice_intake.application.services import (
    InvoiceIntakeService,
    InvoiceQueryService,
    ProcessingSimulator,
    SSEManager,
)
from invoice_intake.infrastructure.metadata.random_metadata_generator import (
    RandomInvoiceMetadataGenerator,
)
from invoice_intake.infrastructure.repositories import InMemoryInvoiceRepository
from invoice_intake.infrastructure.storage.local_file_storage import LocalFileStorage


@dataclass
class InvoiceRuntime:
    """Process-wide collaborators shared by every request."""

    settings: Settings
    repository: InvoiceRepository
    storage: LocalFileStorage
    metadata_generator: RandomInvoiceMetadataGenerator
    processor: ProcessingSimulator
    sse_manager: SSEManager


def build_runtime(settings: Settings, rng: random.Random | None = None) -> InvoiceRuntime:
    """Create the in-memory store and the services around it."""
    rng = rng or random.Random()
    repository = InMemoryInvoiceRepository()
    sse_manager = SSEManager()

    return InvoiceRuntime(
        settings=settings,
        repository=repository,
        storage=LocalFileStorage(upload_dir=settings.upload_dir),
        metadata_generator=RandomInvoiceMetadataGenerator(
            client_names=settings.client_names,
            amount_min=settings.amount_min,
            amount_max=settings.amount_max,
            rng=rng,
        ),
        processor=ProcessingSimulator(
            repository=repository,
            sse_manager=sse_manager,
            min_delay=settings.processing_min_delay_seconds,
            max_delay=settings.processing_max_delay_seconds,
            success_rate=settings.processing_success_rate,
            rng=rng,
        ),
        sse_manager=sse_manager,
    )


def get_runtime(request: Request) -> InvoiceRuntime:
    return request.app.state.runtime


def get_sse_manager(request: Request) -> SSEManager:
    return get_runtime(request).sse_manager


def get_file_storage(request: Request) -> LocalFileStorage:
    return get_runtime(request).storage


async def get_invoice_query_service(
    request: Request,
) -> AsyncGenerator[InvoiceQueryService, None]:
    """Provides an InvoiceQueryService over the shared repository."""
    runtime = get_runtime(request)
    yield InvoiceQueryService(
        runtime.repository,
        default_limit=runtime.settings.default_page_limit,
    )


async def get_invoice_intake_service(
    request: Request,
) -> AsyncGenerator[InvoiceIntakeService, None]:
    """Provides an InvoiceIntakeService with storage, metadata and processing wired up."""
    runtime = get_runtime(request)
    yield InvoiceIntakeService(
        repository=runtime.repository,
        file_storage=runtime.storage,
        metadata_generator=runtime.metadata_generator,
        processor=runtime.processor,
        sse_manager=runtime.sse_manager,
    )
