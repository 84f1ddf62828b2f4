"""Shared fixtures — fast settings, a fresh app per test, and an ASGI client."""

import random
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from invoice_intake.config import Settings
from invoice_intake.domain.entities import InvoiceDraft, InvoiceStatus
from invoice_intake.infrastructure.repositories import InMemoryInvoiceRepository
from invoice_intake.main import create_app

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
PDF_BYTES = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        upload_dir=str(tmp_path / "uploads"),
        processing_min_delay_seconds=0.0,
        processing_max_delay_seconds=0.02,
    )


@pytest.fixture
async def app(settings):
    application = create_app(settings)
    yield application
    await application.state.runtime.processor.shutdown()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def repo() -> InMemoryInvoiceRepository:
    return InMemoryInvoiceRepository()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def _make_draft(
    file_name: str = "invoice.pdf",
    client_name: str = "Acme Corp",
    amount: float = 1000,
    status: InvoiceStatus = InvoiceStatus.PENDING,
    minutes: int = 0,
    file_size: int = 1024,
) -> InvoiceDraft:
    """Build a draft whose upload_date is ``minutes`` after BASE_TIME."""
    return InvoiceDraft(
        file_name=file_name,
        file_size=file_size,
        file_path=f"stored-{file_name}",
        client_name=client_name,
        amount=amount,
        status=status,
        upload_date=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def make_draft():
    return _make_draft


@pytest.fixture
def pdf_bytes() -> bytes:
    return PDF_BYTES
