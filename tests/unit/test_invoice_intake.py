"""Unit tests for the upload pipeline: storage, metadata generation and intake."""

import random

import pytest

from invoice_intake.application.interfaces import (
    InvoiceMetadata,
    InvoiceMetadataGenerator,
    InvoiceProcessor,
)
from invoice_intake.application.services.invoice_intake_service import (
    InvoiceIntakeService,
    UploadedInvoiceFile,
    is_accepted_file,
)
from invoice_intake.application.services.processing_simulator import ProcessingSimulator
from invoice_intake.domain.entities import InvoiceStatus
from invoice_intake.infrastructure.metadata.random_metadata_generator import (
    RandomInvoiceMetadataGenerator,
)
from invoice_intake.infrastructure.storage.local_file_storage import LocalFileStorage


# ── Fakes ────────────────────────────────────────────────────────────

class FixedMetadataGenerator(InvoiceMetadataGenerator):
    def generate(self, file_name: str, content: bytes) -> InvoiceMetadata:
        return InvoiceMetadata(client_name="Fixed Client", amount=1234)


class RecordingProcessor(InvoiceProcessor):
    """Remembers which invoices were handed over, without changing them."""

    def __init__(self):
        self.started: list[str] = []

    async def start(self, invoice_id: str) -> None:
        self.started.append(invoice_id)


class BrokenStorage(LocalFileStorage):
    async def store_file(self, content: bytes, filename: str):
        raise OSError("disk full")


# ── Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(upload_dir=str(tmp_path / "uploads"))


@pytest.fixture
def processor() -> RecordingProcessor:
    return RecordingProcessor()


@pytest.fixture
def service(repo, storage, processor) -> InvoiceIntakeService:
    return InvoiceIntakeService(
        repository=repo,
        file_storage=storage,
        metadata_generator=FixedMetadataGenerator(),
        processor=processor,
    )


# ── LocalFileStorage ────────────────────────────────────────────────

class TestLocalFileStorage:
    async def test_store_file_writes_bytes_under_generated_name(self, storage, pdf_bytes):
        stored = await storage.store_file(pdf_bytes, "invoice.pdf")

        assert stored.stored_name != "invoice.pdf"
        assert stored.stored_name.endswith(".pdf")
        assert stored.file_size == len(pdf_bytes)
        assert storage.get_file_path(stored.stored_name).read_bytes() == pdf_bytes
        assert storage.file_exists(stored.stored_name)

    async def test_same_name_gets_distinct_storage(self, storage):
        first = await storage.store_file(b"one", "same.pdf")
        second = await storage.store_file(b"two", "same.pdf")

        assert first.stored_name != second.stored_name
        assert storage.get_file_path(first.stored_name).read_bytes() == b"one"
        assert storage.get_file_path(second.stored_name).read_bytes() == b"two"

    def test_names_outside_upload_dir_are_refused(self, storage):
        with pytest.raises(ValueError):
            storage.get_file_path("../secrets.pdf")
        assert storage.file_exists("../secrets.pdf") is False


# ── RandomInvoiceMetadataGenerator ──────────────────────────────────

class TestRandomMetadataGenerator:
    def test_values_come_from_configured_ranges(self):
        names = ["Acme Corp", "Metro Dynamics"]
        generator = RandomInvoiceMetadataGenerator(
            client_names=names, amount_min=500, amount_max=10_500, rng=random.Random(5)
        )

        samples = [generator.generate("a.pdf", b"") for _ in range(300)]

        assert {s.client_name for s in samples} == set(names)
        assert all(500 <= s.amount < 10_500 for s in samples)
        assert all(s.amount == int(s.amount) for s in samples)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"client_names": []},
            {"client_names": ["A"], "amount_min": -5},
            {"client_names": ["A"], "amount_min": 100, "amount_max": 100},
        ],
    )
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            RandomInvoiceMetadataGenerator(**kwargs)


# ── InvoiceIntakeService ────────────────────────────────────────────

class TestInvoiceIntakeService:
    @pytest.mark.parametrize(
        ("name", "accepted"),
        [("a.pdf", True), ("A.PDF", True), ("a.txt", False), ("pdf", False), ("a.pdf.exe", False)],
    )
    def test_only_pdf_names_are_accepted(self, name, accepted):
        assert is_accepted_file(name) is accepted

    async def test_non_pdf_upload_creates_nothing(self, service, repo, processor):
        result = await service.upload_files([UploadedInvoiceFile("x.txt", b"hello")])

        assert result.invoice_ids == []
        assert result.skipped == ["x.txt"]
        assert await repo.count() == 0
        assert processor.started == []

    async def test_two_pdfs_create_two_pending_records(
        self, service, repo, processor, storage, pdf_bytes
    ):
        result = await service.upload_files(
            [
                UploadedInvoiceFile("x.pdf", pdf_bytes),
                UploadedInvoiceFile("notes.txt", b"skip me"),
                UploadedInvoiceFile("y.pdf", pdf_bytes),
            ]
        )

        assert len(result.invoice_ids) == 2
        assert processor.started == result.invoice_ids

        for invoice_id, name in zip(result.invoice_ids, ["x.pdf", "y.pdf"]):
            invoice = await repo.get_by_id(invoice_id)
            assert invoice.file_name == name
            assert invoice.status == InvoiceStatus.PENDING
            assert invoice.file_size == len(pdf_bytes)
            assert invoice.client_name == "Fixed Client"
            assert invoice.amount == 1234
            assert invoice.file_path != name
            assert storage.file_exists(invoice.file_path)

    async def test_storage_failure_propagates(self, repo, tmp_path, processor, pdf_bytes):
        service = InvoiceIntakeService(
            repository=repo,
            file_storage=BrokenStorage(upload_dir=str(tmp_path / "broken")),
            metadata_generator=FixedMetadataGenerator(),
            processor=processor,
        )

        with pytest.raises(OSError):
            await service.upload_files([UploadedInvoiceFile("x.pdf", pdf_bytes)])
        assert await repo.count() == 0

    async def test_uploaded_invoices_settle_with_simulator(self, repo, storage, pdf_bytes):
        simulator = ProcessingSimulator(
            repository=repo, min_delay=0.0, max_delay=0.01, rng=random.Random(11)
        )
        service = InvoiceIntakeService(
            repository=repo,
            file_storage=storage,
            metadata_generator=FixedMetadataGenerator(),
            processor=simulator,
        )

        result = await service.upload_files(
            [UploadedInvoiceFile("x.pdf", pdf_bytes), UploadedInvoiceFile("y.pdf", pdf_bytes)]
        )
        await simulator.drain()

        for invoice_id in result.invoice_ids:
            invoice = await repo.get_by_id(invoice_id)
            assert invoice.status in (InvoiceStatus.PROCESSED, InvoiceStatus.FAILED)
            assert invoice.processing_start_time is not None
            assert invoice.processing_end_time is not None
