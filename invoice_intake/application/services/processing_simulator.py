"""Processing Simulator — fake asynchronous processing for uploaded invoices."""

import asyncio
import logging
import random
from datetime import datetime, timezone

from invoice_intake.application.interfaces import InvoiceProcessor, InvoiceRepository
from invoice_intake.application.schemas.invoices import InvoiceSchema
from invoice_intake.application.services.sse_manager import INVOICE_UPDATE, SSEManager
from invoice_intake.domain.entities import Invoice, InvoiceStatus
from invoice_intake.domain.exceptions import EntityNotFoundError, InvalidStatusTransitionError
from invoice_intake.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("ProcessingSimulator")


class ProcessingSimulator(InvoiceProcessor):
    """Marks an invoice Processing right away, then Processed or Failed after a random delay.

    Each ``start`` call schedules one asyncio task. Tasks live only in this
    process: on shutdown they are cancelled and their invoices stay in
    Processing.
    """

    def __init__(
        self,
        repository: InvoiceRepository,
        sse_manager: SSEManager | None = None,
        min_delay: float = 15.0,
        max_delay: float = 45.0,
        success_rate: float = 0.8,
        rng: random.Random | None = None,
    ) -> None:
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError("delay window must satisfy 0 <= min_delay <= max_delay")
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be between 0 and 1")

        self._repository = repository
        self._sse = sse_manager
        self._min_delay = min_delay
        self._max_delay = max_delay
        self._success_rate = success_rate
        self._rng = rng or random.Random()
        self._tasks: set[asyncio.Task[None]] = set()
        # Serializes read-check-write so two transitions never interleave
        self._transition_lock = asyncio.Lock()

    async def start(self, invoice_id: str) -> None:
        """Move the invoice to Processing and schedule its completion."""
        invoice = await self._transition(
            invoice_id,
            InvoiceStatus.PROCESSING,
            processing_start_time=datetime.now(timezone.utc),
        )

        delay = self._draw_delay()
        plog.step_start(
            PipelineStage.PROCESSING,
            f"Processing {invoice.file_name}",
            id=invoice_id,
            delay=f"{delay:.1f}s",
        )

        task = asyncio.create_task(self._finish_later(invoice_id, delay))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every scheduled completion has run."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel outstanding completions; affected invoices remain Processing."""
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                "ProcessingSimulator stopped with %d invoice(s) still Processing", len(pending)
            )

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self._tasks if not t.done())

    def _draw_delay(self) -> float:
        if self._max_delay == self._min_delay:
            return self._min_delay
        return self._rng.uniform(self._min_delay, self._max_delay)

    async def _finish_later(self, invoice_id: str, delay: float) -> None:
        await asyncio.sleep(delay)

        succeeded = self._rng.random() < self._success_rate
        target = InvoiceStatus.PROCESSED if succeeded else InvoiceStatus.FAILED
        try:
            invoice = await self._transition(
                invoice_id,
                target,
                processing_end_time=datetime.now(timezone.utc),
            )
        except (EntityNotFoundError, InvalidStatusTransitionError) as e:
            plog.step_error(PipelineStage.ERROR, f"Could not finish invoice {invoice_id}", error=e)
            return

        if succeeded:
            plog.step_complete(PipelineStage.COMPLETE, f"{invoice.file_name} processed", id=invoice_id)
        else:
            plog.step_error(PipelineStage.FAILED, f"{invoice.file_name} failed processing")

    async def _transition(self, invoice_id: str, target: InvoiceStatus, **timestamps) -> Invoice:
        """Apply a forward-only status change and broadcast it."""
        async with self._transition_lock:
            current = await self._repository.get_by_id(invoice_id)
            if current is None:
                raise EntityNotFoundError("Invoice", invoice_id)
            if not current.status.can_transition_to(target):
                raise InvalidStatusTransitionError(invoice_id, current.status.value, target.value)

            updated = await self._repository.update(invoice_id, status=target, **timestamps)
            if updated is None:
                raise EntityNotFoundError("Invoice", invoice_id)

        if self._sse is not None:
            await self._sse.broadcast(
                INVOICE_UPDATE, InvoiceSchema.from_entity(updated).to_event_payload()
            )
        return updated
