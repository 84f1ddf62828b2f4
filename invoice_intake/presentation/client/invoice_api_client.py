"""HTTP client for the invoice API — upload, list and poll until processing settles.

Mirrors what the browser UI does: after an upload, poll each invoice that is
still Pending/Processing on a fixed interval and stop once every tracked
invoice is Processed or Failed.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any

import httpx

from invoice_intake.application.schemas.invoices import (
    InvoicePageSchema,
    InvoiceSchema,
    UploadResultSchema,
)
from invoice_intake.config import get_settings

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30.0


class InvoiceApiError(Exception):
    """Raised when the invoice API answers with an error status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"[invoice-api] {status_code}: {message}")


class InvoiceSettleTimeout(TimeoutError):
    """Raised when tracked invoices do not reach a terminal status in time."""

    def __init__(self, unsettled: list[str]):
        self.unsettled = unsettled
        super().__init__(f"{len(unsettled)} invoice(s) still processing: {', '.join(unsettled)}")


def has_unsettled(invoices: list[InvoiceSchema]) -> bool:
    """True while at least one invoice is still Pending or Processing."""
    return any(not inv.status.is_terminal for inv in invoices)


class InvoiceApiClient:
    """Async client for ``/api/v1/invoices``.

    Pass ``http_client`` to reuse an existing ``httpx.AsyncClient`` (for
    example one bound to an ASGI transport in tests). ``poll_interval``
    defaults to ``status_poll_interval_seconds`` from Settings.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
        poll_interval: float | None = None,
    ):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        if poll_interval is None:
            poll_interval = get_settings().status_poll_interval_seconds
        if poll_interval < 0:
            raise ValueError("poll_interval must be >= 0")
        self._poll_interval = poll_interval

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    async def __aenter__(self) -> "InvoiceApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── Queries ──────────────────────────────────────────────────────

    async def list_invoices(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        sort_by: str = "uploadDate",
        sort_order: str = "desc",
        status: str | None = None,
        search: str | None = None,
    ) -> InvoicePageSchema:
        params: dict[str, Any] = {"page": page, "sortBy": sort_by, "sortOrder": sort_order}
        if limit is not None:
            params["limit"] = limit
        if status:
            params["status"] = status
        if search:
            params["search"] = search

        response = await self._client.get("/api/v1/invoices", params=params)
        return InvoicePageSchema.model_validate(self._json_or_raise(response))

    async def get_invoice(self, invoice_id: str) -> InvoiceSchema:
        response = await self._client.get(f"/api/v1/invoices/{invoice_id}")
        return InvoiceSchema.model_validate(self._json_or_raise(response))

    # ── Upload ───────────────────────────────────────────────────────

    async def upload_invoices(
        self, files: list[tuple[str, bytes]] | list[Path]
    ) -> UploadResultSchema:
        """Upload ``(name, bytes)`` pairs or local paths in one multipart request."""
        parts = []
        for item in files:
            if isinstance(item, Path):
                name, content = item.name, item.read_bytes()
            else:
                name, content = item
            parts.append(("files", (name, content, "application/pdf")))

        response = await self._client.post("/api/v1/invoices/upload", files=parts)
        return UploadResultSchema.model_validate(self._json_or_raise(response))

    # ── Polling ──────────────────────────────────────────────────────

    async def wait_until_settled(
        self,
        invoice_ids: list[str],
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> list[InvoiceSchema]:
        """Poll the given invoices until all are Processed or Failed.

        Only invoices that are still unsettled are re-fetched on each round.
        Returns the final invoices in the order of ``invoice_ids``.
        """
        if poll_interval is None:
            poll_interval = self._poll_interval

        latest: dict[str, InvoiceSchema] = {}
        for invoice_id in invoice_ids:
            latest[invoice_id] = await self.get_invoice(invoice_id)

        deadline = None if timeout is None else time.monotonic() + timeout

        while has_unsettled(list(latest.values())):
            if deadline is not None and time.monotonic() >= deadline:
                raise InvoiceSettleTimeout(
                    [i for i, inv in latest.items() if not inv.status.is_terminal]
                )

            await asyncio.sleep(poll_interval)

            pending = [i for i, inv in latest.items() if not inv.status.is_terminal]
            logger.debug("Polling %d unsettled invoice(s)", len(pending))
            for invoice_id in pending:
                latest[invoice_id] = await self.get_invoice(invoice_id)

        return [latest[i] for i in invoice_ids]

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _json_or_raise(response: httpx.Response) -> Any:
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("error") or body.get("message") or body.get("detail") or response.text
        raise InvoiceApiError(response.status_code, str(message))
