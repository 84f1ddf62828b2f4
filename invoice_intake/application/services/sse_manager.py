"""SSE Manager — pushes invoice status changes to connected browsers.

Every new invoice and every status transition (Pending → Processing →
Processed/Failed) is sent as one ``invoice_update`` event whose data is
the invoice's camelCase JSON. Listeners that fall behind are dropped
rather than slowing down uploads or the processing timers.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

logger = logging.getLogger(__name__)

INVOICE_UPDATE = "invoice_update"


class SSEManager:
    """Fans invoice updates out to every open ``/invoices/events`` stream.

    Each listener owns a bounded asyncio.Queue. ``broadcast`` never waits,
    so a listener whose queue is full is disconnected instead.
    """

    def __init__(self, max_queue_size: int = 100) -> None:
        self._queues: list[asyncio.Queue[str | None]] = []
        self._max_queue_size = max_queue_size

    async def subscribe(self) -> AsyncGenerator[str, None]:
        """Yield SSE-formatted invoice events until disconnected or shut down."""
        queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=self._max_queue_size)
        self._queues.append(queue)
        logger.debug("Invoice event listener connected (%d open)", len(self._queues))
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
        finally:
            if queue in self._queues:
                self._queues.remove(queue)

    async def broadcast(self, event_type: str, data: dict[str, Any]) -> None:
        """Send one event, e.g. ``INVOICE_UPDATE`` with an invoice payload."""
        sse_message = f"event: {event_type}\ndata: {json.dumps(data)}\n\n"
        lagging: list[asyncio.Queue[str | None]] = []

        for queue in self._queues:
            try:
                queue.put_nowait(sse_message)
            except asyncio.QueueFull:
                lagging.append(queue)

        for queue in lagging:
            logger.warning(
                "Invoice event listener fell %d events behind — disconnecting",
                self._max_queue_size,
            )
            self._queues.remove(queue)
            _drain_and_close(queue)

    async def shutdown(self) -> None:
        """End every open stream after the events already queued for it.

        A full queue gives up its oldest event to make room for the end marker.
        """
        for queue in self._queues:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(None)
        self._queues.clear()

    @property
    def client_count(self) -> int:
        return len(self._queues)


def _drain_and_close(queue: asyncio.Queue[str | None]) -> None:
    while not queue.empty():
        queue.get_nowait()
    queue.put_nowait(None)
