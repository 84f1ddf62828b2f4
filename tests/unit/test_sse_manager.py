"""Unit tests for the SSE broadcaster."""

import asyncio
import json

from invoice_intake.application.services.sse_manager import INVOICE_UPDATE, SSEManager


async def _collect(manager: SSEManager, out: list[str]) -> None:
    async for event in manager.subscribe():
        out.append(event)


async def _wait_for_clients(manager: SSEManager, count: int) -> None:
    while manager.client_count < count:
        await asyncio.sleep(0)


async def test_broadcast_reaches_every_subscriber():
    manager = SSEManager()
    first: list[str] = []
    second: list[str] = []
    tasks = [
        asyncio.create_task(_collect(manager, first)),
        asyncio.create_task(_collect(manager, second)),
    ]
    await asyncio.wait_for(_wait_for_clients(manager, 2), timeout=1)

    await manager.broadcast(INVOICE_UPDATE, {"id": "abc", "status": "Processing"})
    await manager.shutdown()
    await asyncio.wait_for(asyncio.gather(*tasks), timeout=1)

    assert first == second
    assert len(first) == 1
    header, data_line, _, _ = first[0].split("\n")
    assert header == "event: invoice_update"
    assert json.loads(data_line.removeprefix("data: ")) == {"id": "abc", "status": "Processing"}
    assert manager.client_count == 0


async def test_broadcast_without_subscribers_is_a_no_op():
    manager = SSEManager()

    await manager.broadcast(INVOICE_UPDATE, {"id": "abc"})

    assert manager.client_count == 0


async def test_slow_client_is_disconnected_when_queue_fills():
    manager = SSEManager(max_queue_size=2)
    received: list[str] = []
    consumer = asyncio.create_task(_collect(manager, received))
    await asyncio.wait_for(_wait_for_clients(manager, 1), timeout=1)

    # broadcast never suspends, so the consumer cannot drain between calls
    for i in range(3):
        await manager.broadcast(INVOICE_UPDATE, {"n": i})

    assert manager.client_count == 0
    await asyncio.wait_for(consumer, timeout=1)
    assert received == []
