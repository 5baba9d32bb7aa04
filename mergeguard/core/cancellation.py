# mergeguard/core/cancellation.py
import asyncio
from typing import Awaitable, TypeVar

from starlette.requests import ClientDisconnect, Request

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.5


async def cancel_on_disconnect(
    request: Request,
    awaitable: Awaitable[T],
    poll_interval: float = DISCONNECT_POLL_SECONDS,
) -> T:
    """Await ``awaitable``, cancelling it and raising ``ClientDisconnect`` if the client leaves."""
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnect()
    finally:
        if not task.done():
            task.cancel()
