"""Bridge from sync service code (threadpool) to the event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Coroutine, TypeVar

import anyio

T = TypeVar("T")

logger = logging.getLogger(__name__)


def run_async(coro: Coroutine[object, object, T], *, timeout: float | None = None) -> T:
    """
    Run a coroutine from sync code.

    - Inside a FastAPI sync endpoint, hops back onto the server loop via
      anyio.from_thread.run so websocket objects stay on their own loop.
    - Outside any AnyIO worker thread (CLI, plain tests), spins a private loop.
    - Refuses to run from async code on the same thread (await it instead).
    """

    async def _runner() -> T:
        if timeout is not None:
            with anyio.fail_after(timeout):
                return await coro
        return await coro

    try:
        return anyio.from_thread.run(_runner)
    except RuntimeError:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return anyio.run(_runner)
        coro.close()
        raise RuntimeError("run_async called from async context; use await instead")


def run_async_best_effort(
    coro: Coroutine[object, object, object],
    *,
    label: str,
    timeout: float | None = None,
) -> bool:
    """Like run_async, but logs and returns False instead of raising."""
    try:
        run_async(coro, timeout=timeout)
    except Exception:
        logger.warning("best-effort async call failed: %s", label, exc_info=True)
        return False
    return True
