from __future__ import annotations

import asyncio
from typing import Coroutine, TypeVar

import anyio

T = TypeVar("T")


def run_async(coro: Coroutine[object, object, T], *, timeout: float | None = None) -> T:
    """
    Run an async coroutine from sync code.

    - Sync FastAPI endpoints run in an AnyIO worker thread; the coroutine is
      executed on the main loop via anyio.from_thread.run.
    - Outside a worker thread (CLI, scripts, plain unit tests) a fresh loop is
      started with anyio.run.
    - Calling from an async context in the same thread is an error; await instead.
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
