from __future__ import annotations

import asyncio
from typing import Any

from coroload.core.continuation import Continuation, resolve
from coroload.core.driver import CoroutineFactory
from coroload.core.scheduler import Scheduler, TickQueue


class StalledError(RuntimeError):
    """The tick queue drained while a coroutine was still suspended."""


def to_future(continuation: Continuation | Any) -> asyncio.Future[Any]:
    """Resolve a continuation into an asyncio future on the running loop."""

    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    def deliver(error: BaseException | None = None, result: Any = None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    resolve(continuation, deliver)
    return future


def run_sync(factory: CoroutineFactory, *, queue: TickQueue | None = None) -> Any:
    """Drive `factory` to completion on a tick queue (a fresh one unless given) and return its value.

    Raises whatever error the coroutine resolved with, or `StalledError` if
    nothing is left to run before it completes.
    """

    ticks = queue if queue is not None else TickQueue()
    scheduler = Scheduler(next_tick=ticks.call_soon)
    outcome: list[tuple[BaseException | None, Any]] = []

    def deliver(error: BaseException | None = None, result: Any = None) -> None:
        outcome.append((error, result))

    scheduler.run(factory)(deliver)
    ticks.run_until_idle()

    if not outcome:
        raise StalledError("Coroutine suspended with nothing left to run")
    error, result = outcome[0]
    if error is not None:
        raise error
    return result
