from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from coroload.core.continuation import Continuation, DeliveryCallback, Transform, is_continuation, resolve, unit
from coroload.core.driver import CoroutineFactory, make_runner

logger = logging.getLogger(__name__)

NextTick = Callable[[Callable[[], None]], Any]


class CallbackCalledTwice(RuntimeError):
    pass


def asyncio_next_tick(fn: Callable[[], None]) -> None:
    """Schedule `fn` on the running asyncio loop's next iteration."""

    asyncio.get_running_loop().call_soon(fn)


class TickQueue:
    """A deterministic FIFO tick host.

    Useful where no event loop is running (sync callers, tests): callbacks
    scheduled with `call_soon` run only when the queue is drained.
    """

    def __init__(self) -> None:
        self._ready: deque[Callable[[], None]] = deque()
        self.ticks = 0

    def __len__(self) -> int:
        return len(self._ready)

    def call_soon(self, fn: Callable[[], None]) -> None:
        self._ready.append(fn)

    def run_once(self) -> bool:
        if not self._ready:
            return False
        fn = self._ready.popleft()
        self.ticks += 1
        fn()
        return True

    def run_until_idle(self, max_ticks: int | None = None) -> int:
        """Run queued callbacks (including ones they schedule) until none remain.

        Returns the number of ticks executed.
        """

        ran = 0
        while self._ready:
            if max_ticks is not None and ran >= max_ticks:
                break
            self.run_once()
            ran += 1
        return ran


class _Task:
    """One suspension: the downstream callback plus its one-shot flag."""

    __slots__ = ("callback", "done", "violated")

    def __init__(self, callback: DeliveryCallback) -> None:
        self.callback = callback
        self.done = False
        self.violated = False

    def report_violation(self, error: BaseException | None, result: Any) -> None:
        if self.violated:
            self.callback(error, result)
            return
        self.violated = True
        original = self.callback
        self.callback = _discard
        original(CallbackCalledTwice("Callback called twice!"))


def _discard(error: BaseException | None = None, result: Any = None) -> None:
    logger.warning("Discarding delivery after double callback: error=%r result=%r", error, result)


class Scheduler:
    """unit/bind with next-tick delivery and a one-shot delivery guard.

    `transform(error, result)` runs as soon as the awaited continuation
    delivers; resolving its result against the downstream callback is pushed
    to the next tick so long chains of resolved continuations yield to the
    host between steps.
    """

    def __init__(self, next_tick: NextTick = asyncio_next_tick) -> None:
        self.next_tick = next_tick
        self.run: Callable[[CoroutineFactory], Continuation] = make_runner(self.unit, self.bind)

    @staticmethod
    def unit(error: BaseException | None = None, result: Any = None) -> Continuation:
        return unit(error, result)

    def bind(self, value: Any, transform: Transform) -> Continuation:
        def bound(callback: DeliveryCallback) -> None:
            task = _Task(callback)

            def continue_next_tick(error: BaseException | None = None, result: Any = None) -> None:
                if task.done:
                    task.report_violation(error, result)
                    return
                task.done = True

                next_step = transform(error, result)
                # task.callback is read at tick time: a violation reported
                # before then redirects the real outcome to the discard logger.
                self.next_tick(lambda: resolve(next_step, task.callback))

            if not is_continuation(value):
                continue_next_tick(None, value)
                return
            try:
                value(continue_next_tick)
            except Exception as exc:
                continue_next_tick(exc)

        return bound


default_scheduler = Scheduler()
run = default_scheduler.run
