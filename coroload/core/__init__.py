"""Continuation runtime primitives (unit/bind, the coroutine driver, tick scheduling).

Kept free of FastAPI concerns so it can be reused by API routes, the loader, and tests.
"""

from __future__ import annotations

from .bridge import StalledError, run_sync, to_future
from .continuation import Continuation, DeliveryCallback, bind, is_continuation, unit
from .driver import is_coroutine, make_runner
from .scheduler import CallbackCalledTwice, Scheduler, TickQueue, asyncio_next_tick, default_scheduler, run

__all__ = [
    "CallbackCalledTwice",
    "Continuation",
    "DeliveryCallback",
    "Scheduler",
    "StalledError",
    "TickQueue",
    "asyncio_next_tick",
    "bind",
    "default_scheduler",
    "is_continuation",
    "is_coroutine",
    "make_runner",
    "run",
    "run_sync",
    "to_future",
    "unit",
]
