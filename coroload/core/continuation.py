from __future__ import annotations

from collections.abc import Callable
from typing import Any

# callback(error, result); error is an exception instance or None.
DeliveryCallback = Callable[..., None]

# A continuation is invoked with a DeliveryCallback and calls it exactly once.
# Anything that is not callable is treated as an already-resolved plain value.
Continuation = Callable[[DeliveryCallback], None]

Transform = Callable[[BaseException | None, Any], Any]


def is_continuation(obj: object) -> bool:
    return callable(obj)


def unit(error: BaseException | None = None, result: Any = None) -> Continuation:
    """Return a continuation that is already resolved with `(error, result)`."""

    def resolved(callback: DeliveryCallback) -> None:
        callback(error, result)

    return resolved


def bind(value: Any, transform: Transform) -> Continuation:
    """Sequence `value` into the next step produced by `transform`.

    The returned continuation resolves `value` first, hands its outcome to
    `transform` to get the next continuation, then resolves that one against
    the downstream callback. Delivery is synchronous; see
    `coroload.core.scheduler.Scheduler.bind` for the deferred variant.
    """

    def bound(callback: DeliveryCallback) -> None:
        def step(error: BaseException | None = None, result: Any = None) -> None:
            resolve(transform(error, result), callback)

        resolve(value, step)

    return bound


def resolve(value: Any, callback: DeliveryCallback) -> None:
    """Deliver a continuation (or a plain value) to `callback`."""

    if is_continuation(value):
        value(callback)
    else:
        callback(None, value)
