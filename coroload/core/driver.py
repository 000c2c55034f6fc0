from __future__ import annotations

import inspect
from collections.abc import Callable, Generator
from typing import Any

from coroload.core.continuation import Continuation, Transform

Unit = Callable[..., Continuation]
Bind = Callable[[Any, Transform], Continuation]

CoroutineFactory = Callable[[], Any]


def is_coroutine(obj: object) -> bool:
    return inspect.isgenerator(obj)


def make_runner(unit: Unit, bind: Bind) -> Callable[[CoroutineFactory], Continuation]:
    """Build a `run(factory)` driver on top of a unit/bind pair.

    `run` turns a generator function into a single continuation:

    - the generator yields continuations (or plain values) and is resumed
      with their outcome: `throw(error)` on failure, `send(result)` otherwise;
    - an exception escaping the generator resolves the continuation with it;
    - returning resolves it with `(None, value)`;
    - a factory that does not return a generator resolves with its value.

    The factory is only called once the returned continuation is invoked.
    """

    def run(factory: CoroutineFactory) -> Continuation:
        def start(_error: BaseException | None = None, _result: Any = None) -> Continuation:
            try:
                gen = factory()
            except Exception as exc:
                return unit(exc)

            if not is_coroutine(gen):
                return unit(None, gen)

            return bind(unit(), _stepper(gen, unit, bind))

        return bind(unit(), start)

    return run


def _stepper(gen: Generator[Any, Any, Any], unit: Unit, bind: Bind) -> Transform:
    def send(error: BaseException | None = None, result: Any = None) -> Continuation:
        try:
            if error is not None:
                yielded = gen.throw(error)
            else:
                yielded = gen.send(result)
        except StopIteration as stop:
            return unit(None, stop.value)
        except Exception as exc:
            return unit(exc)

        return bind(yielded, send)

    return send
