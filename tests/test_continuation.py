from __future__ import annotations

from coroload.core.continuation import bind, is_continuation, unit


def test_unit_delivers_its_outcome(collect) -> None:
    got, cb = collect()
    err = ValueError("boom")

    unit(None, 5)(cb)
    unit(err)(cb)

    assert got == [(None, 5), (err, None)]


def test_bind_threads_result_into_next_step(collect) -> None:
    got, cb = collect()

    doubled = bind(unit(None, 5), lambda error, result: unit(None, result * 2))
    plus_one = bind(doubled, lambda error, result: unit(None, result + 1))
    plus_one(cb)

    assert got == [(None, 11)]


def test_bind_accepts_plain_values(collect) -> None:
    got, cb = collect()

    bind(7, lambda error, result: unit(error, result))(cb)

    assert got == [(None, 7)]


def test_bind_passes_errors_to_transform(collect) -> None:
    got, cb = collect()
    err = KeyError("missing")
    seen: list[BaseException | None] = []

    def transform(error, result):  # type: ignore[no-untyped-def]
        seen.append(error)
        return unit(None, "handled")

    bind(unit(err), transform)(cb)

    assert seen == [err]
    assert got == [(None, "handled")]


def test_callables_are_continuations() -> None:
    assert is_continuation(unit())
    assert is_continuation(lambda cb: cb())
    assert not is_continuation(42)
    assert not is_continuation("require")
