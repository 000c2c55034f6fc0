from __future__ import annotations

import pytest
from statemachine.exceptions import TransitionNotAllowed

from coroload.loader.fsm import LoadPhase
from coroload.loader.registry import ModuleAlreadyDefined, ModuleRegistry, PendingLoad


def test_define_is_write_once() -> None:
    registry = ModuleRegistry()
    exports = {"double": "fn"}

    registry.define("utils/math.js", exports)

    assert "utils/math.js" in registry
    assert registry.get("utils/math.js") is exports
    with pytest.raises(ModuleAlreadyDefined):
        registry.define("utils/./math.js", {"other": True})
    assert registry.get("utils/math.js") is exports


def test_lookups_normalize_keys() -> None:
    registry = ModuleRegistry()
    registry.define("lib/log.js", "log")

    assert "utils/../lib/log.js" in registry
    assert registry.get("./lib/log.js") == "log"
    assert registry.get("lib/missing.js", "default") == "default"


def test_claim_then_join(collect) -> None:
    registry = ModuleRegistry()

    first, claimed = registry.claim("a.js")
    second, claimed_again = registry.claim("./a.js")

    assert claimed is True
    assert claimed_again is False
    assert second is first
    assert registry.pending_paths == ["a.js"]

    got, cb = collect()
    first.wait()(cb)
    second.wait()(cb)
    assert got == []

    registry.define("a.js", "A")

    assert got == [(None, "A"), (None, "A")]
    assert registry.pending_paths == []
    assert first.phase is LoadPhase.loaded


def test_claim_of_defined_module_is_already_settled(collect) -> None:
    registry = ModuleRegistry()
    registry.define("a.js", "A")

    pending, claimed = registry.claim("a.js")
    got, cb = collect()
    pending.wait()(cb)

    assert claimed is False
    assert got == [(None, "A")]


def test_failed_load_is_forgotten(collect) -> None:
    registry = ModuleRegistry()
    pending, _ = registry.claim("a.js")
    got, cb = collect()
    pending.wait()(cb)
    err = ConnectionError("404")

    registry.fail("a.js", err)

    assert got == [(err, None)]
    assert pending.phase is LoadPhase.failed
    assert "a.js" not in registry

    retry, claimed = registry.claim("a.js")
    assert claimed is True
    assert retry is not pending


def test_fail_without_load_in_flight_raises() -> None:
    with pytest.raises(KeyError):
        ModuleRegistry().fail("nothing.js", RuntimeError())


def test_pending_load_settles_exactly_once() -> None:
    pending = PendingLoad("a.js")
    pending.mark_executed()
    pending.complete("A")

    with pytest.raises(TransitionNotAllowed):
        pending.fail(RuntimeError("late"))
    with pytest.raises(TransitionNotAllowed):
        pending.complete("again")
    with pytest.raises(TransitionNotAllowed):
        pending.mark_executed()
