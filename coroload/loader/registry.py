"""Session-owned module registry.

Replaces the browser's ambient `window.__cache` with an object passed to
loaders explicitly. Besides the write-once path -> exports mapping it tracks
in-flight loads, so concurrent requests for one path share a single fetch
and are woken exactly once when it settles.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from coroload.core.continuation import Continuation, DeliveryCallback
from coroload.loader.fsm import LoadFSM, LoadPhase
from coroload.loader.paths import normalize

logger = logging.getLogger(__name__)


class ModuleAlreadyDefined(ValueError):
    pass


class PendingLoad:
    """An in-flight fetch of one module path."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.fsm = LoadFSM()
        self._waiters: list[DeliveryCallback] = []
        self._outcome: tuple[BaseException | None, Any] | None = None

    @property
    def phase(self) -> LoadPhase:
        return self.fsm.phase

    @property
    def settled(self) -> bool:
        return self._outcome is not None

    def wait(self) -> Continuation:
        """A continuation resolved with the module's exports, or with the load failure."""

        def waiting(callback: DeliveryCallback) -> None:
            if self._outcome is not None:
                callback(*self._outcome)
                return
            self._waiters.append(callback)

        return waiting

    def mark_executed(self) -> None:
        self.fsm.script_executed()

    def complete(self, exports: Any) -> None:
        self.fsm.module_defined()
        self._settle(None, exports)

    def fail(self, error: BaseException) -> None:
        self.fsm.load_failed()
        self._settle(error, None)

    def _settle(self, error: BaseException | None, result: Any) -> None:
        self._outcome = (error, result)
        waiters, self._waiters = self._waiters, []
        for callback in waiters:
            callback(error, result)

    def __repr__(self) -> str:
        return f"PendingLoad(path={self.path!r}, phase={self.phase.value!r}, waiters={len(self._waiters)})"


class ModuleRegistry:
    def __init__(self) -> None:
        self._exports: dict[str, Any] = {}
        self._pending: dict[str, PendingLoad] = {}

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize(path) in self._exports

    def __iter__(self) -> Iterator[str]:
        return iter(self._exports)

    def __len__(self) -> int:
        return len(self._exports)

    def get(self, path: str, default: Any = None) -> Any:
        return self._exports.get(normalize(path), default)

    @property
    def loaded_paths(self) -> list[str]:
        return list(self._exports)

    @property
    def pending_paths(self) -> list[str]:
        return list(self._pending)

    def define(self, path: str, exports: Any) -> None:
        """Store a module's exports. Entries are write-once."""

        key = normalize(path)
        if key in self._exports:
            raise ModuleAlreadyDefined(f"Module '{key}' is already defined")
        self._exports[key] = exports
        logger.debug("Defined module '%s'", key)

        pending = self._pending.pop(key, None)
        if pending is not None:
            pending.complete(exports)

    def claim(self, path: str) -> tuple[PendingLoad, bool]:
        """Claim the fetch of `path`, or join the one already in flight.

        Returns the pending load and whether the caller claimed it (and so
        must start the fetch).
        """

        key = normalize(path)
        existing = self._pending.get(key)
        if existing is not None:
            return existing, False

        pending = PendingLoad(key)
        if key in self._exports:
            pending.complete(self._exports[key])
            return pending, False

        self._pending[key] = pending
        return pending, True

    def fail(self, path: str, error: BaseException) -> None:
        """Fail the in-flight load of `path`; it is forgotten so a later request can retry."""

        key = normalize(path)
        pending = self._pending.pop(key, None)
        if pending is None:
            raise KeyError(f"No load in flight for '{key}'")
        logger.debug("Load of '%s' failed: %s", key, error)
        pending.fail(error)
