from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from coroload.core.continuation import Continuation
from coroload.core.scheduler import Scheduler, default_scheduler
from coroload.loader.fsm import LoadPhase
from coroload.loader.paths import DEFAULT_EXTENSION, resolve_dependency
from coroload.loader.registry import ModuleRegistry, PendingLoad

logger = logging.getLogger(__name__)


class ModuleLoadError(RuntimeError):
    def __init__(self, path: str, reason: object) -> None:
        super().__init__(f"Failed to load module '{path}': {reason}")
        self.path = path
        self.reason = reason


class ScriptHost(Protocol):
    """Where modules come from.

    `inject` starts fetching and evaluating `path`. It calls `on_load` once
    the module's code has run and `on_error` if it could not be fetched or
    run. At most one of the two is called. The module itself completes the
    load by defining its exports in the registry.
    """

    def inject(
        self,
        path: str,
        on_load: Callable[[], None],
        on_error: Callable[[BaseException], None],
    ) -> None:  # pragma: no cover
        ...


class ModuleLoader:
    """Python rendition of the in-page `require`.

    Resolves ids against the requesting module's directory, answers from the
    registry when the module is defined, and otherwise claims (or joins) a
    single fetch through the script host and suspends until it settles.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        host: ScriptHost,
        *,
        scheduler: Scheduler | None = None,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self.registry = registry
        self.host = host
        self.scheduler = scheduler or default_scheduler
        self.extension = extension
        self.fetches = 0

    def require(self, module_id: str, parent: str = "") -> Continuation:
        def loading() -> Any:
            path = resolve_dependency(parent, module_id, self.extension)
            if path in self.registry:
                return self.registry.get(path)

            pending, claimed = self.registry.claim(path)
            if claimed:
                self._fetch(path, pending)
            else:
                logger.debug("Joining in-flight load of '%s'", path)
            exports = yield pending.wait()
            return exports

        return self.scheduler.run(loading)

    def _fetch(self, path: str, pending: PendingLoad) -> None:
        self.fetches += 1
        logger.debug("Fetching module '%s'", path)
        settled = False

        def on_load() -> None:
            nonlocal settled
            if settled:
                return
            settled = True
            if pending.phase is LoadPhase.pending:
                pending.mark_executed()

        def on_error(error: BaseException) -> None:
            nonlocal settled
            if settled or pending.settled:
                return
            settled = True
            self.registry.fail(path, ModuleLoadError(path, error))

        try:
            self.host.inject(path, on_load, on_error)
        except Exception as exc:
            on_error(exc)
