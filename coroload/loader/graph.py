from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from coroload.core.bridge import run_sync
from coroload.core.scheduler import Scheduler, TickQueue
from coroload.loader.client import ModuleLoader
from coroload.loader.paths import DEFAULT_EXTENSION, split_request
from coroload.loader.registry import ModuleRegistry
from coroload.loader.rewrite import find_requires
from coroload.loader.sources import read_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModuleInfo:
    """What a module "exports" when loaded from disk: its path and resolved dependencies."""

    path: str
    dependencies: tuple[str, ...]


class FileScriptHost:
    """Script host that loads modules from a directory tree without executing them.

    Evaluating a module means requiring each literal dependency it names,
    through the same loader, then defining a `ModuleInfo` for it. A module
    whose dependency fails fails too.
    """

    def __init__(
        self,
        root: Path,
        registry: ModuleRegistry,
        *,
        scheduler: Scheduler,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self.root = root
        self.registry = registry
        self.scheduler = scheduler
        self.loader = ModuleLoader(registry, self, scheduler=scheduler, extension=extension)

    def inject(
        self,
        path: str,
        on_load: Callable[[], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        def evaluate(error: BaseException | None = None, source: Any = None) -> None:
            if error is not None:
                on_error(error)
                return
            on_load()
            self.scheduler.run(lambda: self._module_body(path, source))(finish)

        def finish(error: BaseException | None = None, info: Any = None) -> None:
            if error is not None:
                self.registry.fail(path, error)
            else:
                self.registry.define(path, info)

        read_source(self.root, path)(evaluate)

    def _module_body(self, path: str, source: str):
        parent, _ = split_request(path)
        dependencies: list[str] = []
        for specifier in find_requires(source):
            info = yield self.loader.require(specifier, parent)
            dependencies.append(info.path)
        logger.debug("Resolved '%s' -> %s", path, dependencies)
        return ModuleInfo(path=path, dependencies=tuple(dependencies))


def resolve_graph(root: Path, entry: str, *, extension: str = DEFAULT_EXTENSION) -> dict[str, tuple[str, ...]]:
    """Load `entry` and everything it requires; return path -> dependencies.

    Modules appear in the order they finished loading (dependencies first).
    Raises `ModuleLoadError` for missing modules and `StalledError` when a
    dependency cycle keeps modules waiting on each other.
    """

    queue = TickQueue()
    registry = ModuleRegistry()
    host = FileScriptHost(root, registry, scheduler=Scheduler(next_tick=queue.call_soon), extension=extension)

    def walk():
        info = yield host.loader.require(entry)
        return info

    run_sync(walk, queue=queue)
    return {path: registry.get(path).dependencies for path in registry}
