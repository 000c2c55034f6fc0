from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

from redis.exceptions import RedisError

from coroload.config import Settings
from coroload.loader.script import DEFAULT_LOAD_PREFIX, assemble_script
from coroload.loader.sources import read_source
from coroload.script_cache import ScriptCache, source_digest

logger = logging.getLogger(__name__)


def build_options(settings: Settings) -> dict[str, Any]:
    """Everything besides the source that shapes an assembled script."""

    return {
        "load_prefix": DEFAULT_LOAD_PREFIX,
        "extension": settings.extension,
        "poll_interval_ms": settings.poll_interval_ms,
        "runtime_global": settings.runtime_global,
    }


def build_module_script(
    *,
    settings: Settings,
    module_path: str,
    cache: ScriptCache | None = None,
) -> Generator[Any, Any, str]:
    """Coroutine producing the browser script served for `module_path`.

    Drive it with `coroload.core.run`. A source that cannot be read fails
    the coroutine with the `OSError`. Redis errors only cost the cache.
    """

    source = yield read_source(settings.root, module_path)
    options = build_options(settings)
    digest = source_digest(source, options)

    if cache is not None:
        try:
            cached = cache.get(module_path, digest)
        except RedisError as exc:
            logger.warning("Script cache lookup failed for '%s': %s", module_path, exc)
            cached = None
        if cached is not None:
            logger.debug("Serving cached script for '%s'", module_path)
            return cached

    script = assemble_script(module_path, source, **options)

    if cache is not None:
        try:
            cache.put(module_path, digest, script)
        except RedisError as exc:
            logger.warning("Script cache store failed for '%s': %s", module_path, exc)
    return script
