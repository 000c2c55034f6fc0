from __future__ import annotations

import json
import logging
import traceback
from pathlib import Path

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse, Response

from coroload.api.deps import get_script_cache, get_settings
from coroload.api.models import ModuleGraph, ModuleNode
from coroload.bundler import build_module_script
from coroload.config import Settings
from coroload.core import run, to_future
from coroload.loader.graph import resolve_graph
from coroload.loader.paths import resolve_dependency, split_request
from coroload.loader.script import DEFAULT_LOAD_PREFIX
from coroload.script_cache import ScriptCache

logger = logging.getLogger(__name__)

RUNTIME_SCRIPT = Path(__file__).resolve().parents[1] / "static" / "runtime.js"

JAVASCRIPT = "application/javascript"

router = APIRouter()


def _error_response() -> Response:
    # Body is the JSON-encoded traceback, as the browser console expects a string.
    return Response(
        content=json.dumps(traceback.format_exc()),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json",
    )


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/runtime.js")
async def runtime_script() -> FileResponse:
    return FileResponse(RUNTIME_SCRIPT, media_type=JAVASCRIPT)


@router.get(DEFAULT_LOAD_PREFIX + "/{module_path:path}")
async def require_module(
    module_path: str,
    request: Request,
    settings: Settings = Depends(get_settings),
    cache: ScriptCache | None = Depends(get_script_cache),
) -> Response:
    logger.info("Require: %s", request.url.path)
    parent, _ = split_request(module_path)
    logger.debug("Parts: %s (parent=%r)", module_path.split("/"), parent)

    try:
        script = await to_future(
            run(lambda: build_module_script(settings=settings, module_path=module_path, cache=cache))
        )
    except Exception:
        logger.exception("Failed to serve module '%s'", module_path)
        return _error_response()

    return Response(content=script, media_type=JAVASCRIPT)


@router.get("/graph/{module_path:path}", response_model=ModuleGraph)
async def module_graph(module_path: str, settings: Settings = Depends(get_settings)) -> ModuleGraph | Response:
    entry = resolve_dependency("", module_path, settings.extension)
    try:
        graph = resolve_graph(settings.root, entry, extension=settings.extension)
    except Exception:
        logger.exception("Failed to resolve module graph for '%s'", entry)
        return _error_response()

    return ModuleGraph(
        entry=entry,
        modules=[ModuleNode(path=path, dependencies=list(deps)) for path, deps in graph.items()],
    )
