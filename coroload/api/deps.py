from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request

from coroload.config import Settings
from coroload.infra.redis_client import create_redis
from coroload.script_cache import ScriptCache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_script_cache(settings: Settings = Depends(get_settings)) -> Generator[ScriptCache | None, None, None]:
    if not settings.redis_url:
        yield None
        return

    client = create_redis(settings.redis_url)
    try:
        yield ScriptCache(client)
    finally:
        client.close()
