from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from coroload.loader.paths import DEFAULT_EXTENSION
from coroload.loader.script import DEFAULT_POLL_INTERVAL_MS, DEFAULT_RUNTIME_GLOBAL

DEFAULT_PORT = 80


class Settings(BaseModel):
    port: int = Field(DEFAULT_PORT, ge=0, le=65535)
    root: Path = Path(".")
    extension: str = DEFAULT_EXTENSION
    poll_interval_ms: int = Field(DEFAULT_POLL_INTERVAL_MS, ge=1)
    runtime_global: str = DEFAULT_RUNTIME_GLOBAL
    # The assembled-script cache is only used when this is set.
    redis_url: str | None = None


def get_port() -> int:
    return int(os.environ.get("PORT") or DEFAULT_PORT)


def get_root() -> Path:
    return Path(os.environ.get("COROLOAD_ROOT", "."))


def load_settings() -> Settings:
    """Build settings from the environment (and a `.env` file in the working directory, if any)."""

    load_dotenv(find_dotenv(usecwd=True), override=False)
    return Settings(
        port=get_port(),
        root=get_root(),
        extension=os.environ.get("COROLOAD_EXTENSION", DEFAULT_EXTENSION),
        poll_interval_ms=int(os.environ.get("COROLOAD_POLL_MS") or DEFAULT_POLL_INTERVAL_MS),
        redis_url=os.environ.get("REDIS_URL") or None,
    )

