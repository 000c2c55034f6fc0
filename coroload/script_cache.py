from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import redis

SCRIPT_KEY_PREFIX = "coroload:script:"  # + {module_path}


def source_digest(source: str, build: Mapping[str, Any] | None = None) -> str:
    """SHA-256 of a module's source plus the options its script was assembled with."""

    h = hashlib.sha256(source.encode("utf-8"))
    if build:
        h.update(b"\0")
        h.update(json.dumps(dict(build), sort_keys=True).encode("utf-8"))
    return h.hexdigest()


@dataclass(frozen=True, slots=True)
class ScriptCache:
    """Assembled module scripts stored in Redis, keyed by requested module path.

    Each entry remembers the digest of the source and build options it was
    made from; a lookup with a different digest is a miss, so edited sources
    and changed settings are rebuilt.
    """

    r: redis.Redis

    @staticmethod
    def key(module_path: str) -> str:
        return f"{SCRIPT_KEY_PREFIX}{module_path}"

    def get(self, module_path: str, digest: str) -> str | None:
        entry = self.r.hgetall(self.key(module_path))
        if not entry or entry.get("digest") != digest:
            return None
        return entry.get("script")

    def put(self, module_path: str, digest: str, script: str) -> None:
        self.r.hset(self.key(module_path), mapping={"digest": digest, "script": script})
