from __future__ import annotations

from pathlib import Path

from coroload.core.continuation import Continuation, DeliveryCallback
from coroload.loader.paths import normalize


class ModuleAccessError(PermissionError):
    pass


def locate(root: Path, module_path: str) -> Path:
    """Map a module path onto a file below `root`.

    Paths that would escape the root (e.g. through encoded `..` segments) are refused.
    """

    base = root.resolve()
    target = (base / module_path).resolve()
    if target != base and base not in target.parents:
        raise ModuleAccessError(f"Module path '{module_path}' escapes {base}")
    if normalize(module_path) == "":
        raise ModuleAccessError("Empty module path")
    return target


def read_source(root: Path, module_path: str) -> Continuation:
    """A continuation delivering the module's source text (or the OSError reading it)."""

    def reading(callback: DeliveryCallback) -> None:
        try:
            text = locate(root, module_path).read_text(encoding="utf-8")
        except OSError as exc:
            callback(exc)
            return
        callback(None, text)

    return reading
