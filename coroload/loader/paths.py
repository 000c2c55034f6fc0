from __future__ import annotations

DEFAULT_EXTENSION = ".js"


def normalize(path: str) -> str:
    """Resolve `.` and `..` segments of a slash-separated module path.

    `..` never climbs above the root: `"../a.js"` normalizes to `"a.js"`.
    """

    parts: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts:
                parts.pop()
            continue
        parts.append(segment)
    return "/".join(parts)


def split_request(module_path: str) -> tuple[str, str]:
    """Split a requested path into (parent directory, module id)."""

    parts = [p for p in module_path.split("/") if p]
    return "/".join(parts[:-1]), "/".join(parts)


def resolve_dependency(parent: str, module_id: str, extension: str = DEFAULT_EXTENSION) -> str:
    """Resolve `module_id` as required from a module living in `parent`.

    Relative ids (starting with `.`) are joined onto the parent directory;
    anything else is taken from the root. The default extension is appended
    when missing.
    """

    src = module_id
    if module_id.startswith(".") and parent:
        src = f"{parent}/{module_id}"
    if extension and not src.endswith(extension):
        src += extension
    return normalize(src)
