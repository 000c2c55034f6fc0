"""On-demand module loading: path resolution, source rewriting, script assembly, and the
session registry used by the Python-side loader."""

from __future__ import annotations

from .client import ModuleLoader, ModuleLoadError, ScriptHost
from .graph import FileScriptHost, ModuleInfo, resolve_graph
from .paths import normalize, resolve_dependency, split_request
from .registry import ModuleAlreadyDefined, ModuleRegistry, PendingLoad
from .rewrite import find_requires, rewrite_requires
from .script import assemble_script

__all__ = [
    "FileScriptHost",
    "ModuleAlreadyDefined",
    "ModuleInfo",
    "ModuleLoadError",
    "ModuleLoader",
    "ModuleRegistry",
    "PendingLoad",
    "ScriptHost",
    "assemble_script",
    "find_requires",
    "normalize",
    "resolve_dependency",
    "resolve_graph",
    "rewrite_requires",
    "split_request",
]
