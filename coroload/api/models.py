from __future__ import annotations

from pydantic import BaseModel, Field


class ModuleNode(BaseModel):
    path: str
    dependencies: list[str] = Field(default_factory=list)


class ModuleGraph(BaseModel):
    entry: str
    # Dependencies come before the modules that require them.
    modules: list[ModuleNode] = Field(default_factory=list)
