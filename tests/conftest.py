from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from coroload.core import Scheduler, TickQueue


@pytest.fixture()
def ticks() -> TickQueue:
    return TickQueue()


@pytest.fixture()
def scheduler(ticks: TickQueue) -> Scheduler:
    """A scheduler whose ticks only run when the test drains `ticks`."""

    return Scheduler(next_tick=ticks.call_soon)


@pytest.fixture()
def collect() -> Any:
    """Build a delivery callback that records every (error, result) it receives."""

    def _make() -> tuple[list[tuple[BaseException | None, Any]], Any]:
        got: list[tuple[BaseException | None, Any]] = []

        def callback(error: BaseException | None = None, result: Any = None) -> None:
            got.append((error, result))

        return got, callback

    return _make


@pytest.fixture()
def module_root(tmp_path: Path) -> Path:
    """A small module tree:

    index.js -> utils/math.js -> utils/helper.js, lib/log.js
    index.js -> lib/log.js
    """

    (tmp_path / "utils").mkdir()
    (tmp_path / "lib").mkdir()
    (tmp_path / "index.js").write_text(
        "var math = require('./utils/math');\n"
        "var log = require('lib/log');\n"
        "log.info(math.double(21));\n",
        encoding="utf-8",
    )
    (tmp_path / "utils" / "math.js").write_text(
        "var helper = require('./helper');\n"
        "var log = require('../lib/log');\n"
        "module.exports = { double: function(x) { return helper.mul(x, 2); } };\n",
        encoding="utf-8",
    )
    (tmp_path / "utils" / "helper.js").write_text(
        "module.exports = { mul: function(a, b) { return a * b; } };\n",
        encoding="utf-8",
    )
    (tmp_path / "lib" / "log.js").write_text(
        "exports.info = function(msg) { console.log(msg); };\n",
        encoding="utf-8",
    )
    (tmp_path / "index.html").write_text(
        "<html><body><script src=\"/runtime.js\"></script>"
        "<script src=\"/require/index.js\"></script></body></html>\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture()
def client(module_root: Path) -> Generator[Any, None, None]:
    from fastapi.testclient import TestClient

    from coroload.config import Settings
    from coroload.main import create_app

    app = create_app(Settings(root=module_root))
    with TestClient(app) as c:
        yield c
