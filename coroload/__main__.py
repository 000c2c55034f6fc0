from __future__ import annotations

import logging

import uvicorn

from coroload.main import app

logger = logging.getLogger("coroload")


def main() -> None:
    port = app.state.settings.port
    logger.info("Started server: %s", port)
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
