from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from coroload.api.routes import router
from coroload.config import Settings, load_settings

# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(title="coroload", version="0.1.0")
    app.state.settings = settings
    app.include_router(router)

    @app.exception_handler(StarletteHTTPException)
    async def _not_found(request: Request, exc: StarletteHTTPException) -> Response:
        # Unmatched paths answer with a bare 404.
        if exc.status_code == 404:
            return Response(status_code=404)
        return await http_exception_handler(request, exc)

    # Everything the router doesn't claim is served from the module root.
    app.mount("/", StaticFiles(directory=str(settings.root), html=True), name="static")
    return app


app = create_app(load_settings())
