"""
Server - FastAPI application exposing recording, replay, test storage and AI routes.

Provides:
- API routes under /api
- Static file serving for the frontend in ``server.static_dir``
- Mapping of library exceptions to JSON error responses
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from web_test_recorder import __version__
from web_test_recorder.context import AppContext, create_context
from web_test_recorder.exceptions import WebTestRecorderError

logger = logging.getLogger(__name__)

# HTTP status per error_type; anything else is a 500
ERROR_STATUS: Dict[str, int] = {
    "spawn_error": 500,
    "session_not_found": 404,
    "session_gone": 404,
    "record_not_found": 404,
    "configuration_error": 400,
    "storage_error": 400,
    "upstream_error": 502,
    "invalid_response": 502,
}


def error_response(error: WebTestRecorderError) -> JSONResponse:
    """JSON body for a library error."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(error.error_type, 500),
        content={
            "success": False,
            "error": error.message,
            "error_type": error.error_type,
            "details": error.details,
        },
    )


def create_app(context: Optional[AppContext] = None, debug: bool = False) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        context: Component graph to serve (built from global settings if omitted)
        debug: Enable debug mode

    Returns:
        FastAPI application instance
    """
    context = context or create_context()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutting down: stopping live recording sessions")
        await context.aclose()

    app = FastAPI(
        title="Web Test Recorder",
        description="Record, replay and generate browser tests",
        version=__version__,
        debug=debug,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WebTestRecorderError)
    async def handle_library_error(request: Request, exc: WebTestRecorderError) -> JSONResponse:
        if ERROR_STATUS.get(exc.error_type, 500) >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path}: {exc.message}")
        return error_response(exc)

    from web_test_recorder.server.routes import register_routes
    register_routes(app)

    # Mounted last so /api routes take precedence
    static_dir = Path(context.settings.server.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
    else:
        logger.debug(f"Static directory {static_dir} not found; serving API only")

    return app


def run_server(
    context: Optional[AppContext] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    debug: bool = False,
) -> None:
    """
    Run the web server with uvicorn.

    Args:
        context: Component graph to serve
        host: Host to bind to (default from settings)
        port: Port to bind to (default from settings)
        debug: Enable debug mode
    """
    import uvicorn

    context = context or create_context()
    host = host or context.settings.server.host
    port = port or context.settings.server.port

    app = create_app(context, debug=debug)
    logger.info(f"Starting Web Test Recorder at http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info" if debug else "warning")
