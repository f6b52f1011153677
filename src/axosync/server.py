"""HTTP server for axosync."""

import logging
import time
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from . import __version__
from .config import AxosyncConfig
from .errors import AddressError, FileSystemError, FormatError
from .logs import configure_logging
from .patch import parse_requests
from .service import SyncService

logger = logging.getLogger(__name__)


# =============================================================================
# Endpoint Implementation Functions (for testing)
# =============================================================================


def get_file_paths_impl(service: SyncService) -> list[str]:
    """Sorted list of every path under the scrape directory."""
    try:
        return service.get_file_paths()
    except FileSystemError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


def sourcemap_set_impl(service: SyncService, payload: Any) -> None:
    """Apply a patch batch to the sourcemap."""
    try:
        requests = parse_requests(payload)
    except FormatError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        service.set_sourcemap(requests)
    except AddressError as e:
        logger.warning("Rejected sourcemap batch: %s", e)
        raise HTTPException(status_code=400, detail=str(e)) from e
    except (FormatError, FileSystemError) as e:
        logger.error("Sourcemap update failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e


def get_sourcemap_impl(service: SyncService) -> dict[str, Any]:
    """Current sourcemap document."""
    try:
        return service.get_sourcemap().to_dict()
    except (FormatError, FileSystemError) as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


# =============================================================================
# FastAPI Application
# =============================================================================


def create_app(service: SyncService) -> FastAPI:
    """Build the FastAPI application around ``service``."""
    app = FastAPI(title="axosync", version=__version__)
    app.state.service = service

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Malformed bodies are client errors like any other bad batch
        return JSONResponse(
            status_code=400,
            content={"detail": f"invalid request body ({exc.errors()[0]['msg']})"},
        )

    @app.get("/getFilePaths")
    def get_file_paths() -> list[str]:
        return get_file_paths_impl(service)

    @app.post("/sourcemapSet")
    def sourcemap_set(payload: Any = Body(...)) -> Response:
        sourcemap_set_impl(service, payload)
        return Response(status_code=200)

    @app.get("/getProjectFolderName", response_class=PlainTextResponse)
    def get_project_folder_name() -> str:
        return service.get_project_name()

    @app.get("/sourcemap")
    def get_sourcemap() -> dict[str, Any]:
        return get_sourcemap_impl(service)

    return app


# =============================================================================
# Server Entry Point
# =============================================================================


def run_server(config: AxosyncConfig, project_root: Path) -> None:
    """
    Start the HTTP server.

    Runs a single worker process; sourcemap batches are additionally
    serialized by the service lock.

    Args:
        config: Loaded configuration
        project_root: Directory relative config paths are resolved against
    """
    configure_logging(config.log_level)

    service = SyncService.from_config(config, project_root)
    app = create_app(service)

    logger.info(
        "Serving %s on http://%s:%d (sourcemap: %s)",
        config.project_name,
        config.host,
        config.port,
        service.store.path,
    )
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        workers=1,
        log_config=None,
        log_level=config.log_level,
        access_log=False,
    )
