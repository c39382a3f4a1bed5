"""
BotCRUD HTTP API.

The process entry point constructs and initializes one CollectionStore and
hands it to ``create_app``; handlers reach it through ``app.state.store``.
"""

import time
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from util.logging import logger

from ..core.config import VERSION, debug_enabled, get_cors_origins, get_data_dir
from ..core.datastore import CollectionStore
from ..core.errors import DomainError, UnknownCollectionError
from . import bots, health, logs, workers


def _error_body(status_code: int, message: str) -> dict:
    return {
        "statusCode": status_code,
        "error": HTTPStatus(status_code).phrase,
        "message": message,
    }


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, exc.message))

    @app.exception_handler(UnknownCollectionError)
    async def unknown_collection_handler(request: Request, exc: UnknownCollectionError):
        logger.error(f"Unknown collection requested by {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content=_error_body(500, "An internal server error occurred"))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=_error_body(400, _format_validation_errors(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, str(exc.detail)))


def create_app(store: CollectionStore = None) -> FastAPI:
    """Build the FastAPI application around ``store``.

    Without a store one is built from DATA_DIR and initialized, which is what
    ``uvicorn --factory`` gets.
    """
    if store is None:
        store = CollectionStore(get_data_dir())
        store.initialize()

    app = FastAPI(
        title="BotCRUD API",
        version=VERSION,
        description="RESTful API for managing Bots, Workers, and Logs",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None,
    )
    app.state.store = store
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["Accept", "Authorization", "Content-Type", "If-None-Match", "X-Requested-With"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        logger.log_request(request.method, request.url.path, response.status_code,
                           (time.perf_counter() - start) * 1000)
        return response

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(bots.router, prefix="/api")
    app.include_router(workers.router, prefix="/api")
    app.include_router(logs.router, prefix="/api")

    logger.info(f"BotCRUD API ready with collections {list(store.collections)}")
    return app
