from __future__ import annotations

from http import HTTPStatus
from typing import Dict, Optional, Type

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from photolibrary.common.logging import get_logger
from photolibrary.common.settings import Settings, get_settings
from photolibrary.domain.errors import (
    AssetNotFound,
    InvalidOptions,
    PermissionDenied,
    PhotoLibraryError,
    PickInProgress,
    StorageWriteFailed,
    TransformFailed,
)
from photolibrary.services.api.routers import health, library

logger = get_logger(__name__)

ERROR_STATUS: Dict[Type[PhotoLibraryError], HTTPStatus] = {
    PermissionDenied: HTTPStatus.FORBIDDEN,
    InvalidOptions: HTTPStatus.UNPROCESSABLE_ENTITY,
    AssetNotFound: HTTPStatus.NOT_FOUND,
    TransformFailed: HTTPStatus.BAD_GATEWAY,
    StorageWriteFailed: HTTPStatus.INSUFFICIENT_STORAGE,
    PickInProgress: HTTPStatus.CONFLICT,
}


def status_for(exc: PhotoLibraryError) -> HTTPStatus:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return HTTPStatus.INTERNAL_SERVER_ERROR


async def _library_error_handler(request: Request, exc: PhotoLibraryError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.reason)
    return JSONResponse(status_code=int(status), content={"detail": exc.reason})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    cfg = settings or get_settings()
    dev = cfg.app_env.lower() == "development"
    get_logger("photolibrary", cfg.log_level)

    app = FastAPI(
        title="Photo Library API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
    )

    allow_origins = ["*"] if dev else cfg.api.cors_allow_origins
    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
        allow_credentials=cfg.api.cors_allow_credentials,
    )

    app.add_exception_handler(PhotoLibraryError, _library_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(library.router)

    # Cached thumbnails/files, so web paths under PUBLIC_BASE_URL resolve
    app.mount("/cache", StaticFiles(directory=str(cfg.cache_root), check_dir=False), name="cache")
    return app
