from __future__ import annotations

import logging
import os
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from sulama.core.config import Settings, get_settings
from sulama.core.errors import AppError
from sulama.core.log_config import configure_logging
from sulama.repositories.catalog import CatalogStore
from sulama.routers import admin as admin_router
from sulama.routers import auth as auth_router
from sulama.routers import chat as chat_router
from sulama.routers import projects as projects_router
from sulama.services.chat_service import ChatService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (no sniffing, referrer policy, HSTS in prod)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class PublicStaticFiles(StaticFiles):
    def file_response(self, full_path, stat_result, scope, status_code=200):
        response = super().file_response(full_path, stat_result, scope, status_code)
        # the service worker must be revalidated or clients keep an old cache version
        if os.path.basename(str(full_path)) == "sw.js":
            response.headers["Cache-Control"] = "no-cache"
            response.headers["Service-Worker-Allowed"] = "/"
        else:
            response.headers.setdefault("Cache-Control", "public, max-age=3600")
        return response


async def _app_error_handler(request: Request, exc: AppError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def validation_message(errors) -> str:
    """Turkish one-liner for the first pydantic error of a request."""
    if not errors:
        return "Geçersiz istek."
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Geçersiz JSON gövdesi."
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    return f"Geçersiz değer: {field}." if field else "Geçersiz istek."


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse({"error": validation_message(exc.errors())}, status_code=400)


def create_app(settings: Settings | None = None, client: Any = None, catalog: CatalogStore | None = None) -> FastAPI:
    """Factory compatible with ``uvicorn --factory``."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(title="Sulama Asistanı API")
    app.state.settings = settings
    app.state.catalog = catalog or CatalogStore(settings.data_dir)
    app.state.chat_service = ChatService(settings, app.state.catalog, client=client)
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:3000", "http://127.0.0.1:3000"})
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["X-Remaining"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(auth_router.router)
    app.include_router(chat_router.router)
    app.include_router(projects_router.router)
    app.include_router(admin_router.router)

    # mounted last: "/" would otherwise shadow the API routes
    if settings.public_dir.is_dir():
        app.mount("/", PublicStaticFiles(directory=str(settings.public_dir), html=True), name="public")
    else:
        logger.warning("public klasörü bulunamadı: %s", settings.public_dir)

    return app
