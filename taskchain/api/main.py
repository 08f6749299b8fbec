from __future__ import annotations

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars
from taskchain.api.routes import register_routes
from taskchain.core.config import Settings, get_settings
from taskchain.core.logging import setup_logging
from taskchain.infrastructure.db.session import dispose_engine

logger = structlog.get_logger()

OPENAPI_TAGS = [
    {"name": "Tasks", "description": "Assign, submit, approve, reject and remind."},
    {"name": "Notifications", "description": "Per-actor notification feed."},
    {"name": "Actors", "description": "Role hierarchy roster."},
    {"name": "Health", "description": "Liveness and datastore checks."},
]


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await logger.ainfo(
            "service_startup",
            service=settings.app_name,
            environment=settings.environment,
            version=settings.version,
            max_role_level=settings.max_role_level,
            urgent_window_hours=settings.urgent_window_hours,
            notify_creator_on_submit=settings.notify_creator_on_submit,
        )
        yield
        await dispose_engine()
        await logger.ainfo("service_shutdown", service=settings.app_name)

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the task lifecycle API."""
    settings = settings or get_settings()
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        openapi_tags=OPENAPI_TAGS,
        lifespan=_lifespan(settings),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.allow_any_origin else settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    register_routes(app)

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid4())
        bind_contextvars(request_id=request_id, path=request.url.path, method=request.method)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            await logger.ainfo(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            clear_contextvars()

    return app


app = create_app()
