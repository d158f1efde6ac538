"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.responses import Response

from notifaya import __version__
from notifaya.api.routes import api_router
from notifaya.config.settings import AppConfig
from notifaya.engine.client import NotifayaEngine
from notifaya.errors.definitions import ErrInvalidAddress, ErrInvalidBody, ErrInvalidEmail
from notifaya.errors.notify_errors import NotifayaError
from notifaya.metrics.collector import NotifierMetrics
from notifaya.metrics.middleware import PrometheusMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from notifaya.errors.notify_errors import ValidationError
    from notifaya.notifications.message import NotificationSink

logger = logging.getLogger(__name__)

_FIELD_ERRORS = {"address": ErrInvalidAddress, "email": ErrInvalidEmail}


def _field_error(exc: RequestValidationError) -> ValidationError:
    """Pick the user-facing error for the first offending body field."""
    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) >= 2 and loc[0] == "body" and loc[1] in _FIELD_ERRORS:
            return _FIELD_ERRORS[loc[1]]
    return ErrInvalidBody


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle hooks.

    Loads the registry and connects the notification sink on startup and
    closes them on exit.
    """
    config: AppConfig = app.state.config
    engine = NotifayaEngine(config, sink=app.state.sink, metrics=app.state.metrics)

    try:
        await engine.initialize()
        app.state.engine = engine
        logger.info("Notifaya engine initialized")
        yield
    finally:
        await engine.close()
        app.state.engine = None
        logger.info("Notifaya engine shut down")


def create_app(
    *,
    config: AppConfig | None = None,
    sink: NotificationSink | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
        sink: Optional notification sink overriding the configured one.
    """
    if config is None:
        config = AppConfig()

    app = FastAPI(
        title="notifaya",
        version=__version__,
        description="STX payment notifications for registered Stacks addresses",
        lifespan=_lifespan,
    )

    app.state.config = config
    app.state.sink = sink
    app.state.metrics = NotifierMetrics() if config.metrics.enabled else None

    # -- Error handlers --
    @app.exception_handler(NotifayaError)
    async def _notifaya_error_handler(request: Request, exc: NotifayaError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = _field_error(exc)
        return JSONResponse(status_code=error.status_code, content={"error": error.message})

    # -- Base routes --
    @app.get("/health", tags=["base"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    if app.state.metrics is not None:

        @app.get("/metrics", tags=["base"], include_in_schema=False)
        async def metrics_endpoint() -> Response:
            """Prometheus metrics endpoint."""
            return Response(
                content=generate_latest(app.state.metrics.registry),
                media_type="text/plain; version=0.0.4; charset=utf-8",
            )

        app.add_middleware(PrometheusMiddleware, registry=app.state.metrics.registry)

    app.include_router(api_router)

    return app
