"""FastAPI application factory for the Hello node probe service.

Build the FastAPI application from an explicit configuration snapshot and an
explicitly constructed metrics registry, register middleware and routes, and
drive the STARTING -> SERVING transition from the lifespan context manager.
Logging is configured by the process entry point (`app.server`), not here.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry

from app.api.middleware import REQUEST_ID_HEADER, RequestCorrelationMiddleware
from app.api.routes import create_metrics_router, create_probe_router
from app.config import Settings
from app.core.logging_config import get_logger
from app.core.metrics import DefaultMetrics
from app.core.types import ServerPhase


def create_app(
    settings: Settings,
    registry: CollectorRegistry | None = None,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Configuration snapshot (pod name, port, metrics switch).
        registry: Registry receiving the default collectors. A fresh one is
            created when omitted. Ignored when metrics are disabled.

    Returns:
        FastAPI: Application with probe routes and, when enabled, `/metrics`.
    """
    metrics: DefaultMetrics | None = None
    if settings.METRICS_ENABLED:
        metrics = DefaultMetrics(
            registry if registry is not None else CollectorRegistry(),
            interval_ms=settings.METRICS_COLLECT_INTERVAL_MS,
        )
        # Collectors exist before the first request can be accepted.
        metrics.register()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Start background collection, then flip the phase to SERVING.

        Args:
            app: FastAPI application instance.

        Yields:
            None: Control returns to the application after startup completes.
        """
        # === STARTUP SEQUENCE ===
        logger = get_logger("lifespan")
        logger.info(
            "Hello node startup initiated",
            env=settings.ENVIRONMENT,
            metrics_enabled=settings.METRICS_ENABLED,
        )

        if metrics is not None:
            await metrics.start()
            logger.info("Metrics collection started", interval_ms=metrics.interval_ms)

        app.state.phase = ServerPhase.SERVING
        logger.info(f"Server is running at http://localhost:{settings.PORT}")

        yield

        # === SHUTDOWN SEQUENCE ===
        logger.info("Hello node shutdown initiated")
        if metrics is not None:
            await metrics.stop()
        logger.info("Resources released")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Greeting endpoint with liveness, readiness and metrics probes",
        lifespan=lifespan,
    )
    app.state.phase = ServerPhase.STARTING
    app.state.settings = settings
    app.state.metrics = metrics

    app.add_middleware(RequestCorrelationMiddleware)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(create_probe_router(settings))
    if metrics is not None:
        app.include_router(create_metrics_router(metrics))

    return app


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions globally.

    Log the full error with structured context (including request_id) and
    return a generic 500 JSON response that does not leak internal details.
    """
    logger = get_logger("exception_handler")
    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal Server Error",
            "request_id": request.headers.get(REQUEST_ID_HEADER),
        },
    )
