"""Route registration for the probe and metrics surface.

Each router factory registers its handlers through
`APIRouter.add_api_route(path, endpoint, methods=...)` and closes over the
collaborators it needs, so handlers never reach for global state.
"""

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

from app.config import Settings
from app.core.metrics import DefaultMetrics
from app.core.types import HEALTHY_BODY, READY_BODY, GreetingPayload

# HTTP checkers commonly probe with HEAD; uvicorn drops the body.
PROBE_METHODS = ["GET", "HEAD"]


def create_probe_router(settings: Settings) -> APIRouter:
    """Build the router serving `/`, `/health` and `/ready`.

    Args:
        settings: Configuration snapshot; its POD_NAME is captured once here.

    Returns:
        APIRouter: Router with the greeting and probe routes registered.
    """
    router = APIRouter(tags=["probes"])
    pod_name = settings.POD_NAME

    async def greeting() -> GreetingPayload:
        """Return the greeting payload stamped with the current time."""
        return GreetingPayload.for_pod(pod_name)

    async def liveness_probe() -> PlainTextResponse:
        """Report that the process is alive.

        Does not check any dependency; orchestrators restart the container
        only when this stops answering.
        """
        return PlainTextResponse(HEALTHY_BODY)

    async def readiness_probe() -> PlainTextResponse:
        """Report that the server accepts traffic.

        The listener only starts answering after startup completes, so any
        request that reaches this handler is served by a ready process.
        """
        return PlainTextResponse(READY_BODY)

    router.add_api_route("/", greeting, methods=PROBE_METHODS, response_model=GreetingPayload)
    router.add_api_route("/health", liveness_probe, methods=PROBE_METHODS, response_class=PlainTextResponse)
    router.add_api_route("/ready", readiness_probe, methods=PROBE_METHODS, response_class=PlainTextResponse)
    return router


def create_metrics_router(metrics: DefaultMetrics) -> APIRouter:
    """Build the router serving `/metrics` from the given collectors."""
    router = APIRouter(tags=["observability"])

    async def metrics_endpoint() -> Response:
        """Expose the registry in Prometheus text exposition format."""
        return Response(content=metrics.render(), media_type=metrics.content_type)

    router.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)
    return router
