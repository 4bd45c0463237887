"""Default process metrics on an explicitly owned Prometheus registry.

`DefaultMetrics` wires the stock `prometheus_client` collectors (process CPU,
memory and file descriptors, interpreter info, garbage collector counters)
onto a registry supplied by the caller, plus an event-loop lag gauge sampled
by a background task at a fixed interval. The process-wide default registry
is never touched, so several applications can coexist in one interpreter.
"""

import asyncio
import contextlib

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    GCCollector,
    Gauge,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from app.core.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_COLLECT_INTERVAL_MS = 5000


class DefaultMetrics:
    """Default collectors bound to one registry.

    Attributes:
        registry: The registry the collectors are registered on.
        interval_ms: Period of the event-loop lag sampler in milliseconds.
        content_type: Media type of `render()` output.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(
        self,
        registry: CollectorRegistry,
        interval_ms: int = DEFAULT_COLLECT_INTERVAL_MS,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.registry = registry
        self.interval_ms = interval_ms
        self._lag_gauge: Gauge | None = None
        self._task: asyncio.Task | None = None

    @property
    def registered(self) -> bool:
        return self._lag_gauge is not None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def register(self) -> None:
        """Register the default collectors. Calling it again is a no-op."""
        if self.registered:
            return

        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)
        self._lag_gauge = Gauge(
            "python_eventloop_lag_seconds",
            "Lag of the asyncio event loop measured on each sampling interval.",
            registry=self.registry,
        )
        self._lag_gauge.set(0)
        logger.debug("Default metric collectors registered", interval_ms=self.interval_ms)

    async def start(self) -> None:
        """Register collectors if needed and launch the lag sampler."""
        self.register()
        if self.running:
            return
        self._task = asyncio.create_task(self._sample_forever(), name="metrics-sampler")

    async def stop(self) -> None:
        """Cancel the lag sampler and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def render(self) -> bytes:
        """Serialize the registry in the text exposition format."""
        return generate_latest(self.registry)

    async def _sample_forever(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.interval_ms / 1000
        while True:
            started = loop.time()
            await asyncio.sleep(interval)
            lag = loop.time() - started - interval
            self._lag_gauge.set(max(lag, 0.0))
