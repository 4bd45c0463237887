"""Tests for default collector registration and the lag sampler."""
import asyncio
import sys

import pytest
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry

from app.core.metrics import DefaultMetrics


def test_register_adds_default_collectors(registry: CollectorRegistry):
    metrics = DefaultMetrics(registry)
    metrics.register()

    body = metrics.render().decode()
    assert "python_info" in body
    assert "python_gc_objects_collected_total" in body
    assert "python_eventloop_lag_seconds 0.0" in body
    if sys.platform == "linux":
        assert "process_cpu_seconds_total" in body
        assert "process_resident_memory_bytes" in body
    assert metrics.content_type == CONTENT_TYPE_LATEST


def test_register_is_idempotent(registry: CollectorRegistry):
    metrics = DefaultMetrics(registry)
    metrics.register()
    # A second registration of the same collectors would raise ValueError.
    metrics.register()
    assert metrics.registered


def test_default_registry_is_untouched(registry: CollectorRegistry):
    from prometheus_client import REGISTRY

    DefaultMetrics(registry).register()
    assert REGISTRY.get_sample_value("python_eventloop_lag_seconds") is None


def test_interval_must_be_positive(registry: CollectorRegistry):
    with pytest.raises(ValueError):
        DefaultMetrics(registry, interval_ms=0)


def test_sampler_runs_until_stopped(registry: CollectorRegistry):
    metrics = DefaultMetrics(registry, interval_ms=5)

    async def scenario():
        await metrics.start()
        assert metrics.running
        await asyncio.sleep(0.05)
        await metrics.stop()

    asyncio.run(scenario())

    assert not metrics.running
    lag = registry.get_sample_value("python_eventloop_lag_seconds")
    assert lag is not None and lag >= 0.0


def test_stop_without_start_is_noop(registry: CollectorRegistry):
    metrics = DefaultMetrics(registry)
    asyncio.run(metrics.stop())
    assert not metrics.running
