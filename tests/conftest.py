"""Test configuration and shared fixtures.

Provide isolated test settings, registries and client fixtures for the
application test suite. Fixtures never read `.env` files, and every client
gets its own Prometheus registry so collectors are never registered twice.
"""
from typing import Generator
from unittest import mock

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from app.config import Settings
from app.main import create_app

# ==============================================================================
# CONFIGURATION FIXTURES
# ==============================================================================

@pytest.fixture
def mock_settings() -> Settings:
    """Provide isolated test configuration with metrics enabled.

    Returns:
        Settings: Development settings with a fixed pod name.
    """
    return Settings(
        ENVIRONMENT="development",
        LOG_LEVEL="debug",
        POD_NAME="test-pod",
        METRICS_ENABLED=True,
        _env_file=None,  # Bypass the local environment file
    )


@pytest.fixture
def registry() -> CollectorRegistry:
    """Provide a fresh, empty Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def client(mock_settings: Settings, registry: CollectorRegistry) -> Generator[TestClient, None, None]:
    """Provide HTTP test client running the full lifespan.

    Args:
        mock_settings: Isolated test configuration.
        registry: Registry receiving the default collectors.

    Yields:
        TestClient: Client bound to a freshly built application.
    """
    app = create_app(mock_settings, registry)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client_without_metrics(mock_settings: Settings) -> Generator[TestClient, None, None]:
    """Provide HTTP test client for the variant without `/metrics`."""
    settings = mock_settings.model_copy(update={"METRICS_ENABLED": False})
    with TestClient(create_app(settings)) as test_client:
        yield test_client

# ==============================================================================
# MOCKING HELPERS
# ==============================================================================

@pytest.fixture
def mock_urlopen():
    """Provide mock for outbound HTTP calls made with urllib.

    Yields:
        Mock: Patched urllib.request.urlopen.
    """
    with mock.patch("urllib.request.urlopen") as patched:
        yield patched
