"""
Middleware test suite for request ID handling.

Tests verify that the middleware correctly generates or preserves
X-Request-ID headers for request correlation.
"""
import uuid

from fastapi.testclient import TestClient


def test_request_id_generation(client: TestClient):
    """Verify middleware generates a valid UUID when X-Request-ID is not provided.

    Args:
        client: FastAPI test client fixture.
    """
    response = client.get("/health")

    assert response.status_code == 200
    req_id = response.headers.get("X-Request-ID")

    assert req_id is not None
    assert uuid.UUID(req_id)


def test_request_id_passthrough(client: TestClient):
    """Verify middleware preserves client-provided X-Request-ID headers.

    Args:
        client: FastAPI test client fixture.
    """
    custom_trace_id = "trace-abc-123"
    response = client.get(
        "/ready",
        headers={"X-Request-ID": custom_trace_id}
    )

    assert response.headers.get("X-Request-ID") == custom_trace_id


def test_request_ids_are_unique_per_request(client: TestClient):
    """Verify two requests without a header get different IDs."""
    first = client.get("/").headers["X-Request-ID"]
    second = client.get("/").headers["X-Request-ID"]
    assert first != second
