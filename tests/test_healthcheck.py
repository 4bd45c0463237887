"""Container health probe tests."""
import os
import urllib.error
from unittest import mock

from app.healthcheck import build_url, probe


def test_build_url_defaults():
    with mock.patch.dict(os.environ, {}, clear=True):
        assert build_url() == "http://127.0.0.1:3000/health"


def test_build_url_from_environment():
    env_vars = {"HEALTHCHECK_HOST": "10.0.0.5", "HEALTHCHECK_PORT": "8080", "HEALTHCHECK_PATH": "/ready"}
    with mock.patch.dict(os.environ, env_vars, clear=True):
        assert build_url() == "http://10.0.0.5:8080/ready"


def test_probe_healthy(mock_urlopen):
    mock_urlopen.return_value.__enter__.return_value.status = 200
    assert probe("http://127.0.0.1:3000/health") == 0
    mock_urlopen.assert_called_once_with("http://127.0.0.1:3000/health", timeout=2)


def test_probe_unexpected_status(mock_urlopen):
    mock_urlopen.return_value.__enter__.return_value.status = 204
    assert probe("http://127.0.0.1:3000/health") == 1


def test_probe_connection_refused(mock_urlopen):
    mock_urlopen.side_effect = urllib.error.URLError("connection refused")
    assert probe("http://127.0.0.1:3000/health") == 1
