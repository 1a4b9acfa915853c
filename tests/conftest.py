"""Shared test fixtures for the hellosvc test suite.

Provides service configurations bound to loopback ephemeral ports, a
clean environment for settings tests, and canned supervisor responses.
"""

from __future__ import annotations

import pytest

from hellosvc.config.settings import ServiceConfig


# ---------------------------------------------------------------------------
# Environment Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> pytest.MonkeyPatch:
    """Drop variables that feed settings and run from an empty directory."""
    for name in ("PORT", "PEBBLE", "PEBBLE_SOCKET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


# ---------------------------------------------------------------------------
# Server Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def service_config() -> ServiceConfig:
    """Loopback config on an ephemeral port with a short drain deadline."""
    return ServiceConfig(host="127.0.0.1", port=0, shutdown_timeout=1.0)


# ---------------------------------------------------------------------------
# Supervisor Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def services_result() -> list[dict]:
    """A GET /v1/services result with one running and one stopped service."""
    return [
        {
            "name": "hello",
            "startup": "enabled",
            "current": "active",
            "current-since": "2025-01-01T12:00:00Z",
        },
        {
            "name": "worker",
            "startup": "disabled",
            "current": "inactive",
        },
    ]
