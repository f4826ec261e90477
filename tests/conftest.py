"""
Shared pytest fixtures for the email authentication checker test suite.

No fixture performs real DNS lookups; checker tests patch query_dns and
route tests patch run_domain_check.
"""

from __future__ import annotations

import pytest

from authcheck import create_app
from authcheck.models import DnsSettings


# ---------------------------------------------------------------------------
# Test configuration
# ---------------------------------------------------------------------------


class TestConfig:
    """Minimal Flask config for automated testing."""

    TESTING = True
    SECRET_KEY = "test-secret-key-not-for-production"
    JSON_SORT_KEYS = False
    DNS_RESOLVERS = ["192.0.2.53"]
    DNS_TIMEOUT_SECONDS = 2.0
    CHECK_DEADLINE_SECONDS = 5.0
    CORS_ALLOW_ORIGIN = "*"


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="function")
def app():
    """Create a Flask application instance for the test."""
    flask_app = create_app(TestConfig)
    with flask_app.app_context():
        yield flask_app


@pytest.fixture(scope="function")
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture(scope="function")
def settings():
    """DnsSettings pointing at a documentation-range resolver."""
    return DnsSettings(nameservers=("192.0.2.53",), timeout_seconds=2.0)
