"""
Route tests for the JSON API.

All tests use the Flask test client; run_domain_check is patched so no
DNS calls occur.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from authcheck.checker.engine import MECHANISMS
from authcheck.models import CheckResult, DnsSettings

_PATCH_TARGET = "authcheck.api.routes.run_domain_check"


def _fake_report() -> dict[str, CheckResult]:
    return {
        name: CheckResult(name=name, status="fail", info="Record not found.")
        for name in MECHANISMS
    }


# ---------------------------------------------------------------------------
# /api/check
# ---------------------------------------------------------------------------


def test_check_returns_report(client):
    with patch(_PATCH_TARGET, return_value=_fake_report()) as mock_run:
        response = client.get("/api/check?domain=example.com&esp=klaviyo")

    assert response.status_code == 200
    data = response.get_json()
    assert list(data) == list(MECHANISMS)
    assert data["SPF"] == {"name": "SPF", "status": "fail", "info": "Record not found."}

    args, kwargs = mock_run.call_args
    assert args == ("example.com",)
    assert kwargs["esp"] == "klaviyo"
    assert kwargs["settings"] == DnsSettings(nameservers=("192.0.2.53",), timeout_seconds=2.0)
    assert kwargs["deadline_seconds"] == 5.0


def test_check_defaults_to_generic_provider(client):
    with patch(_PATCH_TARGET, return_value=_fake_report()) as mock_run:
        client.get("/api/check?domain=example.com")

    assert mock_run.call_args.kwargs["esp"] == "generic"


def test_check_normalizes_domain(client):
    with patch(_PATCH_TARGET, return_value=_fake_report()) as mock_run:
        client.get("/api/check?domain=%20https://Example.COM./%20")

    assert mock_run.call_args.args == ("example.com",)


@pytest.mark.parametrize("query", ["", "?domain=", "?domain=%20%20", "?esp=klaviyo"])
def test_check_without_domain_is_rejected(client, query):
    with patch(_PATCH_TARGET) as mock_run:
        response = client.get(f"/api/check{query}")

    mock_run.assert_not_called()
    assert response.status_code == 400
    assert response.get_json() == {"error": "Domain is required"}


def test_check_engine_failure_returns_500(client):
    with patch(_PATCH_TARGET, side_effect=MemoryError("out of memory")):
        response = client.get("/api/check?domain=example.com")

    assert response.status_code == 500
    data = response.get_json()
    assert data["error"] == "An error occurred during analysis."
    assert "out of memory" in data["details"]


def test_check_preflight(client):
    with patch(_PATCH_TARGET) as mock_run:
        response = client.options("/api/check")

    mock_run.assert_not_called()
    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Methods"] == "GET, OPTIONS"


# ---------------------------------------------------------------------------
# CORS and auxiliary endpoints
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("path", ["/api/health", "/api/providers", "/api/check"])
def test_responses_carry_cors_headers(client, path):
    response = client.get(path)

    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["Access-Control-Allow-Headers"] == "Content-Type"


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_providers_lists_registry(client):
    response = client.get("/api/providers")

    data = response.get_json()
    assert response.status_code == 200
    assert data[0]["key"] == "generic"
    assert {"key": "amazonses", "name": "Amazon SES", "selectors": []} in data
