"""
Unit tests for authcheck/checker/mx.py

All DNS calls are mocked so no real network activity occurs.
Covers: MX record parsing, resolver ordering, empty results, and DNS
failures.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from authcheck.checker.mx import check_mx, parse_mx_record


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _dns_success(records: list[str]) -> dict:
    """Simulate a successful query_dns result."""
    return {
        "success": True,
        "outcome": "found",
        "records": records,
        "error_type": None,
        "error_message": None,
    }


def _dns_failure(error_type: str = "NXDOMAIN", msg: str = "not found") -> dict:
    """Simulate a failed query_dns result."""
    return {
        "success": False,
        "outcome": "absent" if error_type in ("NXDOMAIN", "NO_ANSWER") else "error",
        "records": [],
        "error_type": error_type,
        "error_message": msg,
    }


_PATCH_TARGET = "authcheck.checker.mx.query_dns"


# ---------------------------------------------------------------------------
# Tests - parse_mx_record
# ---------------------------------------------------------------------------


class TestParseMxRecord:
    """Test the parse_mx_record() function directly."""

    def test_strips_trailing_dot(self):
        assert parse_mx_record("10 aspmx.l.google.com.") == {
            "priority": 10,
            "exchange": "aspmx.l.google.com",
        }

    def test_null_mx(self):
        assert parse_mx_record("0 .") == {"priority": 0, "exchange": ""}

    @pytest.mark.parametrize("raw", ["", "mx.example.com", "ten mx.example.com."])
    def test_malformed_returns_none(self, raw):
        assert parse_mx_record(raw) is None


# ---------------------------------------------------------------------------
# Tests - check_mx
# ---------------------------------------------------------------------------


class TestCheckMx:
    """Test check_mx() with mocked DNS."""

    def test_three_records_preserve_resolver_order(self):
        raw = ["20 mx2.example.com.", "10 mx1.example.com.", "30 mx3.example.com."]
        with patch(_PATCH_TARGET, return_value=_dns_success(raw)):
            result = check_mx("example.com")

        assert result.status == "pass"
        assert result.name == "MX"
        assert result.info == "3 record(s) found."
        assert result.records == [
            {"priority": 20, "exchange": "mx2.example.com"},
            {"priority": 10, "exchange": "mx1.example.com"},
            {"priority": 30, "exchange": "mx3.example.com"},
        ]

    def test_queries_bare_domain(self):
        with patch(_PATCH_TARGET, return_value=_dns_success(["10 mx.example.com."])) as mock_query:
            check_mx("example.com")

        mock_query.assert_called_once_with("example.com", "MX", None)

    @pytest.mark.parametrize("error_type", ["NXDOMAIN", "NO_ANSWER"])
    def test_absent_records_fail(self, error_type):
        with patch(_PATCH_TARGET, return_value=_dns_failure(error_type)):
            result = check_mx("example.com")

        assert result.status == "fail"
        assert result.info == "No MX records found."
        assert result.records is None

    def test_empty_answer_fails(self):
        with patch(_PATCH_TARGET, return_value=_dns_success([])):
            result = check_mx("example.com")

        assert result.status == "fail"

    def test_timeout_is_error(self):
        with patch(_PATCH_TARGET, return_value=_dns_failure("TIMEOUT", "DNS query timed out")):
            result = check_mx("example.com")

        assert result.status == "error"
        assert result.info == "DNS query failed."
        assert result.error == "DNS query timed out"

    def test_malformed_records_are_skipped(self):
        with patch(_PATCH_TARGET, return_value=_dns_success(["garbage", "10 mx.example.com."])):
            result = check_mx("example.com")

        assert result.info == "1 record(s) found."
        assert result.records == [{"priority": 10, "exchange": "mx.example.com"}]
