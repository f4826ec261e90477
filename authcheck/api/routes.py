"""
API blueprint routes.

Provides JSON endpoints for analysing a domain's email authentication
records, listing the known email service providers, and application
health.

Every response from this blueprint carries CORS headers so the browser
front end can call it from any origin.
"""

from __future__ import annotations

import logging

from flask import current_app, jsonify, request

from authcheck.api import bp
from authcheck.checker.engine import DEFAULT_DEADLINE_SECONDS, report_to_dict, run_domain_check
from authcheck.checker.providers import DEFAULT_PROVIDER, list_providers
from authcheck.models import DnsSettings
from authcheck.utils.domain import normalize_domain

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


@bp.after_request
def set_cors_headers(response):
    """Attach CORS headers to every API response."""
    response.headers["Access-Control-Allow-Origin"] = current_app.config.get("CORS_ALLOW_ORIGIN", "*")
    response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@bp.route("/health")
def health():
    """Public health-check endpoint."""
    return jsonify({"status": "ok", "service": "Email Auth Checker"})


@bp.route("/providers")
def providers():
    """Return the email service providers and their DKIM selectors."""
    return jsonify([profile.to_dict() for profile in list_providers()])


@bp.route("/check", methods=["GET", "OPTIONS"])
def check():
    """Analyse the SPF, DMARC, DKIM, MX, BIMI and MTA-STS records of a domain.

    Query parameters:
        domain: The domain to analyse (required).
        esp: Email service provider key used to pick DKIM selectors
            (optional, defaults to "generic").

    Response: the Report, one entry per mechanism name, e.g.
    {"SPF": {"name": "SPF", "status": "pass", ...}, "DMARC": {...}, ...}
    """
    # Pre-flight requests from browsers
    if request.method == "OPTIONS":
        return "", 200

    domain = normalize_domain(request.args.get("domain"))
    if not domain:
        return jsonify({"error": "Domain is required"}), 400

    esp = request.args.get("esp") or DEFAULT_PROVIDER

    try:
        report = run_domain_check(
            domain,
            esp=esp,
            settings=DnsSettings.from_config(current_app.config),
            deadline_seconds=current_app.config.get("CHECK_DEADLINE_SECONDS", DEFAULT_DEADLINE_SECONDS),
        )
    except Exception as exc:
        logger.exception("Analysis failed for %s", domain)
        return jsonify({"error": "An error occurred during analysis.", "details": str(exc)}), 500

    return jsonify(report_to_dict(report))
