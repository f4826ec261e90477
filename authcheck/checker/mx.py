"""
MX record checker - resolves MX records for the bare domain.

Uses the query_dns() wrapper so that resolver settings (nameservers,
timeouts) are applied consistently.  Records are reported in the order
the resolver returned them.
"""

from __future__ import annotations

import logging
from typing import Any

from authcheck.checker.resolver import is_absent, query_dns
from authcheck.models import STATUS_ERROR, STATUS_FAIL, STATUS_PASS, CheckResult, DnsSettings

logger = logging.getLogger(__name__)

NAME = "MX"


def parse_mx_record(raw: str) -> dict[str, Any] | None:
    """Split a rendered MX record ("10 mx1.example.com.") into its parts.

    Returns:
        A dict {priority: int, exchange: str}, or None if *raw* is malformed.
    """
    parts = raw.split(None, 1)
    if len(parts) != 2:
        return None
    try:
        priority = int(parts[0])
    except ValueError:
        return None
    return {"priority": priority, "exchange": parts[1].strip().rstrip(".")}


def check_mx(domain: str, settings: DnsSettings | None = None) -> CheckResult:
    """Resolve MX records for *domain*.

    Args:
        domain: The domain name to query.
        settings: Optional DnsSettings for resolver configuration.

    Returns:
        A CheckResult: pass with every record (resolver order, priorities
        kept), fail when the domain has no MX records, error when the
        lookup failed.
    """
    dns_result = query_dns(domain, "MX", settings)

    if not dns_result["success"]:
        if is_absent(dns_result):
            return CheckResult(name=NAME, status=STATUS_FAIL, info="No MX records found.")
        return CheckResult(
            name=NAME,
            status=STATUS_ERROR,
            info="DNS query failed.",
            error=dns_result.get("error_message"),
        )

    records: list[dict[str, Any]] = []
    for raw in dns_result["records"]:
        parsed = parse_mx_record(raw)
        if parsed is None:
            logger.warning("Skipping malformed MX record for %s: %r", domain, raw)
            continue
        records.append(parsed)

    if not records:
        return CheckResult(name=NAME, status=STATUS_FAIL, info="No MX records found.")

    return CheckResult(
        name=NAME,
        status=STATUS_PASS,
        info=f"{len(records)} record(s) found.",
        records=records,
    )
