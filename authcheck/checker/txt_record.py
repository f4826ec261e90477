"""
Generic TXT record check.

Queries a fixed DNS name and looks for the first TXT record accepted by
a predicate.  Shared by the BIMI and MTA-STS checks, which differ only in
the name they query and the version prefix they expect.
"""

from __future__ import annotations

import logging
from typing import Callable

from authcheck.checker.resolver import is_absent, query_dns
from authcheck.models import STATUS_ERROR, STATUS_FAIL, STATUS_PASS, CheckResult, DnsSettings

logger = logging.getLogger(__name__)


def check_txt_record(
    query_name: str,
    name: str,
    predicate: Callable[[str], bool],
    settings: DnsSettings | None = None,
) -> CheckResult:
    """Look up TXT records at *query_name* and match them against *predicate*.

    Args:
        query_name: Fully-qualified DNS name to query.
        name: Mechanism label placed on the result (e.g. "BIMI").
        predicate: Called with each TXT record (one string per record).
        settings: Optional DnsSettings for resolver configuration.

    Returns:
        A CheckResult: pass with the matching record, fail when no record
        matches or none exist, error when the lookup itself failed.
    """
    dns_result = query_dns(query_name, "TXT", settings)

    if not dns_result["success"]:
        if is_absent(dns_result):
            return CheckResult(name=name, status=STATUS_FAIL, info="Record not found.")
        return CheckResult(
            name=name,
            status=STATUS_ERROR,
            info="DNS query failed.",
            error=dns_result.get("error_message"),
        )

    record = next((r for r in dns_result["records"] if predicate(r)), None)
    if record is None:
        logger.debug("No %s record among %d TXT records at %s", name, len(dns_result["records"]), query_name)
        return CheckResult(name=name, status=STATUS_FAIL, info="Record not found.")

    return CheckResult(name=name, status=STATUS_PASS, info="Valid record found.", record=record)


def starts_with(*prefixes: str) -> Callable[[str], bool]:
    """Return a predicate accepting records that begin with any of *prefixes*."""

    def _predicate(record: str) -> bool:
        return record.startswith(prefixes)

    return _predicate
