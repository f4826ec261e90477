"""
DMARC record validation.

Validates DMARC (Domain-based Message Authentication, Reporting and
Conformance) records for a domain:
- Queries _dmarc.{domain} TXT record
- Requires the p= policy tag
- Reports the policy value and whether aggregate reports (rua=) are requested
"""

from __future__ import annotations

import logging

from authcheck.checker.resolver import is_absent, query_dns
from authcheck.models import STATUS_ERROR, STATUS_FAIL, STATUS_PASS, CheckResult, DnsSettings

logger = logging.getLogger(__name__)

NAME = "DMARC"

_KNOWN_POLICIES = frozenset({"none", "quarantine", "reject"})


def check_dmarc(domain: str, settings: DnsSettings | None = None) -> CheckResult:
    """Validate the DMARC record for *domain*.

    Args:
        domain: The domain name to check.
        settings: Optional DnsSettings for resolver configuration.

    Returns:
        A CheckResult.  When a record is found it carries record and rua;
        policy is set only when the p= tag is present.
    """
    dmarc_domain = f"_dmarc.{domain}"
    dns_result = query_dns(dmarc_domain, "TXT", settings)

    if not dns_result["success"]:
        if is_absent(dns_result):
            return CheckResult(name=NAME, status=STATUS_FAIL, info="No DMARC record found.")
        return CheckResult(
            name=NAME,
            status=STATUS_ERROR,
            info="DNS query failed.",
            error=dns_result.get("error_message"),
        )

    dmarc_records = [r for r in dns_result["records"] if r.startswith("v=DMARC1")]
    if not dmarc_records:
        return CheckResult(name=NAME, status=STATUS_FAIL, info="No DMARC record found.")

    dmarc_record = dmarc_records[0]
    tags = parse_dmarc_tags(dmarc_record)
    warnings: list[str] = []

    if len(dmarc_records) > 1:
        warnings.append(
            f"Multiple DMARC records found ({len(dmarc_records)}); only one is allowed"
        )

    result = CheckResult(
        name=NAME,
        status=STATUS_FAIL,
        info='DMARC record found, but policy tag missing (required "p=").',
        record=dmarc_record,
        rua="rua" in tags,
        warnings=warnings,
    )

    policy = tags.get("p")
    if not policy:
        return result

    result.status = STATUS_PASS
    result.policy = policy
    result.info = f'Policy is set to "{policy}".'

    if policy.lower() == "none":
        warnings.append("DMARC policy is p=none (monitoring only); consider p=quarantine or p=reject")
    elif policy.lower() not in _KNOWN_POLICIES:
        warnings.append(f"Unknown DMARC policy value: p={policy}")

    return result


def parse_dmarc_tags(record: str) -> dict[str, str]:
    """Parse a DMARC record string into a dict of tag=value pairs.

    Tags are separated by semicolons. Whitespace around tags and values
    is stripped. The v=DMARC1 tag is included in the output; when a tag
    repeats, the first occurrence wins.
    """
    tags: dict[str, str] = {}
    for part in record.split(";"):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            key, _, value = part.partition("=")
            tags.setdefault(key.strip().lower(), value.strip())
        else:
            # Some records have bare tokens; store as-is
            tags.setdefault(part.lower(), "")
    return tags
