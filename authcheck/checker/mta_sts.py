"""
MTA-STS checker - SMTP MTA Strict Transport Security (RFC 8461).

Looks for the TXT record at _mta-sts.{domain} that advertises an MTA-STS
policy.  The HTTPS policy file itself is not fetched.
"""

from __future__ import annotations

from authcheck.checker.txt_record import check_txt_record, starts_with
from authcheck.models import CheckResult, DnsSettings

NAME = "MTA-STS"

# RFC 8461 publishes "v=STSv1"; the shorter "v=STS1" is accepted as well.
_is_sts_record = starts_with("v=STS1", "v=STSv1")


def check_mta_sts(domain: str, settings: DnsSettings | None = None) -> CheckResult:
    """Check for an MTA-STS record at _mta-sts.*domain*."""
    return check_txt_record(f"_mta-sts.{domain}", NAME, _is_sts_record, settings)
