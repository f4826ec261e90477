"""
BIMI checker - Brand Indicators for Message Identification.

BIMI allows brands to display their logo in email clients by publishing a
DNS TXT record at default._bimi.{domain}.  Only the presence of a record
with the BIMI1 version tag is checked; the logo and certificate it points
to are not fetched.
"""

from __future__ import annotations

from authcheck.checker.txt_record import check_txt_record, starts_with
from authcheck.models import CheckResult, DnsSettings

NAME = "BIMI"

_is_bimi_record = starts_with("v=BIMI1")


def check_bimi(domain: str, settings: DnsSettings | None = None) -> CheckResult:
    """Check for a BIMI record at default._bimi.*domain*."""
    return check_txt_record(f"default._bimi.{domain}", NAME, _is_bimi_record, settings)
