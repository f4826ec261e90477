"""
DNS resolver wrapper.

Provides thread-safe DNS resolution with configurable nameservers and a
per-query timeout.  Every resolver failure is classified into one of
three outcomes so callers never have to handle dnspython exceptions:

- found:  the query returned records
- absent: the name or the record type does not exist (NXDOMAIN, NoAnswer)
- error:  the lookup itself failed (timeout, SERVFAIL, network error)

No retries are performed.
"""

from __future__ import annotations

import logging
from typing import Any

import dns.exception
import dns.resolver

from authcheck.models import DnsSettings

logger = logging.getLogger(__name__)

OUTCOME_FOUND = "found"
OUTCOME_ABSENT = "absent"
OUTCOME_ERROR = "error"


def _load_settings() -> DnsSettings:
    """Return DnsSettings built from the default Config.

    Only used as a safety net when no settings object is passed by the
    caller (the normal path in run_domain_check passes one explicitly).
    """
    from authcheck.config import Config  # noqa: PLC0415
    return DnsSettings.from_config(Config)


def create_resolver(settings: DnsSettings) -> dns.resolver.Resolver:
    """Create a fresh dns.resolver.Resolver configured from *settings*.

    A new instance is created every time to ensure thread safety.

    Args:
        settings: DnsSettings instance containing resolver config.

    Returns:
        A configured dns.resolver.Resolver instance.
    """
    resolver = dns.resolver.Resolver(configure=False)

    nameservers = settings.get_resolvers()
    if nameservers:
        resolver.nameservers = nameservers
    else:
        resolver.nameservers = ["8.8.8.8", "1.1.1.1"]

    # lifetime == timeout: one attempt per query, never retried
    resolver.timeout = float(settings.timeout_seconds)
    resolver.lifetime = float(settings.timeout_seconds)
    resolver.retry_servfail = False

    return resolver


def _result(
    outcome: str,
    records: list[str] | None = None,
    error_type: str | None = None,
    error_message: str | None = None,
) -> dict[str, Any]:
    return {
        "success": outcome == OUTCOME_FOUND,
        "outcome": outcome,
        "records": records or [],
        "error_type": error_type,
        "error_message": error_message,
    }


def is_absent(dns_result: dict[str, Any]) -> bool:
    """Return True when *dns_result* means "no such record" rather than a fault."""
    return dns_result.get("outcome") == OUTCOME_ABSENT


def query_dns(
    domain: str,
    rdtype: str,
    settings: DnsSettings | None = None,
) -> dict[str, Any]:
    """Execute a DNS query with robust error handling.

    Args:
        domain: The domain name to query.
        rdtype: DNS record type string ("TXT" or "MX").
        settings: Optional DnsSettings; built from Config if not provided.

    Returns:
        A dict with keys:
            success (bool): Whether the query returned records.
            outcome (str): "found", "absent" or "error".
            records (list[str]): The resolved record strings.  TXT records
                are joined into one string per record; MX records are
                rendered as "<preference> <exchange>".
            error_type (str|None): Category of error if failed.
            error_message (str|None): Human-readable error description.
    """
    if settings is None:
        settings = _load_settings()

    resolver = create_resolver(settings)

    try:
        answer = resolver.resolve(domain, rdtype)
        records: list[str] = []
        for rdata in answer:
            # TXT records come as multiple byte strings that need joining
            if rdtype.upper() == "TXT":
                txt_value = b"".join(rdata.strings).decode("utf-8", errors="replace")
                records.append(txt_value)
            else:
                records.append(rdata.to_text())

        logger.debug("DNS query %s/%s returned %d records", domain, rdtype, len(records))
        return _result(OUTCOME_FOUND, records)

    except dns.resolver.NXDOMAIN:
        logger.info("NXDOMAIN for %s/%s", domain, rdtype)
        return _result(
            OUTCOME_ABSENT,
            error_type="NXDOMAIN",
            error_message=f"Domain {domain} does not exist (NXDOMAIN)",
        )

    except dns.resolver.NoAnswer:
        logger.info("NoAnswer for %s/%s", domain, rdtype)
        return _result(
            OUTCOME_ABSENT,
            error_type="NO_ANSWER",
            error_message=f"No {rdtype} records found for {domain}",
        )

    except dns.resolver.NoNameservers:
        logger.warning("NoNameservers for %s/%s", domain, rdtype)
        return _result(
            OUTCOME_ERROR,
            error_type="DNS_ERROR",
            error_message=f"No nameservers available for {domain} (SERVFAIL or all failed)",
        )

    except dns.resolver.Timeout:
        logger.warning("Timeout for %s/%s", domain, rdtype)
        return _result(
            OUTCOME_ERROR,
            error_type="TIMEOUT",
            error_message=f"DNS query timed out for {domain}/{rdtype}",
        )

    except dns.exception.DNSException as exc:
        logger.error("DNSException for %s/%s: %s", domain, rdtype, exc)
        return _result(
            OUTCOME_ERROR,
            error_type="DNS_ERROR",
            error_message=f"DNS error for {domain}/{rdtype}: {exc}",
        )

    except Exception as exc:
        logger.exception("Unexpected error querying %s/%s", domain, rdtype)
        return _result(
            OUTCOME_ERROR,
            error_type="DNS_ERROR",
            error_message=f"Unexpected error for {domain}/{rdtype}: {exc}",
        )
