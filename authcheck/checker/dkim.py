"""
DKIM key discovery.

DKIM selectors are chosen by the sending system and only appear in the
headers of delivered mail, so they cannot be listed through DNS.  This
probe tries the selectors known for the given email service provider
(or a generic list) in order:
- Queries {selector}._domainkey.{domain} TXT records one selector at a time
- Stops at the first record starting with v=DKIM1
- Parses the key tags (k=, p=, t=) and measures the RSA key size with the
  cryptography library
"""

from __future__ import annotations

import base64
import binascii
import logging
import threading

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import load_der_public_key

from authcheck.checker.providers import get_provider
from authcheck.checker.resolver import is_absent, query_dns
from authcheck.models import STATUS_FAIL, STATUS_PASS, CheckResult, DnsSettings

logger = logging.getLogger(__name__)

NAME = "DKIM"


def check_dkim(
    domain: str,
    esp: str | None = None,
    settings: DnsSettings | None = None,
    cancel_event: threading.Event | None = None,
) -> CheckResult:
    """Probe the selectors known for *esp* until one publishes a DKIM key.

    Lookups that come back empty, NXDOMAIN, or fail outright are all
    skipped; only an exhausted selector list is reported, as a fail.

    Args:
        domain: The domain name to check.
        esp: Email service provider key; None or unknown means generic.
        settings: Optional DnsSettings for resolver configuration.
        cancel_event: When set, the scan stops before the next selector.

    Returns:
        A CheckResult: pass with the first matching selector and record,
        otherwise fail.
    """
    profile = get_provider(esp)
    failed_selectors: list[str] = []

    for selector in profile.selectors:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("DKIM probe for %s cancelled before selector %s", domain, selector)
            return CheckResult(
                name=NAME,
                status=STATUS_FAIL,
                info="DKIM probe cancelled.",
                provider=profile.display_name,
            )

        dkim_domain = f"{selector}._domainkey.{domain}"
        dns_result = query_dns(dkim_domain, "TXT", settings)

        if not dns_result["success"]:
            if not is_absent(dns_result):
                logger.warning(
                    "DKIM check failed for %s: %s", dkim_domain, dns_result.get("error_message")
                )
                failed_selectors.append(selector)
            continue

        record = next((r for r in dns_result["records"] if r.startswith("v=DKIM1")), None)
        if record is None:
            continue

        return _key_found(selector, record, profile.display_name)

    warnings: list[str] = []
    if failed_selectors:
        warnings.append(f"DNS lookup failed for selector(s): {', '.join(failed_selectors)}")

    return CheckResult(
        name=NAME,
        status=STATUS_FAIL,
        info="No DKIM key found for known selectors.",
        provider=profile.display_name,
        warnings=warnings,
    )


def _key_found(selector: str, record: str, provider: str) -> CheckResult:
    """Build the pass result for *record*, adding key details and warnings."""
    tags = parse_dkim_tags(record)
    warnings: list[str] = []

    key_type = tags.get("k", "rsa").lower()

    if "y" in tags.get("t", "").lower().split(":"):
        warnings.append("DKIM key is in testing mode (t=y)")

    key_size: int | None = None
    p_tag = tags.get("p", "")
    if p_tag == "":
        warnings.append("DKIM key has been revoked (empty p= value)")
    else:
        key_size = measure_key_size(p_tag, key_type)
        if key_size is None:
            warnings.append("Could not determine DKIM key size")
        elif key_type == "rsa" and key_size < 1024:
            warnings.append(
                f"DKIM key size is {key_size} bits; minimum 1024 required, 2048+ recommended"
            )
        elif key_type == "rsa" and key_size < 2048:
            warnings.append(f"DKIM key size is {key_size} bits; consider upgrading to 2048+ bits")

    return CheckResult(
        name=NAME,
        status=STATUS_PASS,
        info=f"Key found with selector: '{selector}'.",
        selector=selector,
        record=record,
        provider=provider,
        key_type=key_type,
        key_size=key_size,
        warnings=warnings,
    )


def parse_dkim_tags(record: str) -> dict[str, str]:
    """Parse a DKIM TXT record into a dict of tag=value pairs.

    Tags are separated by semicolons; leading/trailing whitespace on tags
    and values is stripped.
    """
    tags: dict[str, str] = {}
    for part in record.split(";"):
        part = part.strip()
        if "=" in part:
            key, _, value = part.partition("=")
            tags[key.strip().lower()] = value.strip()
    return tags


def measure_key_size(p_value: str, key_type: str) -> int | None:
    """Decode the base64 public key and return its size in bits.

    Args:
        p_value: The base64-encoded public key from the p= tag.
        key_type: The key algorithm (rsa, ed25519).

    Returns:
        Key size in bits, or None if the key cannot be parsed.
    """
    clean_b64 = "".join(p_value.split())

    try:
        der_bytes = base64.b64decode(clean_b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.debug("Failed to decode DKIM p= base64: %s", exc)
        return None

    if key_type == "ed25519":
        # Ed25519 keys are always 256 bits
        return 256

    try:
        public_key = load_der_public_key(der_bytes)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        logger.debug("Failed to load DER public key: %s", exc)
        return None

    return getattr(public_key, "key_size", None)
