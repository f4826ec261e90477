"""
SPF record validation.

Validates SPF (Sender Policy Framework) records for a domain:
- Presence and uniqueness of the v=spf1 record
- Term grammar (qualifiers, mechanisms ip4, ip6, include, a, mx, ptr,
  exists, all and the redirect/exp modifiers)
- DNS lookup count enforcement (max 10 per RFC 7208)

Included and redirected records are not fetched; only the published
record itself is checked.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from typing import NamedTuple

from authcheck.checker.resolver import is_absent, query_dns
from authcheck.models import STATUS_ERROR, STATUS_FAIL, STATUS_PASS, CheckResult, DnsSettings

logger = logging.getLogger(__name__)

NAME = "SPF"

# RFC 7208 Section 4.6.4
MAX_DNS_LOOKUPS = 10

_QUALIFIERS = "+-~?"

_MECHANISMS = frozenset({"all", "include", "a", "mx", "ptr", "ip4", "ip6", "exists"})

# Modifiers that may appear at most once and take a domain-spec
_SINGLE_MODIFIERS = frozenset({"redirect", "exp"})

_TERM_NAME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9_.\-]*)(.*)$", re.DOTALL)

# a / mx arguments: optional ":domain", optional "/cidr4", optional "//cidr6"
_A_MX_ARGS_RE = re.compile(r"^(?::([^/]+))?(?:/(0|[1-9][0-9]*))?(?://(0|[1-9][0-9]*))?$")

# ip4 / ip6 arguments: address, optional "/cidr" without leading zeros
_IP_ARGS_RE = re.compile(r"^([^/%]+)(?:/(0|[1-9][0-9]*))?$")

# domain-spec characters plus macro-expand (%{x}, %%, %_, %-)
_DOMAIN_SPEC_RE = re.compile(
    r"^(?:[A-Za-z0-9._\-]|%\{[slodiphcrtv]\d*r?[.\-+,/_=]*\}|%%|%_|%-)+$",
    re.IGNORECASE,
)

# Lookup-incurring terms, matched at the start of a term after an optional qualifier
_LOOKUP_TOKEN_RE = re.compile(
    r"(?<![^\s])[+\-~?]?(?:include:|a:|mx:|exists:|redirect=)",
    re.IGNORECASE,
)


class SpfParseResult(NamedTuple):
    """Outcome of parsing one SPF record."""

    valid: bool
    mechanisms: list[dict[str, str]]
    errors: list[str]


def check_spf(domain: str, settings: DnsSettings | None = None) -> CheckResult:
    """Validate the SPF record for *domain*.

    Args:
        domain: The domain name to check.
        settings: Optional DnsSettings for resolver configuration.

    Returns:
        A CheckResult carrying mechanisms and warnings (both possibly
        empty), plus record and lookup_count once a single SPF record
        was found.
    """
    result = CheckResult(
        name=NAME,
        status=STATUS_FAIL,
        info="No SPF record found.",
        mechanisms=[],
        warnings=[],
    )

    dns_result = query_dns(domain, "TXT", settings)

    if not dns_result["success"]:
        if is_absent(dns_result):
            return result
        result.status = STATUS_ERROR
        result.info = "DNS query failed."
        result.error = dns_result.get("error_message")
        return result

    spf_records = [r for r in dns_result["records"] if r.lower().startswith("v=spf1")]

    if not spf_records:
        return result

    if len(spf_records) > 1:
        # Duplicate records are fatal on their own; neither is parsed
        result.info = f"{len(spf_records)} SPF records found."
        result.warnings.append("Critical: multiple SPF records found; only one is allowed.")
        return result

    spf_record = spf_records[0]
    result.record = spf_record

    parsed = parse_spf_record(spf_record)
    result.mechanisms = parsed.mechanisms

    if parsed.valid:
        result.status = STATUS_PASS
        result.info = "SPF record is valid."
    else:
        result.status = STATUS_FAIL
        result.info = f"SPF record has syntax errors: {parsed.errors[0]}."
        logger.debug("SPF syntax errors for %s: %s", domain, parsed.errors)

    lookup_count = count_dns_lookups(spf_record)
    result.lookup_count = lookup_count

    if lookup_count > MAX_DNS_LOOKUPS:
        result.status = STATUS_FAIL
        if parsed.valid:
            result.info = f"SPF record exceeds the limit of {MAX_DNS_LOOKUPS} DNS lookups."
        result.warnings.append(
            f"Critical: {lookup_count} DNS lookups found, exceeding the limit of {MAX_DNS_LOOKUPS}."
        )

    return result


def count_dns_lookups(spf_record: str) -> int:
    """Count the lookup-incurring terms (include:, a:, mx:, exists:, redirect=)."""
    return len(_LOOKUP_TOKEN_RE.findall(spf_record))


def parse_spf_record(spf_record: str) -> SpfParseResult:
    """Parse an SPF record string and check it against the SPF term grammar.

    Every term is parsed even after an error, so the mechanism list is as
    complete as possible for display.  Each mechanism dict has keys
    qualifier, type, value; modifiers carry an empty qualifier.
    """
    terms = spf_record.split()
    if not terms or terms[0].lower() != "v=spf1":
        return SpfParseResult(False, [], ["record must start with 'v=spf1'"])

    mechanisms: list[dict[str, str]] = []
    errors: list[str] = []
    seen_modifiers: set[str] = set()

    for term in terms[1:]:
        qualifier = "+"
        explicit_qualifier = False
        body = term
        if body[0] in _QUALIFIERS:
            qualifier = body[0]
            explicit_qualifier = True
            body = body[1:]

        match = _TERM_NAME_RE.match(body)
        if not match:
            errors.append(f"invalid term '{term}'")
            continue

        name = match.group(1).lower()
        rest = match.group(2)

        if rest.startswith("="):
            value = rest[1:]
            error = _check_modifier(name, value, explicit_qualifier, seen_modifiers)
            seen_modifiers.add(name)
            mechanisms.append({"qualifier": "", "type": name, "value": value})
        else:
            value = rest[1:] if rest.startswith(":") else rest
            error = _check_mechanism(name, rest)
            mechanisms.append({"qualifier": qualifier, "type": name, "value": value})

        if error:
            errors.append(error)

    return SpfParseResult(not errors, mechanisms, errors)


def _check_modifier(
    name: str,
    value: str,
    explicit_qualifier: bool,
    seen_modifiers: set[str],
) -> str | None:
    """Return an error message for an invalid modifier, or None."""
    if explicit_qualifier:
        return f"modifier '{name}' cannot take a qualifier"
    if name in _SINGLE_MODIFIERS:
        if name in seen_modifiers:
            return f"modifier '{name}' appears more than once"
        if not _valid_domain_spec(value):
            return f"invalid domain '{value}' in '{name}' modifier"
    return None


def _check_mechanism(name: str, rest: str) -> str | None:
    """Return an error message for an invalid mechanism, or None.

    *rest* is everything after the mechanism name, including the leading
    ':' or '/' separator.
    """
    if name not in _MECHANISMS:
        return f"unknown mechanism '{name}'"

    if name == "all":
        if rest:
            return "'all' takes no argument"
        return None

    if name in ("include", "exists"):
        if not rest.startswith(":") or not _valid_domain_spec(rest[1:]):
            return f"'{name}' requires a valid domain"
        return None

    if name == "ptr":
        if rest and (not rest.startswith(":") or not _valid_domain_spec(rest[1:])):
            return "invalid domain in 'ptr'"
        return None

    if name in ("a", "mx"):
        args = _A_MX_ARGS_RE.match(rest)
        if not args:
            return f"invalid arguments to '{name}'"
        domain_spec, cidr4, cidr6 = args.groups()
        if domain_spec is not None and not _valid_domain_spec(domain_spec):
            return f"invalid domain '{domain_spec}' in '{name}'"
        if cidr4 is not None and not 0 <= int(cidr4) <= 32:
            return f"invalid IPv4 prefix length /{cidr4} in '{name}'"
        if cidr6 is not None and not 0 <= int(cidr6) <= 128:
            return f"invalid IPv6 prefix length //{cidr6} in '{name}'"
        return None

    # ip4 / ip6
    if not rest.startswith(":"):
        return f"'{name}' requires an address"
    network = rest[1:]
    args = _IP_ARGS_RE.match(network)
    if not args:
        return f"invalid address '{network}' in '{name}'"
    address, prefix = args.groups()
    try:
        if name == "ip4":
            ipaddress.IPv4Address(address)
            max_prefix = 32
        else:
            ipaddress.IPv6Address(address)
            max_prefix = 128
    except ValueError:
        return f"invalid address '{network}' in '{name}'"
    if prefix is not None and int(prefix) > max_prefix:
        return f"invalid prefix length /{prefix} in '{name}'"
    return None


def _valid_domain_spec(value: str) -> bool:
    return bool(value) and bool(_DOMAIN_SPEC_RE.match(value))
