"""
Data model for the email authentication checker.

Three value types are defined here:
  CheckResult, ProviderProfile, DnsSettings

Nothing is persisted; a CheckResult lives only as long as the Report
that carries it back to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Status values
# ---------------------------------------------------------------------------

STATUS_PASS = "pass"
STATUS_FAIL = "fail"
STATUS_ERROR = "error"

# Serialization order of the optional CheckResult fields
_OPTIONAL_FIELDS: tuple[str, ...] = (
    "record",
    "records",
    "mechanisms",
    "lookup_count",
    "policy",
    "rua",
    "selector",
    "provider",
    "key_type",
    "key_size",
    "warnings",
    "error",
)


# ---------------------------------------------------------------------------
# CheckResult
# ---------------------------------------------------------------------------


@dataclass
class CheckResult:
    """Outcome of a single mechanism check (SPF, DMARC, DKIM, ...)."""

    name: str
    status: str
    info: str
    record: str | None = None
    records: list[dict[str, Any]] | None = None
    mechanisms: list[dict[str, str]] | None = None
    lookup_count: int | None = None
    policy: str | None = None
    rua: bool | None = None
    selector: str | None = None
    provider: str | None = None
    key_type: str | None = None
    key_size: int | None = None
    warnings: list[str] | None = None
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.status == STATUS_PASS

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict, leaving out optional fields that are unset."""
        data: dict[str, Any] = {
            "name": self.name,
            "status": self.status,
            "info": self.info,
        }
        for key in _OPTIONAL_FIELDS:
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    def __repr__(self) -> str:
        return f"<CheckResult {self.name} status={self.status}>"


# ---------------------------------------------------------------------------
# ProviderProfile
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderProfile:
    """An email service provider and the DKIM selectors it is known to use.

    Selectors are ordered by likelihood; the DKIM probe stops at the first
    one that resolves to a key.
    """

    key: str
    display_name: str
    selectors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "name": self.display_name,
            "selectors": list(self.selectors),
        }


# ---------------------------------------------------------------------------
# DnsSettings
# ---------------------------------------------------------------------------

DEFAULT_NAMESERVERS: tuple[str, ...] = ("8.8.8.8", "1.1.1.1")
DEFAULT_TIMEOUT_SECONDS = 4.0


@dataclass(frozen=True)
class DnsSettings:
    """DNS resolver configuration shared by every check of one analysis."""

    nameservers: tuple[str, ...] = field(default=DEFAULT_NAMESERVERS)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_config(cls, config: Any) -> DnsSettings:
        """Build settings from a Flask config mapping or a config class.

        Args:
            config: Anything exposing DNS_RESOLVERS / DNS_TIMEOUT_SECONDS,
                either as mapping keys or as attributes.

        Returns:
            A DnsSettings instance; missing values fall back to defaults.
        """
        if hasattr(config, "get"):
            resolvers = config.get("DNS_RESOLVERS")
            timeout = config.get("DNS_TIMEOUT_SECONDS")
        else:
            resolvers = getattr(config, "DNS_RESOLVERS", None)
            timeout = getattr(config, "DNS_TIMEOUT_SECONDS", None)

        if isinstance(resolvers, str):
            resolvers = [r.strip() for r in resolvers.split(",") if r.strip()]

        return cls(
            nameservers=tuple(resolvers) if resolvers else DEFAULT_NAMESERVERS,
            timeout_seconds=float(timeout) if timeout else DEFAULT_TIMEOUT_SECONDS,
        )

    def get_resolvers(self) -> list[str]:
        """Return the resolver list as a Python list."""
        return list(self.nameservers)

    def __repr__(self) -> str:
        return f"<DnsSettings nameservers={list(self.nameservers)} timeout={self.timeout_seconds}>"
