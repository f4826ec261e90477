"""
Configuration module for the email authentication checker.

Loads settings from environment variables with sensible defaults.
"""

import os


def _env_list(name: str, default: str) -> list[str]:
    """Split a comma-separated environment variable into a list."""
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    """Base configuration shared by all environments."""

    # Security
    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-change-me")

    # Keep Report entries in mechanism order when serialised
    JSON_SORT_KEYS: bool = False

    # DNS resolution
    DNS_RESOLVERS: list[str] = _env_list("DNS_RESOLVERS", "8.8.8.8,1.1.1.1")
    DNS_TIMEOUT_SECONDS: float = float(os.environ.get("DNS_TIMEOUT_SECONDS", "4.0"))

    # Upper bound for one whole analysis (all six checks)
    CHECK_DEADLINE_SECONDS: float = float(os.environ.get("CHECK_DEADLINE_SECONDS", "30.0"))

    # CORS for the JSON API
    CORS_ALLOW_ORIGIN: str = os.environ.get("CORS_ALLOW_ORIGIN", "*")
