"""Domain input normalisation."""
from __future__ import annotations

import re

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)


def normalize_domain(value: str | None) -> str:
    """Reduce user input such as " https://Example.COM./path " to "example.com".

    Strips surrounding whitespace, a URL scheme, any path, query or port,
    and a trailing dot, then lowercases.  Returns "" when nothing is left.
    """
    if not value:
        return ""
    domain = _SCHEME_RE.sub("", value.strip())
    domain = re.split(r"[/?#]", domain, maxsplit=1)[0]
    domain = domain.split(":", 1)[0]
    return domain.strip().rstrip(".").lower()
