"""
Email service provider registry.

Maps a provider key (as sent by the client, e.g. "sendgrid") to the DKIM
selectors that provider is known to publish.  DNS cannot enumerate
selectors, so the DKIM probe tries these in order.  The table is built
once at import time and is read-only afterwards.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from authcheck.models import ProviderProfile

DEFAULT_PROVIDER = "generic"

_PROFILES: tuple[ProviderProfile, ...] = (
    ProviderProfile(
        "generic",
        "Generic / Unknown",
        ("google", "selector1", "selector2", "k1", "k2", "k3", "default", "mail", "dkim"),
    ),
    ProviderProfile("google-workspace", "Google Workspace", ("google",)),
    ProviderProfile("microsoft365", "Microsoft 365", ("selector1", "selector2")),
    ProviderProfile("mailchimp", "Mailchimp", ("k1", "k2", "k3", "mandrill")),
    ProviderProfile("sendgrid", "SendGrid", ("s1", "s2", "smtpapi")),
    ProviderProfile("klaviyo", "Klaviyo", ("klaviyo",)),
    ProviderProfile("hubspot", "HubSpot", ("hs1", "hs2")),
    ProviderProfile("brevo", "Brevo", ("mail", "brevo1", "brevo2")),
    ProviderProfile("mailerlite", "MailerLite", ("litesrv", "ml", "ml2")),
    ProviderProfile("postmark", "Postmark", ("pm", "pm-bounces")),
    ProviderProfile("mailgun", "Mailgun", ("smtp", "k1", "krs", "mailo", "mx")),
    # SES signs with per-identity random selectors; nothing to guess
    ProviderProfile("amazonses", "Amazon SES", ()),
)

PROVIDERS: Mapping[str, ProviderProfile] = MappingProxyType(
    {profile.key: profile for profile in _PROFILES}
)


def get_provider(key: str | None) -> ProviderProfile:
    """Return the profile for *key*, falling back to the generic profile.

    The key is matched case-insensitively; None, blank and unknown keys
    all resolve to the generic profile.
    """
    if key:
        profile = PROVIDERS.get(key.strip().lower())
        if profile is not None:
            return profile
    return PROVIDERS[DEFAULT_PROVIDER]


def list_providers() -> list[ProviderProfile]:
    """Return every provider profile in registry order."""
    return list(PROVIDERS.values())
