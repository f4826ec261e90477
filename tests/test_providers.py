"""Unit tests for authcheck/checker/providers.py"""

from __future__ import annotations

import dataclasses

import pytest

from authcheck.checker.providers import PROVIDERS, get_provider, list_providers

_EXPECTED_KEYS = [
    "generic",
    "google-workspace",
    "microsoft365",
    "mailchimp",
    "sendgrid",
    "klaviyo",
    "hubspot",
    "brevo",
    "mailerlite",
    "postmark",
    "mailgun",
    "amazonses",
]


def test_registry_contains_every_provider():
    assert [p.key for p in list_providers()] == _EXPECTED_KEYS


def test_klaviyo_has_single_selector():
    assert PROVIDERS["klaviyo"].selectors == ("klaviyo",)


def test_amazonses_has_no_selectors():
    assert PROVIDERS["amazonses"].selectors == ()


def test_generic_selector_order():
    assert PROVIDERS["generic"].selectors == (
        "google", "selector1", "selector2", "k1", "k2", "k3", "default", "mail", "dkim",
    )


@pytest.mark.parametrize("key", ["klaviyo", " Klaviyo ", "KLAVIYO"])
def test_get_provider_normalizes_key(key):
    assert get_provider(key).key == "klaviyo"


@pytest.mark.parametrize("key", [None, "", "not-a-provider"])
def test_get_provider_falls_back_to_generic(key):
    assert get_provider(key).key == "generic"


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        PROVIDERS["new"] = PROVIDERS["generic"]  # type: ignore[index]

    with pytest.raises(dataclasses.FrozenInstanceError):
        PROVIDERS["generic"].selectors = ()  # type: ignore[misc]


def test_profile_to_dict():
    assert PROVIDERS["microsoft365"].to_dict() == {
        "key": "microsoft365",
        "name": "Microsoft 365",
        "selectors": ["selector1", "selector2"],
    }
