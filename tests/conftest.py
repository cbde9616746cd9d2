"""Pytest fixtures for hibpkit tests."""

from collections.abc import Callable

import httpx
import pytest

from hibpkit.client import HIBPClient, HIBPConfig
from hibpkit.config import reset_settings


@pytest.fixture(autouse=True)
def reset_global_settings():
    """Reset cached settings before each test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    """Requests captured by the mock transport."""
    return []


@pytest.fixture
def make_client(requests_seen):
    """Build an HIBPClient whose requests go to a handler instead of the network."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        **config_overrides,
    ) -> HIBPClient:
        def record(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        config = HIBPConfig(**{"api_key": "test-key", **config_overrides})
        return HIBPClient(config, transport=httpx.MockTransport(record))

    return factory


@pytest.fixture
def breach_payload() -> dict:
    """A breach as returned by the HIBP API."""
    return {
        "Name": "Adobe",
        "Title": "Adobe",
        "Domain": "adobe.com",
        "BreachDate": "2013-10-04",
        "AddedDate": "2013-12-04T00:00:00Z",
        "ModifiedDate": "2022-05-15T23:52:49Z",
        "PwnCount": 152445165,
        "Description": "<p>Breach description</p>",
        "LogoPath": "https://haveibeenpwned.com/Content/Images/PwnedLogos/Adobe.png",
        "DataClasses": ["Email addresses", "Password hints", "Passwords", "Usernames"],
        "IsVerified": True,
        "IsFabricated": False,
        "IsSensitive": False,
        "IsRetired": False,
        "IsSpamList": False,
        "IsMalware": False,
        "IsStealerLog": False,
        "IsSubscriptionFree": False,
    }
