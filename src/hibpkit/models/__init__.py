"""Pydantic models for HIBP API responses."""

from hibpkit.models.breach import Breach
from hibpkit.models.paste import Paste
from hibpkit.models.stealer import StealerLogAlias, StealerLogDomain, StealerLogEmail
from hibpkit.models.subscription import SubscribedDomain, SubscriptionStatus

__all__ = [
    "Breach",
    "Paste",
    "StealerLogAlias",
    "StealerLogDomain",
    "StealerLogEmail",
    "SubscribedDomain",
    "SubscriptionStatus",
]
