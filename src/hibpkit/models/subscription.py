"""Subscription records for the authenticated API key."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal

from hibpkit.utils.datetime import parse_hibp_date


class SubscriptionStatus(BaseModel):
    """Current subscription of the API key, including its rate limit."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    subscription_name: str
    description: str = ""
    subscribed_until: str = ""
    rpm: int = Field(description="Requests per minute allowed by the subscription")
    domain_search_max_breached_accounts: int | None = None
    includes_stealer_logs: bool = False

    @property
    def subscribed_until_datetime(self) -> datetime | None:
        """Parse the subscription expiry as datetime."""
        return parse_hibp_date(self.subscribed_until)


class SubscribedDomain(BaseModel):
    """A domain verified for domain search on this subscription."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    domain_name: str
    date_added: str = ""
    date_expires: str = ""
