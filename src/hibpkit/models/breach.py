"""Breach records returned by the HIBP breach endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from hibpkit.utils.datetime import parse_hibp_date


class Breach(BaseModel):
    """A data breach from HIBP.

    Represents a known data breach that exposed user credentials.
    Wire names are PascalCase ("PwnCount"); either form is accepted.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    name: str = Field(description="Unique breach identifier (e.g., 'Adobe')")
    title: str = Field(description="Human-readable breach name")
    domain: str = Field(default="", description="Domain of the breached service")
    breach_date: str = Field(description="Date the breach occurred (YYYY-MM-DD)")
    added_date: str = Field(description="Date breach was added to HIBP")
    modified_date: str = Field(description="Date breach record was last modified")
    pwn_count: int = Field(description="Number of accounts exposed")
    description: str = Field(default="", description="HTML description of the breach")
    logo_path: str = Field(default="", description="Path to breach logo")
    data_classes: list[str] = Field(
        default_factory=list,
        description="Types of data exposed (e.g., 'Email addresses', 'Passwords')",
    )
    is_verified: bool = Field(default=True, description="Breach has been verified")
    is_fabricated: bool = Field(default=False, description="Breach may be fabricated")
    is_sensitive: bool = Field(
        default=False,
        description="Breach is sensitive (e.g., adult sites)",
    )
    is_retired: bool = Field(default=False, description="Breach has been retired")
    is_spam_list: bool = Field(default=False, description="Breach is a spam list")
    is_malware: bool = Field(
        default=False,
        description="Breach was from malware distribution",
    )
    is_stealer_log: bool = Field(
        default=False,
        description="Breach was sourced from info-stealer logs",
    )
    is_subscription_free: bool = Field(
        default=False,
        description="Breach is freely accessible without subscription",
    )

    @property
    def exposed_passwords(self) -> bool:
        """Check if passwords were exposed in this breach."""
        return "Passwords" in self.data_classes

    @property
    def breach_datetime(self) -> datetime | None:
        """Parse breach date as datetime."""
        return parse_hibp_date(self.breach_date)

    @property
    def added_datetime(self) -> datetime | None:
        """Parse added date as datetime."""
        return parse_hibp_date(self.added_date)
