"""Paste records returned by the paste account endpoint."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class Paste(BaseModel):
    """A paste containing an exposed email address.

    Pastes are text documents uploaded to paste sites that contain
    personal data, often from data breaches.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    source: str = Field(description="Paste site name (e.g., 'Pastebin')")
    id: str = Field(description="Paste identifier")
    title: str | None = Field(default=None, description="Paste title if available")
    date: str | None = Field(default=None, description="Date paste was created")
    email_count: int = Field(default=0, description="Number of emails in paste")
