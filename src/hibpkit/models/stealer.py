"""Stealer log records.

Stealer log endpoints return either bare strings or single-key objects
(``{"email": "..."}``); both shapes are accepted.
"""

from typing import Any

from pydantic import BaseModel, model_validator


class _SingleValue(BaseModel):
    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            (field_name,) = cls.model_fields
            return {field_name: data}
        return data


class StealerLogEmail(_SingleValue):
    """An email address captured by info-stealer malware on a website domain."""

    email: str


class StealerLogAlias(_SingleValue):
    """An email alias on an email domain found in stealer logs."""

    alias: str


class StealerLogDomain(_SingleValue):
    """A website domain an email address was captured logging into."""

    domain: str
