"""hibpkit: async client for the Have I Been Pwned API v3.

Covers breach, paste, stealer log and subscription lookups, and
k-anonymity password checks, with optional client-side rate limiting.
"""

__version__ = "0.1.0"

from hibpkit.client import HIBPClient, HIBPConfig
from hibpkit.exceptions import (
    ConfigurationError,
    DataValidationError,
    HIBPError,
    NotFoundError,
    ParseError,
    TransportError,
)
from hibpkit.passwords import PwnedPassword
from hibpkit.ratelimit import RateLimiter

__all__ = [
    "__version__",
    "ConfigurationError",
    "DataValidationError",
    "HIBPClient",
    "HIBPConfig",
    "HIBPError",
    "NotFoundError",
    "ParseError",
    "PwnedPassword",
    "RateLimiter",
    "TransportError",
]
