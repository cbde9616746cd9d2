"""Client-side request pacing for the HIBP API.

HIBP enforces a requests-per-minute quota per API key. A RateLimiter
spaces permitted request start times at least ``60 / rpm`` seconds apart.

One limiter belongs to one client configuration and is shared by every
clone of that client, so concurrent tasks using copies of the same client
obey a single pace. The limiter is not tied to an event loop and may be
shared across threads that each run their own loop.
"""

import asyncio
import threading
import time

import structlog

from hibpkit.exceptions import ConfigurationError

log = structlog.get_logger(__name__)


class RateLimiter:
    """Async pacing gate enforcing a minimum interval between requests.

    Each caller reserves the next free slot under a thread lock, then
    sleeps until that slot outside the lock. Slots are at least
    ``min_interval`` apart, and neither the sleep nor the caller's request
    holds the lock.

    Example:
        limiter = RateLimiter(rpm=10)
        await limiter.wait_if_needed()
        response = await http.get(url)
    """

    def __init__(self, rpm: int) -> None:
        """Initialize the limiter.

        Args:
            rpm: Permitted requests per minute (must be positive)

        Raises:
            ConfigurationError: If rpm is not a positive integer
        """
        if isinstance(rpm, bool) or not isinstance(rpm, int) or rpm <= 0:
            raise ConfigurationError(
                "Rate limit must be a positive number of requests per minute",
                rpm=rpm,
            )
        self._rpm = rpm
        self._lock = threading.Lock()
        # Start time of the most recently reserved slot
        self._last_request: float | None = None

    def __repr__(self) -> str:
        return f"RateLimiter(rpm={self._rpm})"

    def get_rpm(self) -> int:
        """Get the configured rate limit in requests per minute."""
        return self._rpm

    @property
    def min_interval(self) -> float:
        """Minimum seconds between two permitted request starts."""
        return 60.0 / self._rpm

    def _reserve_slot(self) -> float:
        with self._lock:
            now = time.monotonic()
            if self._last_request is None:
                slot = now
            else:
                slot = max(now, self._last_request + self.min_interval)
            self._last_request = slot
        return slot

    async def wait_if_needed(self) -> None:
        """Claim the next permitted slot and wait until it starts."""
        slot = self._reserve_slot()
        delay = slot - time.monotonic()
        if delay > 0:
            log.debug("Rate limit pacing", rpm=self._rpm, delay=round(delay, 3))
        # Sleep until the slot start is reached
        while delay > 0:
            await asyncio.sleep(delay)
            delay = slot - time.monotonic()
