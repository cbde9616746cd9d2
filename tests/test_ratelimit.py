"""Tests for the client-side rate limiter."""

import asyncio
import copy
import threading
import time

import httpx
import pytest

from hibpkit.exceptions import ConfigurationError
from hibpkit.ratelimit import RateLimiter

# Float slack for stamps built by repeated addition
EPSILON = 1e-6


def assert_paced(permitted: list[float], start: float, interval: float) -> None:
    """The k-th permitted call starts no earlier than start + k * interval."""
    for k, stamp in enumerate(permitted):
        assert stamp >= start + k * interval - EPSILON


class TestRateLimiterConfig:
    """Tests for limiter construction."""

    def test_rpm_accessors(self) -> None:
        """Configured rpm is readable without side effects."""
        limiter = RateLimiter(120)
        assert limiter.get_rpm() == 120
        assert repr(limiter) == "RateLimiter(rpm=120)"
        assert limiter.min_interval == pytest.approx(0.5)

    @pytest.mark.parametrize("rpm", [0, -1, -100])
    def test_non_positive_rpm_rejected(self, rpm: int) -> None:
        """Non-positive rpm is a configuration error, not 'unlimited'."""
        with pytest.raises(ConfigurationError) as exc_info:
            RateLimiter(rpm)
        assert exc_info.value.context["rpm"] == rpm

    @pytest.mark.parametrize("rpm", [1.5, "10", True, None])
    def test_non_integer_rpm_rejected(self, rpm: object) -> None:
        """Rpm must be an integer."""
        with pytest.raises(ConfigurationError):
            RateLimiter(rpm)  # type: ignore[arg-type]


class TestRateLimiterPacing:
    """Tests for wait_if_needed timing."""

    @pytest.mark.asyncio
    async def test_first_call_is_immediate(self) -> None:
        """A fresh limiter does not delay the first request."""
        limiter = RateLimiter(1)  # 60s interval
        start = time.monotonic()
        await limiter.wait_if_needed()
        assert time.monotonic() - start < 0.5

    @pytest.mark.asyncio
    async def test_back_to_back_calls_are_spaced(self) -> None:
        """Second call waits out the minimum interval."""
        limiter = RateLimiter(600)  # 0.1s interval
        await limiter.wait_if_needed()
        first = limiter._last_request
        await limiter.wait_if_needed()
        second = limiter._last_request
        assert second - first >= limiter.min_interval - EPSILON

    @pytest.mark.asyncio
    async def test_single_caller_waits_at_most_one_interval(self) -> None:
        """A lone caller is never delayed longer than 60/rpm."""
        limiter = RateLimiter(600)
        await limiter.wait_if_needed()
        start = time.monotonic()
        await limiter.wait_if_needed()
        assert time.monotonic() - start < limiter.min_interval + 0.1

    @pytest.mark.asyncio
    async def test_idle_time_is_not_banked(self) -> None:
        """After a long idle period only one call is free; the next is paced."""
        limiter = RateLimiter(600)
        await limiter.wait_if_needed()
        limiter._last_request = time.monotonic() - 3600

        start = time.monotonic()
        await limiter.wait_if_needed()
        assert time.monotonic() - start < 0.05

        first = limiter._last_request
        await limiter.wait_if_needed()
        assert limiter._last_request - first >= limiter.min_interval - EPSILON

    @pytest.mark.asyncio
    async def test_concurrent_callers_obey_interval(self) -> None:
        """Concurrent callers are released one interval after another."""
        limiter = RateLimiter(600)
        permitted: list[float] = []

        async def caller() -> None:
            await limiter.wait_if_needed()
            permitted.append(time.monotonic())

        start = time.monotonic()
        await asyncio.gather(*(caller() for _ in range(5)))

        assert len(permitted) == 5
        assert_paced(sorted(permitted), start, limiter.min_interval)

    def test_shared_across_threads_and_event_loops(self) -> None:
        """Threads each running their own event loop share one pace without errors."""
        limiter = RateLimiter(600)
        permitted: list[float] = []
        errors: list[BaseException] = []
        record = threading.Lock()

        async def caller() -> None:
            try:
                await limiter.wait_if_needed()
            except Exception as e:
                with record:
                    errors.append(e)
                return
            now = time.monotonic()
            with record:
                permitted.append(now)

        async def burst() -> None:
            await asyncio.gather(*(caller() for _ in range(3)))

        start = time.monotonic()
        threads = [threading.Thread(target=lambda: asyncio.run(burst())) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert errors == []
        assert len(permitted) == 6
        assert_paced(sorted(permitted), start, limiter.min_interval)

    def test_reused_across_successive_event_loops(self) -> None:
        """A limiter keeps working when a later asyncio.run reuses it."""
        limiter = RateLimiter(6000)

        async def burst() -> None:
            await asyncio.gather(*(limiter.wait_if_needed() for _ in range(3)))

        asyncio.run(burst())
        first_loop_last = limiter._last_request
        asyncio.run(burst())

        assert limiter._last_request >= first_loop_last + 3 * limiter.min_interval - EPSILON

    @pytest.mark.asyncio
    async def test_three_concurrent_waits_at_120_rpm(self) -> None:
        """Three concurrent waits at 120 rpm take at least one second in total."""
        limiter = RateLimiter(120)

        start = time.monotonic()
        results = await asyncio.gather(
            *(limiter.wait_if_needed() for _ in range(3)),
            return_exceptions=True,
        )
        elapsed = time.monotonic() - start

        assert results == [None, None, None]
        assert elapsed >= 2 * (60 / 120)


class TestRateLimiterSharing:
    """Tests for limiter sharing between client handles."""

    def test_clone_shares_limiter(self, make_client) -> None:
        """Every copy of a client paces through the same limiter."""
        client = make_client(lambda request: httpx.Response(200, json=[]), rpm=30)

        assert client.rate_limiter is not None
        assert client.clone().rate_limiter is client.rate_limiter
        assert copy.copy(client).rate_limiter is client.rate_limiter
        assert client.with_user_agent("other/1.0").rate_limiter is client.rate_limiter

    def test_separate_clients_have_separate_limiters(self, make_client) -> None:
        """Independently configured clients do not share pacing state."""
        first = make_client(lambda request: httpx.Response(200, json=[]), rpm=30)
        second = make_client(lambda request: httpx.Response(200, json=[]), rpm=30)
        assert first.rate_limiter is not second.rate_limiter

    def test_no_rpm_means_unthrottled(self, make_client) -> None:
        """Without an rpm the client has no limiter at all."""
        client = make_client(lambda request: httpx.Response(200, json=[]))
        assert client.rate_limiter is None

    @pytest.mark.asyncio
    async def test_clones_are_paced_together(self, make_client) -> None:
        """Requests issued through different clones are spaced by one limiter."""
        client = make_client(lambda request: httpx.Response(200, json=[]), rpm=300)
        clones = [client, client.clone(), client.clone()]

        start = time.monotonic()
        await asyncio.gather(*(c.get_all_breaches() for c in clones))
        elapsed = time.monotonic() - start

        assert elapsed >= 2 * client.rate_limiter.min_interval
        for c in clones:
            await c.close()

    @pytest.mark.asyncio
    async def test_lock_released_before_request(self, make_client) -> None:
        """The limiter lock is not held while the request is in flight."""
        held_during_request: list[bool] = []

        def handler(request: httpx.Request) -> httpx.Response:
            held_during_request.append(client.rate_limiter._lock.locked())
            return httpx.Response(200, json=[])

        client = make_client(handler, rpm=60)
        async with client:
            await client.get_all_breaches()

        assert held_during_request == [False]

    @pytest.mark.asyncio
    async def test_slow_responses_do_not_serialize_callers(self) -> None:
        """Callers queue on the pace, not on network latency."""
        from hibpkit.client import HIBPClient, HIBPConfig

        async def slow_handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.3)
            return httpx.Response(200, json=[])

        client = HIBPClient(
            HIBPConfig(api_key="test-key", rpm=6000),
            transport=httpx.MockTransport(slow_handler),
        )

        start = time.monotonic()
        async with client:
            await asyncio.gather(*(client.get_all_breaches() for _ in range(3)))
        elapsed = time.monotonic() - start

        assert elapsed < 0.6
