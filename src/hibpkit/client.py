"""Have I Been Pwned (HIBP) API client.

HIBP provides breach data for email addresses and domains, and the
Pwned Passwords range API for k-anonymity password checks.

API Documentation: https://haveibeenpwned.com/API/v3
Rate Limit: set per subscription in requests per minute (see
GET /subscription/status)

Note: Most endpoints require a paid API key from https://haveibeenpwned.com/API/Key
"""

import json
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from hibpkit.exceptions import NotFoundError, ParseError, TransportError
from hibpkit.models import (
    Breach,
    Paste,
    StealerLogAlias,
    StealerLogDomain,
    StealerLogEmail,
    SubscribedDomain,
    SubscriptionStatus,
)
from hibpkit.passwords import (
    PwnedPassword,
    find_occurrences,
    hash_password,
    parse_range_response,
    split_hash,
    validate_hash_prefix,
)
from hibpkit.ratelimit import RateLimiter

log = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_USER_AGENT = "hibpkit"


class HIBPConfig(BaseModel):
    """Configuration for HIBP API client."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(description="HIBP API key (required)")
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with every request",
    )
    base_url: str = Field(
        default="https://haveibeenpwned.com/api/v3",
        description="HIBP API base URL",
    )
    passwords_url: str = Field(
        default="https://api.pwnedpasswords.com",
        description="Pwned Passwords range API base URL",
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    rpm: int | None = Field(
        default=None,
        description="Requests per minute to pace at (None disables pacing)",
    )


class HIBPClient:
    """Async client for Have I Been Pwned API.

    Every request first passes through the optional RateLimiter. Copies
    made with ``clone()``, ``with_user_agent()`` or ``copy.copy()`` share
    the same limiter, so tasks using different handles of one client still
    obey a single pace.

    Example:
        async with HIBPClient(HIBPConfig(api_key="your-key", rpm=10)) as client:
            breaches = await client.get_breaches_for_account("user@example.com")
            for breach in breaches:
                print(f"Found in {breach.title} ({breach.breach_date})")

            count = await client.check_password_padded("hunter2")
    """

    def __init__(
        self,
        config: HIBPConfig,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HIBP client.

        Args:
            config: HIBP configuration with API key.
            rate_limiter: Limiter to share; built from ``config.rpm`` when omitted.
            transport: Custom httpx transport (e.g. httpx.MockTransport in tests).

        Raises:
            ConfigurationError: If ``config.rpm`` is not positive.
        """
        self.config = config
        if rate_limiter is None and config.rpm is not None:
            rate_limiter = RateLimiter(config.rpm)
        self.rate_limiter = rate_limiter
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    async def with_auto_rate_limit(
        cls,
        config: HIBPConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HIBPClient":
        """Create a client paced at the rpm of the key's subscription.

        The subscription lookup itself is unthrottled.

        Raises:
            ConfigurationError: If the subscription reports rpm <= 0
        """
        async with cls(config.model_copy(update={"rpm": None}), transport=transport) as probe:
            status = await probe.get_subscription_status()

        log.info(
            "Configured rate limit from subscription",
            subscription=status.subscription_name,
            rpm=status.rpm,
        )
        return cls(config.model_copy(update={"rpm": status.rpm}), transport=transport)

    def clone(self, **overrides: Any) -> "HIBPClient":
        """Return a new handle sharing this client's rate limiter.

        Args:
            overrides: Config fields to change on the copy (e.g. user_agent).
        """
        config = self.config.model_copy(update=overrides) if overrides else self.config
        return type(self)(config, self.rate_limiter, self._transport)

    def __copy__(self) -> "HIBPClient":
        return self.clone()

    def with_user_agent(self, user_agent: str) -> "HIBPClient":
        """Return a copy of this client sending a different User-Agent."""
        return self.clone(user_agent=user_agent)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"User-Agent": self.config.user_agent}
            if self.config.api_key:
                headers["hibp-api-key"] = self.config.api_key
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=httpx.Timeout(self.config.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HIBPClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()

    def _url(self, *segments: str) -> str:
        """Build an API URL from a path, percent-encoding trailing segments."""
        path, *values = segments
        encoded = "".join(f"/{quote(v.strip(), safe='')}" for v in values)
        return f"{self.config.base_url}{path}{encoded}"

    async def _request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a paced GET request.

        The rate limiter is released before the request is sent.

        Returns:
            Response with a 2xx or 404 status

        Raises:
            TransportError: On any other status or a connection failure
        """
        if self.rate_limiter is not None:
            await self.rate_limiter.wait_if_needed()

        client = await self._get_client()
        try:
            response = await client.get(url, params=params, headers=headers)
        except httpx.RequestError as e:
            raise TransportError(
                "Failed to connect to HIBP",
                url=url,
                detail=str(e),
            ) from e

        log.debug("HIBP API request", url=url, status=response.status_code)

        if response.is_success or response.status_code == 404:
            return response

        if response.status_code == 401:
            raise TransportError(
                "HIBP API key is invalid or missing",
                url=url,
                status_code=401,
            )

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            log.warning("HIBP rate limit exceeded", url=url, retry_after=retry_after)
            raise TransportError(
                "HIBP rate limit exceeded",
                url=url,
                status_code=429,
                retry_after=retry_after,
            )

        raise TransportError(
            f"HIBP API request failed with status {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        missing_ok: bool = False,
        resource: str | None = None,
    ) -> Any:
        """GET a JSON endpoint and apply the 404 policy.

        Args:
            url: Full request URL
            params: Optional query parameters
            missing_ok: Return None on 404 (account/domain lookups)
            resource: Name used in NotFoundError on 404 (named lookups)

        Returns:
            Decoded JSON body, or None for a tolerated 404

        Raises:
            NotFoundError: On 404 when ``resource`` is given
            TransportError: On 404 for any other endpoint
            ParseError: If the body is not valid JSON
        """
        response = await self._request(url, params=params)

        if response.status_code == 404:
            if missing_ok:
                return None
            if resource is not None:
                raise NotFoundError(f"{resource} not found", url=url, status_code=404)
            raise TransportError(
                "HIBP API request failed with status 404",
                url=url,
                status_code=404,
            )

        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise ParseError("HIBP returned malformed JSON", url=url, detail=str(e)) from e

    @staticmethod
    def _parse(model: type[T], data: Any, url: str) -> T:
        """Validate decoded JSON against a model (or list of models)."""
        try:
            return TypeAdapter(model).validate_python(data)
        except ValidationError as e:
            raise ParseError(
                "HIBP response did not match expected shape",
                url=url,
                errors=e.error_count(),
            ) from e

    # Breaches

    async def get_breaches_for_account(
        self,
        account: str,
        *,
        include_unverified: bool = True,
        domain: str | None = None,
    ) -> list[Breach]:
        """Get all breaches an account (email address) appears in.

        Args:
            account: Email address or username to look up
            include_unverified: Include unverified breaches
            domain: Only return breaches of this domain

        Returns:
            List of breaches, empty if the account is not pwned
        """
        url = self._url("/breachedaccount", account)
        params = {
            "truncateResponse": "false",
            "includeUnverified": str(include_unverified).lower(),
        }
        if domain:
            params["domain"] = domain

        data = await self._get_json(url, params=params, missing_ok=True)
        if data is None:
            return []
        return self._parse(list[Breach], data, url)

    async def get_all_breaches(self, *, domain: str | None = None) -> list[Breach]:
        """List all breaches in the HIBP database.

        Args:
            domain: Optional domain filter (e.g., "adobe.com")
        """
        url = self._url("/breaches")
        params = {"domain": domain} if domain else None
        data = await self._get_json(url, params=params)
        return self._parse(list[Breach], data, url)

    async def get_breach_by_name(self, name: str) -> Breach:
        """Get details of a single breach.

        Args:
            name: Breach name (e.g., "Adobe")

        Raises:
            NotFoundError: If no breach has that name
        """
        url = self._url("/breach", name)
        data = await self._get_json(url, resource="Breach")
        return self._parse(Breach, data, url)

    async def get_latest_breach(self) -> Breach:
        """Get the most recently added breach."""
        url = self._url("/latestbreach")
        data = await self._get_json(url, resource="Latest breach")
        return self._parse(Breach, data, url)

    async def get_data_classes(self) -> list[str]:
        """Get all data classes (types of compromised data)."""
        url = self._url("/dataclasses")
        data = await self._get_json(url)
        return self._parse(list[str], data, url)

    # Pastes

    async def get_pastes_for_account(self, account: str) -> list[Paste]:
        """Get all pastes an email address appears in.

        Returns:
            List of pastes, empty if none
        """
        url = self._url("/pasteaccount", account)
        data = await self._get_json(url, missing_ok=True)
        if data is None:
            return []
        return self._parse(list[Paste], data, url)

    # Subscription

    async def get_subscription_status(self) -> SubscriptionStatus:
        """Get the subscription tied to the API key."""
        url = self._url("/subscription/status")
        data = await self._get_json(url)
        return self._parse(SubscriptionStatus, data, url)

    async def get_all_subscribed_domains(self) -> list[SubscribedDomain]:
        """Get all domains verified for domain search on this subscription."""
        url = self._url("/subscribed")
        data = await self._get_json(url)
        return self._parse(list[SubscribedDomain], data, url)

    # Stealer logs

    async def get_stealer_log_emails_for_domain(self, domain: str) -> list[StealerLogEmail]:
        """Get email addresses captured by stealer logs on a website domain."""
        url = self._url("/stealerlog/domain", domain)
        data = await self._get_json(url, missing_ok=True)
        if data is None:
            return []
        return self._parse(list[StealerLogEmail], data, url)

    async def get_stealer_log_aliases_for_domain(self, domain: str) -> list[StealerLogAlias]:
        """Get email aliases on an email domain found in stealer logs."""
        url = self._url("/stealerlog/alias", domain)
        data = await self._get_json(url, missing_ok=True)
        if data is None:
            return []
        return self._parse(list[StealerLogAlias], data, url)

    async def get_stealer_log_domains_for_email(self, email: str) -> list[StealerLogDomain]:
        """Get website domains an email address was captured logging into."""
        url = self._url("/stealerlog/email", email)
        data = await self._get_json(url, missing_ok=True)
        if data is None:
            return []
        return self._parse(list[StealerLogDomain], data, url)

    # Pwned Passwords

    async def _search_range(self, hash_prefix: str, *, padded: bool) -> list[PwnedPassword]:
        validate_hash_prefix(hash_prefix)

        url = f"{self.config.passwords_url}/range/{hash_prefix}"
        headers = {"Add-Padding": "true"} if padded else None
        response = await self._request(url, headers=headers)

        if response.status_code == 404:
            raise TransportError(
                "Pwned Passwords range request failed with status 404",
                url=url,
                status_code=404,
            )

        entries = parse_range_response(response.text)
        log.debug("Password range fetched", hash_prefix=hash_prefix, entries=len(entries))
        return entries

    async def search_password_range(self, hash_prefix: str) -> list[PwnedPassword]:
        """Get every known hash suffix for a 5-character SHA-1 prefix.

        Args:
            hash_prefix: First 5 characters of a SHA-1 password hash

        Returns:
            Entries in response order

        Raises:
            DataValidationError: If the prefix is not exactly 5 characters
        """
        return await self._search_range(hash_prefix, padded=False)

    async def search_password_range_padded(self, hash_prefix: str) -> list[PwnedPassword]:
        """Like ``search_password_range`` but asks for zero-count decoy entries.

        Padding hides the real response size from network observers.
        """
        return await self._search_range(hash_prefix, padded=True)

    async def check_password_hash(self, sha1_hash: str, *, padded: bool = False) -> int:
        """Check a pre-computed SHA-1 hash against Pwned Passwords.

        Args:
            sha1_hash: Full 40-char SHA-1 hex digest (any case)
            padded: Request decoy padding entries

        Returns:
            Number of times the hash was seen, 0 if absent
        """
        prefix, suffix = split_hash(sha1_hash)
        entries = await self._search_range(prefix, padded=padded)
        return find_occurrences(entries, suffix)

    async def check_password(self, password: str) -> int:
        """Check how often a password has been exposed in data breaches.

        Only the first 5 characters of the password's SHA-1 hash are sent.

        Args:
            password: Plaintext password (hashed verbatim, never sent or logged)

        Returns:
            Number of times the password was seen, 0 if absent
        """
        return await self.check_password_hash(hash_password(password))

    async def check_password_padded(self, password: str) -> int:
        """Like ``check_password`` but with a padded range query."""
        return await self.check_password_hash(hash_password(password), padded=True)
