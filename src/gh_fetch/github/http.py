"""Async HTTP transport for the GitHub API.

Owns the httpx client, authentication headers, and transport-level
resiliency: retries with exponential backoff on 5xx, timeouts and network
errors, and waiting out rate-limit responses. Everything above this layer
sees either a GitHubResponse or a gh_fetch error.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from gh_fetch.config import GitHubConfig
from gh_fetch.errors import ApiError, AuthError, RateLimitExceeded
from gh_fetch.github.auth import GitHubAuth

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"


def _int_header(headers: httpx.Headers, name: str) -> int:
    return int(headers.get(name, "0"))


class RateLimitInfo(BaseModel):
    """Quota snapshot carried in the x-ratelimit-* response headers."""

    limit: int
    remaining: int
    reset: datetime
    used: int
    resource: str = "core"

    @classmethod
    def from_headers(cls, headers: httpx.Headers) -> Optional["RateLimitInfo"]:
        """Read the quota headers, or None when GitHub sent none."""
        if "x-ratelimit-limit" not in headers:
            return None

        return cls(
            limit=_int_header(headers, "x-ratelimit-limit"),
            remaining=_int_header(headers, "x-ratelimit-remaining"),
            reset=datetime.fromtimestamp(_int_header(headers, "x-ratelimit-reset"), tz=UTC),
            used=_int_header(headers, "x-ratelimit-used"),
            resource=headers.get("x-ratelimit-resource", "core"),
        )


@dataclass
class GitHubResponse:
    """Decoded response body plus the status and headers it came with."""

    status_code: int
    data: Any
    headers: httpx.Headers
    rate_limit: RateLimitInfo | None = None
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def error_message(self) -> str:
        """Best-effort error text from a failed response body."""
        if isinstance(self.data, dict) and self.data.get("message"):
            return str(self.data["message"])
        if isinstance(self.data, str) and self.data:
            return self.data
        return f"HTTP {self.status_code}"


class GitHubClient:
    """Async HTTP client shared by the REST and GraphQL endpoints.

    A request is attempted up to ``max_retries + 1`` times. Server errors,
    timeouts and network errors back off exponentially from one second;
    rate-limited responses wait for ``retry-after`` or the quota reset.
    A 401 is never retried.
    """

    INITIAL_BACKOFF = 1.0
    BACKOFF_MULTIPLIER = 2.0
    # Longest wait for a primary rate limit reset before giving up
    MAX_RATE_LIMIT_WAIT = 900

    def __init__(
        self,
        auth: GitHubAuth,
        config: GitHubConfig | None = None,
        max_retries: int = 3,
    ) -> None:
        """Initialize GitHub HTTP client.

        Args:
            auth: Validated credentials.
            config: Connection settings (base URL, user agent, timeout).
            max_retries: Maximum number of retries for failed requests.
        """
        self._auth = auth
        self._config = config or GitHubConfig()
        self._max_retries = max_retries

        self._client: httpx.AsyncClient | None = None
        self.requests_made = 0
        self.last_rate_limit: RateLimitInfo | None = None

    @property
    def base_url(self) -> str:
        """API base URL requests are resolved against."""
        return self._config.api_base_url.rstrip("/")

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": self._config.user_agent,
            **self._auth.get_authorization_header(),
        }
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self._config.timeout_seconds,
            follow_redirects=True,
        )
        return self._client

    def _backoff_seconds(self, attempt: int) -> float:
        return self.INITIAL_BACKOFF * (self.BACKOFF_MULTIPLIER**attempt)

    def _rate_limit_wait(self, response: httpx.Response, attempt: int) -> int | None:
        """Seconds to wait before retrying a rate-limited response.

        Returns:
            Seconds to wait, or None if the response is not a rate limit.

        Raises:
            RateLimitExceeded: If retries are exhausted or the reset is too far away.
        """
        retry_after = response.headers.get("retry-after")
        quota = RateLimitInfo.from_headers(response.headers)

        if retry_after:
            wait_seconds = int(retry_after)
        elif quota is not None and quota.remaining == 0:
            wait_seconds = int((quota.reset - datetime.now(UTC)).total_seconds()) + 1
        else:
            return None

        if attempt >= self._max_retries or wait_seconds > self.MAX_RATE_LIMIT_WAIT:
            reset_at = quota.reset if quota is not None else datetime.now(UTC)
            raise RateLimitExceeded(reset_at=reset_at, retry_after=wait_seconds)

        logger.warning("Rate limited by GitHub. Retrying in %d seconds", wait_seconds)
        return max(wait_seconds, 0)

    def _failure_wait(self, response: httpx.Response, attempt: int, label: str) -> float | None:
        """Seconds to wait before retrying, or None when the response is final."""
        status = response.status_code

        if status == 401:
            raise AuthError(f"GitHub rejected the token (401) for {label}")

        if status in (403, 429):
            wait_seconds = self._rate_limit_wait(response, attempt)
            if wait_seconds is not None:
                return wait_seconds

        if status >= 500:
            logger.warning("Server error %d for %s", status, label)
            if attempt >= self._max_retries:
                raise ApiError(
                    f"Max retries ({self._max_retries}) exceeded for {label}",
                    status_code=status,
                )
            return self._backoff_seconds(attempt)

        return None

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one logical request, retrying transient failures.

        Raises:
            AuthError: On 401.
            ApiError: When retries are exhausted.
            RateLimitExceeded: When the rate limit cannot be waited out.
        """
        client = await self._ensure_client()
        label = f"{method} {path}"
        attempt = 0

        while True:
            logger.debug("%s (attempt %d)", label, attempt + 1)
            try:
                response = await client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as e:
                kind = "timeout" if isinstance(e, httpx.TimeoutException) else "network error"
                logger.warning("Request %s for %s: %s", kind, label, e)
                if attempt >= self._max_retries:
                    raise ApiError(f"Request {kind} for {label}: {e}") from e
                wait_seconds: float | None = self._backoff_seconds(attempt)
            else:
                wait_seconds = self._failure_wait(response, attempt, label)
                if wait_seconds is None:
                    return response

            logger.debug(
                "Retry %d/%d for %s in %.1fs", attempt + 1, self._max_retries, label, wait_seconds
            )
            await asyncio.sleep(wait_seconds)
            attempt += 1

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("Failed to parse JSON response from %s: %s", response.url, e)
            return response.text

    async def request(self, method: str, path: str, **kwargs: Any) -> GitHubResponse:
        """Make an HTTP request to the GitHub API.

        Non-2xx responses other than 401, rate limits and 5xx are returned to the
        caller, which decides whether they mean "not found" or an API error.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: API path (e.g., "/rate_limit" or "/repos/owner/repo/issues").
            **kwargs: Additional arguments passed to httpx (params, json, etc.).
        """
        response = await self._send(method, path, **kwargs)
        self.requests_made += 1

        quota = RateLimitInfo.from_headers(response.headers)
        if quota is not None:
            self.last_rate_limit = quota

        return GitHubResponse(
            status_code=response.status_code,
            data=self._decode(response),
            headers=response.headers,
            rate_limit=quota,
            url=str(response.url),
        )

    async def get(self, path: str, **kwargs: Any) -> GitHubResponse:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> GitHubResponse:
        return await self.request("POST", path, **kwargs)

    async def close(self) -> None:
        """Close the underlying httpx client, if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
