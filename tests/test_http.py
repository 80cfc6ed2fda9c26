"""Tests for the GitHub HTTP transport."""

from datetime import UTC, datetime, timedelta

import httpx
import pytest
import respx

from gh_fetch.config import GitHubConfig
from gh_fetch.errors import ApiError, AuthError, RateLimitExceeded
from gh_fetch.github.auth import GitHubAuth
from gh_fetch.github.http import GitHubClient, GitHubResponse, RateLimitInfo

API = "https://api.github.com"


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace asyncio.sleep in the transport and record requested waits."""
    waits: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        waits.append(seconds)

    monkeypatch.setattr("gh_fetch.github.http.asyncio.sleep", fake_sleep)
    return waits


class TestRateLimitInfo:
    """Tests for RateLimitInfo model."""

    def test_from_headers_valid(self) -> None:
        """Test RateLimitInfo.from_headers with valid headers."""
        headers = httpx.Headers(
            {
                "x-ratelimit-limit": "5000",
                "x-ratelimit-remaining": "4999",
                "x-ratelimit-reset": "1234567890",
                "x-ratelimit-used": "1",
                "x-ratelimit-resource": "graphql",
            }
        )

        info = RateLimitInfo.from_headers(headers)

        assert info is not None
        assert info.limit == 5000
        assert info.remaining == 4999
        assert info.used == 1
        assert info.resource == "graphql"
        assert info.reset == datetime.fromtimestamp(1234567890, tz=UTC)

    def test_from_headers_missing_headers(self) -> None:
        """Test RateLimitInfo.from_headers returns None for missing headers."""
        assert RateLimitInfo.from_headers(httpx.Headers({})) is None

    def test_from_headers_defaults(self) -> None:
        """Test missing optional fields default."""
        info = RateLimitInfo.from_headers(httpx.Headers({"x-ratelimit-limit": "60"}))

        assert info is not None
        assert info.remaining == 0
        assert info.used == 0
        assert info.resource == "core"


class TestGitHubResponse:
    """Tests for GitHubResponse."""

    def test_success_range(self) -> None:
        """Test is_success for 2xx codes only."""
        assert GitHubResponse(200, None, httpx.Headers()).is_success
        assert GitHubResponse(204, None, httpx.Headers()).is_success
        assert not GitHubResponse(304, None, httpx.Headers()).is_success
        assert not GitHubResponse(404, None, httpx.Headers()).is_success

    def test_not_found(self) -> None:
        """Test is_not_found."""
        assert GitHubResponse(404, None, httpx.Headers()).is_not_found

    def test_error_message(self) -> None:
        """Test error text extraction."""
        assert GitHubResponse(422, {"message": "Bad"}, httpx.Headers()).error_message() == "Bad"
        assert GitHubResponse(502, "Gateway", httpx.Headers()).error_message() == "Gateway"
        assert "500" in GitHubResponse(500, None, httpx.Headers()).error_message()


class TestGitHubClient:
    """Tests for requests, headers and retries."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_headers_and_rate_limit_tracking(self, token: str) -> None:
        """Test auth and version headers are sent and rate limits recorded."""
        route = respx.get(f"{API}/rate_limit").mock(
            return_value=httpx.Response(
                200,
                json={"ok": True},
                headers={
                    "x-ratelimit-limit": "5000",
                    "x-ratelimit-remaining": "4000",
                    "x-ratelimit-reset": "1234567890",
                },
            )
        )

        async with GitHubClient(GitHubAuth(token=token)) as client:
            response = await client.get("/rate_limit")

        request = route.calls[0].request
        assert request.headers["Authorization"] == f"Bearer {token}"
        assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert request.headers["User-Agent"].startswith("gh-fetch/")
        assert response.data == {"ok": True}
        assert client.requests_made == 1
        assert client.last_rate_limit is not None
        assert client.last_rate_limit.remaining == 4000

    @pytest.mark.asyncio
    @respx.mock
    async def test_custom_base_url(self, token: str) -> None:
        """Test requests go to the configured API base URL."""
        route = respx.get("https://ghe.example.com/api/v3/rate_limit").mock(
            return_value=httpx.Response(200, json={})
        )
        config = GitHubConfig(api_base_url="https://ghe.example.com/api/v3/")

        async with GitHubClient(GitHubAuth(token=token), config) as client:
            await client.get("/rate_limit")

        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_401_raises_auth_error(self, token: str) -> None:
        """Test rejected tokens are not retried."""
        route = respx.get(f"{API}/user").mock(return_value=httpx.Response(401))

        async with GitHubClient(GitHubAuth(token=token)) as client:
            with pytest.raises(AuthError):
                await client.get("/user")

        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_returned(self, token: str) -> None:
        """Test client errors are returned to the caller."""
        respx.get(f"{API}/missing").mock(
            return_value=httpx.Response(404, json={"message": "Not Found"})
        )

        async with GitHubClient(GitHubAuth(token=token)) as client:
            response = await client.get("/missing")

        assert response.is_not_found

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_retried_then_succeeds(self, token: str, no_sleep: list[float]) -> None:
        """Test server errors are retried with exponential backoff."""
        route = respx.get(f"{API}/flaky").mock(
            side_effect=[
                httpx.Response(502),
                httpx.Response(503),
                httpx.Response(200, json=[]),
            ]
        )

        async with GitHubClient(GitHubAuth(token=token), max_retries=3) as client:
            response = await client.get("/flaky")

        assert response.is_success
        assert route.call_count == 3
        assert no_sleep == [1.0, 2.0]

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_exhausted(self, token: str, no_sleep: list[float]) -> None:
        """Test persistent server errors become ApiError."""
        respx.get(f"{API}/down").mock(return_value=httpx.Response(500))

        async with GitHubClient(GitHubAuth(token=token), max_retries=2) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/down")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_exhausted(self, token: str, no_sleep: list[float]) -> None:
        """Test repeated timeouts become ApiError."""
        respx.get(f"{API}/slow").mock(side_effect=httpx.ReadTimeout("slow"))

        async with GitHubClient(GitHubAuth(token=token), max_retries=1) as client:
            with pytest.raises(ApiError, match="timeout"):
                await client.get("/slow")

    @pytest.mark.asyncio
    @respx.mock
    async def test_retry_after_honored(self, token: str, no_sleep: list[float]) -> None:
        """Test a secondary rate limit waits retry-after seconds."""
        route = respx.get(f"{API}/busy").mock(
            side_effect=[
                httpx.Response(403, headers={"retry-after": "7"}),
                httpx.Response(200, json={}),
            ]
        )

        async with GitHubClient(GitHubAuth(token=token)) as client:
            response = await client.get("/busy")

        assert response.is_success
        assert route.call_count == 2
        assert no_sleep == [7]

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit_exhausted(self, token: str, no_sleep: list[float]) -> None:
        """Test a primary rate limit reset too far away raises RateLimitExceeded."""
        reset = datetime.now(UTC) + timedelta(hours=1)
        respx.get(f"{API}/limited").mock(
            return_value=httpx.Response(
                403,
                headers={
                    "x-ratelimit-limit": "5000",
                    "x-ratelimit-remaining": "0",
                    "x-ratelimit-reset": str(int(reset.timestamp())),
                },
            )
        )

        async with GitHubClient(GitHubAuth(token=token)) as client:
            with pytest.raises(RateLimitExceeded) as exc_info:
                await client.get("/limited")

        assert isinstance(exc_info.value, ApiError)
        assert exc_info.value.status_code == 403
        assert no_sleep == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_plain_403_returned(self, token: str) -> None:
        """Test a permission 403 without rate limit signals is returned."""
        respx.get(f"{API}/private").mock(
            return_value=httpx.Response(403, json={"message": "Forbidden"})
        )

        async with GitHubClient(GitHubAuth(token=token)) as client:
            response = await client.get("/private")

        assert response.status_code == 403
