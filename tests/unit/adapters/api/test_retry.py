"""
Tests unitaires pour le mecanisme de relance.

Ces tests verifient:
- RateLimitError capture le header Retry-After
- request_with_retry relance sur 429, 5xx et erreurs de transport
- Les autres 4xx remontent sans relance
- Les echecs permanents remontent apres epuisement des tentatives
"""

import httpx
import pytest
import respx

from cineamore.adapters.api.retry import (
    RateLimitError,
    ServerError,
    request_with_retry,
    with_retry,
)

URL = "https://api.example.org/items"


class TestErrors:
    def test_rate_limit_error_stores_retry_after(self) -> None:
        error = RateLimitError(retry_after=60)
        assert error.retry_after == 60
        assert "60" in str(error)

    def test_server_error_stores_status(self) -> None:
        assert ServerError(503).status_code == 503


class TestWithRetryDecorator:
    @pytest.mark.asyncio
    async def test_non_retryable_error_is_raised_at_once(self) -> None:
        """Une erreur non transitoire n'est pas relancee."""
        calls = 0

        @with_retry(max_attempts=3, max_wait=1)
        async def failing() -> None:
            nonlocal calls
            calls += 1
            raise ValueError("bad")

        with pytest.raises(ValueError):
            await failing()
        assert calls == 1


class TestRequestWithRetry:
    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_then_succeeds_after_server_error(self) -> None:
        route = respx.get(URL).mock(
            side_effect=[httpx.Response(503), httpx.Response(200, json={"ok": True})]
        )
        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL, max_attempts=2)

        assert response.json() == {"ok": True}
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_persistent_rate_limit_is_reraised(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(429, headers={"Retry-After": "7"}))
        async with httpx.AsyncClient() as client:
            with pytest.raises(RateLimitError) as exc_info:
                await request_with_retry(client, "GET", URL, max_attempts=1)

        assert exc_info.value.retry_after == 7

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_error_is_not_retried(self) -> None:
        route = respx.get(URL).mock(return_value=httpx.Response(401))
        async with httpx.AsyncClient() as client:
            with pytest.raises(httpx.HTTPStatusError):
                await request_with_retry(client, "GET", URL, max_attempts=3)

        assert route.call_count == 1
