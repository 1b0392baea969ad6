"""
Relance des appels HTTP vers les API externes.

Sont relancés, avec backoff exponentiel et jitter :
- les réponses 429 (RateLimitError, délai Retry-After indicatif)
- les réponses 5xx (ServerError)
- les erreurs de transport httpx (timeout, connexion refusée)

Les autres réponses 4xx sont propagées immédiatement.

Usage:
    response = await request_with_retry(client, "GET", "/search/movie", params=...)
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class RateLimitError(Exception):
    """
    L'API a répondu 429 Too Many Requests.

    Attributes:
        retry_after: Secondes à attendre selon l'en-tête Retry-After, ou None
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


class ServerError(Exception):
    """L'API a répondu avec un code 5xx."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Server error {status_code}")


RETRYABLE_ERRORS = (RateLimitError, ServerError, httpx.TransportError)


def with_retry(max_attempts: int = 3, max_wait: int = 30):
    """
    Décorateur de relance pour une coroutine d'appel API.

    Args:
        max_attempts: Nombre maximum de tentatives
        max_wait: Délai maximum entre deux tentatives, en secondes

    Example:
        @with_retry(max_attempts=2)
        async def fetch():
            ...
    """
    return retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        # Format date HTTP : on laisse le backoff décider
        return None


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 3,
    **kwargs,
) -> httpx.Response:
    """
    Exécute une requête HTTP avec relance sur les erreurs transitoires.

    Args:
        client: Client httpx async
        method: Méthode HTTP
        url: URL (relative à base_url du client)
        max_attempts: Nombre maximum de tentatives
        **kwargs: Arguments passés à client.request()

    Returns:
        La réponse en cas de succès (2xx/3xx)

    Raises:
        RateLimitError: 429 persistant après épuisement des tentatives
        ServerError: 5xx persistant après épuisement des tentatives
        httpx.TransportError: Réseau indisponible
        httpx.HTTPStatusError: Autres erreurs 4xx, sans relance
    """

    @with_retry(max_attempts=max_attempts)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        if response.status_code >= 500:
            raise ServerError(response.status_code)
        response.raise_for_status()
        return response

    return await _do_request()
