"""
Client TMDB pour la classification des genres.

Implémente IMetadataClient : recherche de films par titre et récupération
des détails (genres, réalisateur, synopsis, images).

Toute défaillance (réseau, 429 persistant, 5xx, réponse illisible) est
convertie en ExternalServiceError. Un film inexistant (404) donne None.

Usage:
    client = TMDBClient(api_key="xxx", cache=APICache())
    results = await client.search("Alien")
    details = await client.get_details(results[0].id)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from cineamore.adapters.api.cache import APICache
from cineamore.adapters.api.retry import RateLimitError, ServerError, request_with_retry
from cineamore.core.errors import ExternalServiceError
from cineamore.core.ports.api_clients import IMetadataClient, MediaDetails, SearchResult


def _year_from_date(value: Optional[str]) -> Optional[int]:
    """Extrait l'année d'une date TMDB (YYYY-MM-DD)."""
    if not value or len(value) < 4 or not value[:4].isdigit():
        return None
    return int(value[:4])


class TMDBClient(IMetadataClient):
    """
    Client API TMDB.

    - Recherche limitée aux 5 premiers résultats (ordre de pertinence TMDB)
    - Détails avec crédits (réalisateur)
    - Cache disque (24h recherches, 7j détails)
    - Relance sur 429, 5xx et erreurs de transport

    Attributes:
        TMDB_BASE_URL: URL de base de l'API v3
        TMDB_IMAGE_BASE_URL: URL de base des affiches
        MAX_SEARCH_RESULTS: Nombre de résultats de recherche conservés
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w780"
    TMDB_BACKDROP_BASE_URL = "https://image.tmdb.org/t/p/w1280"
    MAX_SEARCH_RESULTS = 5

    def __init__(
        self,
        api_key: str,
        cache: APICache,
        language: str = "en-US",
        max_attempts: int = 3,
    ) -> None:
        """
        Args:
            api_key: Clé API v3 ou jeton d'accès v4
            cache: Cache disque des réponses
            language: Langue des noms de genre renvoyés
            max_attempts: Tentatives par requête
        """
        self._api_key = api_key
        self._cache = cache
        self._language = language
        self._max_attempts = max_attempts
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, créé à la première utilisation.

        Une clé v3 (32 caractères hex) passe en paramètre api_key, un jeton
        v4 en en-tête Bearer.
        """
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            params = {}
            if len(self._api_key) > 40:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key
            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=15.0,
            )
        return self._client

    @property
    def source(self) -> str:
        return "tmdb"

    async def _get_json(self, path: str, params: dict[str, Any]) -> Optional[dict]:
        """
        GET avec relance ; None sur 404.

        Raises:
            ExternalServiceError: Pour toute autre défaillance
        """
        try:
            response = await request_with_retry(
                self._get_client(),
                "GET",
                path,
                max_attempts=self._max_attempts,
                params=params,
            )
            return response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise ExternalServiceError(
                f"TMDB a répondu {e.response.status_code}",
                {"path": path, "status": e.response.status_code},
            ) from e
        except RateLimitError as e:
            raise ExternalServiceError(
                "TMDB limite le débit", {"path": path, "retry_after": e.retry_after}
            ) from e
        except ServerError as e:
            raise ExternalServiceError(
                f"TMDB indisponible ({e.status_code})",
                {"path": path, "status": e.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"TMDB injoignable : {e}", {"path": path}) from e
        except ValueError as e:
            raise ExternalServiceError("Réponse TMDB illisible", {"path": path}) from e

    async def search(
        self,
        query: str,
        year: Optional[int] = None,
    ) -> list[SearchResult]:
        """
        Recherche des films par titre.

        L'année n'est pas envoyée à TMDB : le choix du candidat (année exacte
        puis tolérance) est fait par l'appelant sur les résultats bruts.
        """
        if not query:
            return []

        async def fetch() -> list[SearchResult]:
            logger.debug(f"Recherche TMDB: {query}")
            path = "/search/movie"
            data = await self._get_json(
                path,
                {"query": query, "include_adult": "false", "language": self._language},
            )
            try:
                return self._parse_search(data)
            except (KeyError, TypeError, AttributeError) as e:
                raise ExternalServiceError("Réponse TMDB illisible", {"path": path}) from e

        return await self._cache.get_or_fetch(
            f"tmdb:search:{self._language}:{query.lower()}", fetch, APICache.SEARCH_TTL
        )

    def _parse_search(self, data: Optional[dict]) -> list[SearchResult]:
        results = []
        for item in (data or {}).get("results", [])[: self.MAX_SEARCH_RESULTS]:
            title = item.get("title") or item.get("original_title") or ""
            original = item.get("original_title")
            results.append(
                SearchResult(
                    id=str(item["id"]),
                    title=title,
                    original_title=original if original != title else None,
                    year=_year_from_date(item.get("release_date")),
                    source=self.source,
                )
            )
        return results

    async def get_details(self, media_id: str) -> Optional[MediaDetails]:
        """Récupère les détails d'un film, crédits inclus."""

        async def fetch() -> Optional[MediaDetails]:
            logger.debug(f"Détails TMDB: {media_id}")
            path = f"/movie/{media_id}"
            data = await self._get_json(
                path,
                {"language": self._language, "append_to_response": "credits"},
            )
            if data is None:
                return None
            try:
                return self._parse_details(data)
            except (KeyError, TypeError, AttributeError) as e:
                raise ExternalServiceError("Réponse TMDB illisible", {"path": path}) from e

        return await self._cache.get_or_fetch(
            f"tmdb:details:{self._language}:{media_id}", fetch, APICache.DETAILS_TTL
        )

    def _parse_details(self, data: dict) -> MediaDetails:
        director = None
        for member in data.get("credits", {}).get("crew", []):
            if member.get("job") == "Director":
                director = member.get("name")
                break

        poster_path = data.get("poster_path")
        backdrop_path = data.get("backdrop_path")
        title = data.get("title") or data.get("original_title") or ""
        original = data.get("original_title")
        return MediaDetails(
            id=str(data["id"]),
            title=title,
            original_title=original if original != title else None,
            year=_year_from_date(data.get("release_date")),
            genres=tuple(g["name"] for g in data.get("genres", []) if g.get("name")),
            director=director,
            overview=data.get("overview") or None,
            poster_url=f"{self.TMDB_IMAGE_BASE_URL}{poster_path}" if poster_path else None,
            backdrop_url=f"{self.TMDB_BACKDROP_BASE_URL}{backdrop_path}"
            if backdrop_path
            else None,
        )

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
