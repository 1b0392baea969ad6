"""
Cache disque des réponses de l'API de métadonnées.

diskcache conserve les réponses entre deux exécutions du balayage de
classification : relancer un lot ne refait pas les recherches déjà faites.

TTL :
- recherches : 24 heures
- détails : 7 jours
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

from diskcache import Cache

T = TypeVar("T")


class APICache:
    """
    Cache asynchrone avec TTL.

    Les opérations diskcache sont bloquantes : elles passent par
    run_in_executor pour ne pas bloquer la boucle d'événements.

    Example:
        cache = APICache(cache_dir=".cache/api")
        results = await cache.get_or_fetch(
            "tmdb:search:alien", lambda: client.fetch(...), APICache.SEARCH_TTL
        )
    """

    SEARCH_TTL = 24 * 60 * 60
    DETAILS_TTL = 7 * 24 * 60 * 60

    def __init__(self, cache_dir: str | Path = ".cache/api") -> None:
        self._cache = Cache(str(cache_dir))

    async def get(self, key: str) -> Optional[Any]:
        """Retourne la valeur en cache, ou None si absente ou expirée."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Stocke une valeur (picklable) pour ttl secondes."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, partial(self._cache.set, key, value, expire=ttl))

    async def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        ttl: int,
    ) -> T:
        """
        Lecture cache-first : n'appelle fetch() qu'en cas d'absence.

        Une valeur None retournée par fetch() n'est pas mise en cache.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await fetch()
        if value is not None:
            await self.set(key, value, ttl)
        return value

    async def clear(self) -> None:
        """Vide le cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        self._cache.close()
