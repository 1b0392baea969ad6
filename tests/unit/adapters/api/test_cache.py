"""
Tests unitaires pour APICache.

Ces tests verifient:
- Stockage et recuperation de valeurs
- Lecture cache-first de get_or_fetch
- Les resultats None ne sont pas mis en cache
"""

from pathlib import Path

import pytest

from cineamore.adapters.api.cache import APICache


class TestAPICache:
    """Tests pour la classe APICache."""

    @pytest.fixture
    def cache(self, tmp_path: Path) -> APICache:
        cache = APICache(cache_dir=str(tmp_path / "test_cache"))
        yield cache
        cache.close()

    @pytest.mark.asyncio
    async def test_get_returns_none_for_missing_key(self, cache: APICache) -> None:
        assert await cache.get("nonexistent_key") is None

    @pytest.mark.asyncio
    async def test_set_and_get_round_trip(self, cache: APICache) -> None:
        await cache.set("alien", {"title": "Alien", "year": 1979}, APICache.SEARCH_TTL)
        assert await cache.get("alien") == {"title": "Alien", "year": 1979}

    @pytest.mark.asyncio
    async def test_get_or_fetch_calls_fetch_once(self, cache: APICache) -> None:
        calls = 0

        async def fetch() -> list[str]:
            nonlocal calls
            calls += 1
            return ["Horror"]

        first = await cache.get_or_fetch("genres", fetch, APICache.DETAILS_TTL)
        second = await cache.get_or_fetch("genres", fetch, APICache.DETAILS_TTL)

        assert first == second == ["Horror"]
        assert calls == 1

    @pytest.mark.asyncio
    async def test_none_is_not_cached(self, cache: APICache) -> None:
        calls = 0

        async def fetch() -> None:
            nonlocal calls
            calls += 1
            return None

        await cache.get_or_fetch("missing", fetch, APICache.DETAILS_TTL)
        await cache.get_or_fetch("missing", fetch, APICache.DETAILS_TTL)

        assert calls == 2

    @pytest.mark.asyncio
    async def test_clear(self, cache: APICache) -> None:
        await cache.set("alien", "x", APICache.SEARCH_TTL)
        await cache.clear()
        assert await cache.get("alien") is None
