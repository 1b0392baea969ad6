"""
Tests unitaires pour GenreClassifier.

Le client TMDB est remplace par un AsyncMock : aucun appel reseau.
"""

from unittest.mock import AsyncMock

import pytest

from cineamore.core.entities import Quarantined
from cineamore.core.errors import ExternalServiceError
from cineamore.core.ports.api_clients import IMetadataClient, MediaDetails, SearchResult
from cineamore.services.genre_classifier import (
    ClassificationStatus,
    GenreClassifier,
    pick_candidate,
)


def _result(media_id: str, year) -> SearchResult:
    return SearchResult(id=media_id, title=f"Film {media_id}", year=year, source="tmdb")


@pytest.fixture
def client() -> AsyncMock:
    client = AsyncMock(spec=IMetadataClient)
    client.search.return_value = [_result("348", 1979), _result("679", 1986)]
    client.get_details.return_value = MediaDetails(
        id="348", title="Alien", genres=("Horror", "Science Fiction")
    )
    return client


@pytest.fixture
def classifier(uow, client) -> GenreClassifier:
    return GenreClassifier(uow, client, batch_size=5, delay_seconds=0)


class TestPickCandidate:
    """Tests du choix du candidat par annee."""

    def test_exact_year_wins(self) -> None:
        results = [_result("1", 1978), _result("2", 1979)]
        assert pick_candidate(results, 1979).id == "2"

    def test_within_tolerance(self) -> None:
        results = [_result("1", 2001), _result("2", 1980)]
        assert pick_candidate(results, 1979).id == "2"

    def test_falls_back_to_first(self) -> None:
        results = [_result("1", 2001), _result("2", 1990)]
        assert pick_candidate(results, 1979).id == "1"

    def test_without_year(self) -> None:
        assert pick_candidate([_result("1", 2001)], None).id == "1"

    def test_empty(self) -> None:
        assert pick_candidate([], 1979) is None


class TestClassifyBatch:
    """Tests de classify_batch()."""

    @pytest.mark.asyncio
    async def test_updates_unclassified_items(self, classifier, client, uow, make_item) -> None:
        item = make_item(title="Alien 1080p BluRay", genres=())
        make_item(title="Already classified")

        report = await classifier.classify_batch()

        assert report.processed == 1
        assert report.remaining == 0
        outcome = report.results[0]
        assert outcome.status is ClassificationStatus.UPDATED
        assert outcome.cleaned_title == "Alien"
        client.search.assert_awaited_once_with("Alien", 1979)
        client.get_details.assert_awaited_once_with("348")
        with uow:
            assert uow.catalogue.get_by_id(item.id).genres == ("Horror", "Science Fiction")

    @pytest.mark.asyncio
    async def test_no_results_sets_sentinel(self, classifier, client, uow, make_item) -> None:
        client.search.return_value = []
        item = make_item(genres=())

        report = await classifier.classify_batch()

        assert report.results[0].status is ClassificationStatus.NO_RESULTS
        with uow:
            assert uow.catalogue.get_by_id(item.id).genres == ("Uncategorized",)
        # Deja traitee : plus candidate
        assert (await classifier.classify_batch()).processed == 0

    @pytest.mark.asyncio
    async def test_no_genres_sets_sentinel(self, classifier, client, uow, make_item) -> None:
        client.get_details.return_value = MediaDetails(id="348", title="Alien")
        item = make_item(genres=())

        report = await classifier.classify_batch()

        assert report.results[0].status is ClassificationStatus.NO_GENRES
        with uow:
            assert uow.catalogue.get_by_id(item.id).genres == ("Uncategorized",)

    @pytest.mark.asyncio
    async def test_service_error_leaves_item_unclassified(
        self, classifier, client, uow, make_item
    ) -> None:
        client.search.side_effect = ExternalServiceError("TMDB indisponible (503)")
        item = make_item(genres=())

        report = await classifier.classify_batch()

        assert report.processed == 1
        assert report.remaining == 1
        assert report.results[0].status is ClassificationStatus.ERROR
        assert report.results[0].error == "TMDB indisponible (503)"
        with uow:
            assert uow.catalogue.get_by_id(item.id).genres == ()

    @pytest.mark.asyncio
    async def test_batch_size_and_remaining(self, uow, client, make_item) -> None:
        for index in range(4):
            make_item(title=f"Film {index}", genres=())
        classifier = GenreClassifier(uow, client, batch_size=3, delay_seconds=0)

        report = await classifier.classify_batch()

        assert report.processed == 3
        assert report.remaining == 1
        assert (await classifier.classify_batch(limit=10)).processed == 1

    @pytest.mark.asyncio
    async def test_visibility_is_not_changed(self, classifier, uow, make_item) -> None:
        item = make_item(genres=(), visibility=Quarantined(reason="Missing genre"))

        await classifier.classify_batch()

        with uow:
            loaded = uow.catalogue.get_by_id(item.id)
        assert loaded.genres == ("Horror", "Science Fiction")
        assert loaded.visibility.reason == "Missing genre"

    @pytest.mark.asyncio
    async def test_requires_client(self, uow) -> None:
        with pytest.raises(ExternalServiceError):
            await GenreClassifier(uow, None).classify_batch()
