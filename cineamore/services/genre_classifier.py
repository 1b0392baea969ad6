"""
Classification des genres par lots via TMDB.

Chaque exécution traite au plus `batch_size` fiches sans genre :
1. Nettoyage du titre (marqueurs de release retirés)
2. Recherche TMDB
3. Choix du candidat : année exacte, sinon année à +/- tolérance, sinon le
   premier résultat
4. Récupération des genres du candidat

Une fiche traitée reçoit toujours des genres : ceux de TMDB, ou le genre
sentinelle ("Uncategorized") quand TMDB n'en fournit pas. Elle ne sera donc
plus candidate aux exécutions suivantes. Seule une erreur du service externe
laisse la fiche intacte, pour qu'un prochain lot la retente.

La classification ne modifie jamais la visibilité.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from loguru import logger

from cineamore.core.entities.catalogue import CatalogueItem
from cineamore.core.errors import ExternalServiceError
from cineamore.core.ports.api_clients import IMetadataClient, SearchResult
from cineamore.core.ports.repositories import IUnitOfWork
from cineamore.utils.helpers import clean_release_title


class ClassificationStatus(Enum):
    """Issue du traitement d'une fiche."""

    UPDATED = "updated"
    NO_GENRES = "no_genres"
    NO_RESULTS = "no_results"
    ERROR = "error"


@dataclass
class ClassificationOutcome:
    """Résultat pour une fiche."""

    item_id: str
    title: str
    cleaned_title: str
    status: ClassificationStatus
    genres: tuple[str, ...] = ()
    error: Optional[str] = None


@dataclass
class ClassificationReport:
    """
    Bilan d'un lot.

    Attributs :
        processed : Fiches traitées dans ce lot (erreurs comprises)
        remaining : Fiches encore sans genre après le lot
        results : Détail par fiche
    """

    processed: int = 0
    remaining: int = 0
    results: list[ClassificationOutcome] = field(default_factory=list)


def pick_candidate(
    results: list[SearchResult], year: Optional[int], tolerance: int = 1
) -> Optional[SearchResult]:
    """
    Choisit le résultat correspondant le mieux à l'année de la fiche.

    Année exacte d'abord, puis le plus proche dans la tolérance (à écart
    égal, l'ordre de pertinence TMDB départage), sinon le premier résultat.
    """
    if not results:
        return None
    if year is None:
        return results[0]

    for result in results:
        if result.year == year:
            return result

    close = [r for r in results if r.year is not None and abs(r.year - year) <= tolerance]
    if close:
        return min(close, key=lambda r: abs(r.year - year))
    return results[0]


class GenreClassifier:
    """
    Remplit les genres manquants du catalogue.

    Example:
        classifier = GenreClassifier(uow, tmdb_client)
        report = await classifier.classify_batch()
        print(report.processed, report.remaining)
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        client: Optional[IMetadataClient],
        batch_size: int = 5,
        year_tolerance: int = 1,
        delay_seconds: float = 0.25,
        sentinel_genre: str = "Uncategorized",
    ) -> None:
        self._uow = uow
        self._client = client
        self._batch_size = batch_size
        self._year_tolerance = year_tolerance
        self._delay = delay_seconds
        self._sentinel = sentinel_genre

    async def classify_batch(self, limit: Optional[int] = None) -> ClassificationReport:
        """
        Traite un lot de fiches sans genre.

        Args:
            limit: Taille du lot (défaut : batch_size configuré)

        Raises:
            ExternalServiceError: TMDB n'est pas configuré
        """
        if self._client is None:
            raise ExternalServiceError("TMDB n'est pas configuré (CINEAMORE_TMDB_API_KEY)")

        size = limit if limit and limit > 0 else self._batch_size
        with self._uow:
            items = self._uow.catalogue.list_unclassified(limit=size)

        report = ClassificationReport()
        for index, item in enumerate(items):
            if index and self._delay:
                # Limite de débit TMDB
                await asyncio.sleep(self._delay)
            report.results.append(await self._classify_item(item))
            report.processed += 1

        with self._uow:
            report.remaining = self._uow.catalogue.count_unclassified()

        logger.info(
            "Lot de classification termine",
            processed=report.processed,
            remaining=report.remaining,
        )
        return report

    async def _classify_item(self, item: CatalogueItem) -> ClassificationOutcome:
        cleaned = clean_release_title(item.title)
        outcome = ClassificationOutcome(
            item_id=item.id,
            title=item.title,
            cleaned_title=cleaned,
            status=ClassificationStatus.ERROR,
        )
        try:
            genres, status = await self._lookup_genres(cleaned, item.year)
        except ExternalServiceError as e:
            logger.warning(f"Classification impossible pour '{item.title}': {e.message}")
            outcome.error = e.message
            return outcome

        with self._uow:
            found = self._uow.catalogue.set_genres(item.id, genres)
        if not found:
            outcome.error = "Movie no longer exists"
            return outcome

        outcome.status = status
        outcome.genres = genres
        return outcome

    async def _lookup_genres(
        self, cleaned_title: str, year: Optional[int]
    ) -> tuple[tuple[str, ...], ClassificationStatus]:
        results = await self._client.search(cleaned_title, year) if cleaned_title else []
        candidate = pick_candidate(results, year, self._year_tolerance)
        if candidate is None:
            return (self._sentinel,), ClassificationStatus.NO_RESULTS

        details = await self._client.get_details(candidate.id)
        if details is not None and details.genres:
            return tuple(details.genres), ClassificationStatus.UPDATED
        return (self._sentinel,), ClassificationStatus.NO_GENRES
