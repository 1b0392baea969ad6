"""
Agrégat des notes.

La note moyenne n'est jamais stockée : chaque vote incrémente rating_sum et
rating_count dans une seule requête, et la moyenne est recalculée à la
lecture. Aucune déduplication par votant.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from cineamore.core.errors import NotFoundError, ValidationError
from cineamore.core.ports.repositories import IUnitOfWork

MIN_SCORE = 1
MAX_SCORE = 5


@dataclass(frozen=True)
class RatingResult:
    """Agrégat après le vote."""

    average: float
    count: int


def validate_score(score: Any) -> int:
    """
    Vérifie qu'une note est un entier entre 1 et 5.

    Raises:
        ValidationError: Note absente, non entière ou hors bornes
    """
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError("Invalid input", {"field": "score", "value": score})
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError(
            f"Score must be between {MIN_SCORE} and {MAX_SCORE}",
            {"field": "score", "value": score},
        )
    return score


class RatingService:
    """Enregistrement des votes."""

    def __init__(self, uow: IUnitOfWork) -> None:
        self._uow = uow

    def rate(self, item_id: str, score: Any) -> RatingResult:
        """
        Ajoute un vote à une fiche.

        Raises:
            ValidationError: Note invalide (rien n'est écrit)
            NotFoundError: Fiche introuvable
        """
        score = validate_score(score)
        with self._uow:
            totals = self._uow.catalogue.increment_rating(item_id, score)
        if totals is None:
            raise NotFoundError("Movie not found", {"item_id": item_id})

        rating_sum, rating_count = totals
        logger.debug(f"Vote {score} sur la fiche {item_id} ({rating_count} votes)")
        return RatingResult(average=rating_sum / rating_count, count=rating_count)
