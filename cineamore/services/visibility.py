"""
Modération par visibilité (quarantaine).

Une fiche en quarantaine disparaît des listes publiques sans être supprimée.
Elle y entre par décision explicite de l'administrateur ou par le balayage
automatique des fiches incomplètes, et en sort par correction +
restauration.

Critères du balayage (configurables, CINEAMORE_QUARANTINE_CRITERIA) :
- missing_genre : aucun genre, ou uniquement le genre sentinelle
- missing_poster : pas d'affiche
- missing_plot : pas de synopsis
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Sequence, Union

from loguru import logger

from cineamore.config import KNOWN_QUARANTINE_CRITERIA
from cineamore.core.entities.catalogue import CatalogueItem, Quarantined, Visible
from cineamore.core.errors import NotFoundError, ValidationError
from cineamore.core.ports.repositories import IUnitOfWork
from cineamore.core.value_objects.item_patch import ItemPatch
from cineamore.services.access import RoleLike, require_admin
from cineamore.utils.constants import MANUAL_QUARANTINE_REASON, QUARANTINE_CRITERIA_LABELS
from cineamore.utils.helpers import utcnow


@dataclass
class QuarantineEntry:
    """Ligne de la liste de quarantaine."""

    id: str
    title: str
    year: Optional[int]
    director: Optional[str]
    reason: str
    updated_at: Optional[datetime] = None


@dataclass
class QuarantinePage:
    """Page de fiches en quarantaine, avec le total global."""

    total: int
    items: list[QuarantineEntry] = field(default_factory=list)

    @property
    def showing(self) -> int:
        return len(self.items)


@dataclass
class SweepResult:
    """
    Bilan d'un balayage.

    Attributs :
        scanned : Fiches visibles examinées
        quarantined : Fiches passées en quarantaine
        reasons : ID de fiche -> raison posée
    """

    scanned: int = 0
    quarantined: int = 0
    reasons: dict[str, str] = field(default_factory=dict)


def failed_criteria(
    item: CatalogueItem, criteria: Sequence[str], sentinel_genre: str
) -> list[str]:
    """Retourne les critères (dans l'ordre configuré) que la fiche ne remplit pas."""
    failed = []
    for criterion in criteria:
        if criterion == "missing_genre":
            if not [g for g in item.genres if g != sentinel_genre]:
                failed.append(criterion)
        elif criterion == "missing_poster":
            if not item.poster:
                failed.append(criterion)
        elif criterion == "missing_plot":
            if not item.plot:
                failed.append(criterion)
    return failed


def describe_criteria(criteria: Sequence[str]) -> str:
    """Ex: ["missing_genre", "missing_poster"] -> "Missing genre, Missing poster"."""
    return ", ".join(QUARANTINE_CRITERIA_LABELS[c] for c in criteria)


class VisibilityService:
    """
    Mise en quarantaine, correction et restauration des fiches.

    Example:
        service = VisibilityService(uow, criteria=["missing_genre", "missing_poster"])
        result = service.sweep(role=Role.ADMIN)
        page = service.list_quarantined(role=Role.ADMIN)
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        criteria: Sequence[str] = KNOWN_QUARANTINE_CRITERIA,
        sentinel_genre: str = "Uncategorized",
        clock: Callable = utcnow,
    ) -> None:
        unknown = [c for c in criteria if c not in QUARANTINE_CRITERIA_LABELS]
        if unknown:
            raise ValueError(f"Critères de quarantaine inconnus : {', '.join(unknown)}")
        self._uow = uow
        self._criteria = tuple(criteria)
        self._sentinel = sentinel_genre
        self._clock = clock

    @property
    def criteria(self) -> tuple[str, ...]:
        return self._criteria

    def quarantine(
        self, item_id: str, role: RoleLike, reason: Optional[str] = None
    ) -> CatalogueItem:
        """
        Met une fiche en quarantaine.

        Raises:
            Unauthorized: L'appelant n'est pas administrateur
            NotFoundError: Fiche introuvable
        """
        require_admin(role)
        reason = (reason or "").strip() or MANUAL_QUARANTINE_REASON
        with self._uow:
            if not self._uow.catalogue.set_visibility(
                item_id, Quarantined(reason=reason, updated_at=self._clock())
            ):
                raise NotFoundError("Movie not found", {"item_id": item_id})
            item = self._uow.catalogue.get_by_id(item_id)

        logger.info("Fiche mise en quarantaine", item_id=item_id, reason=reason)
        return item

    def list_quarantined(
        self, role: RoleLike, limit: int = 100, offset: int = 0
    ) -> QuarantinePage:
        """Fiches en quarantaine triées par titre, avec le total."""
        require_admin(role)
        if limit < 1 or offset < 0:
            raise ValidationError("Pagination invalide", {"limit": limit, "offset": offset})
        with self._uow:
            items = self._uow.catalogue.list_quarantined(limit=limit, offset=offset)
            total = self._uow.catalogue.count_quarantined()
        return QuarantinePage(
            total=total,
            items=[
                QuarantineEntry(
                    id=item.id,
                    title=item.title,
                    year=item.year,
                    director=item.director,
                    reason=item.visibility.reason,
                    updated_at=item.visibility.updated_at,
                )
                for item in items
            ],
        )

    def correct_and_maybe_restore(
        self,
        item_id: str,
        patch: Union[ItemPatch, dict[str, Any], None],
        restore: bool,
        role: RoleLike,
    ) -> CatalogueItem:
        """
        Corrige une fiche et, si demandé, la rend à nouveau visible.

        Seuls les champs présents dans le patch sont modifiés. Sans
        restauration, la visibilité est inchangée.

        Raises:
            Unauthorized: L'appelant n'est pas administrateur
            NotFoundError: Fiche introuvable
            ValidationError: Patch invalide
        """
        require_admin(role)
        if patch is None:
            patch = ItemPatch()
        elif not isinstance(patch, ItemPatch):
            patch = ItemPatch.from_dict(patch)

        with self._uow:
            item = self._uow.catalogue.get_by_id(item_id)
            if item is None:
                raise NotFoundError("Movie not found", {"item_id": item_id})
            updated = patch.apply_to(item)
            if restore:
                updated.visibility = Visible(updated_at=self._clock())
            updated = self._uow.catalogue.save(updated)

        logger.info(
            "Fiche corrigee",
            item_id=item_id,
            fields=sorted(patch.fields()),
            restored=restore,
        )
        return updated

    def sweep(self, role: RoleLike) -> SweepResult:
        """
        Met en quarantaine les fiches visibles qui échouent à un critère.

        La raison liste les critères en échec, ex: "Missing genre, Missing poster".
        Ne touche jamais aux fiches déjà en quarantaine.
        """
        require_admin(role)
        result = SweepResult()
        if not self._criteria:
            return result

        now = self._clock()
        with self._uow:
            candidates = self._uow.catalogue.list_sweep_candidates(
                self._criteria, self._sentinel
            )
            for item in candidates:
                result.scanned += 1
                failed = failed_criteria(item, self._criteria, self._sentinel)
                if not failed:
                    continue
                reason = describe_criteria(failed)
                self._uow.catalogue.set_visibility(
                    item.id, Quarantined(reason=reason, updated_at=now)
                )
                result.quarantined += 1
                result.reasons[item.id] = reason

        logger.info(
            "Balayage de quarantaine termine",
            scanned=result.scanned,
            quarantined=result.quarantined,
        )
        return result
