"""
Workflow d'approbation des propositions.

Machine à états : pending -> approved | rejected. Les deux statuts de
décision sont terminaux ; re-décider une proposition lève InvalidStateError.

L'approbation écrit dans le catalogue puis marque la proposition, dans la
même transaction (unité de travail). Si l'écriture du catalogue échoue, la
proposition reste pending. Si un autre administrateur a décidé entre-temps,
le marquage conditionnel échoue et l'écriture du catalogue est annulée.
"""

from dataclasses import replace
from typing import Callable, Iterable, Optional

from loguru import logger

from cineamore.core.entities.catalogue import CatalogueItem, Visible
from cineamore.core.entities.moderation import (
    BulkReviewResult,
    ChangeKind,
    ChangeStatus,
    PendingChange,
)
from cineamore.core.errors import CineAmoreError, InvalidStateError, NotFoundError
from cineamore.core.ports.repositories import IUnitOfWork
from cineamore.services.access import RoleLike, require_admin
from cineamore.utils.helpers import utcnow


class ApprovalWorkflow:
    """
    Décisions de l'administrateur sur les propositions.

    Example:
        workflow = ApprovalWorkflow(uow)
        workflow.approve("7", reviewer="admin", role=Role.ADMIN)
        workflow.reject("8", reviewer="admin", role=Role.ADMIN, note="Doublon")
    """

    def __init__(self, uow: IUnitOfWork, clock: Callable = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def _load_pending(self, pending_id: str) -> PendingChange:
        change = self._uow.pending_changes.get_by_id(pending_id)
        if change is None:
            raise NotFoundError("Pending change not found", {"pending_id": pending_id})
        if not change.is_pending:
            raise InvalidStateError(
                f"Change already {change.status.value}",
                {"pending_id": pending_id, "status": change.status.value},
            )
        return change

    def _apply(self, change: PendingChange) -> Optional[CatalogueItem]:
        """Applique la proposition au catalogue (dans la transaction courante)."""
        now = self._clock()
        catalogue = self._uow.catalogue

        if change.kind is ChangeKind.CREATE:
            item = change.proposed.apply_to(CatalogueItem())
            item = replace(item, id=None, visibility=Visible(updated_at=now), added_at=now)
            return catalogue.add(item)

        current = catalogue.get_by_id(change.item_id) if change.item_id else None
        if current is None:
            raise NotFoundError(
                "Movie no longer exists", {"item_id": change.item_id, "pending_id": change.id}
            )
        if change.kind is ChangeKind.UPDATE:
            return catalogue.save(change.proposed.apply_to(current))

        catalogue.delete(current.id)
        return None

    def _mark(
        self,
        change: PendingChange,
        status: ChangeStatus,
        reviewer: str,
        note: Optional[str],
    ) -> PendingChange:
        if not self._uow.pending_changes.mark_reviewed(
            change.id, status, reviewer, self._clock(), note
        ):
            # Décidée par quelqu'un d'autre depuis la lecture
            raise InvalidStateError(
                "Change was reviewed concurrently", {"pending_id": change.id}
            )
        return self._uow.pending_changes.get_by_id(change.id)

    def approve(self, pending_id: str, reviewer: str, role: RoleLike) -> PendingChange:
        """
        Approuve une proposition et applique son effet au catalogue.

        - create : insère une nouvelle fiche visible
        - update : écrit exactement les champs présents dans la proposition
        - delete : supprime la fiche

        Raises:
            Unauthorized: L'appelant n'est pas administrateur
            NotFoundError: Proposition ou fiche visée introuvable
            InvalidStateError: Proposition déjà décidée
            StoreError: Échec de la base (la proposition reste pending)
        """
        require_admin(role)
        with self._uow:
            change = self._load_pending(pending_id)
            item = self._apply(change)
            reviewed = self._mark(change, ChangeStatus.APPROVED, reviewer, None)

        logger.info(
            "Changement approuve",
            pending_id=pending_id,
            kind=change.kind.value,
            item_id=item.id if item else change.item_id,
            reviewer=reviewer,
        )
        return reviewed

    def reject(
        self,
        pending_id: str,
        reviewer: str,
        role: RoleLike,
        note: Optional[str] = None,
    ) -> PendingChange:
        """
        Rejette une proposition. Le catalogue n'est pas touché.

        Raises:
            Unauthorized: L'appelant n'est pas administrateur
            NotFoundError: Proposition introuvable
            InvalidStateError: Proposition déjà décidée
        """
        require_admin(role)
        note = (note or "").strip() or None
        with self._uow:
            change = self._load_pending(pending_id)
            reviewed = self._mark(change, ChangeStatus.REJECTED, reviewer, note)

        logger.info("Changement rejete", pending_id=pending_id, reviewer=reviewer)
        return reviewed

    def bulk_approve(
        self, pending_ids: Iterable[str], reviewer: str, role: RoleLike
    ) -> BulkReviewResult:
        """Approuve chaque proposition séparément ; un échec n'arrête pas les autres."""
        require_admin(role)
        return self._bulk(pending_ids, lambda pid: self.approve(pid, reviewer, role))

    def bulk_reject(
        self,
        pending_ids: Iterable[str],
        reviewer: str,
        role: RoleLike,
        note: Optional[str] = None,
    ) -> BulkReviewResult:
        """Rejette chaque proposition séparément, avec la même note."""
        require_admin(role)
        return self._bulk(pending_ids, lambda pid: self.reject(pid, reviewer, role, note))

    def _bulk(
        self, pending_ids: Iterable[str], decide: Callable[[str], PendingChange]
    ) -> BulkReviewResult:
        result = BulkReviewResult()
        for pending_id in pending_ids:
            try:
                decide(pending_id)
                result.succeeded += 1
            except CineAmoreError as e:
                logger.warning(f"Decision impossible pour {pending_id}: {e.message}")
                result.errors.append((pending_id, e.message))
        return result
