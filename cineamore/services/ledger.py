"""
Journal des propositions des contributeurs.

Un contributeur ne modifie jamais le catalogue directement : il dépose une
proposition (create, update ou delete) qui attend la décision d'un
administrateur (voir ApprovalWorkflow). Aucune écriture dans le catalogue
n'a lieu au moment de la proposition.

Pour update et delete, un instantané de la fiche est conservé dans
`previous` afin que l'administrateur voie l'avant/après.
"""

from typing import Any, Optional, Union

from loguru import logger

from cineamore.core.entities.moderation import (
    ChangeKind,
    ChangeStatus,
    FieldDiff,
    PendingChange,
)
from cineamore.core.entities.session import SessionClaims
from cineamore.core.errors import NotFoundError, Unauthorized, ValidationError
from cineamore.core.ports.repositories import IUnitOfWork
from cineamore.core.value_objects.item_patch import ItemPatch
from cineamore.services.access import require_contributor
from cineamore.services.catalogue import snapshot_item
from cineamore.utils.helpers import utcnow

# Champs conservés dans la proposition d'une suppression (affichage)
DELETE_SUMMARY_FIELDS = ("title", "year", "director")


def _coerce_kind(kind: Union[ChangeKind, str]) -> ChangeKind:
    if isinstance(kind, ChangeKind):
        return kind
    try:
        return ChangeKind(str(kind).lower())
    except ValueError:
        raise ValidationError(
            f"Type de proposition inconnu : {kind}",
            {"kind": kind, "allowed": [k.value for k in ChangeKind]},
        )


def _coerce_patch(proposed: Union[ItemPatch, dict[str, Any], None]) -> ItemPatch:
    if proposed is None:
        return ItemPatch()
    if isinstance(proposed, ItemPatch):
        return proposed
    return ItemPatch.from_dict(proposed)


class PendingChangeLedger:
    """
    Dépôt et consultation des propositions.

    Example:
        ledger = PendingChangeLedger(uow)
        change = ledger.propose("update", "12", {"title": "New"}, claims)
        ledger.list_pending()  # [change]
    """

    def __init__(self, uow: IUnitOfWork) -> None:
        self._uow = uow

    def propose(
        self,
        kind: Union[ChangeKind, str],
        item_ref: Optional[str],
        proposed: Union[ItemPatch, dict[str, Any], None],
        contributor: SessionClaims,
    ) -> PendingChange:
        """
        Enregistre une proposition en attente.

        Args:
            kind: create, update ou delete
            item_ref: ID de la fiche visée (ignoré pour create)
            proposed: Champs proposés (ItemPatch ou dict)
            contributor: Session du contributeur

        Returns:
            La proposition enregistrée, au statut pending

        Raises:
            Unauthorized: Session absente, non contributeur, ou compte désactivé
            ValidationError: Titre manquant (create), fiche introuvable
                (update/delete), proposition vide (update)
        """
        claims = require_contributor(contributor)
        change_kind = _coerce_kind(kind)
        patch = _coerce_patch(proposed)

        with self._uow:
            account = self._uow.contributors.get_by_id(claims.contributor_id)
            if account is None or not account.is_active:
                raise Unauthorized("Contributor account is inactive")

            previous = None
            item_id = None
            if change_kind is ChangeKind.CREATE:
                if not patch.fields().get("title"):
                    raise ValidationError("Title is required", {"field": "title"})
            else:
                item = self._uow.catalogue.get_by_id(item_ref) if item_ref else None
                if item is None:
                    raise ValidationError("Movie not found", {"item_id": item_ref})
                item_id = item.id
                previous = snapshot_item(item)
                if change_kind is ChangeKind.UPDATE and patch.is_empty():
                    raise ValidationError("Aucune modification proposée")
                if change_kind is ChangeKind.DELETE:
                    patch = ItemPatch(
                        title=item.title, year=item.year, director=item.director
                    )

            change = self._uow.pending_changes.add(
                PendingChange(
                    kind=change_kind,
                    item_id=item_id,
                    proposed=patch,
                    previous=previous,
                    contributor_id=account.id,
                    contributor_username=account.username,
                    created_at=utcnow(),
                )
            )

        logger.info(
            "Proposition enregistree",
            pending_id=change.id,
            kind=change.kind.value,
            contributor=change.contributor_username,
        )
        return change

    def list_pending(
        self, contributor_id: Optional[str] = None, limit: Optional[int] = None
    ) -> list[PendingChange]:
        """Propositions en attente, les plus récentes d'abord."""
        with self._uow:
            return self._uow.pending_changes.list_by_status(
                ChangeStatus.PENDING, contributor_id=contributor_id, limit=limit
            )

    def list_for_contributor(self, contributor_id: str, limit: int = 50) -> list[PendingChange]:
        """Historique complet d'un contributeur (tous statuts)."""
        with self._uow:
            return self._uow.pending_changes.list_by_contributor(contributor_id, limit=limit)

    def get(self, pending_id: str) -> PendingChange:
        """
        Retourne une proposition.

        Raises:
            NotFoundError: ID inconnu
        """
        with self._uow:
            change = self._uow.pending_changes.get_by_id(pending_id)
        if change is None:
            raise NotFoundError("Pending change not found", {"pending_id": pending_id})
        return change

    @staticmethod
    def diff(change: PendingChange) -> list[FieldDiff]:
        """
        Différences champ par champ entre l'instantané et la proposition.

        - create : tous les champs proposés (avant = None)
        - update : les champs proposés dont la valeur change
        - delete : les champs résumés, qui disparaissent (après = None)
        """
        proposed = change.proposed.to_dict()
        previous = change.previous or {}

        if change.kind is ChangeKind.CREATE:
            return [FieldDiff(name, None, value) for name, value in proposed.items()]
        if change.kind is ChangeKind.DELETE:
            return [
                FieldDiff(name, previous.get(name), None)
                for name in DELETE_SUMMARY_FIELDS
                if previous.get(name) is not None
            ]
        return [
            FieldDiff(name, previous.get(name), value)
            for name, value in proposed.items()
            if previous.get(name) != value
        ]
