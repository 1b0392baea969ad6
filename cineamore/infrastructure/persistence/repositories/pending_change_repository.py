"""
Implementation SQLModel du repository PendingChange.

Le journal des propositions est en ajout seul : pas de suppression, et la
seule mise a jour possible est la decision (mark_reviewed), conditionnee
au statut 'pending'.
"""

import json
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, col, select

from cineamore.core.entities.moderation import ChangeKind, ChangeStatus, PendingChange
from cineamore.core.ports.repositories import IPendingChangeRepository
from cineamore.core.value_objects.item_patch import ItemPatch
from cineamore.infrastructure.persistence.models import PendingChangeModel
from cineamore.infrastructure.persistence.repositories.base import as_utc, parse_id
from cineamore.utils.helpers import utcnow


class SQLModelPendingChangeRepository(IPendingChangeRepository):
    """
    Repository SQLModel pour les propositions de contributeurs.

    Gere la persistance des PendingChange avec conversion
    bidirectionnelle entre entite et modele.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: PendingChangeModel) -> PendingChange:
        """
        Convertit un modele DB en entite domaine.

        Args :
            model : Le modele PendingChangeModel depuis la DB

        Retourne :
            L'entite PendingChange correspondante
        """
        return PendingChange(
            id=str(model.id) if model.id else None,
            kind=ChangeKind(model.kind),
            item_id=str(model.item_id) if model.item_id else None,
            proposed=ItemPatch.from_dict(model.proposed),
            previous=model.previous,
            contributor_id=str(model.contributor_id),
            contributor_username=model.contributor_username,
            status=ChangeStatus(model.status),
            created_at=as_utc(model.created_at),
            reviewed_at=as_utc(model.reviewed_at),
            reviewed_by=model.reviewed_by,
            review_notes=model.review_notes,
        )

    def _to_model(self, entity: PendingChange) -> PendingChangeModel:
        """
        Convertit une entite domaine en modele DB.

        Le patch est serialise sans ses champs absents ; un champ present
        a None est stocke en null.
        """
        model = PendingChangeModel(
            kind=entity.kind.value,
            item_id=parse_id(entity.item_id),
            proposed_json=json.dumps(entity.proposed.to_dict()),
            previous_json=json.dumps(entity.previous)
            if entity.previous is not None
            else None,
            contributor_id=int(entity.contributor_id),
            contributor_username=entity.contributor_username,
            status=entity.status.value,
            created_at=entity.created_at or utcnow(),
            reviewed_at=entity.reviewed_at,
            reviewed_by=entity.reviewed_by,
            review_notes=entity.review_notes,
        )
        if entity.id:
            model.id = int(entity.id)
        return model

    def get_by_id(self, change_id: str) -> Optional[PendingChange]:
        """Recupere une proposition par son ID."""
        pk = parse_id(change_id)
        if pk is None:
            return None
        model = self._session.get(PendingChangeModel, pk)
        if model:
            return self._to_entity(model)
        return None

    def add(self, change: PendingChange) -> PendingChange:
        """Insere une nouvelle proposition."""
        model = self._to_model(change)
        self._session.add(model)
        self._session.flush()
        self._session.refresh(model)
        return self._to_entity(model)

    def mark_reviewed(
        self,
        change_id: str,
        status: ChangeStatus,
        reviewer: str,
        reviewed_at: datetime,
        note: Optional[str] = None,
    ) -> bool:
        """
        Passe une proposition 'pending' a un statut terminal.

        UPDATE conditionnel : zero ligne modifiee signifie que la proposition
        n'existe pas ou a deja ete decidee.
        """
        if status is ChangeStatus.PENDING:
            raise ValueError("Le statut d'une decision doit etre terminal")
        pk = parse_id(change_id)
        if pk is None:
            return False
        self._session.flush()
        result = self._session.connection().execute(
            update(PendingChangeModel)
            .where(PendingChangeModel.id == pk)
            .where(PendingChangeModel.status == ChangeStatus.PENDING.value)
            .values(
                status=status.value,
                reviewed_at=reviewed_at,
                reviewed_by=reviewer,
                review_notes=note,
            )
        )
        self._session.expire_all()
        return result.rowcount == 1

    def list_by_status(
        self,
        status: ChangeStatus,
        contributor_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[PendingChange]:
        """Liste les propositions d'un statut, les plus recentes d'abord."""
        statement = select(PendingChangeModel).where(
            PendingChangeModel.status == status.value
        )
        if contributor_id is not None:
            pk = parse_id(contributor_id)
            if pk is None:
                return []
            statement = statement.where(PendingChangeModel.contributor_id == pk)
        statement = statement.order_by(
            col(PendingChangeModel.created_at).desc(), col(PendingChangeModel.id).desc()
        )
        if limit:
            statement = statement.limit(limit)
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def list_by_contributor(self, contributor_id: str, limit: int = 50) -> list[PendingChange]:
        """Liste toutes les propositions d'un contributeur."""
        pk = parse_id(contributor_id)
        if pk is None:
            return []
        statement = (
            select(PendingChangeModel)
            .where(PendingChangeModel.contributor_id == pk)
            .order_by(
                col(PendingChangeModel.created_at).desc(), col(PendingChangeModel.id).desc()
            )
            .limit(limit)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]
