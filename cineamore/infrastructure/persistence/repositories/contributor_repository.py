"""
Implementation SQLModel du repository Contributor.
"""

from typing import Optional

from sqlmodel import Session, col, select

from cineamore.core.entities.moderation import Contributor
from cineamore.core.ports.repositories import IContributorRepository
from cineamore.infrastructure.persistence.models import ContributorModel
from cineamore.infrastructure.persistence.repositories.base import as_utc, parse_id
from cineamore.utils.helpers import normalize_username, utcnow


class SQLModelContributorRepository(IContributorRepository):
    """Repository SQLModel pour les comptes contributeurs."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: ContributorModel) -> Contributor:
        """Convertit un modele DB en entite domaine."""
        return Contributor(
            id=str(model.id) if model.id else None,
            username=model.username,
            password=model.password,
            display_name=model.display_name,
            is_active=model.is_active,
            has_seen_guide=model.has_seen_guide,
            created_at=as_utc(model.created_at),
            created_by=model.created_by,
        )

    def _to_model(self, entity: Contributor) -> ContributorModel:
        """Convertit une entite domaine en modele DB."""
        model = ContributorModel(
            username=normalize_username(entity.username),
            password=entity.password,
            display_name=entity.display_name,
            is_active=entity.is_active,
            has_seen_guide=entity.has_seen_guide,
            created_at=entity.created_at or utcnow(),
            created_by=entity.created_by,
        )
        if entity.id:
            model.id = int(entity.id)
        return model

    def get_by_id(self, contributor_id: str) -> Optional[Contributor]:
        """Recupere un contributeur par son ID."""
        pk = parse_id(contributor_id)
        if pk is None:
            return None
        model = self._session.get(ContributorModel, pk)
        if model:
            return self._to_entity(model)
        return None

    def get_by_username(self, username: str) -> Optional[Contributor]:
        """Recupere un contributeur par son identifiant (insensible a la casse)."""
        statement = select(ContributorModel).where(
            ContributorModel.username == normalize_username(username)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def add(self, contributor: Contributor) -> Contributor:
        """Insere un nouveau contributeur."""
        model = self._to_model(contributor)
        self._session.add(model)
        self._session.flush()
        self._session.refresh(model)
        return self._to_entity(model)

    def save(self, contributor: Contributor) -> Contributor:
        """
        Met a jour un contributeur existant.

        username et created_by ne sont pas modifiables.

        Raises:
            ValueError: Si le contributeur n'existe pas
        """
        pk = parse_id(contributor.id)
        existing = self._session.get(ContributorModel, pk) if pk is not None else None
        if existing is None:
            raise ValueError(f"Contributeur introuvable : {contributor.id}")
        existing.password = contributor.password
        existing.display_name = contributor.display_name
        existing.is_active = contributor.is_active
        existing.has_seen_guide = contributor.has_seen_guide
        self._session.add(existing)
        self._session.flush()
        self._session.refresh(existing)
        return self._to_entity(existing)

    def list_all(self) -> list[Contributor]:
        """Liste les contributeurs, les plus recents d'abord."""
        statement = select(ContributorModel).order_by(
            col(ContributorModel.created_at).desc(), col(ContributorModel.id).desc()
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]
