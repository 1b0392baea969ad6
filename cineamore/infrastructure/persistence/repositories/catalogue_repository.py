"""
Implementation SQLModel du repository Catalogue.

Repository concret pour les fiches du catalogue. Seul ce module convertit
les colonnes visibility_* en variant Visible/Quarantined.

Les écritures sont flushées dans la session de l'unité de travail mais
jamais commitées ici.
"""

import json
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import and_, func, or_, select as sa_select, update
from sqlmodel import Session, col, select

from cineamore.core.entities.catalogue import (
    CatalogueItem,
    Quarantined,
    Visibility,
    Visible,
    VisibilityState,
)
from cineamore.core.ports.repositories import ICatalogueRepository
from cineamore.core.value_objects.download_link import DownloadLink
from cineamore.infrastructure.persistence.models import CatalogueItemModel
from cineamore.infrastructure.persistence.repositories.base import as_utc, parse_id
from cineamore.utils.helpers import new_legacy_id, utcnow


def _links_to_json(links: Sequence[DownloadLink]) -> list[dict[str, Any]]:
    return [
        {
            "label": link.label,
            "url": link.url,
            "added_at": link.added_at.isoformat() if link.added_at else None,
        }
        for link in links
    ]


def _links_from_json(raw: list[dict[str, Any]]) -> tuple[DownloadLink, ...]:
    links = []
    for data in raw:
        added_at = data.get("added_at")
        links.append(
            DownloadLink(
                label=data.get("label", ""),
                url=data.get("url", ""),
                added_at=datetime.fromisoformat(added_at) if added_at else None,
            )
        )
    return tuple(links)


def _blank(column) -> Any:
    """Condition SQL : colonne texte NULL ou vide."""
    return or_(column.is_(None), column == "")


class SQLModelCatalogueRepository(ICatalogueRepository):
    """
    Repository SQLModel pour les fiches du catalogue.

    Gere la persistance des CatalogueItem avec conversion
    bidirectionnelle entre entite et modele.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: CatalogueItemModel) -> CatalogueItem:
        """
        Convertit un modele DB en entite domaine.

        Args :
            model : Le modele CatalogueItemModel depuis la DB

        Retourne :
            L'entite CatalogueItem correspondante
        """
        updated_at = as_utc(model.visibility_updated_at)
        visibility: Visibility
        if model.visibility_state == VisibilityState.QUARANTINED.value:
            visibility = Quarantined(
                reason=model.visibility_reason or "Quarantined",
                updated_at=updated_at,
            )
        else:
            visibility = Visible(updated_at=updated_at)

        return CatalogueItem(
            id=str(model.id) if model.id else None,
            legacy_id=model.legacy_id,
            title=model.title,
            original=model.original,
            year=model.year,
            director=model.director,
            plot=model.plot,
            notes=model.notes,
            lb=model.lb,
            poster=model.poster,
            backdrop=model.backdrop,
            genres=tuple(model.genres),
            download_links=_links_from_json(model.download_links),
            rating_sum=model.rating_sum,
            rating_count=model.rating_count,
            visibility=visibility,
            added_at=as_utc(model.added_at),
        )

    def _to_model(self, entity: CatalogueItem) -> CatalogueItemModel:
        """
        Convertit une entite domaine en modele DB.

        Un legacy_id est attribue si l'entite n'en a pas encore.
        """
        model = CatalogueItemModel(
            legacy_id=entity.legacy_id or new_legacy_id(),
            title=entity.title,
            rating_sum=entity.rating_sum,
            rating_count=entity.rating_count,
            added_at=entity.added_at or utcnow(),
        )
        self._copy_fields(entity, model)
        self._copy_visibility(entity.visibility, model)
        if entity.id:
            model.id = int(entity.id)
        return model

    @staticmethod
    def _copy_fields(entity: CatalogueItem, model: CatalogueItemModel) -> None:
        """Recopie les champs editables (ni notes agregees, ni legacy_id)."""
        model.title = entity.title
        model.original = entity.original
        model.year = entity.year
        model.director = entity.director
        model.plot = entity.plot
        model.notes = entity.notes
        model.lb = entity.lb
        model.poster = entity.poster
        model.backdrop = entity.backdrop
        model.genres = list(entity.genres)
        model.download_links = _links_to_json(entity.download_links)

    @staticmethod
    def _copy_visibility(visibility: Visibility, model: CatalogueItemModel) -> None:
        model.visibility_state = visibility.state.value
        # Une fiche visible n'a jamais de raison
        model.visibility_reason = (
            visibility.reason if isinstance(visibility, Quarantined) else None
        )
        model.visibility_updated_at = visibility.updated_at or utcnow()

    def _get_model(self, item_id: str) -> Optional[CatalogueItemModel]:
        pk = parse_id(item_id)
        if pk is None:
            return None
        return self._session.get(CatalogueItemModel, pk)

    def get_by_id(self, item_id: str) -> Optional[CatalogueItem]:
        """Recupere une fiche par son ID."""
        model = self._get_model(item_id)
        if model:
            return self._to_entity(model)
        return None

    def add(self, item: CatalogueItem) -> CatalogueItem:
        """Insere une nouvelle fiche."""
        model = self._to_model(item)
        self._session.add(model)
        self._session.flush()
        self._session.refresh(model)
        return self._to_entity(model)

    def save(self, item: CatalogueItem) -> CatalogueItem:
        """
        Met a jour une fiche existante.

        rating_sum/rating_count ne sont jamais ecrits ici : seul
        increment_rating les modifie.

        Raises:
            ValueError: Si la fiche n'existe pas
        """
        existing = self._get_model(item.id) if item.id else None
        if existing is None:
            raise ValueError(f"Fiche introuvable : {item.id}")
        self._copy_fields(item, existing)
        self._copy_visibility(item.visibility, existing)
        self._session.add(existing)
        self._session.flush()
        self._session.refresh(existing)
        return self._to_entity(existing)

    def delete(self, item_id: str) -> bool:
        """Supprime une fiche par ID. Retourne True si supprimee."""
        model = self._get_model(item_id)
        if model:
            self._session.delete(model)
            self._session.flush()
            return True
        return False

    def increment_rating(self, item_id: str, score: int) -> Optional[tuple[int, int]]:
        """
        Incremente l'agregat de notes en une seule requete UPDATE.

        L'increment est calcule par la base (rating_sum = rating_sum + :score),
        donc deux votes concurrents ne peuvent pas s'ecraser.
        """
        pk = parse_id(item_id)
        if pk is None:
            return None
        self._session.flush()
        connection = self._session.connection()
        result = connection.execute(
            update(CatalogueItemModel)
            .where(CatalogueItemModel.id == pk)
            .values(
                rating_sum=CatalogueItemModel.rating_sum + score,
                rating_count=CatalogueItemModel.rating_count + 1,
            )
        )
        if result.rowcount == 0:
            return None
        row = connection.execute(
            sa_select(CatalogueItemModel.rating_sum, CatalogueItemModel.rating_count).where(
                CatalogueItemModel.id == pk
            )
        ).one()
        # Les instances chargees dans la session portent l'ancien agregat
        self._session.expire_all()
        return row.rating_sum, row.rating_count

    def set_visibility(self, item_id: str, visibility: Visibility) -> bool:
        """Change la visibilite d'une fiche. Retourne False si absente."""
        model = self._get_model(item_id)
        if model is None:
            return False
        self._copy_visibility(visibility, model)
        self._session.add(model)
        self._session.flush()
        return True

    def set_genres(self, item_id: str, genres: Sequence[str]) -> bool:
        """Remplace les genres d'une fiche. Retourne False si absente."""
        model = self._get_model(item_id)
        if model is None:
            return False
        model.genres = list(genres)
        self._session.add(model)
        self._session.flush()
        return True

    def list_visible(
        self, limit: int = 50, offset: int = 0, genre: Optional[str] = None
    ) -> list[CatalogueItem]:
        """Liste les fiches visibles, les plus recentes d'abord."""
        statement = select(CatalogueItemModel).where(
            CatalogueItemModel.visibility_state == VisibilityState.VISIBLE.value
        )
        if genre:
            statement = statement.where(
                col(CatalogueItemModel.genres_json).contains(json.dumps(genre))
            )
        statement = (
            statement.order_by(
                col(CatalogueItemModel.added_at).desc(), col(CatalogueItemModel.id).desc()
            )
            .offset(offset)
            .limit(limit)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def list_quarantined(self, limit: int = 100, offset: int = 0) -> list[CatalogueItem]:
        """Liste les fiches en quarantaine, triees par titre."""
        statement = (
            select(CatalogueItemModel)
            .where(CatalogueItemModel.visibility_state == VisibilityState.QUARANTINED.value)
            .order_by(col(CatalogueItemModel.title), col(CatalogueItemModel.id))
            .offset(offset)
            .limit(limit)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def count_quarantined(self) -> int:
        """Compte les fiches en quarantaine."""
        statement = select(func.count(CatalogueItemModel.id)).where(
            CatalogueItemModel.visibility_state == VisibilityState.QUARANTINED.value
        )
        return self._session.exec(statement).one()

    def _unclassified_clause(self) -> Any:
        return or_(
            col(CatalogueItemModel.genres_json).is_(None),
            CatalogueItemModel.genres_json == "[]",
            CatalogueItemModel.genres_json == "",
        )

    def list_unclassified(self, limit: int = 5) -> list[CatalogueItem]:
        """Liste les fiches sans genre, par ordre d'insertion."""
        statement = (
            select(CatalogueItemModel)
            .where(self._unclassified_clause())
            .order_by(col(CatalogueItemModel.id))
            .limit(limit)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def count_unclassified(self) -> int:
        """Compte les fiches sans genre."""
        statement = select(func.count(CatalogueItemModel.id)).where(
            self._unclassified_clause()
        )
        return self._session.exec(statement).one()

    def list_sweep_candidates(
        self, criteria: Sequence[str], sentinel_genre: str
    ) -> list[CatalogueItem]:
        """
        Liste les fiches visibles qui echouent a au moins un critere.

        La decision fine (quels criteres echouent) est refaite par le
        service ; ce filtre SQL ne fait que reduire le balayage.
        """
        conditions = []
        if "missing_genre" in criteria:
            conditions.append(self._unclassified_clause())
            conditions.append(CatalogueItemModel.genres_json == json.dumps([sentinel_genre]))
        if "missing_poster" in criteria:
            conditions.append(_blank(col(CatalogueItemModel.poster)))
        if "missing_plot" in criteria:
            conditions.append(_blank(col(CatalogueItemModel.plot)))
        if not conditions:
            return []

        statement = (
            select(CatalogueItemModel)
            .where(
                and_(
                    CatalogueItemModel.visibility_state == VisibilityState.VISIBLE.value,
                    or_(*conditions),
                )
            )
            .order_by(col(CatalogueItemModel.id))
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]
