"""
Lecture publique du catalogue.

Seules les fiches visibles sont listées ; une fiche en quarantaine reste
accessible à l'administrateur par son ID. L'administrateur peut aussi créer,
modifier et supprimer des fiches sans passer par une proposition.
"""

from dataclasses import replace
from typing import Any, Callable, Optional, Union

from loguru import logger

from cineamore.core.entities.catalogue import CatalogueItem, Visible
from cineamore.core.entities.session import Role
from cineamore.core.errors import NotFoundError, ValidationError
from cineamore.core.ports.repositories import IUnitOfWork
from cineamore.core.value_objects.item_patch import UNSET, ItemPatch
from cineamore.services.access import RoleLike, coerce_role, require_admin
from cineamore.utils.helpers import utcnow

MAX_PAGE_SIZE = 100


def snapshot_item(item: CatalogueItem) -> dict[str, Any]:
    """
    Instantané JSON d'une fiche, aux clés d'un ItemPatch.

    Stocké comme `previous` d'une proposition update/delete pour la vue
    comparative de l'administrateur.
    """
    return {
        "title": item.title,
        "original": item.original,
        "year": item.year,
        "director": item.director,
        "plot": item.plot,
        "notes": item.notes,
        "lb": item.lb,
        "poster": item.poster,
        "backdrop": item.backdrop,
        "genres": list(item.genres),
        "download_links": [
            {
                "label": link.label,
                "url": link.url,
                "added_at": link.added_at.isoformat() if link.added_at else None,
            }
            for link in item.download_links
        ],
    }


class CatalogueService:
    """Consultation du catalogue et édition directe par l'administrateur."""

    def __init__(self, uow: IUnitOfWork, clock: Callable = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def browse(
        self, limit: int = 50, offset: int = 0, genre: Optional[str] = None
    ) -> list[CatalogueItem]:
        """
        Liste les fiches visibles, les plus récentes d'abord.

        Raises:
            ValidationError: Pagination hors bornes
        """
        if limit < 1 or limit > MAX_PAGE_SIZE or offset < 0:
            raise ValidationError(
                f"Pagination invalide (1 <= limit <= {MAX_PAGE_SIZE}, offset >= 0)",
                {"limit": limit, "offset": offset},
            )
        with self._uow:
            return self._uow.catalogue.list_visible(limit=limit, offset=offset, genre=genre)

    def get(self, item_id: str, role: RoleLike = None) -> CatalogueItem:
        """
        Retourne une fiche.

        Une fiche en quarantaine n'est renvoyée qu'à l'administrateur.

        Raises:
            NotFoundError: Fiche absente (ou masquée pour cet appelant)
        """
        with self._uow:
            item = self._uow.catalogue.get_by_id(item_id)
        if item is None or (not item.is_visible and coerce_role(role) is not Role.ADMIN):
            raise NotFoundError("Movie not found", {"item_id": item_id})
        return item

    # Édition directe par l'administrateur

    def create(
        self, patch: Union[ItemPatch, dict[str, Any]], role: RoleLike
    ) -> CatalogueItem:
        """
        Ajoute une fiche visible, sans passer par une proposition.

        Raises:
            Unauthorized: L'appelant n'est pas administrateur
            ValidationError: Patch invalide ou sans titre
        """
        require_admin(role)
        patch = _as_patch(patch)
        if patch.title is UNSET:
            raise ValidationError("Title is required", {"field": "title"})

        now = self._clock()
        item = replace(
            patch.apply_to(CatalogueItem()),
            id=None,
            visibility=Visible(updated_at=now),
            added_at=now,
        )
        with self._uow:
            item = self._uow.catalogue.add(item)
        logger.info("Fiche creee", item_id=item.id, title=item.title)
        return item

    def update(
        self, item_id: str, patch: Union[ItemPatch, dict[str, Any]], role: RoleLike
    ) -> CatalogueItem:
        """
        Modifie les champs présents dans le patch. La visibilité est inchangée.

        Raises:
            Unauthorized: L'appelant n'est pas administrateur
            NotFoundError: Fiche introuvable
            ValidationError: Patch invalide
        """
        require_admin(role)
        patch = _as_patch(patch)
        with self._uow:
            item = self._uow.catalogue.get_by_id(item_id)
            if item is None:
                raise NotFoundError("Movie not found", {"item_id": item_id})
            item = self._uow.catalogue.save(patch.apply_to(item))
        logger.info("Fiche modifiee", item_id=item_id, fields=sorted(patch.fields()))
        return item

    def delete(self, item_id: str, role: RoleLike) -> None:
        """
        Supprime définitivement une fiche.

        Raises:
            Unauthorized: L'appelant n'est pas administrateur
            NotFoundError: Fiche introuvable
        """
        require_admin(role)
        with self._uow:
            if not self._uow.catalogue.delete(item_id):
                raise NotFoundError("Movie not found", {"item_id": item_id})
        logger.info("Fiche supprimee", item_id=item_id)


def _as_patch(patch: Union[ItemPatch, dict[str, Any], None]) -> ItemPatch:
    if patch is None:
        return ItemPatch()
    if isinstance(patch, ItemPatch):
        return patch
    return ItemPatch.from_dict(patch)
