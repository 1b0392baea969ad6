"""
Gestion des comptes contributeurs.

Les comptes sont créés, modifiés et désactivés par l'administrateur.
L'identifiant est normalisé (minuscules, sans "@" initial) et unique.
"""

from dataclasses import replace
from typing import Optional

from loguru import logger

from cineamore.core.entities.moderation import Contributor
from cineamore.core.errors import NotFoundError, ValidationError
from cineamore.core.ports.repositories import IUnitOfWork
from cineamore.services.access import RoleLike, require_admin
from cineamore.utils.constants import ADMIN_USERNAME
from cineamore.utils.helpers import normalize_username, utcnow

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4


class ContributorService:
    """Comptes contributeurs : administration et authentification."""

    def __init__(self, uow: IUnitOfWork) -> None:
        self._uow = uow

    def create(
        self,
        username: str,
        password: str,
        role: RoleLike,
        display_name: str = "",
        created_by: str = ADMIN_USERNAME,
    ) -> Contributor:
        """
        Crée un compte actif.

        Raises:
            Unauthorized: L'appelant n'est pas administrateur
            ValidationError: Identifiant trop court ou déjà pris, mot de passe trop court
        """
        require_admin(role)
        username = normalize_username(username)
        password = (password or "").strip()
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters",
                {"field": "username"},
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                {"field": "password"},
            )

        with self._uow:
            if self._uow.contributors.get_by_username(username) is not None:
                raise ValidationError("Username already exists", {"field": "username"})
            contributor = self._uow.contributors.add(
                Contributor(
                    username=username,
                    password=password,
                    display_name=(display_name or "").strip(),
                    created_at=utcnow(),
                    created_by=created_by,
                )
            )

        logger.info("Contributeur cree", username=username)
        return contributor

    def update(
        self,
        contributor_id: str,
        role: RoleLike,
        password: Optional[str] = None,
        display_name: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Contributor:
        """
        Modifie un compte.

        Un mot de passe de moins de 4 caractères est ignoré, pas refusé.

        Raises:
            NotFoundError: Compte introuvable
        """
        require_admin(role)
        with self._uow:
            contributor = self._uow.contributors.get_by_id(contributor_id)
            if contributor is None:
                raise NotFoundError("Contributor not found", {"contributor_id": contributor_id})
            changes = {}
            password = (password or "").strip()
            if len(password) >= MIN_PASSWORD_LENGTH:
                changes["password"] = password
            if display_name is not None:
                changes["display_name"] = display_name.strip()
            if is_active is not None:
                changes["is_active"] = is_active
            contributor = self._uow.contributors.save(replace(contributor, **changes))

        logger.info("Contributeur modifie", contributor_id=contributor_id, fields=sorted(changes))
        return contributor

    def deactivate(self, contributor_id: str, role: RoleLike) -> Contributor:
        """Désactive un compte : il ne peut plus se connecter ni proposer."""
        return self.update(contributor_id, role, is_active=False)

    def list_all(self, role: RoleLike) -> list[Contributor]:
        """Tous les comptes, les plus récents d'abord."""
        require_admin(role)
        with self._uow:
            return self._uow.contributors.list_all()

    def authenticate(self, username: str, password: str) -> Optional[Contributor]:
        """Retourne le contributeur actif correspondant, ou None."""
        username = normalize_username(username)
        if not username or not password:
            return None
        with self._uow:
            contributor = self._uow.contributors.get_by_username(username)
        if contributor is None or not contributor.is_active:
            return None
        if contributor.password != password:
            return None
        return contributor

    def mark_guide_seen(self, contributor_id: str) -> Contributor:
        """
        Note que le contributeur a vu le guide d'accueil.

        Raises:
            NotFoundError: Compte introuvable
        """
        with self._uow:
            contributor = self._uow.contributors.get_by_id(contributor_id)
            if contributor is None:
                raise NotFoundError("Contributor not found", {"contributor_id": contributor_id})
            if contributor.has_seen_guide:
                return contributor
            return self._uow.contributors.save(replace(contributor, has_seen_guide=True))
