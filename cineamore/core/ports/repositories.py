"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des données.
Les implémentations (adaptateurs) fournissent les mécanismes de stockage concrets
(SQLite/PostgreSQL via SQLModel).

Les repositories n'effectuent jamais de commit : ils écrivent dans la session
de l'unité de travail (IUnitOfWork), qui valide ou annule l'ensemble à la
sortie du bloc `with`. C'est ce qui rend l'approbation atomique : écriture du
catalogue et changement de statut de la proposition partagent la même
transaction.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from types import TracebackType
from typing import Optional, Sequence

from cineamore.core.entities.catalogue import CatalogueItem, Visibility
from cineamore.core.entities.moderation import ChangeStatus, Contributor, PendingChange


class ICatalogueRepository(ABC):
    """
    Interface de stockage des fiches du catalogue.

    Définit les opérations pour persister et récupérer les entités CatalogueItem.
    """

    @abstractmethod
    def get_by_id(self, item_id: str) -> Optional[CatalogueItem]:
        """Récupère une fiche par son ID interne."""
        ...

    @abstractmethod
    def add(self, item: CatalogueItem) -> CatalogueItem:
        """Insère une nouvelle fiche et retourne la fiche avec son ID."""
        ...

    @abstractmethod
    def save(self, item: CatalogueItem) -> CatalogueItem:
        """Met à jour une fiche existante (hors agrégat de notes)."""
        ...

    @abstractmethod
    def delete(self, item_id: str) -> bool:
        """Supprime une fiche par ID. Retourne True si supprimée."""
        ...

    @abstractmethod
    def increment_rating(self, item_id: str, score: int) -> Optional[tuple[int, int]]:
        """
        Incrémente atomiquement rating_sum de score et rating_count de 1.

        Retourne :
            Le couple (rating_sum, rating_count) après incrément, ou None si
            la fiche n'existe pas
        """
        ...

    @abstractmethod
    def set_visibility(self, item_id: str, visibility: Visibility) -> bool:
        """Change la visibilité d'une fiche. Retourne False si absente."""
        ...

    @abstractmethod
    def set_genres(self, item_id: str, genres: Sequence[str]) -> bool:
        """Remplace les genres d'une fiche. Retourne False si absente."""
        ...

    @abstractmethod
    def list_visible(
        self, limit: int = 50, offset: int = 0, genre: Optional[str] = None
    ) -> list[CatalogueItem]:
        """Liste les fiches visibles, les plus récentes d'abord."""
        ...

    @abstractmethod
    def list_quarantined(self, limit: int = 100, offset: int = 0) -> list[CatalogueItem]:
        """Liste les fiches en quarantaine, triées par titre."""
        ...

    @abstractmethod
    def count_quarantined(self) -> int:
        """Compte les fiches en quarantaine."""
        ...

    @abstractmethod
    def list_unclassified(self, limit: int = 5) -> list[CatalogueItem]:
        """Liste les fiches sans genre (candidates à la classification)."""
        ...

    @abstractmethod
    def count_unclassified(self) -> int:
        """Compte les fiches sans genre."""
        ...

    @abstractmethod
    def list_sweep_candidates(
        self, criteria: Sequence[str], sentinel_genre: str
    ) -> list[CatalogueItem]:
        """
        Liste les fiches visibles qui échouent à au moins un critère.

        Args :
            criteria : Critères actifs (missing_genre, missing_poster, missing_plot)
            sentinel_genre : Genre posé quand la classification a échoué,
                considéré comme une absence de genre
        """
        ...


class IPendingChangeRepository(ABC):
    """
    Interface de stockage des propositions de contributeurs.

    Pas de suppression : le journal des propositions est en ajout seul.
    """

    @abstractmethod
    def get_by_id(self, change_id: str) -> Optional[PendingChange]:
        """Récupère une proposition par son ID."""
        ...

    @abstractmethod
    def add(self, change: PendingChange) -> PendingChange:
        """Insère une nouvelle proposition."""
        ...

    @abstractmethod
    def mark_reviewed(
        self,
        change_id: str,
        status: ChangeStatus,
        reviewer: str,
        reviewed_at: datetime,
        note: Optional[str] = None,
    ) -> bool:
        """
        Passe une proposition PENDING au statut terminal donné.

        La mise à jour est conditionnelle (WHERE status = 'pending') : si un
        autre administrateur a déjà décidé, rien n'est écrit.

        Retourne :
            True si la proposition était encore en attente et a été mise à jour
        """
        ...

    @abstractmethod
    def list_by_status(
        self,
        status: ChangeStatus,
        contributor_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[PendingChange]:
        """Liste les propositions d'un statut, les plus récentes d'abord."""
        ...

    @abstractmethod
    def list_by_contributor(self, contributor_id: str, limit: int = 50) -> list[PendingChange]:
        """Liste toutes les propositions d'un contributeur, les plus récentes d'abord."""
        ...


class IContributorRepository(ABC):
    """Interface de stockage des comptes contributeurs."""

    @abstractmethod
    def get_by_id(self, contributor_id: str) -> Optional[Contributor]:
        """Récupère un contributeur par son ID."""
        ...

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[Contributor]:
        """Récupère un contributeur par son identifiant normalisé."""
        ...

    @abstractmethod
    def add(self, contributor: Contributor) -> Contributor:
        """Insère un nouveau contributeur."""
        ...

    @abstractmethod
    def save(self, contributor: Contributor) -> Contributor:
        """Met à jour un contributeur existant."""
        ...

    @abstractmethod
    def list_all(self) -> list[Contributor]:
        """Liste les contributeurs, les plus récents d'abord."""
        ...


class IUnitOfWork(ABC):
    """
    Unité de travail transactionnelle.

    Utilisation :
        with uow:
            change = uow.pending_changes.get_by_id("3")
            uow.catalogue.save(item)
        # commit si le bloc se termine normalement, rollback sinon

    Une même instance peut être réutilisée : chaque entrée dans le bloc
    ouvre une nouvelle session.
    """

    catalogue: ICatalogueRepository
    pending_changes: IPendingChangeRepository
    contributors: IContributorRepository

    @abstractmethod
    def __enter__(self) -> "IUnitOfWork":
        ...

    @abstractmethod
    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        ...
