"""
Modeles SQLModel pour la base de donnees CineAmore.

Ces modeles representent les tables de la base de donnees.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- catalogue_items: Fiches publiees (films, series, animes)
- pending_changes: Propositions des contributeurs (journal en ajout seul)
- contributors: Comptes contributeurs

Les champs JSON (*_json) stockent les listes (genres, liens) et les
instantanes de propositions de maniere serialisee.
"""

import json
from datetime import datetime
from typing import Any

from sqlmodel import Field, Index, SQLModel

from cineamore.utils.helpers import utcnow


class CatalogueItemModel(SQLModel, table=True):
    """
    Modele representant une fiche du catalogue.

    La visibilite est aplatie en trois colonnes (visibility_*). Le repository
    est le seul a convertir ces colonnes en variant Visible/Quarantined, et
    ecrit toujours visibility_reason = NULL pour une fiche visible.
    """

    __tablename__ = "catalogue_items"
    __table_args__ = (
        Index("ix_catalogue_items_state_title", "visibility_state", "title"),
    )

    id: int | None = Field(default=None, primary_key=True)
    legacy_id: str = Field(index=True, unique=True)  # Alias historique, immuable
    title: str = Field(index=True)
    original: str | None = None
    year: int | None = Field(default=None, index=True)
    director: str | None = Field(default=None, index=True)
    plot: str | None = None
    notes: str | None = None  # Notes de l'editeur
    lb: str | None = None  # URL Letterboxd
    poster: str | None = None
    backdrop: str | None = None
    genres_json: str | None = None  # JSON: ["Drama", "Thriller"]
    download_links_json: str | None = None  # JSON: [{"label", "url", "added_at"}]
    rating_sum: int = Field(default=0)
    rating_count: int = Field(default=0)
    visibility_state: str = Field(default="visible", index=True)  # visible, quarantined
    visibility_reason: str | None = None
    visibility_updated_at: datetime | None = Field(default_factory=utcnow)
    added_at: datetime | None = Field(default_factory=utcnow, index=True)

    @property
    def genres(self) -> list[str]:
        """Retourne les genres deserialises."""
        if self.genres_json:
            return json.loads(self.genres_json)
        return []

    @genres.setter
    def genres(self, value: list[str]) -> None:
        """Serialise les genres en JSON (liste vide -> NULL)."""
        self.genres_json = json.dumps(list(value)) if value else None

    @property
    def download_links(self) -> list[dict[str, Any]]:
        """Retourne les liens deserialises."""
        if self.download_links_json:
            return json.loads(self.download_links_json)
        return []

    @download_links.setter
    def download_links(self, value: list[dict[str, Any]]) -> None:
        """Serialise les liens en JSON."""
        self.download_links_json = json.dumps(value) if value else None


class PendingChangeModel(SQLModel, table=True):
    """
    Modele representant une proposition de contributeur.

    item_id n'a pas de cle etrangere : une suppression approuvee retire la
    fiche mais la proposition reste dans le journal.
    """

    __tablename__ = "pending_changes"
    __table_args__ = (
        Index("ix_pending_changes_status_created", "status", "created_at"),
        Index("ix_pending_changes_contributor_status", "contributor_id", "status"),
    )

    id: int | None = Field(default=None, primary_key=True)
    kind: str = Field(index=True)  # create, update, delete
    item_id: int | None = Field(default=None, index=True)
    proposed_json: str = "{}"  # JSON: champs presents de l'ItemPatch
    previous_json: str | None = None  # JSON: instantane avant modification
    contributor_id: int = Field(foreign_key="contributors.id")
    contributor_username: str
    status: str = Field(default="pending")  # pending, approved, rejected
    created_at: datetime | None = Field(default_factory=utcnow)
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    review_notes: str | None = None

    @property
    def proposed(self) -> dict[str, Any]:
        """Retourne les champs proposes deserialises."""
        return json.loads(self.proposed_json) if self.proposed_json else {}

    @property
    def previous(self) -> dict[str, Any] | None:
        """Retourne l'instantane deserialise."""
        return json.loads(self.previous_json) if self.previous_json else None


class ContributorModel(SQLModel, table=True):
    """
    Modele representant un compte contributeur.

    username est stocke en minuscules, sans "@" initial.
    """

    __tablename__ = "contributors"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    password: str  # En clair, exigence produit
    display_name: str = ""
    is_active: bool = Field(default=True)
    has_seen_guide: bool = Field(default=False)
    created_at: datetime | None = Field(default_factory=utcnow)
    created_by: str = "admin"
