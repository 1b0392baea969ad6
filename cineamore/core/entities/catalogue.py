"""
Entités du catalogue.

Un CatalogueItem est une fiche publiée (film, série ou anime). Sa visibilité
est un variant étiqueté : Visible ou Quarantined. Seul Quarantined porte une
raison, ce qui garantit par le type qu'une fiche visible n'a jamais de raison
de quarantaine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Union

from cineamore.core.value_objects.download_link import DownloadLink


class VisibilityState(Enum):
    """État de modération d'une fiche."""

    VISIBLE = "visible"
    QUARANTINED = "quarantined"


@dataclass(frozen=True)
class Visible:
    """La fiche apparaît dans les listes publiques."""

    updated_at: Optional[datetime] = None

    state: ClassVar[VisibilityState] = VisibilityState.VISIBLE

    @property
    def reason(self) -> None:
        return None


@dataclass(frozen=True)
class Quarantined:
    """
    La fiche est masquée des listes publiques sans être supprimée.

    Attributs :
        reason : Motif lisible (ex: "Missing genre, Missing poster")
        updated_at : Date de mise en quarantaine
    """

    reason: str
    updated_at: Optional[datetime] = None

    state: ClassVar[VisibilityState] = VisibilityState.QUARANTINED

    def __post_init__(self) -> None:
        if not self.reason or not self.reason.strip():
            raise ValueError("Une quarantaine doit avoir une raison")


Visibility = Union[Visible, Quarantined]


@dataclass
class CatalogueItem:
    """
    Fiche publiée du catalogue.

    La note moyenne n'est jamais stockée : elle est dérivée de rating_sum et
    rating_count, qui ne sont incrémentés qu'ensemble (voir RatingService).

    Attributs :
        id : Identifiant interne (ID base de données)
        legacy_id : Alias historique ("m" + 8 caractères hex), immuable
        title : Titre affiché (obligatoire)
        original : Titre en langue originale
        year : Année de sortie
        director : Réalisateur
        plot : Synopsis
        notes : Notes de l'éditeur
        lb : URL Letterboxd
        poster : URL de l'affiche
        backdrop : URL de l'image de fond
        genres : Genres (vide = non classé)
        download_links : Liens de téléchargement
        rating_sum : Somme des notes reçues
        rating_count : Nombre de notes reçues
        visibility : Visible ou Quarantined
        added_at : Date d'ajout au catalogue
    """

    id: Optional[str] = None
    legacy_id: Optional[str] = None
    title: str = ""
    original: Optional[str] = None
    year: Optional[int] = None
    director: Optional[str] = None
    plot: Optional[str] = None
    notes: Optional[str] = None
    lb: Optional[str] = None
    poster: Optional[str] = None
    backdrop: Optional[str] = None
    genres: tuple[str, ...] = ()
    download_links: tuple[DownloadLink, ...] = ()
    rating_sum: int = 0
    rating_count: int = 0
    visibility: Visibility = field(default_factory=Visible)
    added_at: Optional[datetime] = None

    @property
    def average_rating(self) -> Optional[float]:
        """Note moyenne, indéfinie (None) tant qu'aucun vote n'existe."""
        if self.rating_count <= 0:
            return None
        return self.rating_sum / self.rating_count

    @property
    def is_visible(self) -> bool:
        return isinstance(self.visibility, Visible)
