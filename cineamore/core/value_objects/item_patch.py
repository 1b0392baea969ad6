"""
Objet valeur ItemPatch : modification partielle typée d'une fiche du catalogue.

Chaque champ vaut soit UNSET (champ absent, la fiche n'est pas touchée),
soit une valeur, y compris None (champ présent mais vidé). Cette
distinction rend exacte la fusion appliquée lors de l'approbation : seuls
les champs présents sont écrits, les autres restent inchangés.

Normalisation à la construction :
- les textes sont nettoyés (strip) ; un texte vide devient None
- le titre, s'il est présent, ne peut être ni None ni vide
- l'année, si elle est renseignée, doit être comprise entre 1880 et 2100
- genres et liens sont convertis en tuples (DownloadLink pour les liens)
"""

from dataclasses import dataclass, fields as dataclass_fields, replace
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from cineamore.core.errors import ValidationError
from cineamore.core.value_objects.download_link import DownloadLink

if TYPE_CHECKING:
    from cineamore.core.entities.catalogue import CatalogueItem

YEAR_MIN = 1880
YEAR_MAX = 2100

_TEXT_FIELDS = ("original", "director", "plot", "notes", "lb", "poster", "backdrop")


class _Unset:
    """Marqueur d'un champ absent du patch."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _clean_text(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(
            f"Le champ {field_name} doit être un texte", {"field": field_name}
        )
    value = value.strip()
    return value or None


def _clean_year(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("Année invalide", {"field": "year"})
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Année invalide", {"field": "year", "value": value})
    if not YEAR_MIN <= year <= YEAR_MAX:
        raise ValidationError(
            f"L'année doit être comprise entre {YEAR_MIN} et {YEAR_MAX}",
            {"field": "year", "value": year},
        )
    return year


def _clean_genres(value: Any) -> Optional[tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        # Saisie formulaire : "Action, Drame"
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Les genres doivent former une liste", {"field": "genres"})
    genres = []
    for genre in value:
        if not isinstance(genre, str):
            raise ValidationError("Les genres doivent être des textes", {"field": "genres"})
        genre = genre.strip()
        if genre and genre not in genres:
            genres.append(genre)
    return tuple(genres)


def _clean_links(value: Any) -> Optional[tuple[DownloadLink, ...]]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise ValidationError(
            "Les liens de téléchargement doivent former une liste",
            {"field": "download_links"},
        )
    links = []
    for raw in value:
        if isinstance(raw, DownloadLink):
            links.append(raw)
            continue
        if not isinstance(raw, dict):
            raise ValidationError("Lien de téléchargement invalide", {"field": "download_links"})
        label = _clean_text(raw.get("label"), "download_links.label")
        url = _clean_text(raw.get("url"), "download_links.url")
        if not label or not url:
            raise ValidationError(
                "Un lien de téléchargement doit avoir un libellé et une URL",
                {"field": "download_links"},
            )
        added_at = _clean_added_at(raw.get("added_at"))
        links.append(DownloadLink(label=label, url=url, added_at=added_at))
    return tuple(links)


def _clean_added_at(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValidationError("Date d'ajout invalide", {"field": "download_links.added_at"})
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            "Date d'ajout invalide", {"field": "download_links.added_at", "value": value}
        )


@dataclass(frozen=True)
class ItemPatch:
    """
    Modification partielle d'une fiche.

    Utilisé à la fois comme charge utile d'une proposition (create/update/delete)
    et comme correction administrateur d'une fiche en quarantaine.

    Example:
        patch = ItemPatch(title="Alien", year=1979)
        patch.fields()          # {"title": "Alien", "year": 1979}
        ItemPatch(plot=None)    # vide explicitement le synopsis
    """

    title: str | _Unset = UNSET
    original: Optional[str] | _Unset = UNSET
    year: Optional[int] | _Unset = UNSET
    director: Optional[str] | _Unset = UNSET
    plot: Optional[str] | _Unset = UNSET
    notes: Optional[str] | _Unset = UNSET
    lb: Optional[str] | _Unset = UNSET
    poster: Optional[str] | _Unset = UNSET
    backdrop: Optional[str] | _Unset = UNSET
    genres: Optional[tuple[str, ...]] | _Unset = UNSET
    download_links: Optional[tuple[DownloadLink, ...]] | _Unset = UNSET

    def __post_init__(self) -> None:
        if self.title is not UNSET:
            title = _clean_text(self.title, "title")
            if not title:
                raise ValidationError("Title is required", {"field": "title"})
            object.__setattr__(self, "title", title)
        for name in _TEXT_FIELDS:
            value = getattr(self, name)
            if value is not UNSET:
                object.__setattr__(self, name, _clean_text(value, name))
        if self.year is not UNSET:
            object.__setattr__(self, "year", _clean_year(self.year))
        if self.genres is not UNSET:
            object.__setattr__(self, "genres", _clean_genres(self.genres))
        if self.download_links is not UNSET:
            object.__setattr__(self, "download_links", _clean_links(self.download_links))

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in dataclass_fields(cls))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ItemPatch":
        """
        Construit un patch depuis un dict (JSON stocké ou corps de requête).

        Les clés absentes restent UNSET ; une clé présente avec null vide le champ.

        Raises:
            ValidationError: Si une clé ne correspond à aucun champ de fiche
        """
        unknown = sorted(set(data) - set(cls.field_names()))
        if unknown:
            raise ValidationError(
                f"Champs inconnus : {', '.join(unknown)}", {"fields": unknown}
            )
        return cls(**data)

    def fields(self) -> dict[str, Any]:
        """Retourne uniquement les champs présents dans le patch."""
        return {
            name: getattr(self, name)
            for name in self.field_names()
            if getattr(self, name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.fields()

    def only(self, *names: str) -> "ItemPatch":
        """Restreint le patch aux champs nommés."""
        return ItemPatch(**{k: v for k, v in self.fields().items() if k in names})

    def apply_to(self, item: "CatalogueItem") -> "CatalogueItem":
        """
        Applique le patch à une fiche et retourne la fiche modifiée.

        Remplacement complet des champs fournis : une liste de genres ou de
        liens présente remplace la liste existante, sans fusion.
        """
        values = dict(self.fields())
        for key in ("genres", "download_links"):
            if key in values and values[key] is None:
                values[key] = ()
        return replace(item, **values)

    def to_dict(self) -> dict[str, Any]:
        """Sérialise les champs présents en types JSON."""
        data: dict[str, Any] = {}
        for name, value in self.fields().items():
            if name == "genres" and value is not None:
                value = list(value)
            elif name == "download_links" and value is not None:
                value = [
                    {
                        "label": link.label,
                        "url": link.url,
                        "added_at": link.added_at.isoformat() if link.added_at else None,
                    }
                    for link in value
                ]
            data[name] = value
        return data
