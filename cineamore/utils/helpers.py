"""
Fonctions utilitaires partagées dans le projet CineAmore.

- clean_release_title : retrait des marqueurs de release d'un titre
- normalize_username : forme canonique d'un identifiant contributeur
- new_legacy_id : génération d'un identifiant historique
- utcnow : horodatage UTC
"""

import secrets
from datetime import datetime, timezone

from cineamore.utils.constants import (
    LEGACY_ID_HEX_LENGTH,
    LEGACY_ID_PREFIX,
    RELEASE_TOKENS_PATTERN,
)


def utcnow() -> datetime:
    """Horodatage UTC avec fuseau."""
    return datetime.now(timezone.utc)


def clean_release_title(title: str) -> str:
    """
    Nettoie un titre avant recherche TMDB.

    Retire les marqueurs de qualité (1080p, x265, web-dl...) sans tenir
    compte de la casse, puis réduit les espaces multiples.

    Example:
        >>> clean_release_title("Alien 1080p BluRay x264")
        'Alien'
    """
    if not title:
        return ""
    cleaned = RELEASE_TOKENS_PATTERN.sub(" ", title)
    return " ".join(cleaned.split())


def normalize_username(username: str) -> str:
    """Retire le "@" initial, les espaces, et passe en minuscules."""
    return (username or "").strip().lstrip("@").strip().lower()


def new_legacy_id() -> str:
    """Génère un identifiant historique ("m" + 8 caractères hex)."""
    return LEGACY_ID_PREFIX + secrets.token_hex(LEGACY_ID_HEX_LENGTH // 2)
