"""
Utilitaires communs aux repositories SQLModel.

Les entités exposent des identifiants str, la base des clés entières.
"""

from datetime import datetime, timezone
from typing import Optional


def parse_id(value: Optional[str]) -> Optional[int]:
    """
    Convertit un identifiant d'entité en clé primaire.

    Retourne None si l'identifiant n'est pas un entier : la recherche
    correspondante ne trouvera rien plutôt que de lever une erreur SQL.
    """
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite rend des datetimes naïfs : on les rattache à UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
