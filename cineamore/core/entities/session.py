"""
Entités de session.

Le workflow de modération ne consomme qu'un rôle et, pour un contributeur,
son identité. La résolution du jeton signé est faite par l'adaptateur
SessionTokenCodec.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(Enum):
    """Rôle de l'appelant."""

    ADMIN = "admin"
    CONTRIBUTOR = "contributor"
    NONE = "none"


@dataclass(frozen=True)
class SessionClaims:
    """
    Identité résolue depuis un jeton de session.

    Attributs :
        role : Rôle de l'appelant
        user : Nom d'utilisateur ("admin" pour l'administrateur)
        contributor_id : Identifiant du contributeur (absent pour l'admin)
        display_name : Nom affiché
    """

    role: Role
    user: str = ""
    contributor_id: Optional[str] = None
    display_name: str = ""

    @classmethod
    def anonymous(cls) -> "SessionClaims":
        return cls(role=Role.NONE)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
