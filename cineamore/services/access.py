"""
Contrôle des rôles.

Les services reçoivent le rôle de l'appelant (Role, chaîne ou SessionClaims)
et refusent l'opération avec Unauthorized si le rôle ne convient pas.
"""

from typing import Optional, Union

from cineamore.core.entities.session import Role, SessionClaims
from cineamore.core.errors import Unauthorized

RoleLike = Union[Role, SessionClaims, str, None]


def coerce_role(role: RoleLike) -> Role:
    """Ramène un rôle exprimé sous n'importe quelle forme à l'énumération Role."""
    if isinstance(role, SessionClaims):
        return role.role
    if isinstance(role, Role):
        return role
    if isinstance(role, str):
        try:
            return Role(role.lower())
        except ValueError:
            return Role.NONE
    return Role.NONE


def require_admin(role: RoleLike) -> None:
    """Lève Unauthorized si l'appelant n'est pas administrateur."""
    if coerce_role(role) is not Role.ADMIN:
        raise Unauthorized()


def require_contributor(claims: Optional[SessionClaims]) -> SessionClaims:
    """
    Vérifie que la session est celle d'un contributeur identifié.

    Retourne :
        Les claims, avec contributor_id garanti non vide
    """
    if claims is None or claims.role is not Role.CONTRIBUTOR or not claims.contributor_id:
        raise Unauthorized()
    return claims
