"""
Dépendances partagées des routes.

La session est lue dans le cookie "session" ou, à défaut, dans l'en-tête
Authorization: Bearer <jeton>.
"""

from typing import Optional

from fastapi import Depends, Request

from ..container import Container
from ..core.entities.session import Role, SessionClaims
from ..core.errors import Unauthorized

SESSION_COOKIE = "session"


def get_container(request: Request) -> Container:
    """Container DI attaché à l'application."""
    return request.app.state.container


def _read_token(request: Request) -> Optional[str]:
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None


def get_claims(request: Request) -> SessionClaims:
    """Identité de l'appelant (anonyme si pas de jeton valide)."""
    return get_container(request).auth_service().resolve(_read_token(request))


def require_admin_claims(claims: SessionClaims = Depends(get_claims)) -> SessionClaims:
    if claims.role is not Role.ADMIN:
        raise Unauthorized()
    return claims


def require_contributor_claims(claims: SessionClaims = Depends(get_claims)) -> SessionClaims:
    if claims.role is not Role.CONTRIBUTOR or not claims.contributor_id:
        raise Unauthorized()
    return claims
