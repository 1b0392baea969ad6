"""
Codec des jetons de session (JWT HS256, PyJWT).

Le jeton transporte le rôle et, pour un contributeur, son identité.
Un jeton absent, mal formé, mal signé ou expiré se résout en None : le
workflow le traite comme un appelant anonyme.
"""

from datetime import timedelta
from typing import Optional

import jwt
from loguru import logger

from cineamore.core.entities.session import Role, SessionClaims
from cineamore.utils.helpers import utcnow

ALGORITHM = "HS256"


class SessionTokenCodec:
    """
    Émission et résolution des jetons de session.

    Example:
        codec = SessionTokenCodec(secret="...", ttl_hours=24)
        token = codec.issue(SessionClaims(role=Role.ADMIN, user="admin"))
        codec.resolve(token).is_admin  # True
    """

    def __init__(self, secret: str, ttl_hours: int = 24) -> None:
        if not secret:
            raise ValueError("Un secret de session est requis")
        self._secret = secret
        self._ttl = timedelta(hours=ttl_hours)

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, claims: SessionClaims) -> str:
        """Signe un jeton valable ttl_hours."""
        now = utcnow()
        payload = {
            "role": claims.role.value,
            "user": claims.user,
            "name": claims.display_name,
            "iat": now,
            "exp": now + self._ttl,
        }
        if claims.contributor_id is not None:
            payload["cid"] = claims.contributor_id
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def resolve(self, token: Optional[str]) -> Optional[SessionClaims]:
        """Vérifie et décode un jeton ; None s'il est invalide."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.PyJWTError as e:
            logger.debug(f"Jeton de session rejeté: {e}")
            return None
        try:
            role = Role(payload.get("role"))
        except ValueError:
            return None
        if role is Role.CONTRIBUTOR and not payload.get("cid"):
            return None
        return SessionClaims(
            role=role,
            user=payload.get("user", ""),
            contributor_id=payload.get("cid"),
            display_name=payload.get("name", ""),
        )
