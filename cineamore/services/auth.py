"""
Connexion et résolution des sessions.

- Administrateur : mot de passe seul (CINEAMORE_ADMIN_PASSWORD)
- Contributeur : identifiant + mot de passe d'un compte actif
"""

import hmac
from typing import Optional

from loguru import logger

from cineamore.adapters.auth.session_tokens import SessionTokenCodec
from cineamore.core.entities.session import Role, SessionClaims
from cineamore.core.errors import Unauthorized, ValidationError
from cineamore.services.contributors import ContributorService
from cineamore.utils.constants import ADMIN_USERNAME


class AuthService:
    """
    Émet les jetons de session après vérification des identifiants.

    Example:
        token, claims = auth.login(password="admin123")
        auth.resolve(token).is_admin  # True
    """

    def __init__(
        self,
        contributors: ContributorService,
        codec: SessionTokenCodec,
        admin_password: str,
    ) -> None:
        self._contributors = contributors
        self._codec = codec
        self._admin_password = admin_password

    def login(self, password: str, username: Optional[str] = None) -> tuple[str, SessionClaims]:
        """
        Vérifie les identifiants et émet un jeton.

        Raises:
            ValidationError: Mot de passe absent
            Unauthorized: Identifiants invalides
        """
        if not password:
            raise ValidationError("Password required", {"field": "password"})

        if not username or not username.strip():
            if not hmac.compare_digest(password.encode(), self._admin_password.encode()):
                logger.warning("Echec de connexion administrateur")
                raise Unauthorized("Invalid admin password")
            claims = SessionClaims(role=Role.ADMIN, user=ADMIN_USERNAME, display_name="Admin")
        else:
            contributor = self._contributors.authenticate(username, password)
            if contributor is None:
                logger.warning("Echec de connexion contributeur")
                raise Unauthorized("Invalid credentials")
            claims = SessionClaims(
                role=Role.CONTRIBUTOR,
                user=contributor.username,
                contributor_id=contributor.id,
                display_name=contributor.label,
            )

        logger.info("Connexion", user=claims.user, role=claims.role.value)
        return self._codec.issue(claims), claims

    def resolve(self, token: Optional[str]) -> SessionClaims:
        """Claims du jeton, ou une session anonyme."""
        return self._codec.resolve(token) or SessionClaims.anonymous()
