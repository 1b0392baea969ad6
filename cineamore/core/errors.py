"""
Taxonomie des erreurs du domaine.

Chaque erreur porte un message lisible par un humain et des details
optionnels (dict serialisable). La couche web les convertit en reponses
JSON structurees ; la CLI les affiche telles quelles.

- ValidationError : entree mal formee (forme, bornes) - jamais relancee
- Unauthorized : role insuffisant pour l'operation
- NotFoundError : identifiant reference absent
- InvalidStateError : transition d'etat interdite (ex: re-moderer un changement)
- ExternalServiceError : echec du service de metadonnees (TMDB)
- StoreError : echec de la base (connexion, conflit d'ecriture)
"""

from typing import Any, Optional


class CineAmoreError(Exception):
    """Erreur de base de l'application."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(CineAmoreError):
    """Entree invalide (champ manquant, valeur hors bornes)."""


class Unauthorized(CineAmoreError):
    """L'appelant n'a pas le role requis."""

    def __init__(self, message: str = "Unauthorized", details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, details)


class NotFoundError(CineAmoreError):
    """L'entite referencee n'existe pas."""


class InvalidStateError(CineAmoreError):
    """Transition d'etat interdite."""


class ExternalServiceError(CineAmoreError):
    """Le service de metadonnees externe a echoue."""


class StoreError(CineAmoreError):
    """La base de donnees a refuse ou perdu l'ecriture."""
