"""
CineAmore - Catalogue de films, series et animes avec moderation.

Ce package fournit le coeur de moderation du catalogue : propositions des
contributeurs, validation par l'administrateur, quarantaine des fiches
incompletes, classification des genres via TMDB et notes des visiteurs.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports, objets valeur, erreurs)
- services/ : Couche application (cas d'utilisation, orchestration)
- adapters/ : Couche infrastructure (CLI, clients API, jetons de session)
- infrastructure/ : Persistance SQLModel
- web/ : API JSON FastAPI
"""

__version__ = "0.1.0"
