"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- ICatalogueRepository : Stockage des fiches du catalogue
- IPendingChangeRepository : Journal des propositions
- IContributorRepository : Comptes contributeurs
- IUnitOfWork : Transaction regroupant les trois repositories

Ports client API : Contrats pour les services externes
- IMetadataClient : Service de métadonnées (TMDB)
- SearchResult : Résultat de recherche depuis une API
- MediaDetails : Informations détaillées depuis une API
"""

from cineamore.core.ports.api_clients import (
    IMetadataClient,
    MediaDetails,
    SearchResult,
)
from cineamore.core.ports.repositories import (
    ICatalogueRepository,
    IContributorRepository,
    IPendingChangeRepository,
    IUnitOfWork,
)

__all__ = [
    # Repositories
    "ICatalogueRepository",
    "IPendingChangeRepository",
    "IContributorRepository",
    "IUnitOfWork",
    # Clients API
    "IMetadataClient",
    "SearchResult",
    "MediaDetails",
]
