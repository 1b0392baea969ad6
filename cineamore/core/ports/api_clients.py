"""
Interfaces ports pour les clients API.

Interfaces abstraites (ports) définissant le contrat du service de métadonnées
externe (TMDB). Le service est considéré comme au mieux disponible : limité
en débit et faillible. Les implémentations lèvent ExternalServiceError sur
un échec réseau ou HTTP, et retournent None pour un média inexistant.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class SearchResult:
    """
    Résultat de recherche depuis l'API de métadonnées.

    Les résultats sont retournés dans l'ordre de pertinence de l'API.

    Attributs :
        id : ID spécifique à l'API (ID TMDB)
        title : Titre localisé depuis l'API
        original_title : Titre en langue originale
        year : Année de sortie (None si date inconnue)
        source : Identifiant de la source API ("tmdb")
    """

    id: str
    title: str
    original_title: Optional[str] = None
    year: Optional[int] = None
    source: str = ""


@dataclass
class MediaDetails:
    """
    Informations média détaillées depuis l'API.

    Attributs :
        id : ID spécifique à l'API
        title : Titre localisé
        original_title : Titre en langue originale
        year : Année de sortie
        genres : Tuple des noms de genre
        director : Réalisateur principal
        overview : Résumé de l'intrigue
        poster_url : URL complète vers l'affiche
        backdrop_url : URL complète vers l'image de fond
    """

    id: str
    title: str
    original_title: Optional[str] = None
    year: Optional[int] = None
    genres: tuple[str, ...] = ()
    director: Optional[str] = None
    overview: Optional[str] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None


class IMetadataClient(ABC):
    """
    Interface du service de métadonnées.

    Définit le contrat pour rechercher un titre et récupérer ses détails
    (genres notamment) depuis une API externe.
    """

    @abstractmethod
    async def search(
        self,
        query: str,
        year: Optional[int] = None,
    ) -> list[SearchResult]:
        """
        Recherche des médias par titre.

        Args :
            query : Requête de recherche (titre nettoyé)
            year : Année indicative (le choix du candidat est fait par l'appelant)

        Retourne :
            Liste des résultats classés par l'API

        Raises :
            ExternalServiceError : Si l'API est injoignable ou répond en erreur
        """
        ...

    @abstractmethod
    async def get_details(self, media_id: str) -> Optional[MediaDetails]:
        """
        Récupère les informations détaillées pour un média spécifique.

        Retourne :
            Informations média détaillées, ou None si non trouvé

        Raises :
            ExternalServiceError : Si l'API est injoignable ou répond en erreur
        """
        ...

    @property
    @abstractmethod
    def source(self) -> str:
        """Retourne l'identifiant de la source API (ex: 'tmdb')."""
        ...
