"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web :
base de donnees (Resource avec cycle de vie explicite), unite de travail,
client TMDB, codec de session et services metier.
"""

from typing import Callable, Optional

from dependency_injector import containers, providers

from .adapters.api.cache import APICache
from .adapters.api.tmdb_client import TMDBClient
from .adapters.auth.session_tokens import SessionTokenCodec
from .config import Settings
from .infrastructure.persistence.database import init_database
from .infrastructure.persistence.repositories import SQLModelUnitOfWork
from .services.approval import ApprovalWorkflow
from .services.auth import AuthService
from .services.catalogue import CatalogueService
from .services.contributors import ContributorService
from .services.genre_classifier import GenreClassifier
from .services.ledger import PendingChangeLedger
from .services.ratings import RatingService
from .services.visibility import VisibilityService


def build_metadata_client(
    settings: Settings, cache: Callable[[], APICache]
) -> Optional[TMDBClient]:
    """Client TMDB, ou None si aucune cle n'est configuree."""
    if not settings.tmdb_enabled:
        return None
    return TMDBClient(
        api_key=settings.tmdb_api_key,
        cache=cache(),
        language=settings.tmdb_language,
    )


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.init_resources()  # Ouvre la base (Database.init)
        workflow = container.approval_workflow()
        container.shutdown_resources()  # Database.dispose

    Les tests remplacent la base par une SQLite en memoire :
        container.database.override(providers.Object(Database("sqlite://").init()))
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource : init au demarrage, dispose a l'arret
    database = providers.Resource(
        init_database,
        database_url=config.provided.database_url,
    )

    # Unite de travail - Factory : une instance par service
    unit_of_work = providers.Factory(
        SQLModelUnitOfWork,
        session_factory=database.provided.session,
    )

    # Sessions
    session_codec = providers.Singleton(
        SessionTokenCodec,
        secret=config.provided.session_secret,
        ttl_hours=config.provided.session_ttl_hours,
    )

    # Cache API - cree seulement si TMDB est configure
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.cache_dir,
    )

    tmdb_client = providers.Singleton(
        build_metadata_client,
        settings=config,
        cache=api_cache.provider,
    )

    # Services - Factory car ils dependent d'une unite de travail
    catalogue_service = providers.Factory(CatalogueService, uow=unit_of_work)

    pending_change_ledger = providers.Factory(PendingChangeLedger, uow=unit_of_work)

    approval_workflow = providers.Factory(ApprovalWorkflow, uow=unit_of_work)

    visibility_service = providers.Factory(
        VisibilityService,
        uow=unit_of_work,
        criteria=config.provided.quarantine_criteria,
        sentinel_genre=config.provided.sentinel_genre,
    )

    genre_classifier = providers.Factory(
        GenreClassifier,
        uow=unit_of_work,
        client=tmdb_client,
        batch_size=config.provided.classification_batch_size,
        year_tolerance=config.provided.classification_year_tolerance,
        delay_seconds=config.provided.classification_delay_seconds,
        sentinel_genre=config.provided.sentinel_genre,
    )

    rating_service = providers.Factory(RatingService, uow=unit_of_work)

    contributor_service = providers.Factory(ContributorService, uow=unit_of_work)

    auth_service = providers.Factory(
        AuthService,
        contributors=contributor_service,
        codec=session_codec,
        admin_password=config.provided.admin_password,
    )
