"""
Fixtures pytest partagees pour les tests CineAmore.

Ce module contient les fixtures communes utilisees dans les tests:
- Base SQLite en memoire et unite de travail
- Fabrique de fiches du catalogue
- Contributeur enregistre et sessions (admin, contributeur)
"""

from typing import Callable, Iterator

import pytest

from cineamore.core.entities import CatalogueItem, Contributor, Role, SessionClaims
from cineamore.infrastructure.persistence.database import Database
from cineamore.infrastructure.persistence.repositories import SQLModelUnitOfWork


@pytest.fixture
def database() -> Iterator[Database]:
    """Base SQLite en memoire, tables creees."""
    db = Database("sqlite://").init()
    yield db
    db.dispose()


@pytest.fixture
def uow(database: Database) -> SQLModelUnitOfWork:
    """Unite de travail sur la base de test."""
    return SQLModelUnitOfWork(database.session)


@pytest.fixture
def make_item(uow: SQLModelUnitOfWork) -> Callable[..., CatalogueItem]:
    """
    Fabrique de fiches persistees.

    Par defaut la fiche est complete (genre, affiche, synopsis) et visible.
    Les kwargs remplacent les valeurs par defaut.
    """

    def _make(**overrides) -> CatalogueItem:
        values = {
            "title": "Alien",
            "year": 1979,
            "director": "Ridley Scott",
            "plot": "Un vaisseau recoit un signal de detresse.",
            "poster": "https://image.tmdb.org/t/p/w780/alien.jpg",
            "genres": ("Horror", "Science Fiction"),
        }
        values.update(overrides)
        with uow:
            return uow.catalogue.add(CatalogueItem(**values))

    return _make


@pytest.fixture
def contributor(uow: SQLModelUnitOfWork) -> Contributor:
    """Contributeur actif enregistre."""
    with uow:
        return uow.contributors.add(
            Contributor(username="marie", password="secret", display_name="Marie")
        )


@pytest.fixture
def contributor_claims(contributor: Contributor) -> SessionClaims:
    return SessionClaims(
        role=Role.CONTRIBUTOR,
        user=contributor.username,
        contributor_id=contributor.id,
        display_name=contributor.label,
    )


@pytest.fixture
def admin_claims() -> SessionClaims:
    return SessionClaims(role=Role.ADMIN, user="admin", display_name="Admin")
