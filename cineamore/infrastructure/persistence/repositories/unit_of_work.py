"""
Unite de travail SQLModel.

Partage une seule session entre les trois repositories. La sortie du bloc
`with` commit si aucune exception n'est survenue, rollback sinon. Les
erreurs SQLAlchemy sont converties en StoreError.
"""

from types import TracebackType
from typing import Callable, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from cineamore.core.errors import StoreError
from cineamore.core.ports.repositories import IUnitOfWork
from cineamore.infrastructure.persistence.repositories.catalogue_repository import (
    SQLModelCatalogueRepository,
)
from cineamore.infrastructure.persistence.repositories.contributor_repository import (
    SQLModelContributorRepository,
)
from cineamore.infrastructure.persistence.repositories.pending_change_repository import (
    SQLModelPendingChangeRepository,
)


class SQLModelUnitOfWork(IUnitOfWork):
    """
    Transaction partagee par les repositories SQLModel.

    Example:
        uow = SQLModelUnitOfWork(database.session)
        with uow:
            uow.catalogue.save(item)
            uow.pending_changes.mark_reviewed(...)
        # les deux ecritures sont commitees ensemble, ou aucune
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._session: Optional[Session] = None

    def __enter__(self) -> "SQLModelUnitOfWork":
        if self._session is not None:
            raise RuntimeError("Unite de travail deja ouverte")
        self._session = self._session_factory()
        self.catalogue = SQLModelCatalogueRepository(self._session)
        self.pending_changes = SQLModelPendingChangeRepository(self._session)
        self.contributors = SQLModelContributorRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        session = self._session
        self._session = None
        if session is None:
            return
        try:
            if exc_type is None:
                session.commit()
            else:
                session.rollback()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Echec du commit: {e}")
            raise StoreError("La base de donnees a refuse l'ecriture", {"cause": str(e)}) from e
        finally:
            session.close()

        if isinstance(exc, SQLAlchemyError):
            logger.error(f"Transaction annulee: {exc}")
            raise StoreError("Erreur de base de donnees", {"cause": str(exc)}) from exc
