"""
Configuration de la base de donnees pour CineAmore.

Ce module fournit :
- Database : proprietaire de l'engine, avec cycle de vie explicite init()/dispose()
- init_database : generateur utilise comme Resource par le container DI
  (initialisation au demarrage, liberation a l'arret)

Aucun engine global : l'engine appartient a l'instance Database injectee, ce
qui permet aux tests de fournir une base SQLite en memoire.

La base de donnees est configuree via CINEAMORE_DATABASE_URL (defaut: sqlite:///cineamore.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


class Database:
    """
    Engine SQLModel avec initialisation et liberation explicites.

    Utilisation :
        db = Database("sqlite:///cineamore.db")
        db.init()  # Cree les tables si necessaire
        with db.session() as session:
            ...
        db.dispose()
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        """
        Initialise la configuration sans ouvrir de connexion.

        Args:
            url: URL SQLAlchemy de la base
            echo: Active le log SQL de SQLAlchemy
        """
        self._url = url
        self._echo = echo
        self._engine: Optional[Engine] = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def engine(self) -> Engine:
        """Retourne l'engine. Leve RuntimeError si init() n'a pas ete appele."""
        if self._engine is None:
            raise RuntimeError("Database non initialisee : appeler init() d'abord")
        return self._engine

    def init(self) -> "Database":
        """
        Cree l'engine et les tables si elles n'existent pas deja.

        Idempotent : un second appel ne recree pas l'engine.
        """
        if self._engine is not None:
            return self

        kwargs: dict = {"echo": self._echo}
        if self._url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_sqlite(self._url):
                # Une seule connexion partagee, sinon chaque session voit une base vide
                kwargs["poolclass"] = StaticPool
            else:
                db_path = Path(self._url.replace("sqlite:///", ""))
                db_path.parent.mkdir(exist_ok=True, parents=True)

        self._engine = create_engine(self._url, **kwargs)

        # Import des modeles pour enregistrer leurs metadonnees
        from cineamore.infrastructure.persistence import models  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.debug(f"Base de donnees initialisee: {self._url}")
        return self

    def session(self) -> Session:
        """
        Ouvre une nouvelle session.

        expire_on_commit=False : les modeles restent lisibles apres le commit,
        le temps de les convertir en entites.
        """
        return Session(self.engine, expire_on_commit=False)

    def dispose(self) -> None:
        """Ferme toutes les connexions du pool."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


def init_database(database_url: str) -> Generator[Database, None, None]:
    """
    Resource DI : initialise la base au demarrage et la libere a l'arret.

    Utilisation dans le container :
        database = providers.Resource(init_database, database_url=...)
        container.init_resources()      # -> Database.init()
        container.shutdown_resources()  # -> Database.dispose()
    """
    database = Database(database_url).init()
    try:
        yield database
    finally:
        database.dispose()
