"""Couche de persistance SQLModel (base, modeles, repositories)."""

from cineamore.infrastructure.persistence.database import Database, init_database

__all__ = ["Database", "init_database"]
