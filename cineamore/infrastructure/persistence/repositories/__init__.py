"""
Implementations SQLModel des repositories.

Adaptateurs concrets des ports de persistance definis dans
core/ports/repositories.py.
"""

from cineamore.infrastructure.persistence.repositories.catalogue_repository import (
    SQLModelCatalogueRepository,
)
from cineamore.infrastructure.persistence.repositories.contributor_repository import (
    SQLModelContributorRepository,
)
from cineamore.infrastructure.persistence.repositories.pending_change_repository import (
    SQLModelPendingChangeRepository,
)
from cineamore.infrastructure.persistence.repositories.unit_of_work import (
    SQLModelUnitOfWork,
)

__all__ = [
    "SQLModelCatalogueRepository",
    "SQLModelContributorRepository",
    "SQLModelPendingChangeRepository",
    "SQLModelUnitOfWork",
]
