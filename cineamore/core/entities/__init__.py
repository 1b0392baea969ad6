"""
Business entities representing core domain concepts.

Exports:
- CatalogueItem: A published movie/series/anime record
- Visible / Quarantined: Tagged visibility variant of an item
- PendingChange: A contributor proposal awaiting an admin decision
- Contributor: A contributor account managed by the admin
- SessionClaims / Role: Caller identity resolved from a session token
"""

from cineamore.core.entities.catalogue import (
    CatalogueItem,
    Quarantined,
    Visibility,
    VisibilityState,
    Visible,
)
from cineamore.core.entities.moderation import (
    BulkReviewResult,
    ChangeKind,
    ChangeStatus,
    Contributor,
    FieldDiff,
    PendingChange,
)
from cineamore.core.entities.session import Role, SessionClaims

__all__ = [
    "CatalogueItem",
    "Visibility",
    "VisibilityState",
    "Visible",
    "Quarantined",
    "PendingChange",
    "ChangeKind",
    "ChangeStatus",
    "Contributor",
    "FieldDiff",
    "BulkReviewResult",
    "Role",
    "SessionClaims",
]
