"""
Entités de modération.

Entités représentant les propositions des contributeurs (PendingChange) et
les comptes contributeurs eux-mêmes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from cineamore.core.value_objects.item_patch import ItemPatch


class ChangeKind(Enum):
    """Type de modification proposée."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ChangeStatus(Enum):
    """Statut d'une proposition. APPROVED et REJECTED sont terminaux."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class PendingChange:
    """
    Une proposition de contributeur en attente de décision.

    Le contributeur ne modifie jamais l'entrée après sa création ; un
    administrateur la fait passer une seule fois de PENDING à APPROVED ou
    REJECTED. Les entrées ne sont jamais supprimées (journal d'audit).

    Attributs :
        id : Identifiant unique
        kind : create, update ou delete
        item_id : Fiche visée (None pour create)
        proposed : Champs proposés (movieData)
        previous : Instantané de la fiche avant modification (previousData)
        contributor_id : Identifiant du contributeur
        contributor_username : Nom du contributeur (dénormalisé pour l'affichage)
        status : pending, approved ou rejected
        created_at : Date de la proposition
        reviewed_at : Date de la décision
        reviewed_by : Administrateur ayant décidé
        review_notes : Note de l'administrateur (surtout pour les rejets)
    """

    kind: ChangeKind
    proposed: ItemPatch
    contributor_id: str
    contributor_username: str
    id: Optional[str] = None
    item_id: Optional[str] = None
    previous: Optional[dict[str, Any]] = None
    status: ChangeStatus = ChangeStatus.PENDING
    created_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    review_notes: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status is ChangeStatus.PENDING


@dataclass
class Contributor:
    """
    Compte contributeur, créé et désactivé uniquement par l'administrateur.

    Le mot de passe est stocké en clair : l'administrateur doit pouvoir le
    consulter et le réinitialiser.

    Attributs :
        id : Identifiant unique
        username : Identifiant de connexion (minuscules, sans "@" initial)
        password : Mot de passe
        display_name : Nom affiché
        is_active : Compte autorisé à se connecter
        has_seen_guide : Guide d'accueil déjà affiché
        created_at : Date de création
        created_by : Auteur de la création
    """

    username: str
    password: str
    id: Optional[str] = None
    display_name: str = ""
    is_active: bool = True
    has_seen_guide: bool = False
    created_at: Optional[datetime] = None
    created_by: str = "admin"

    @property
    def label(self) -> str:
        """Nom à afficher, avec repli sur l'identifiant."""
        return self.display_name or self.username


@dataclass(frozen=True)
class FieldDiff:
    """Différence sur un champ entre l'instantané et la proposition."""

    field: str
    before: Any = None
    after: Any = None


@dataclass
class BulkReviewResult:
    """Résultat d'une approbation ou d'un rejet en masse."""

    succeeded: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
