"""
Corps de requête (pydantic) et sérialisation des réponses.

Les champs d'une fiche sont transmis tels quels (dict) : leur validation
est faite par ItemPatch, qui distingue un champ absent d'un champ à null.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from ..core.entities.catalogue import CatalogueItem
from ..core.entities.moderation import BulkReviewResult, Contributor, FieldDiff, PendingChange
from ..services.genre_classifier import ClassificationReport
from ..services.visibility import QuarantinePage, SweepResult


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: str = ""


class RateRequest(BaseModel):
    item_id: str
    score: Any = None


class ProposalRequest(BaseModel):
    kind: str
    item_id: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)


class RejectRequest(BaseModel):
    note: Optional[str] = None


class BulkReviewRequest(BaseModel):
    ids: list[str] = Field(default_factory=list)
    note: Optional[str] = None


class QuarantineRequest(BaseModel):
    reason: Optional[str] = None


class ItemRequest(BaseModel):
    data: dict[str, Any] = Field(default_factory=dict)


class CorrectionRequest(BaseModel):
    item_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    restore: bool = False


class BackfillRequest(BaseModel):
    limit: Optional[int] = Field(default=None, ge=1, le=50)


class ContributorCreateRequest(BaseModel):
    username: str
    password: str
    display_name: str = ""


class ContributorUpdateRequest(BaseModel):
    password: Optional[str] = None
    display_name: Optional[str] = None
    is_active: Optional[bool] = None


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def item_to_dict(item: CatalogueItem) -> dict[str, Any]:
    """Fiche publique ; la visibilité n'expose une raison qu'en quarantaine."""
    return {
        "id": item.id,
        "legacy_id": item.legacy_id,
        "title": item.title,
        "original": item.original,
        "year": item.year,
        "director": item.director,
        "plot": item.plot,
        "notes": item.notes,
        "lb": item.lb,
        "poster": item.poster,
        "backdrop": item.backdrop,
        "genres": list(item.genres),
        "download_links": [
            {"label": link.label, "url": link.url, "added_at": _iso(link.added_at)}
            for link in item.download_links
        ],
        "rating": {
            "average": item.average_rating,
            "count": item.rating_count,
        },
        "visibility": {
            "state": item.visibility.state.value,
            "reason": item.visibility.reason,
            "updated_at": _iso(item.visibility.updated_at),
        },
        "added_at": _iso(item.added_at),
    }


def change_to_dict(change: PendingChange) -> dict[str, Any]:
    return {
        "id": change.id,
        "kind": change.kind.value,
        "item_id": change.item_id,
        "data": change.proposed.to_dict(),
        "previous": change.previous,
        "contributor_id": change.contributor_id,
        "contributor_username": change.contributor_username,
        "status": change.status.value,
        "created_at": _iso(change.created_at),
        "reviewed_at": _iso(change.reviewed_at),
        "reviewed_by": change.reviewed_by,
        "review_notes": change.review_notes,
    }


def diff_to_dict(diff: FieldDiff) -> dict[str, Any]:
    return {"field": diff.field, "before": diff.before, "after": diff.after}


def contributor_to_dict(contributor: Contributor) -> dict[str, Any]:
    # Le mot de passe est visible par l'administrateur, exigence produit
    return {
        "id": contributor.id,
        "username": contributor.username,
        "password": contributor.password,
        "display_name": contributor.display_name,
        "is_active": contributor.is_active,
        "has_seen_guide": contributor.has_seen_guide,
        "created_at": _iso(contributor.created_at),
        "created_by": contributor.created_by,
    }


def bulk_to_dict(result: BulkReviewResult) -> dict[str, Any]:
    return {
        "succeeded": result.succeeded,
        "errors": [{"id": pid, "error": message} for pid, message in result.errors],
    }


def quarantine_page_to_dict(page: QuarantinePage) -> dict[str, Any]:
    return {
        "total": page.total,
        "showing": page.showing,
        "films": [
            {
                "id": entry.id,
                "title": entry.title,
                "year": entry.year,
                "director": entry.director,
                "reason": entry.reason,
            }
            for entry in page.items
        ],
    }


def sweep_to_dict(result: SweepResult) -> dict[str, Any]:
    return {
        "scanned": result.scanned,
        "quarantined": result.quarantined,
        "reasons": result.reasons,
    }


def report_to_dict(report: ClassificationReport) -> dict[str, Any]:
    return {
        "processed": report.processed,
        "remaining": report.remaining,
        "results": [
            {
                "item_id": outcome.item_id,
                "title": outcome.title,
                "cleaned_title": outcome.cleaned_title,
                "status": outcome.status.value,
                "genres": list(outcome.genres),
                "error": outcome.error,
            }
            for outcome in report.results
        ],
    }
