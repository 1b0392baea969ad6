"""
Routes administrateur : édition du catalogue, décisions sur les propositions,
quarantaine, classification des genres et comptes contributeurs.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ...core.entities.session import SessionClaims
from ..deps import get_container, require_admin_claims
from ..schemas import (
    BackfillRequest,
    BulkReviewRequest,
    ContributorCreateRequest,
    ContributorUpdateRequest,
    CorrectionRequest,
    ItemRequest,
    QuarantineRequest,
    RejectRequest,
    bulk_to_dict,
    change_to_dict,
    contributor_to_dict,
    diff_to_dict,
    item_to_dict,
    quarantine_page_to_dict,
    report_to_dict,
    sweep_to_dict,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin")


# Catalogue


@router.post("/items", status_code=201)
def create_item(
    body: ItemRequest,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    service = get_container(request).catalogue_service()
    item = service.create(body.data, role=claims)
    return {"success": True, "film": item_to_dict(item)}


@router.patch("/items/{item_id}")
def update_item(
    item_id: str,
    body: ItemRequest,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    service = get_container(request).catalogue_service()
    item = service.update(item_id, body.data, role=claims)
    return {"success": True, "film": item_to_dict(item)}


@router.delete("/items/{item_id}")
def delete_item(
    item_id: str,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    get_container(request).catalogue_service().delete(item_id, role=claims)
    return {"success": True}


# Propositions


@router.get("/pending")
def list_pending(
    request: Request,
    contributor_id: Optional[str] = Query(None),
    claims: SessionClaims = Depends(require_admin_claims),
):
    ledger = get_container(request).pending_change_ledger()
    changes = ledger.list_pending(contributor_id=contributor_id)
    return {"total": len(changes), "changes": [change_to_dict(c) for c in changes]}


@router.get("/pending/{pending_id}")
def pending_detail(
    pending_id: str,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    """Proposition avec la vue comparative avant/après."""
    ledger = get_container(request).pending_change_ledger()
    change = ledger.get(pending_id)
    return {
        "change": change_to_dict(change),
        "diff": [diff_to_dict(d) for d in ledger.diff(change)],
    }


@router.post("/pending/bulk-approve")
def bulk_approve(
    body: BulkReviewRequest,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    workflow = get_container(request).approval_workflow()
    return bulk_to_dict(workflow.bulk_approve(body.ids, reviewer=claims.user, role=claims))


@router.post("/pending/bulk-reject")
def bulk_reject(
    body: BulkReviewRequest,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    workflow = get_container(request).approval_workflow()
    result = workflow.bulk_reject(body.ids, reviewer=claims.user, role=claims, note=body.note)
    return bulk_to_dict(result)


@router.post("/pending/{pending_id}/approve")
def approve(
    pending_id: str,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    workflow = get_container(request).approval_workflow()
    change = workflow.approve(pending_id, reviewer=claims.user, role=claims)
    return {"success": True, "change": change_to_dict(change)}


@router.post("/pending/{pending_id}/reject")
def reject(
    pending_id: str,
    request: Request,
    body: Optional[RejectRequest] = None,
    claims: SessionClaims = Depends(require_admin_claims),
):
    workflow = get_container(request).approval_workflow()
    note = body.note if body else None
    change = workflow.reject(pending_id, reviewer=claims.user, role=claims, note=note)
    return {"success": True, "change": change_to_dict(change)}


# Quarantaine


@router.get("/quarantined")
def list_quarantined(
    request: Request,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    claims: SessionClaims = Depends(require_admin_claims),
):
    service = get_container(request).visibility_service()
    page = service.list_quarantined(role=claims, limit=limit, offset=offset)
    return {"success": True, **quarantine_page_to_dict(page)}


@router.post("/quarantined")
def correct_quarantined(
    body: CorrectionRequest,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    """Corrige une fiche et la restaure si `restore` est vrai."""
    service = get_container(request).visibility_service()
    item = service.correct_and_maybe_restore(
        body.item_id, body.data, restore=body.restore, role=claims
    )
    return {"success": True, "film": item_to_dict(item)}


@router.post("/quarantine-sweep")
def quarantine_sweep(request: Request, claims: SessionClaims = Depends(require_admin_claims)):
    service = get_container(request).visibility_service()
    return {"success": True, **sweep_to_dict(service.sweep(role=claims))}


@router.post("/items/{item_id}/quarantine")
def quarantine_item(
    item_id: str,
    request: Request,
    body: Optional[QuarantineRequest] = None,
    claims: SessionClaims = Depends(require_admin_claims),
):
    service = get_container(request).visibility_service()
    item = service.quarantine(item_id, role=claims, reason=body.reason if body else None)
    return {"success": True, "film": item_to_dict(item)}


@router.post("/backfill-genres")
async def backfill_genres(
    request: Request,
    body: Optional[BackfillRequest] = None,
    claims: SessionClaims = Depends(require_admin_claims),
):
    """Classe un lot de fiches sans genre via TMDB."""
    classifier = get_container(request).genre_classifier()
    report = await classifier.classify_batch(limit=body.limit if body else None)
    logger.info("Backfill genres: %d traitees, %d restantes", report.processed, report.remaining)
    return report_to_dict(report)


# Contributeurs


@router.get("/contributors")
def list_contributors(request: Request, claims: SessionClaims = Depends(require_admin_claims)):
    service = get_container(request).contributor_service()
    return {"contributors": [contributor_to_dict(c) for c in service.list_all(role=claims)]}


@router.post("/contributors", status_code=201)
def create_contributor(
    body: ContributorCreateRequest,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    service = get_container(request).contributor_service()
    contributor = service.create(
        body.username,
        body.password,
        role=claims,
        display_name=body.display_name,
        created_by=claims.user,
    )
    return {"success": True, "contributor": contributor_to_dict(contributor)}


@router.patch("/contributors/{contributor_id}")
def update_contributor(
    contributor_id: str,
    body: ContributorUpdateRequest,
    request: Request,
    claims: SessionClaims = Depends(require_admin_claims),
):
    service = get_container(request).contributor_service()
    contributor = service.update(
        contributor_id,
        role=claims,
        password=body.password,
        display_name=body.display_name,
        is_active=body.is_active,
    )
    return {"success": True, "contributor": contributor_to_dict(contributor)}
