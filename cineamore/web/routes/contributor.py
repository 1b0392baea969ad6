"""
Routes contributeur : dépôt de propositions et suivi.
"""

from fastapi import APIRouter, Depends, Query, Request

from ...core.entities.session import SessionClaims
from ..deps import get_container, require_contributor_claims
from ..schemas import ProposalRequest, change_to_dict

router = APIRouter(prefix="/api/contributor")


@router.post("/changes", status_code=201)
def propose(
    body: ProposalRequest,
    request: Request,
    claims: SessionClaims = Depends(require_contributor_claims),
):
    """Dépose une proposition create, update ou delete."""
    ledger = get_container(request).pending_change_ledger()
    change = ledger.propose(body.kind, body.item_id, body.data, claims)
    return {"success": True, "change": change_to_dict(change)}


@router.get("/changes")
def my_changes(
    request: Request,
    limit: int = Query(50, ge=1, le=200),
    claims: SessionClaims = Depends(require_contributor_claims),
):
    """Historique des propositions du contributeur connecté."""
    ledger = get_container(request).pending_change_ledger()
    changes = ledger.list_for_contributor(claims.contributor_id, limit=limit)
    return {"changes": [change_to_dict(change) for change in changes]}


@router.post("/guide-seen")
def guide_seen(request: Request, claims: SessionClaims = Depends(require_contributor_claims)):
    service = get_container(request).contributor_service()
    service.mark_guide_seen(claims.contributor_id)
    return {"success": True}
