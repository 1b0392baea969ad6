"""
Routes publiques : consultation du catalogue et notation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ...core.entities.session import SessionClaims
from ..deps import get_claims, get_container
from ..schemas import RateRequest, item_to_dict

router = APIRouter(prefix="/api")


@router.get("/catalogue")
def browse(
    request: Request,
    limit: int = Query(50),
    offset: int = Query(0),
    genre: Optional[str] = Query(None),
):
    """Fiches visibles, les plus récentes d'abord."""
    service = get_container(request).catalogue_service()
    items = service.browse(limit=limit, offset=offset, genre=genre)
    return {"items": [item_to_dict(item) for item in items], "count": len(items)}


@router.get("/catalogue/{item_id}")
def get_item(item_id: str, request: Request, claims: SessionClaims = Depends(get_claims)):
    service = get_container(request).catalogue_service()
    return item_to_dict(service.get(item_id, role=claims))


@router.post("/rate")
def rate(body: RateRequest, request: Request):
    """Ajoute un vote (1 à 5) et renvoie la nouvelle moyenne."""
    service = get_container(request).rating_service()
    result = service.rate(body.item_id, body.score)
    return {"success": True, "average": result.average, "count": result.count}
