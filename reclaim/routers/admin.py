import uuid
from datetime import datetime
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from reclaim.errors import InvalidState, NotFound
from reclaim.models.user import Actor
from reclaim.routers.claims import claim_response
from reclaim.routers.items import item_response
from reclaim.services.stats import DashboardCounts, dashboard_counts
from reclaim.services.store import LifecycleStore, get_store
from reclaim.utils.auth_helper import require_admin

router = APIRouter()


# Request / Response Models
class DecisionRequest(BaseModel):
    approve: bool


class ActivityItem(BaseModel):
    id: int
    timestamp: datetime
    user_id: str
    user_name: str
    action: str
    item_id: Optional[uuid.UUID] = None
    item_type: Optional[str] = None
    details: str


@router.get("/stats", response_model=DashboardCounts)
async def get_overview_stats(
    store: LifecycleStore = Depends(get_store),
    admin: Actor = Depends(require_admin),
):
    """Counts for the admin dashboard"""
    return dashboard_counts(store)


@router.get("/items")
async def get_items_for_review(
    status: Optional[Literal["pending", "verified", "claimed"]] = None,
    store: LifecycleStore = Depends(get_store),
    admin: Actor = Depends(require_admin),
):
    items = store.reports.list_reports(status=status)
    return {"items": [item_response(item, with_answers=True) for item in items]}


@router.get("/items/{item_id}")
async def get_item_for_review(
    item_id: uuid.UUID,
    store: LifecycleStore = Depends(get_store),
    admin: Actor = Depends(require_admin),
):
    try:
        item = store.reports.get_report(item_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

    claims = [c for c in store.claims.list_claims() if c.item_id == item.id]

    return {
        "item": item_response(item, with_answers=True),
        "claims": [claim_response(c) for c in claims],
    }


@router.post("/items/{item_id}/decide")
async def decide_item_report(
    item_id: uuid.UUID,
    payload: DecisionRequest,
    store: LifecycleStore = Depends(get_store),
    admin: Actor = Depends(require_admin),
):
    """Verify (publish) or reject a pending item report"""
    try:
        item = store.reports.decide_report(item_id, payload.approve, admin)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidState as e:
        raise HTTPException(status_code=409, detail=e.message)

    return {
        "ok": True,
        "status": item.status if item else "rejected",
        "message": "Item verified and published!" if payload.approve else "Item report rejected",
    }


@router.get("/claims")
async def get_claims_for_moderation(
    status: Optional[Literal["pending", "approved", "rejected"]] = None,
    store: LifecycleStore = Depends(get_store),
    admin: Actor = Depends(require_admin),
):
    """Claims with the item's stored answers alongside, for a side-by-side check"""
    results = []

    for claim in store.claims.list_claims(status=status):
        try:
            item = item_response(store.reports.get_report(claim.item_id), with_answers=True)
        except NotFound:
            item = None

        results.append({"claim": claim_response(claim), "item": item})

    return {"claims": results}


@router.get("/claims/lookup/{code}")
async def lookup_claim(
    code: str,
    store: LifecycleStore = Depends(get_store),
    admin: Actor = Depends(require_admin),
):
    claim = store.claims.lookup_claim_by_code(code.strip())
    if not claim:
        raise HTTPException(status_code=404, detail="No claim found with this code")

    try:
        item = item_response(store.reports.get_report(claim.item_id), with_answers=True)
    except NotFound:
        item = None

    return {"claim": claim_response(claim), "item": item}


@router.post("/claims/{claim_id}/decide")
async def decide_claim(
    claim_id: uuid.UUID,
    payload: DecisionRequest,
    store: LifecycleStore = Depends(get_store),
    admin: Actor = Depends(require_admin),
):
    """Approve or reject a pending claim; approval marks the item claimed"""
    try:
        claim = store.claims.decide_claim(claim_id, payload.approve, admin)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidState as e:
        raise HTTPException(status_code=409, detail=e.message)

    # the returned claim lets a client drop it from any lookup view it holds
    return {
        "ok": True,
        "claim": claim_response(claim),
        "message": "Claim approved!" if payload.approve else "Claim rejected",
    }


@router.get("/activity", response_model=List[ActivityItem])
async def get_recent_activity(
    limit: int = Query(50, ge=1, le=500),
    store: LifecycleStore = Depends(get_store),
    admin: Actor = Depends(require_admin),
):
    """Full activity log, newest first"""
    return [ActivityItem.model_validate(entry.model_dump()) for entry in store.activity.list_all(limit=limit)]
