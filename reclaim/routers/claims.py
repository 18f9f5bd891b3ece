import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from reclaim.errors import NotFound
from reclaim.models.claim import Claim
from reclaim.models.user import Actor
from reclaim.routers.items import item_response
from reclaim.services.store import LifecycleStore, get_store
from reclaim.utils.auth_helper import get_actor
from reclaim.utils.s3_service import resolve_photo_ref


router = APIRouter()


class ClaimCreateRequest(BaseModel):
    item_id: uuid.UUID
    answers: List[str] = Field(min_length=1, max_length=3)
    proof_photo_ref: Optional[str] = None


def claim_response(claim: Claim) -> dict:
    data = claim.model_dump()
    data["proof_photo_ref"] = resolve_photo_ref(claim.proof_photo_ref)
    return data


@router.post("/create")
async def create_claim(
    payload: ClaimCreateRequest,
    store: LifecycleStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    try:
        item = store.reports.get_report(payload.item_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

    if item.status != "verified":
        raise HTTPException(status_code=400, detail="This item is not open for claims")

    if not any(answer.strip() for answer in payload.answers):
        raise HTTPException(status_code=400, detail="Answer at least one security question")

    if len(payload.answers) > len(item.security_questions):
        raise HTTPException(status_code=400, detail="More answers than security questions")

    # Prevent duplicate claim by same user
    existing = [
        c for c in store.claims.list_claims(status="pending", claimant_id=actor.user_id)
        if c.item_id == item.id
    ]
    if existing:
        raise HTTPException(status_code=409, detail="Already a pending claim for this item exists")

    try:
        claim = store.claims.submit_claim(
            item_id=item.id,
            claimant=actor,
            answers=payload.answers,
            proof_photo_ref=payload.proof_photo_ref,
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

    return {
        "ok": True,
        "claim_id": str(claim.id),
        "claim_code": claim.claim_code,
    }


@router.get("/mine")
async def get_my_claims(
    store: LifecycleStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    results = []

    for claim in store.claims.list_claims(claimant_id=actor.user_id):
        try:
            item = store.reports.get_report(claim.item_id)
        except NotFound:
            continue

        results.append({"claim": claim_response(claim), "item": item_response(item)})

    return {"claims": results}


@router.get("/{claim_id}")
async def get_claim_status(
    claim_id: uuid.UUID,
    store: LifecycleStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    """
    Get claim by ID - accessible by the claimant and staff.
    """
    try:
        claim = store.claims.get_claim(claim_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

    if claim.claimant_id != actor.user_id and not actor.is_admin:
        raise HTTPException(status_code=403, detail="Not authorized to view this claim")

    return {"claim": claim_response(claim)}
