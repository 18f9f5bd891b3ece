from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from reclaim.errors import ExternalServiceFailure, NotFound
from reclaim.models.user import Actor
from reclaim.routers.auth import get_profiles
from reclaim.routers.claims import claim_response
from reclaim.routers.items import item_response
from reclaim.services.identity import ProfileStore
from reclaim.services.stats import user_summary
from reclaim.services.store import LifecycleStore, get_store
from reclaim.utils.auth_helper import get_actor


router = APIRouter()


@router.get("/me")
async def get_my_profile(
    store: LifecycleStore = Depends(get_store),
    profiles: ProfileStore = Depends(get_profiles),
    actor: Actor = Depends(get_actor),
):
    try:
        # Firestore read is blocking
        profile = await run_in_threadpool(profiles.get_profile, actor.user_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except ExternalServiceFailure as e:
        raise HTTPException(status_code=502, detail=e.message)

    reported = store.reports.list_reports(reported_by=actor.user_id)

    claimed = []
    for claim in store.claims.list_claims(claimant_id=actor.user_id):
        try:
            item = store.reports.get_report(claim.item_id)
        except NotFound:
            continue
        claimed.append({"claim": claim_response(claim), "item": item_response(item)})

    return {
        "user": profile.model_dump(),
        "stats": user_summary(store, actor.user_id),
        "reported_items": [item_response(item, with_answers=True) for item in reported],
        "claimed_items": claimed,
    }


@router.get("/activity")
async def get_my_activity(
    limit: int = Query(50, ge=1, le=500),
    store: LifecycleStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    return {"activities": store.activity.list_for_user(actor.user_id, limit=limit)}
