import uuid
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from PIL import UnidentifiedImageError

from reclaim.errors import NotFound
from reclaim.models.item import ItemReport
from reclaim.models.user import Actor
from reclaim.services.store import LifecycleStore, get_store
from reclaim.utils.auth_helper import get_actor, get_current_user_optional
from reclaim.utils.form_validator import validate_report_item_form
from reclaim.utils.s3_service import compress_image, resolve_photo_ref, upload_to_s3


router = APIRouter()

MAX_UPLOAD_SIZE_MB = 5
MAX_UPLOAD_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024


def item_response(item: ItemReport, with_answers: bool = False) -> dict:
    data = item.model_dump() if with_answers else item.public_dict()
    data["photo_ref"] = resolve_photo_ref(item.photo_ref)
    return data


@router.post("/create")
async def report_item(
    item_type: str = Form(...),
    location: str = Form(...),
    date_found: str = Form(...),
    time_found: str = Form(...),
    question1: str = Form(...),
    answer1: str = Form(...),
    question2: Optional[str] = Form(None),
    answer2: Optional[str] = Form(None),
    question3: Optional[str] = Form(None),
    answer3: Optional[str] = Form(None),
    other_details: Optional[str] = Form(None),
    photo_url: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    store: LifecycleStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    form = validate_report_item_form(
        item_type=item_type,
        location=location,
        date_found=date_found,
        time_found=time_found,
        question1=question1,
        answer1=answer1,
        question2=question2,
        answer2=answer2,
        question3=question3,
        answer3=answer3,
        other_details=other_details,
    )

    photo_ref = (photo_url or "").strip() or None

    # read image into memory and upload
    if image is not None and image.filename:
        raw_bytes = await image.read()

        if len(raw_bytes) > MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=400, detail=f"Image exceeds {MAX_UPLOAD_SIZE_MB}MB limit")

        try:
            buffer, ext = compress_image(raw_bytes)
        except UnidentifiedImageError:
            raise HTTPException(status_code=400, detail="File is not a readable image")

        photo_ref = upload_to_s3(buffer, ext, image.filename)

    item = store.reports.submit_report(
        item_type=form.item_type,
        other_details=form.other_details,
        location=form.location,
        date_found=form.date_found,
        time_found=form.time_found,
        photo_ref=photo_ref,
        questions=[q.model_dump() for q in form.questions],
        reporter=actor,
    )

    return {"ok": True, "item_id": str(item.id), "status": item.status}


@router.get("/all")
async def get_board_items(store: LifecycleStore = Depends(get_store)):
    # only staff-verified reports are published
    items = store.reports.list_reports(status="verified")

    return {
        "items": [item_response(item) for item in items],
    }


@router.get("/{item_id}")
async def get_item(
    item_id: uuid.UUID,
    store: LifecycleStore = Depends(get_store),
    current_user=Depends(get_current_user_optional),
):
    try:
        item = store.reports.get_report(item_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

    viewer_id = current_user["sub"] if current_user else None
    is_admin = bool(current_user) and current_user.get("role") == "admin"
    is_reporter = viewer_id == item.reported_by

    # unverified reports stay private to their reporter and staff
    if item.status == "pending" and not (is_admin or is_reporter):
        raise HTTPException(status_code=404, detail="Item not found")

    return {"item": item_response(item, with_answers=is_admin or is_reporter)}
