from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from PIL import UnidentifiedImageError

from reclaim.models.user import Actor
from reclaim.routers.items import MAX_UPLOAD_BYTES, MAX_UPLOAD_SIZE_MB
from reclaim.utils.auth_helper import get_actor
from reclaim.utils.s3_service import compress_image, generate_signed_url, upload_to_s3


router = APIRouter()


@router.post("/upload")
async def upload_photo(
    image: UploadFile = File(...),
    actor: Actor = Depends(get_actor),
):
    """Store a photo and hand back a key usable as photo_ref or proof_photo_ref."""
    raw_bytes = await image.read()

    if not raw_bytes:
        raise HTTPException(status_code=400, detail="Empty upload")

    if len(raw_bytes) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail=f"Image exceeds {MAX_UPLOAD_SIZE_MB}MB limit")

    try:
        buffer, ext = compress_image(raw_bytes)
    except UnidentifiedImageError:
        raise HTTPException(status_code=400, detail="File is not a readable image")

    key = upload_to_s3(buffer, ext, image.filename)

    return {
        "key": key,
        "url": generate_signed_url(key),
    }
