import io
import os
from datetime import datetime, timezone
from functools import lru_cache
from PIL import Image
import boto3

from reclaim.utils.logging_config import get_logger

logger = get_logger(__name__)

FOLDER = "uploads"


def get_bucket():
    return os.getenv("R2_BUCKET")


@lru_cache(maxsize=1)
def get_s3_client():
    return boto3.client(
        service_name="s3",
        endpoint_url=f"https://{os.getenv('CLOUDFLARE_ACCOUNT_ID')}.r2.cloudflarestorage.com",
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        region_name="auto",
    )


def compress_image(data: bytes, max_width=1400, quality=80):
    img = Image.open(io.BytesIO(data))
    img = img.convert("RGB")

    # Resize while keeping aspect ratio
    w, h = img.size
    if w > max_width:
        new_height = int(h * (max_width / w))
        img = img.resize((max_width, new_height), Image.LANCZOS)

    buffer = io.BytesIO()

    try:
        img.save(buffer, format="WEBP", quality=quality, method=6)
        ext = "webp"
    except (OSError, KeyError) as e:
        logger.warning("WebP encoding failed, falling back to JPEG: %s", e)

        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=quality, optimize=True)
        ext = "jpg"

    buffer.seek(0)
    return buffer, ext


def upload_to_s3(buffer: io.BytesIO, ext: str, original_name: str, folder: str = FOLDER):
    base = os.path.splitext(os.path.basename(original_name or "photo"))[0]

    ts = int(datetime.now(timezone.utc).timestamp())
    key = f"{folder}/{base}-{ts}.{ext}"

    get_s3_client().upload_fileobj(buffer, get_bucket(), key)
    logger.info("uploaded object key=%s", key)

    return key


def generate_signed_url(key: str, expires_in=3600):
    try:
        return get_s3_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": get_bucket(), "Key": key},
            ExpiresIn=expires_in,
        )
    except Exception as e:
        logger.warning("Error generating signed URL for %s: %s", key, e)
        return None


def resolve_photo_ref(ref: str | None):
    """Full URLs pass through; storage keys become presigned URLs."""
    if not ref:
        return None

    if ref.startswith(("http://", "https://")):
        return ref

    return generate_signed_url(ref)
