import logging
import uuid
from typing import Optional

import boto3
from botocore.config import Config
from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse

from ..config import R2_ACCESS_KEY_ID, R2_ACCOUNT_ID, R2_BUCKET_NAME, R2_PUBLIC_URL, R2_SECRET_ACCESS_KEY

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Upload"])

PHOTO_PREFIX = "visitor-photos"
MAX_PHOTO_SIZE = 10 * 1024 * 1024  # 10MB

# Content type -> stored file extension
ALLOWED_IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
    "image/heif": "heif",
}


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def public_url(key: str) -> str:
    return f"{R2_PUBLIC_URL.rstrip('/')}/{key}"


@router.post("/upload-photo")
async def upload_photo(file: Optional[UploadFile] = File(None)):
    """Store a visitor photo taken at check-in and return its public URL"""
    if file is None:
        return JSONResponse(status_code=400, content={"error": "No file provided"})

    extension = ALLOWED_IMAGE_TYPES.get(file.content_type or "")
    if not extension:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid file type. Only PNG, JPEG, WebP, GIF and HEIC images are allowed."},
        )

    content = await file.read()
    if len(content) > MAX_PHOTO_SIZE:
        return JSONResponse(status_code=400, content={"error": "File too large. Maximum size is 10MB."})

    key = f"{PHOTO_PREFIX}/{uuid.uuid4()}.{extension}"
    logger.info(f"📤 Uploading visitor photo ({len(content)} bytes) to {key}")
    try:
        r2 = get_r2_client()
        r2.put_object(Bucket=R2_BUCKET_NAME, Key=key, Body=content, ContentType=file.content_type)
    except Exception as e:
        logger.error(f"❌ Failed to upload visitor photo: {str(e)}")
        return JSONResponse(status_code=500, content={"error": "Failed to upload photo"})

    logger.info(f"✅ Visitor photo uploaded: {key}")
    return {"url": public_url(key)}
