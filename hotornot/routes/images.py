"""
HotOrNot Backend — Image Route Handlers
=========================================

What:  POST /api/upload, GET /api/images, GET /api/images/{id}.
How:   Extracts the multipart file or path parameter, delegates to the
       upload service / image store, returns JSON.

Request Flow (upload):
    1. Client sends multipart/form-data with an `image` field
    2. Missing field → UploadError (400) raised by the service
    3. Extension, content type and declared size checked before reading
    4. UploadService validates the bytes, writes the file, inserts and
       commits the image row (file removed if that fails)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from hotornot.database import get_db_session
from hotornot.schemas.common import ErrorResponse
from hotornot.schemas.image import ImageResponse, UploadResponse
from hotornot.services.image_store import image_store
from hotornot.services.upload_service import upload_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Images"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        200: {"description": "Image stored and registered", "model": UploadResponse},
        400: {"description": "No file, empty file, or unsupported file", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Upload an image",
    description="Stores the multipart field `image` and registers it with zero votes.",
)
async def upload_image(
    image: Optional[UploadFile] = File(
        default=None,
        description="Image file (png, jpg, jpeg, gif, webp)",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> UploadResponse:
    """
    Upload a new image.

    The field is optional at the schema level so that a request without it
    reaches the service and gets the upload-specific 400 response instead of
    a generic schema error.
    """
    if image is None:
        return await upload_service.save_upload(db=db, filename=None, content=None)

    try:
        # Reject on headers alone before the body is pulled into memory
        upload_service.precheck(image.filename, image.size, image.content_type)
        content = await image.read()
        logger.info(
            "Received upload: filename=%s, size=%d bytes",
            image.filename or "unknown",
            len(content),
        )
        return await upload_service.save_upload(
            db=db,
            filename=image.filename,
            content=content,
            content_length=image.size,
            content_type=image.content_type,
        )
    finally:
        await image.close()


@router.get(
    "/images",
    response_model=List[ImageResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all images",
    description="All images in upload order, each with its rating (null until voted on).",
)
async def list_images(db: AsyncSession = Depends(get_db_session)) -> List[ImageResponse]:
    return await image_store.list_images(db)


@router.get(
    "/images/{image_id}",
    response_model=ImageResponse,
    responses={
        404: {"description": "Image not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single image",
)
async def get_image(
    image_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ImageResponse:
    return await image_store.get_image(db, image_id)
