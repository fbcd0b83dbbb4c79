"""Image upload endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from storeadmin.api.schemas import ErrorResponse, UploadResponse
from storeadmin.infrastructure.storage import ImageStorage

router = APIRouter(tags=["Uploads"])


def get_storage() -> ImageStorage:
    """Get image storage using current settings."""
    return ImageStorage()


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Upload image",
    description="Store one image (multipart field 'image') and return its public URL.",
)
async def upload_image(
    image: Annotated[UploadFile, File(description="Image file")],
    storage: Annotated[ImageStorage, Depends(get_storage)],
) -> UploadResponse:
    """Store an uploaded image.

    Args:
        image: Multipart file.
        storage: Image storage.

    Returns:
        URL of the stored file.
    """
    return UploadResponse(url=await storage.save(image))
