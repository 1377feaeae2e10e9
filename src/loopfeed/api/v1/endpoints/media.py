# src/loopfeed/api/v1/endpoints/media.py
"""Media upload endpoint; posts reference the returned URL."""

import logging

from fastapi import APIRouter, File, Form, UploadFile, status
from pydantic import BaseModel

from loopfeed.api.v1.dependencies import CurrentUserDep, MediaStorageDep
from loopfeed.services.errors import InvalidInputError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])

MEDIA_FOLDERS = ("videos", "images", "thumbnails", "avatars", "covers")


class MediaResponse(BaseModel):
    url: str
    filename: str
    size: int


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
def upload_media(
    current_user: CurrentUserDep,
    storage: MediaStorageDep,
    file: UploadFile = File(...),
    folder: str = Form("images"),
) -> MediaResponse:
    """Store an uploaded file and return its public URL."""
    if folder not in MEDIA_FOLDERS:
        raise InvalidInputError(f"Unknown media folder: {folder}")
    data = file.file.read()
    stored = storage.save(data, file.filename or "upload", folder=folder)
    logger.info("User %s uploaded %s", current_user.id, stored.url)
    return MediaResponse(url=stored.url, filename=stored.filename, size=stored.size)
