"""
FastAPI dependencies wiring the image services to the configured blob store.
"""
from typing import Optional

from fastapi import Depends, UploadFile

from app.services.image_service import ImageService
from app.services.storage_service import StorageService
from app.services.team_service import TeamService
from app.storage import BlobStorage, get_blob_storage


def get_image_service(storage: BlobStorage = Depends(get_blob_storage)) -> ImageService:
    return ImageService(storage)


def get_storage_service(images: ImageService = Depends(get_image_service)) -> StorageService:
    return StorageService(images)


def get_team_service(images: ImageService = Depends(get_image_service)) -> TeamService:
    return TeamService(images)


def has_upload(file: Optional[UploadFile]) -> bool:
    """True when a file input was actually filled in (browsers post empty parts)."""
    return file is not None and bool(file.filename)
