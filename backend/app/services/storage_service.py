"""
Storage area service: stand-alone images kept in blob storage.
"""
import logging
import time
from typing import BinaryIO, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.storage_image import StorageImage
from app.services.errors import ImageValidationError, RecordNotFoundError
from app.services.image_service import ImageService, commit_or_raise
from app.utils.logging import log_image_deleted, log_image_uploaded
from app.utils.metrics import images_deleted_total, images_uploaded_total

logger = logging.getLogger(__name__)

AREA = "storage"


class StorageService:
    """Service for stand-alone image business logic."""

    def __init__(self, images: ImageService):
        self.images = images

    @staticmethod
    async def list_images(db: AsyncSession) -> List[StorageImage]:
        """Get all stored images, newest first."""
        result = await db.execute(
            select(StorageImage).order_by(StorageImage.created_at.desc(), StorageImage.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_by_name(db: AsyncSession, image_name: str) -> Optional[StorageImage]:
        result = await db.execute(
            select(StorageImage).where(StorageImage.image_name == image_name)
        )
        return result.scalar_one_or_none()

    async def upload_image(
        self,
        db: AsyncSession,
        file: BinaryIO,
        content_type: Optional[str]
    ) -> StorageImage:
        """
        Upload an image to blob storage and record its metadata.

        Args:
            db: Database session
            file: Image bytes
            content_type: Declared MIME type of the upload

        Returns:
            The new StorageImage row

        Raises:
            ImageValidationError, BlobStoreError, ConsistencyError, PersistenceError
        """
        start_time = time.time()
        extension = self.images.parse_content_type(content_type)
        image_name = await self.images.generate_unique_name(db, StorageImage, extension)
        uri = await self.images.store_image(file, image_name, content_type)

        image = StorageImage(image_name=image_name, uri=uri)
        db.add(image)
        await commit_or_raise(db)
        await db.refresh(image)

        images_uploaded_total.labels(area=AREA).inc()
        log_image_uploaded(
            logger,
            area=AREA,
            image_name=image_name,
            record_id=image.id,
            duration_ms=(time.time() - start_time) * 1000
        )
        return image

    async def delete_image(self, db: AsyncSession, image_name: Optional[str]) -> None:
        """
        Delete an image's metadata, then its blob.

        The row is committed as deleted before the blob delete is attempted;
        if the blob delete fails the error is raised and the row stays gone.

        Raises:
            ImageValidationError: image_name missing
            RecordNotFoundError: no row with that name (no blob call made)
            BlobStoreError: blob delete failed
        """
        if not image_name:
            raise ImageValidationError("ImageName cant be null.")

        image = await self.get_by_name(db, image_name)
        if image is None:
            logger.error(f"Image meta data is not in database: {image_name}")
            raise RecordNotFoundError("Image meta data is not in database.")

        record_id = image.id
        await db.delete(image)
        await commit_or_raise(db)

        await self.images.delete_image(image_name)

        images_deleted_total.labels(area=AREA).inc()
        log_image_deleted(logger, area=AREA, image_name=image_name, record_id=record_id)
