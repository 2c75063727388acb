"""
Image upload/delete orchestration shared by the storage and team areas.

Flow for an upload:
1. Validate the declared content type against the configured image formats
2. Generate random names until one is unused in the target table
3. Upload the bytes to blob storage
4. Resolve the public URI from the storage listing
5. (caller) Insert or update the metadata row

Blob store and database are not transactional together: a failure after
step 3 leaves the blob in place, and deletes remove the row before the blob.
"""
import asyncio
import logging
import time
from typing import BinaryIO, Callable, Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.config import settings
from app.services.errors import (
    BlobStoreError,
    ConsistencyError,
    ImageValidationError,
    NameGenerationError,
    PersistenceError,
    RecordNotFoundError,
)
from app.storage.base import BlobResponse, BlobStorage
from app.utils.logging import log_storage_failure
from app.utils.metrics import storage_operation_duration_seconds, storage_operation_failures_total
from app.utils.name_generator import generate_random_name

logger = logging.getLogger(__name__)

NOT_AN_IMAGE_MESSAGE = "You can only upload an image!"


class ImageService:
    """
    Validates image uploads and drives the blob store.

    Responsibilities:
    - Check content types against the allow-list
    - Generate collision-free file names
    - Upload/delete blobs and resolve their URIs
    """

    def __init__(
        self,
        storage: BlobStorage,
        image_formats: Optional[Iterable[str]] = None,
        name_generator: Callable[[str, int], str] = generate_random_name,
        name_length: Optional[int] = None,
        max_name_attempts: Optional[int] = None,
    ):
        self.storage = storage
        formats = settings.image_formats if image_formats is None else image_formats
        self.image_formats = tuple(fmt.lower() for fmt in formats)
        self.name_generator = name_generator
        self.name_length = name_length or settings.generated_name_length
        self.max_name_attempts = max_name_attempts or settings.name_generation_max_attempts

    def parse_content_type(self, content_type: Optional[str]) -> str:
        """
        Validate a declared content type and return its subtype.

        Args:
            content_type: MIME type such as "image/png"

        Returns:
            The lower-cased subtype, used as the file extension

        Raises:
            ImageValidationError: not an image, or a format not in the allow-list
        """
        mime = (content_type or "").split(";", 1)[0].strip().lower()
        kind, _, subtype = mime.partition("/")
        if kind != "image" or not subtype:
            raise ImageValidationError(NOT_AN_IMAGE_MESSAGE)
        if subtype not in self.image_formats:
            raise ImageValidationError(f"Formats supported: {', '.join(self.image_formats)}")
        return subtype

    async def generate_unique_name(self, db: AsyncSession, model, extension: str) -> str:
        """
        Generate a file name not yet used by any row of model.

        The check and the later insert are separate statements; the unique
        column on image_name rejects the loser of a concurrent race.
        """
        for attempt in range(1, self.max_name_attempts + 1):
            name = self.name_generator(extension, self.name_length)
            result = await db.execute(
                select(func.count()).select_from(model).where(model.image_name == name)
            )
            if result.scalar_one() == 0:
                return name
            logger.debug(f"Generated name {name} already taken (attempt {attempt})")

        raise NameGenerationError(
            f"Could not generate an unused file name after {self.max_name_attempts} attempts"
        )

    async def _call_storage(self, operation: str, fn, *args):
        start_time = time.time()
        try:
            return await asyncio.to_thread(fn, *args)
        finally:
            storage_operation_duration_seconds.labels(operation=operation).observe(
                time.time() - start_time
            )

    def _raise_on_error(self, operation: str, response: BlobResponse, image_name: str) -> None:
        if not response.error:
            return
        storage_operation_failures_total.labels(operation=operation).inc()
        log_storage_failure(
            logger,
            operation,
            response.status or "unknown error",
            image_name=response.name or image_name
        )
        raise BlobStoreError(response.status, operation=operation)

    async def upload_blob(self, file: BinaryIO, image_name: str, content_type: Optional[str] = None) -> None:
        """Upload bytes under image_name. Raises BlobStoreError on failure."""
        response = await self._call_storage("upload", self.storage.upload, image_name, file, content_type)
        self._raise_on_error("upload", response, image_name)

    async def resolve_uri(self, image_name: str) -> str:
        """
        Find the URI of a stored blob by scanning the container listing.

        Raises:
            ConsistencyError: the blob is not in the listing
        """
        objects = await self._call_storage("list", self.storage.list_objects)
        uri = ""
        for blob in objects:
            if blob.name == image_name:
                uri = blob.uri
        if not uri:
            storage_operation_failures_total.labels(operation="list").inc()
            log_storage_failure(logger, "list", "uploaded blob missing from listing", image_name=image_name)
            raise ConsistencyError("Could not find image in storage container!")
        return uri

    async def store_image(self, file: BinaryIO, image_name: str, content_type: Optional[str] = None) -> str:
        """
        Upload an image and return its public URI.

        Nothing is written to the database here; callers persist the
        returned URI together with image_name.
        """
        await self.upload_blob(file, image_name, content_type)
        return await self.resolve_uri(image_name)

    async def delete_image(self, image_name: str) -> None:
        """Delete a blob. Raises BlobStoreError when the store reports a failure."""
        response = await self._call_storage("delete", self.storage.delete, image_name)
        self._raise_on_error("delete", response, image_name)


async def commit_or_raise(db: AsyncSession) -> None:
    """
    Commit the session, rolling back and raising PersistenceError on failure.

    An update whose row was deleted by another request in the meantime
    raises RecordNotFoundError instead.
    """
    try:
        await db.commit()
    except StaleDataError as e:
        await db.rollback()
        logger.warning(f"Row vanished before commit: {e}", extra={"event": "stale_row"})
        raise RecordNotFoundError("The record was deleted by another request.") from e
    except SQLAlchemyError as e:
        await db.rollback()
        storage_operation_failures_total.labels(operation="commit").inc()
        log_storage_failure(logger, "commit", str(e), include_traceback=True)
        raise PersistenceError(f"Failed to save changes: {e}") from e
