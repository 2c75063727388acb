"""
Errors raised by the image services.

Routes translate these into HTTP responses:
- ImageValidationError -> form re-rendered with an error banner
- BlobStoreError -> 500 with the storage backend's status text
- ConsistencyError -> 500 problem response
- RecordNotFoundError -> 404
- PersistenceError -> 500
"""
from typing import Optional


class ImageServiceError(Exception):
    """Base class for image service failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ImageValidationError(ImageServiceError):
    """Rejected user input. Nothing was written anywhere."""


class BlobStoreError(ImageServiceError):
    """The blob store reported a failed upload or delete."""

    def __init__(self, status: Optional[str], operation: str = "storage"):
        super().__init__(status or f"Blob {operation} failed")
        self.status = self.message
        self.operation = operation


class ConsistencyError(ImageServiceError):
    """Blob store and metadata disagree, e.g. an uploaded blob is missing from the listing."""


class NameGenerationError(ConsistencyError):
    """No unused file name was found within the attempt limit."""


class RecordNotFoundError(ImageServiceError):
    """The referenced metadata row does not exist."""


class PersistenceError(ImageServiceError):
    """A database write failed."""
