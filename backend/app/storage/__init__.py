"""
Blob storage backends for uploaded images.

The backend is chosen by settings.storage_backend:
- "r2": Cloudflare R2 / any S3-compatible bucket (production)
- "local": files on disk served under /media (development)
"""
from typing import Optional

from app.config import settings
from app.storage.base import BlobObject, BlobResponse, BlobStorage
from app.storage.local import LocalBlobStorage
from app.storage.r2_client import R2Client

__all__ = [
    "BlobObject",
    "BlobResponse",
    "BlobStorage",
    "LocalBlobStorage",
    "R2Client",
    "get_blob_storage",
]

# Singleton instance
_blob_storage: Optional[BlobStorage] = None


def get_blob_storage() -> BlobStorage:
    """
    Get the singleton blob storage for the configured backend.

    Also used as a FastAPI dependency so tests can override it.
    """
    global _blob_storage
    if _blob_storage is None:
        if settings.storage_backend == "local":
            _blob_storage = LocalBlobStorage()
        elif settings.storage_backend == "r2":
            _blob_storage = R2Client()
        else:
            raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
    return _blob_storage
