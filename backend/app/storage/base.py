"""
Blob storage interface shared by all storage backends.

Every backend reports upload/delete outcomes as a BlobResponse instead of
raising, so callers can surface the backend's status text to the client.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, List, Optional


@dataclass(frozen=True)
class BlobResponse:
    """Outcome of a blob store operation."""
    error: bool
    status: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class BlobObject:
    """A stored object as seen in a container listing."""
    name: str
    uri: str


class BlobStorage(ABC):
    """Minimal blob store used by the image services."""

    @property
    def is_configured(self) -> bool:
        return True

    @abstractmethod
    def upload(self, name: str, data: BinaryIO, content_type: Optional[str] = None) -> BlobResponse:
        """Store the stream under name, overwriting any existing object."""

    @abstractmethod
    def delete(self, name: str) -> BlobResponse:
        """
        Delete the object stored under name.

        Deleting a missing object succeeds, so a retried or repeated delete
        never reports an error.
        """

    @abstractmethod
    def list_objects(self) -> List[BlobObject]:
        """List every object in the container with its public URI."""
