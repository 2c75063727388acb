"""
Filesystem blob storage for local development.

Objects are plain files in a single directory, served by the app under
settings.local_storage_url.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO, List, Optional

from app.config import settings
from app.storage.base import BlobObject, BlobResponse, BlobStorage

logger = logging.getLogger(__name__)


class LocalBlobStorage(BlobStorage):
    """Stores blobs as files under a root directory."""

    def __init__(self, root: Optional[str] = None, base_url: Optional[str] = None):
        self.root = Path(root or settings.local_storage_path)
        self.base_url = (base_url or settings.local_storage_url).rstrip('/')
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        # Names are generated, but never let one escape the root
        if os.path.basename(name) != name or name in ('', '.', '..'):
            raise ValueError(f"Invalid blob name: {name!r}")
        return self.root / name

    def upload(self, name: str, data: BinaryIO, content_type: Optional[str] = None) -> BlobResponse:
        try:
            with self._path(name).open('wb') as buffer:
                shutil.copyfileobj(data, buffer)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to write {name} to {self.root}: {e}")
            return BlobResponse(error=True, status=f"Failed to upload {name}: {e}", name=name)
        return BlobResponse(error=False, status=f"File {name} uploaded successfully", name=name)

    def delete(self, name: str) -> BlobResponse:
        try:
            self._path(name).unlink()
        except FileNotFoundError:
            logger.debug(f"{name} not found in {self.root} (already deleted)")
            return BlobResponse(error=False, status=f"File {name} was already deleted", name=name)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to delete {name} from {self.root}: {e}")
            return BlobResponse(error=True, status=f"Failed to delete {name}: {e}", name=name)
        return BlobResponse(error=False, status=f"File {name} deleted successfully", name=name)

    def list_objects(self) -> List[BlobObject]:
        return [
            BlobObject(name=path.name, uri=f"{self.base_url}/{path.name}")
            for path in sorted(self.root.iterdir())
            if path.is_file()
        ]
