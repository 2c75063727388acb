"""
Cloudflare R2 / S3-compatible storage client.

Uses boto3 with S3-compatible API to interact with Cloudflare R2.
This is storage-provider agnostic - works with any S3-compatible storage.

Images are written through the backend (the admin forms post the file bytes)
and served to site visitors from the bucket's public URL.
"""
import logging
from typing import BinaryIO, List, Optional
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from app.config import settings
from app.storage.base import BlobObject, BlobResponse, BlobStorage

logger = logging.getLogger(__name__)


class R2Client(BlobStorage):
    """
    S3-compatible client for Cloudflare R2.

    Implements upload, delete and listing for the image services.
    Connection parameters default to the values in settings.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        bucket: Optional[str] = None,
        region: Optional[str] = None,
        public_url: Optional[str] = None,
    ):
        """
        Initialize R2 client with boto3.

        Fails gracefully if not configured (no client, every call reports an error).
        """
        self._client = None
        self._configured = False
        self._endpoint = endpoint or settings.r2_endpoint
        self._bucket = bucket or settings.r2_bucket
        self._public_url = public_url or settings.r2_public_url

        access_key = access_key or settings.r2_access_key
        secret_key = secret_key or settings.r2_secret_key

        # Check if R2 is configured
        if not all([self._endpoint, access_key, secret_key]):
            logger.warning(
                "R2 storage not configured. "
                "Set R2_ENDPOINT, R2_ACCESS_KEY, and R2_SECRET_KEY."
            )
            return

        try:
            # Use signature_version='s3v4' for R2 compatibility
            self._client = boto3.client(
                's3',
                endpoint_url=self._endpoint,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region or settings.r2_region,
                config=Config(
                    signature_version='s3v4',
                    s3={'addressing_style': 'path'}  # R2 uses path-style
                )
            )
            self._configured = True
            logger.info(f"R2 client initialized for bucket: {self._bucket}")

        except NoCredentialsError:
            logger.error("R2 credentials not found or invalid")
        except BotoCoreError as e:
            logger.error(f"Failed to initialize R2 client: {e}")

    @property
    def is_configured(self) -> bool:
        """Check if R2 client is properly configured."""
        return self._configured and self._client is not None

    @property
    def bucket(self) -> str:
        """Get configured bucket name."""
        return self._bucket

    def public_uri(self, object_key: str) -> str:
        """
        Build the URI an object is served from.

        Uses the bucket's public URL when set, otherwise the path-style
        endpoint URL.
        """
        if self._public_url:
            return f"{self._public_url.rstrip('/')}/{object_key}"
        return f"{self._endpoint.rstrip('/')}/{self.bucket}/{object_key}"

    def upload(self, name: str, data: BinaryIO, content_type: Optional[str] = None) -> BlobResponse:
        """
        Upload a stream to the bucket.

        Args:
            name: Object key
            data: Readable binary stream
            content_type: MIME type stored with the object

        Returns:
            BlobResponse with error=True and the provider message on failure
        """
        if not self.is_configured:
            logger.error(f"Cannot upload {name}: R2 not configured")
            return BlobResponse(error=True, status="Storage service not configured", name=name)

        params = {'Bucket': self.bucket, 'Key': name, 'Body': data}
        if content_type:
            params['ContentType'] = content_type

        try:
            self._client.put_object(**params)
            logger.debug(f"Uploaded {name} to R2")
            return BlobResponse(error=False, status=f"File {name} uploaded successfully", name=name)
        except ClientError as e:
            logger.error(f"Failed to upload {name} to R2: {e}")
            return BlobResponse(error=True, status=f"Failed to upload {name}: {e}", name=name)
        except BotoCoreError as e:
            logger.error(f"Unexpected error uploading {name} to R2: {e}")
            return BlobResponse(error=True, status=f"Failed to upload {name}: {e}", name=name)

    def delete(self, name: str) -> BlobResponse:
        """
        Delete an object from the bucket.

        Args:
            name: The S3 object key to delete

        Returns:
            BlobResponse; a missing object counts as deleted
        """
        if not self.is_configured:
            logger.warning(f"Cannot delete object {name}: R2 not configured")
            return BlobResponse(error=True, status="Storage service not configured", name=name)

        try:
            self._client.delete_object(Bucket=self.bucket, Key=name)
            logger.debug(f"Deleted object {name} from R2")
            return BlobResponse(error=False, status=f"File {name} deleted successfully", name=name)
        except ClientError as e:
            # If object doesn't exist, consider it a success (idempotent)
            if e.response['Error']['Code'] in ('404', 'NoSuchKey'):
                logger.debug(f"Object {name} not found in R2 (already deleted)")
                return BlobResponse(error=False, status=f"File {name} was already deleted", name=name)
            logger.error(f"Failed to delete object {name} from R2: {e}")
            return BlobResponse(error=True, status=f"Failed to delete {name}: {e}", name=name)
        except BotoCoreError as e:
            logger.error(f"Unexpected error deleting object {name} from R2: {e}")
            return BlobResponse(error=True, status=f"Failed to delete {name}: {e}", name=name)

    def list_objects(self) -> List[BlobObject]:
        """
        List all objects in the bucket using pagination.

        Returns:
            BlobObject per key; empty when not configured
        """
        if not self.is_configured:
            logger.warning("Cannot list objects: R2 not configured")
            return []

        objects = []
        paginator = self._client.get_paginator('list_objects_v2')
        try:
            for page in paginator.paginate(Bucket=self.bucket):
                for item in page.get('Contents', []):
                    key = item['Key']
                    objects.append(BlobObject(name=key, uri=self.public_uri(key)))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list objects in bucket {self.bucket}: {e}")
            return []

        logger.debug(f"Listed {len(objects)} objects in bucket {self.bucket}")
        return objects

