"""S3-compatible storage driver (AWS S3, Cloudflare R2, MinIO, Supabase Storage, etc)."""

import logging
from typing import Any, Dict, Iterable, List

import aioboto3
from botocore.exceptions import ClientError

from app.storage.base import (
    BaseStorageDriver,
    StorageConnectionError,
    StorageError,
    StoragePermissionError,
)

logger = logging.getLogger(__name__)

# DeleteObjects accepts at most 1000 keys per request
_DELETE_BATCH_SIZE = 1000


class S3StorageDriver(BaseStorageDriver):
    """S3-compatible storage driver.

    Supports:
    - AWS S3
    - Cloudflare R2
    - MinIO
    - Supabase Storage (S3 protocol endpoint)

    Configuration:
        aws_access_key_id: Access key
        aws_secret_access_key: Secret key
        bucket: Bucket name
        region: AWS region (default: us-east-1)
        endpoint_url: Custom endpoint URL (for R2, MinIO, etc)
        public_base_url: Origin used to build public locators
        public_marker: Path marker preceding the bucket in public locators

    Example:
        >>> config = {
        ...     "aws_access_key_id": "AKIA...",
        ...     "aws_secret_access_key": "...",
        ...     "bucket": "artworks",
        ...     "public_base_url": "https://project.supabase.co",
        ... }
        >>> driver = S3StorageDriver(config)
        >>> await driver.put_object("thumbnails/a-123456.png", data, "image/png")
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)

        self.s3_config = {
            "aws_access_key_id": config["aws_access_key_id"],
            "aws_secret_access_key": config["aws_secret_access_key"],
            "region_name": config.get("region", "us-east-1"),
        }

        # Support custom endpoint (Cloudflare R2, MinIO, etc)
        if config.get("endpoint_url"):
            self.s3_config["endpoint_url"] = config["endpoint_url"]

        self.session = aioboto3.Session()

    async def put_object(
        self,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        overwrite: bool = True,
    ) -> None:
        """Upload object to S3."""
        key = path.strip("/")

        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                if not overwrite and await self._head(s3, key):
                    raise StorageError(f"Object already exists: {path}")
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=content,
                    ContentType=content_type,
                )

        except ClientError as e:
            code = e.response["Error"]["Code"]
            if code in ("403", "AccessDenied"):
                raise StoragePermissionError(f"Access denied uploading {path}")
            raise StorageError(f"Failed to upload {path}: {e}")

    async def delete_objects(self, paths: Iterable[str]) -> List[str]:
        """Delete objects from S3 in batches.

        S3 reports missing keys as deleted, so only real failures are returned.
        """
        keys = [p.strip("/") for p in paths if p]
        if not keys:
            return []

        failed: List[str] = []
        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                for start in range(0, len(keys), _DELETE_BATCH_SIZE):
                    batch = keys[start:start + _DELETE_BATCH_SIZE]
                    response = await s3.delete_objects(
                        Bucket=self.bucket,
                        Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
                    )
                    for error in response.get("Errors", []):
                        logger.warning(
                            f"Failed to delete {error.get('Key')}: {error.get('Message')}"
                        )
                        failed.append(error.get("Key"))

        except ClientError as e:
            raise StorageError(f"Failed to delete objects: {e}")

        return failed

    async def object_exists(self, path: str) -> bool:
        """Check object existence with HEAD."""
        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                return await self._head(s3, path.strip("/"))
        except ClientError as e:
            raise StorageError(f"Failed to check {path}: {e}")

    async def test_connection(self) -> bool:
        """Test S3 connection by checking if bucket exists.

        Returns:
            True if bucket is accessible
        """
        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                await s3.head_bucket(Bucket=self.bucket)
            return True

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code in ("404", "NoSuchBucket"):
                raise StorageConnectionError(f"Bucket not found: {self.bucket}")
            elif error_code == "403":
                raise StorageConnectionError(f"Access denied to bucket: {self.bucket}")
            return False

        except Exception:
            return False

    async def _head(self, s3, key: str) -> bool:
        try:
            await s3.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] in ("404", "NoSuchKey", "NotFound"):
                return False
            raise
