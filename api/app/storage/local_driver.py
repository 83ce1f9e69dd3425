"""Local filesystem storage driver."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List

import aiofiles
import aiofiles.os

from app.storage.base import BaseStorageDriver, StorageError

logger = logging.getLogger(__name__)


class LocalStorageDriver(BaseStorageDriver):
    """Local filesystem storage driver.

    Objects live under ``{base_path}/{bucket}/``. The public locators it hands
    out are expected to be served by a static file mount or reverse proxy.

    Configuration:
        base_path: Absolute path to storage directory
        bucket: Bucket directory name (default: artworks)
        public_base_url: Origin used to build public locators

    Example:
        >>> driver = LocalStorageDriver({"base_path": "/data/storage"})
        >>> await driver.put_object("html/a-123456.html", b"<html></html>", "text/html")
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.base_path = Path(config["base_path"])

        # Ensure base_path is absolute for security
        if not self.base_path.is_absolute():
            self.base_path = self.base_path.resolve()

        self.root = (self.base_path / self.bucket).resolve()

    def _validate_path(self, file_path: str) -> Path:
        """Validate path is within the bucket root (prevent directory traversal).

        Args:
            file_path: Relative file path

        Returns:
            Absolute Path object

        Raises:
            StorageError: If path tries to escape the bucket root
        """
        full_path = (self.root / file_path.lstrip("/")).resolve()

        try:
            full_path.relative_to(self.root)
        except ValueError:
            raise StorageError(
                f"Path {file_path} attempts to escape base directory"
            )

        return full_path

    async def put_object(
        self,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        overwrite: bool = True,
    ) -> None:
        """Write object to local filesystem.

        The content type is not persisted; static file servers infer it
        from the extension.
        """
        full_path = self._validate_path(path)

        if full_path.exists() and not overwrite:
            raise StorageError(f"Object already exists: {path}")

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(full_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise StorageError(f"Failed to upload {path}: {e}")

    async def delete_objects(self, paths: Iterable[str]) -> List[str]:
        """Remove files, ignoring the ones that are already gone."""
        failed: List[str] = []
        for path in paths:
            if not path:
                continue
            try:
                full_path = self._validate_path(path)
                await aiofiles.os.remove(full_path)
            except FileNotFoundError:
                continue
            except (OSError, StorageError) as e:
                logger.warning(f"Failed to delete {path}: {e}")
                failed.append(path)
        return failed

    async def object_exists(self, path: str) -> bool:
        """Check whether the file exists."""
        return self._validate_path(path).is_file()

    async def test_connection(self) -> bool:
        """Test if base path exists and is accessible.

        Returns:
            True if base_path exists and is writable
        """
        try:
            return self.base_path.exists() and os.access(self.base_path, os.W_OK)
        except Exception:
            return False
