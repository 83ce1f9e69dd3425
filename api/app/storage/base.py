"""Base storage driver interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote, unquote, urlsplit


class BaseStorageDriver(ABC):
    """Base class for object storage drivers.

    Every driver addresses objects by a bucket-relative path
    (``thumbnails/sunset-study-123456.png``) and publishes them under a
    public locator of the form::

        {public_base_url}{public_marker}{bucket}/{path}

    ``path_from_public_url`` is the inverse of ``get_public_url`` and is what
    the artwork service uses to find the object behind a stored locator.
    """

    def __init__(self, config: Dict[str, Any]):
        """Initialize storage driver with configuration.

        Args:
            config: Storage configuration dict. Common keys are ``bucket``,
                ``public_base_url`` and ``public_marker``; the rest is
                provider-specific.
        """
        self.config = config
        self.bucket = config.get("bucket", "artworks").strip("/")
        self.public_base_url = config.get("public_base_url", "").rstrip("/")
        marker = config.get("public_marker", "/storage/v1/object/public/")
        self.public_marker = "/" + marker.strip("/") + "/"

    @abstractmethod
    async def put_object(
        self,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        overwrite: bool = True,
    ) -> None:
        """Store an object at ``path``.

        Args:
            path: Bucket-relative destination path
            content: Object bytes
            content_type: Declared MIME type stored with the object
            overwrite: Replace an existing object at the same path

        Raises:
            StorageError: If the upload fails or the object exists and
                ``overwrite`` is False
        """
        pass

    @abstractmethod
    async def delete_objects(self, paths: Iterable[str]) -> List[str]:
        """Delete objects, best-effort.

        Missing paths are not an error.

        Args:
            paths: Bucket-relative paths to remove

        Returns:
            Paths that could not be deleted

        Raises:
            StorageError: Only when the backend cannot be reached at all
        """
        pass

    @abstractmethod
    async def object_exists(self, path: str) -> bool:
        """Check whether an object is stored at ``path``."""
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        """Test if storage is accessible.

        Returns:
            True if connection successful, False otherwise
        """
        pass

    def get_public_url(self, path: str) -> str:
        """Build the public locator for ``path``."""
        return f"{self.public_base_url}{self.public_marker}{self.bucket}/{quote(path.lstrip('/'))}"

    def path_from_public_url(self, url: Optional[str]) -> Optional[str]:
        """Map a public locator back to its bucket-relative path.

        Returns None for empty, malformed or foreign URLs.
        """
        if not url:
            return None
        try:
            parts = urlsplit(url)
        except ValueError:
            return None
        if parts.scheme not in ("http", "https"):
            return None

        pathname = unquote(parts.path)
        idx = pathname.find(self.public_marker)
        if idx == -1:
            return None

        rel = pathname[idx + len(self.public_marker):]
        after_bucket = "/".join(rel.split("/")[1:])
        return after_bucket or None


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class StorageConnectionError(StorageError):
    """Exception for connection errors."""

    pass


class StoragePermissionError(StorageError):
    """Exception for permission errors."""

    pass
