"""Object storage drivers for artwork assets."""

from app.storage.base import BaseStorageDriver, StorageError
from app.storage.factory import get_storage_driver

__all__ = ["BaseStorageDriver", "StorageError", "get_storage_driver"]
