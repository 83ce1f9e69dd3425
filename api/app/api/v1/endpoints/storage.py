"""Storage test endpoints."""

import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_storage, require_admin
from app.config import settings
from app.schemas.storage import StorageTestResponse
from app.storage.base import BaseStorageDriver, StorageError

router = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.post("/test", response_model=StorageTestResponse)
async def test_storage_connection(storage: BaseStorageDriver = Depends(get_storage)):
    """Test object storage connection.

    Verifies that the configured bucket (or local directory) is reachable.
    """
    try:
        connected = await storage.test_connection()
    except StorageError as e:
        logger.warning(f"Storage connection test failed: {e}")
        return StorageTestResponse(
            status="error",
            provider=settings.storage_provider,
            bucket=storage.bucket,
            message=str(e),
        )

    return StorageTestResponse(
        status="ok" if connected else "error",
        provider=settings.storage_provider,
        bucket=storage.bucket,
        message="Connection successful" if connected else "Connection failed",
    )
