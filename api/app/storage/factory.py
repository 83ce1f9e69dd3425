"""Storage driver factory."""

from typing import Optional

from app.config import Settings, settings as default_settings
from app.storage.base import BaseStorageDriver, StorageError
from app.storage.local_driver import LocalStorageDriver
from app.storage.s3_driver import S3StorageDriver


def get_storage_driver(config: Optional[Settings] = None) -> BaseStorageDriver:
    """Get storage driver instance from application settings.

    Args:
        config: Settings to read from (defaults to the process settings)

    Returns:
        Configured storage driver instance

    Raises:
        StorageError: If the provider is unknown or misconfigured

    Example:
        >>> driver = get_storage_driver()
        >>> driver.get_public_url("thumbnails/a-123456.png")
        'http://localhost:8000/storage/v1/object/public/artworks/thumbnails/a-123456.png'
    """
    config = config or default_settings

    driver_config = {
        "bucket": config.storage_bucket,
        "public_base_url": config.storage_public_base_url,
        "public_marker": config.storage_public_marker,
    }

    provider = config.storage_provider.lower()

    if provider == "local":
        driver_config["base_path"] = config.storage_base_path
        return LocalStorageDriver(driver_config)

    elif provider == "s3":
        if not config.aws_access_key_id or not config.aws_secret_access_key:
            raise StorageError(
                "Missing required S3 configuration: aws_access_key_id, aws_secret_access_key"
            )
        driver_config.update(
            {
                "aws_access_key_id": config.aws_access_key_id,
                "aws_secret_access_key": config.aws_secret_access_key,
                "region": config.aws_region,
                "endpoint_url": config.s3_endpoint_url,
            }
        )
        return S3StorageDriver(driver_config)

    else:
        raise StorageError(f"Unsupported storage provider: {provider}")
