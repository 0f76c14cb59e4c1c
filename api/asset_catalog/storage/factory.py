"""Storage driver factory."""

from pathlib import Path

from asset_catalog.config import Settings
from asset_catalog.storage.base import BaseStorageDriver, StorageError
from asset_catalog.storage.local_driver import LocalStorageDriver
from asset_catalog.storage.s3_driver import S3StorageDriver


def get_storage_driver(settings: Settings) -> BaseStorageDriver:
    """Build the blob storage driver described by the settings.

    Raises:
        StorageError: If the provider is unknown or misconfigured

    Example:
        >>> driver = get_storage_driver(Settings(blob_provider="local"))
        >>> await driver.test_connection()
        True
    """
    provider = settings.blob_provider.lower()

    if provider == "local":
        return LocalStorageDriver(
            {
                "base_path": str(Path(settings.blob_base_path) / settings.blob_container),
                "public_base_url": settings.public_base_url,
                "url_prefix": settings.api_prefix,
                "secret_key": settings.secret_key,
            }
        )

    elif provider == "s3":
        driver_config = {
            "bucket_name": settings.s3_bucket,
            "aws_access_key_id": settings.aws_access_key_id,
            "aws_secret_access_key": settings.aws_secret_access_key,
            "region": settings.s3_region,
            "endpoint_url": settings.s3_endpoint_url,
            "base_path": settings.blob_container,
        }
        required_fields = ["aws_access_key_id", "aws_secret_access_key", "bucket_name"]
        missing = [f for f in required_fields if not driver_config[f]]
        if missing:
            raise StorageError(f"Missing required S3 configuration: {missing}")
        return S3StorageDriver(driver_config)

    else:
        raise StorageError(f"Unsupported storage provider: {provider}")
