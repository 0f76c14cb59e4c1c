"""Blob storage drivers for asset images."""

from asset_catalog.storage.base import BaseStorageDriver, StorageError
from asset_catalog.storage.factory import get_storage_driver

__all__ = ["BaseStorageDriver", "StorageError", "get_storage_driver"]
