"""Base storage driver interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional


class FileInfo(Dict[str, Any]):
    """File information dict with typed access."""

    @property
    def name(self) -> str:
        return self["name"]

    @property
    def path(self) -> str:
        return self["path"]

    @property
    def size_bytes(self) -> int:
        return self["size_bytes"]

    @property
    def modified_at(self) -> datetime:
        return self["modified_at"]

    @property
    def content_type(self) -> Optional[str]:
        return self.get("content_type")


class BaseStorageDriver(ABC):
    """Base class for blob storage drivers.

    Drivers store flat blob names inside one container and hand out
    read-only, time-limited URLs for them.
    """

    def __init__(self, config: Dict[str, Any]):
        """Initialize storage driver with configuration.

        Args:
            config: Storage configuration dict with provider-specific settings
        """
        self.config = config

    @abstractmethod
    async def upload_file(
        self, file_path: str, content: bytes, content_type: Optional[str] = None
    ) -> str:
        """Upload file and return its path.

        Args:
            file_path: Destination path (relative to the container)
            content: File content as bytes
            content_type: MIME type recorded with the blob

        Raises:
            StorageError: If upload fails
        """
        pass

    @abstractmethod
    async def download_file(self, file_path: str) -> bytes:
        """Download file and return bytes.

        Raises:
            StorageError: If download fails
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    async def delete_file(self, file_path: str) -> None:
        """Delete a file. Deleting a missing file is not an error.

        Raises:
            StorageError: If deletion fails
        """
        pass

    @abstractmethod
    async def file_exists(self, file_path: str) -> bool:
        pass

    @abstractmethod
    async def get_file_info(self, file_path: str) -> FileInfo:
        """Get file metadata without downloading.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    async def generate_signed_url(self, file_path: str, expires_in: int) -> str:
        """Build a read-only URL for a file.

        Args:
            file_path: Path to file
            expires_in: Lifetime of the URL in seconds

        Returns:
            URL granting read access without further authentication
        """
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        """Test if storage is accessible."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class StorageConnectionError(StorageError):
    """Exception for connection errors."""

    pass
