"""Local filesystem storage driver."""

import mimetypes
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiofiles

from asset_catalog.storage.base import BaseStorageDriver, FileInfo, StorageError
from asset_catalog.storage.signing import sign_blob_name


class LocalStorageDriver(BaseStorageDriver):
    """Local filesystem storage driver.

    Signed URLs point back at this service's ``/blobs/{name}`` endpoint and
    carry a token that the endpoint verifies.

    Configuration:
        base_path: Directory holding the container's blobs
        public_base_url: Externally reachable base URL of the API
        url_prefix: Router prefix the blob endpoint is mounted under
        secret_key: Key used to sign blob tokens

    Example:
        >>> driver = LocalStorageDriver({
        ...     "base_path": "/data/blobs/asset-images",
        ...     "public_base_url": "http://localhost:8000",
        ...     "url_prefix": "/api",
        ...     "secret_key": "...",
        ... })
        >>> url = await driver.generate_signed_url("abc_high.jpg", 3600)
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        # Resolved so traversal checks compare like with like
        self.base_path = Path(config["base_path"]).resolve()
        self.public_base_url = config.get("public_base_url", "").rstrip("/")
        self.url_prefix = config.get("url_prefix", "").rstrip("/")
        self.secret_key = config["secret_key"]

    def _validate_path(self, file_path: str) -> Path:
        """Validate path is within base_path (prevent directory traversal).

        Raises:
            StorageError: If path tries to escape base_path
        """
        full_path = (self.base_path / file_path).resolve()

        try:
            full_path.relative_to(self.base_path)
        except ValueError:
            raise StorageError(
                f"Path {file_path} attempts to escape base directory"
            )

        return full_path

    async def upload_file(
        self, file_path: str, content: bytes, content_type: Optional[str] = None
    ) -> str:
        full_path = self._validate_path(file_path)

        # Create parent directories if they don't exist
        full_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(full_path, "wb") as f:
            await f.write(content)

        return str(full_path.relative_to(self.base_path))

    async def download_file(self, file_path: str) -> bytes:
        full_path = self._validate_path(file_path)

        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        async with aiofiles.open(full_path, "rb") as f:
            return await f.read()

    async def delete_file(self, file_path: str) -> None:
        full_path = self._validate_path(file_path)
        try:
            full_path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete file: {e}")

    async def file_exists(self, file_path: str) -> bool:
        return self._validate_path(file_path).is_file()

    async def get_file_info(self, file_path: str) -> FileInfo:
        full_path = self._validate_path(file_path)

        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        stat = full_path.stat()
        content_type, _ = mimetypes.guess_type(full_path.name)
        return FileInfo(
            {
                "name": full_path.name,
                "path": file_path,
                "size_bytes": stat.st_size,
                "modified_at": datetime.fromtimestamp(stat.st_mtime),
                "content_type": content_type or "application/octet-stream",
            }
        )

    async def generate_signed_url(self, file_path: str, expires_in: int) -> str:
        self._validate_path(file_path)
        token = sign_blob_name(file_path, self.secret_key, expires_in)
        return (
            f"{self.public_base_url}{self.url_prefix}/blobs/{quote(file_path)}"
            f"?token={quote(token)}"
        )

    async def test_connection(self) -> bool:
        """Check that the container directory exists (creating it) and is writable."""
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            return os.access(self.base_path, os.R_OK | os.W_OK)
        except OSError:
            return False
