"""S3-compatible storage driver (AWS S3, Cloudflare R2, MinIO, etc)."""

from typing import Any, Dict, Optional

import aioboto3
from botocore.exceptions import ClientError

from asset_catalog.storage.base import (
    BaseStorageDriver,
    FileInfo,
    StorageConnectionError,
    StorageError,
)

# SigV4 presigned URLs cannot outlive seven days.
MAX_PRESIGN_SECONDS = 7 * 24 * 3600


class S3StorageDriver(BaseStorageDriver):
    """S3-compatible storage driver.

    Configuration:
        aws_access_key_id: Access key
        aws_secret_access_key: Secret key
        bucket_name: Bucket name
        region: AWS region (default: us-east-1)
        endpoint_url: Custom endpoint URL (for R2, MinIO, etc)
        base_path: Prefix path within bucket (optional)

    Example:
        >>> config = {
        ...     "aws_access_key_id": "AKIA...",
        ...     "aws_secret_access_key": "...",
        ...     "bucket_name": "household-assets",
        ...     "base_path": "asset-images",
        ... }
        >>> driver = S3StorageDriver(config)
        >>> url = await driver.generate_signed_url("abc_low.jpg", 3600)
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.bucket_name = config["bucket_name"]
        self.base_path = config.get("base_path", "").strip("/")

        self.s3_config = {
            "aws_access_key_id": config["aws_access_key_id"],
            "aws_secret_access_key": config["aws_secret_access_key"],
            "region_name": config.get("region", "us-east-1"),
        }

        if config.get("endpoint_url"):
            self.s3_config["endpoint_url"] = config["endpoint_url"]

        self.session = aioboto3.Session()

    def _get_full_key(self, file_path: str) -> str:
        if self.base_path:
            return f"{self.base_path}/{file_path}".strip("/")
        return file_path.strip("/")

    async def upload_file(
        self, file_path: str, content: bytes, content_type: Optional[str] = None
    ) -> str:
        key = self._get_full_key(file_path)
        extra = {"ContentType": content_type} if content_type else {}

        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                await s3.put_object(
                    Bucket=self.bucket_name, Key=key, Body=content, **extra
                )
            return file_path

        except ClientError as e:
            raise StorageError(f"Failed to upload file: {e}")

    async def download_file(self, file_path: str) -> bytes:
        key = self._get_full_key(file_path)

        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                response = await s3.get_object(Bucket=self.bucket_name, Key=key)
                async with response["Body"] as stream:
                    return await stream.read()

        except ClientError as e:
            if e.response["Error"]["Code"] in ("NoSuchKey", "404"):
                raise FileNotFoundError(f"File not found: {file_path}")
            raise StorageError(f"Failed to download file: {e}")

    async def delete_file(self, file_path: str) -> None:
        key = self._get_full_key(file_path)

        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                await s3.delete_object(Bucket=self.bucket_name, Key=key)

        except ClientError as e:
            raise StorageError(f"Failed to delete file: {e}")

    async def file_exists(self, file_path: str) -> bool:
        try:
            await self.get_file_info(file_path)
            return True
        except FileNotFoundError:
            return False

    async def get_file_info(self, file_path: str) -> FileInfo:
        key = self._get_full_key(file_path)

        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                response = await s3.head_object(Bucket=self.bucket_name, Key=key)

            return FileInfo(
                {
                    "name": key.split("/")[-1],
                    "path": file_path,
                    "size_bytes": response["ContentLength"],
                    "modified_at": response["LastModified"],
                    "content_type": response.get("ContentType"),
                }
            )

        except ClientError as e:
            if e.response["Error"]["Code"] in ("404", "NoSuchKey"):
                raise FileNotFoundError(f"File not found: {file_path}")
            raise StorageError(f"Failed to get file info: {e}")

    async def generate_signed_url(self, file_path: str, expires_in: int) -> str:
        key = self._get_full_key(file_path)

        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                return await s3.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.bucket_name, "Key": key},
                    ExpiresIn=min(expires_in, MAX_PRESIGN_SECONDS),
                )

        except ClientError as e:
            raise StorageError(f"Failed to sign URL: {e}")

    async def test_connection(self) -> bool:
        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                await s3.head_bucket(Bucket=self.bucket_name)
            return True

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code in ("404", "NoSuchBucket"):
                raise StorageConnectionError(f"Bucket not found: {self.bucket_name}")
            elif error_code == "403":
                raise StorageConnectionError(f"Access denied to bucket: {self.bucket_name}")
            return False

        except Exception:
            return False
