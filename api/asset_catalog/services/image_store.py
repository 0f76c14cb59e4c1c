"""Dual-resolution image storage on top of a blob driver."""

import asyncio
import io
import logging
import mimetypes
import re
import uuid
from datetime import timedelta
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Tuple
from urllib.parse import unquote, urlsplit

from PIL import Image, ImageOps

from asset_catalog.schemas.asset import ImageUrls
from asset_catalog.storage.base import BaseStorageDriver

logger = logging.getLogger(__name__)

HIGH_RES_BOUNDS = (1920, 1920)
HIGH_RES_QUALITY = 90
LOW_RES_BOUNDS = (400, 400)
LOW_RES_QUALITY = 80

HIGH_SUFFIX = "_high"
LOW_SUFFIX = "_low"

_BLOB_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class InvalidImageError(Exception):
    """Upload or URL rejected before touching storage."""

    pass


def blob_name_from_url(url: str) -> Optional[str]:
    """Extract the blob name (last path segment, query stripped) from a URL.

    Examples:
        >>> blob_name_from_url("https://acct.blob.core.windows.net/asset-images/ab_high.jpg?sig=x")
        'ab_high.jpg'
        >>> blob_name_from_url("not a url") is None
        True
    """
    if not url:
        return None
    path = unquote(urlsplit(url).path)
    name = path.rsplit("/", 1)[-1]
    if not _BLOB_NAME_RE.match(name):
        return None
    return name


def sibling_blob_name(name: str) -> Optional[str]:
    """Name of the other resolution of the same upload, if ``name`` is one of a pair."""
    path = PurePosixPath(name)
    if path.stem.endswith(HIGH_SUFFIX):
        return path.stem[: -len(HIGH_SUFFIX)] + LOW_SUFFIX + path.suffix
    if path.stem.endswith(LOW_SUFFIX):
        return path.stem[: -len(LOW_SUFFIX)] + HIGH_SUFFIX + path.suffix
    return None


def _flatten(img: Image.Image) -> Image.Image:
    """Convert to RGB, compositing any transparency over white."""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        img = img.convert("RGBA")
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.getchannel("A"))
        return background
    return img.convert("RGB")


def _encode_jpeg(img: Image.Image, bounds: Tuple[int, int], quality: int) -> bytes:
    resized = img.copy()
    resized.thumbnail(bounds, Image.Resampling.LANCZOS)
    buffer = io.BytesIO()
    resized.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


def render_resolutions(content: bytes) -> Tuple[bytes, bytes]:
    """Re-encode an image as (high, low) JPEGs.

    Neither output is enlarged; both keep the aspect ratio within their bounds.

    Raises:
        Exception: Whatever Pillow raises for unreadable input
    """
    with Image.open(io.BytesIO(content)) as img:
        img = ImageOps.exif_transpose(img)
        img = _flatten(img)
        high = _encode_jpeg(img, HIGH_RES_BOUNDS, HIGH_RES_QUALITY)
        low = _encode_jpeg(img, LOW_RES_BOUNDS, LOW_RES_QUALITY)
    return high, low


class ImageStore:
    """Uploads, deletes and fetches asset images.

    Each upload becomes two blobs, ``<id>_high.jpg`` and ``<id>_low.jpg``,
    which are deleted together.
    """

    def __init__(self, driver: BaseStorageDriver, signed_url_ttl: timedelta):
        self.driver = driver
        self.signed_url_ttl = signed_url_ttl

    @property
    def _ttl_seconds(self) -> int:
        return int(self.signed_url_ttl.total_seconds())

    async def upload(
        self, content: bytes, content_type: Optional[str], original_name: Optional[str]
    ) -> ImageUrls:
        """Store an uploaded image and return signed URLs for both resolutions.

        Raises:
            InvalidImageError: If the content type is not an image or the file is empty
            StorageError: If the blob store rejects the write
        """
        if not content_type or not content_type.lower().startswith("image/"):
            raise InvalidImageError(
                f"Unsupported content type: {content_type or 'unknown'}. Only images are allowed"
            )
        if not content:
            raise InvalidImageError("Uploaded file is empty")

        stem = str(uuid.uuid4())

        try:
            high, low = await asyncio.to_thread(render_resolutions, content)
        except Exception as e:
            logger.warning(
                f"Image re-encode failed for {original_name!r}, storing original: {e}"
            )
            name = stem + self._original_extension(content_type, original_name)
            await self.driver.upload_file(name, content, content_type)
            url = await self.driver.generate_signed_url(name, self._ttl_seconds)
            return ImageUrls(high=url, low=url)

        high_name = f"{stem}{HIGH_SUFFIX}.jpg"
        low_name = f"{stem}{LOW_SUFFIX}.jpg"
        await self.driver.upload_file(high_name, high, "image/jpeg")
        try:
            await self.driver.upload_file(low_name, low, "image/jpeg")
        except Exception:
            # Never leave half of a pair behind
            try:
                await self.driver.delete_file(high_name)
            except Exception as e:
                logger.error(f"Failed to remove orphaned blob {high_name}: {e}")
            raise

        return ImageUrls(
            high=await self.driver.generate_signed_url(high_name, self._ttl_seconds),
            low=await self.driver.generate_signed_url(low_name, self._ttl_seconds),
        )

    async def delete(self, urls: Iterable[str]) -> List[str]:
        """Delete the blobs behind ``urls`` and their sibling resolutions.

        Failures are logged and suppressed so a dangling blob never blocks
        metadata deletion.

        Returns:
            Blob names that were deleted
        """
        names: List[str] = []
        for url in urls:
            name = blob_name_from_url(url)
            if name is None:
                logger.warning(f"Skipping image with unrecognised URL: {url}")
                continue
            for candidate in (name, sibling_blob_name(name)):
                if candidate and candidate not in names:
                    names.append(candidate)

        deleted = []
        for name in names:
            try:
                await self.driver.delete_file(name)
                deleted.append(name)
            except Exception as e:
                logger.error(f"Failed to delete blob {name}: {e}")

        return deleted

    async def open(self, url: str) -> Tuple[bytes, str]:
        """Fetch the blob behind a URL.

        Returns:
            (content, content_type)

        Raises:
            InvalidImageError: If the URL does not name a blob
            FileNotFoundError: If the blob does not exist
        """
        name = blob_name_from_url(url)
        if name is None:
            raise InvalidImageError("Invalid blob storage URL format")
        return await self.read_blob(name)

    async def read_blob(self, name: str) -> Tuple[bytes, str]:
        info = await self.driver.get_file_info(name)
        content = await self.driver.download_file(name)
        return content, info.content_type or "image/jpeg"

    @staticmethod
    def _original_extension(content_type: str, original_name: Optional[str]) -> str:
        suffix = PurePosixPath(original_name or "").suffix.lower()
        if suffix and re.match(r"^\.[a-z0-9]{1,8}$", suffix):
            return suffix
        return mimetypes.guess_extension(content_type) or ""
