"""Image upload and retrieval endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import Response

from asset_catalog.api.deps import get_household_id, get_image_store, get_settings
from asset_catalog.config import Settings
from asset_catalog.schemas.asset import UploadResponse
from asset_catalog.services.image_store import ImageStore, InvalidImageError
from asset_catalog.storage.signing import verify_blob_token

router = APIRouter()
logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000"


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    image: Optional[UploadFile] = File(None, description="Image file"),
    household_id: str = Depends(get_household_id),
    image_store: ImageStore = Depends(get_image_store),
):
    """Upload an asset photo.

    - Rejects non-image content types before anything is stored
    - Stores a 1920px (q90) and a 400px (q80) JPEG re-encode
    - Falls back to the original bytes for both when re-encoding fails
    """
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )

    try:
        content = await image.read()
        urls = await image_store.upload(content, image.content_type, image.filename)
        return UploadResponse(image_url=urls.high, image_urls=urls)

    except InvalidImageError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid image file: {str(e)}",
        )
    except Exception as e:
        logger.error(f"Failed to upload image for household {household_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload image: {str(e)}",
        )


@router.get("/proxy-image")
async def proxy_image(
    url: Optional[str] = Query(None, description="Signed blob URL to fetch"),
    household_id: str = Depends(get_household_id),
    image_store: ImageStore = Depends(get_image_store),
):
    """Fetch a stored image through the API so browsers can draw it on a canvas."""
    if not url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing url query parameter",
        )

    try:
        content, content_type = await image_store.open(url)
    except InvalidImageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except FileNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    except Exception as e:
        logger.error(f"Error proxying image: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to proxy image: {str(e)}",
        )

    return Response(
        content=content,
        media_type=content_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )


@router.get("/blobs/{blob_name}")
async def read_signed_blob(
    blob_name: str,
    token: str = Query(..., description="Signature issued with the URL"),
    settings: Settings = Depends(get_settings),
    image_store: ImageStore = Depends(get_image_store),
):
    """Serve a blob from the local driver to holders of a valid signed URL."""
    if not verify_blob_token(token, blob_name, settings.secret_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired signature",
        )

    try:
        content, content_type = await image_store.read_blob(blob_name)
    except FileNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    except Exception as e:
        logger.error(f"Error reading blob {blob_name}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to read image: {str(e)}",
        )

    return Response(
        content=content,
        media_type=content_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )
