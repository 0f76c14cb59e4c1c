"""Asset endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from asset_catalog.api.deps import get_db, get_household_id, get_image_store
from asset_catalog.schemas.asset import (
    AssetCreate,
    AssetDeleteResponse,
    AssetResponse,
    AssetSummaryResponse,
    AssetUpdate,
)
from asset_catalog.services.asset_service import (
    AssetNotFoundError,
    collect_image_urls,
    create_asset,
    delete_asset,
    get_asset,
    list_assets,
    summarize_assets,
    update_asset,
)
from asset_catalog.services.image_store import ImageStore

router = APIRouter()
logger = logging.getLogger(__name__)


def _not_found(asset_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Asset {asset_id} not found",
    )


@router.get("", response_model=List[AssetResponse])
def list_household_assets(
    household_id: str = Depends(get_household_id),
    db: Session = Depends(get_db),
):
    """List all assets of the caller's household."""
    try:
        return list_assets(db, household_id)
    except Exception as e:
        logger.error(f"List assets failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list assets: {str(e)}",
        )


@router.post("", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
def create_household_asset(
    asset_data: AssetCreate,
    household_id: str = Depends(get_household_id),
    db: Session = Depends(get_db),
):
    """
    Create an asset.

    - **value**: Monetary value (required, numeric)
    - **imageUrls**: Up to four images, each a URL or a `{high, low}` pair
    - **imageUrl**: Legacy single image; wrapped into `imageUrls` when that is absent
    """
    try:
        return create_asset(db, household_id, asset_data.model_dump())
    except Exception as e:
        logger.error(f"Create asset failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create asset: {str(e)}",
        )


@router.get("/summary", response_model=AssetSummaryResponse)
def get_portfolio_summary(
    household_id: str = Depends(get_household_id),
    db: Session = Depends(get_db),
):
    """Total portfolio value of the household, overall and per category."""
    try:
        return summarize_assets(db, household_id)
    except Exception as e:
        logger.error(f"Summarize assets failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to summarize assets: {str(e)}",
        )


@router.get("/{asset_id}", response_model=AssetResponse)
def get_household_asset(
    asset_id: str,
    household_id: str = Depends(get_household_id),
    db: Session = Depends(get_db),
):
    """Get asset by ID."""
    try:
        return get_asset(db, asset_id, household_id)
    except AssetNotFoundError:
        raise _not_found(asset_id)
    except Exception as e:
        logger.error(f"Get asset failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get asset: {str(e)}",
        )


@router.put("/{asset_id}", response_model=AssetResponse)
def update_household_asset(
    asset_id: str,
    asset_data: AssetUpdate,
    household_id: str = Depends(get_household_id),
    db: Session = Depends(get_db),
):
    """
    Update an asset. Fields left out of the body keep their stored value;
    `id` and `householdId` cannot be changed.
    """
    try:
        return update_asset(
            db, asset_id, household_id, asset_data.model_dump(exclude_unset=True)
        )
    except AssetNotFoundError:
        raise _not_found(asset_id)
    except Exception as e:
        logger.error(f"Update asset failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update asset: {str(e)}",
        )


@router.delete("/{asset_id}", response_model=AssetDeleteResponse)
async def delete_household_asset(
    asset_id: str,
    household_id: str = Depends(get_household_id),
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """Delete an asset and, best-effort, both resolutions of its images."""
    try:
        asset = get_asset(db, asset_id, household_id)

        urls = collect_image_urls(asset)
        if urls:
            await image_store.delete(urls)

        delete_asset(db, asset_id, household_id)
        return AssetDeleteResponse(deleted=True, id=asset_id)

    except AssetNotFoundError:
        raise _not_found(asset_id)
    except Exception as e:
        logger.error(f"Delete asset failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete asset: {str(e)}",
        )
