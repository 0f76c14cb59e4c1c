"""Business logic services."""

from asset_catalog.services.asset_service import AssetNotFoundError, create_asset, get_asset
from asset_catalog.services.image_store import ImageStore, InvalidImageError
from asset_catalog.services.insurance_advisor import InsuranceAdvisor

__all__ = [
    "AssetNotFoundError",
    "create_asset",
    "get_asset",
    "ImageStore",
    "InvalidImageError",
    "InsuranceAdvisor",
]
