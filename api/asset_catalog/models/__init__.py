"""SQLAlchemy models."""

from asset_catalog.database import Base
from asset_catalog.models.asset import Asset
from asset_catalog.models.user_preferences import UserPreferences

__all__ = [
    "Base",
    "Asset",
    "UserPreferences",
]
