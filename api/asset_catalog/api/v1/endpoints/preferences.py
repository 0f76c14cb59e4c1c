"""User preferences endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from asset_catalog.api.deps import get_db, get_user_id
from asset_catalog.schemas.preferences import PreferencesResponse, PreferencesUpdate
from asset_catalog.services.preferences_service import get_preferences, update_preferences

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=PreferencesResponse)
def read_preferences(
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Get the caller's preferences (defaults when none are stored)."""
    try:
        return get_preferences(db, user_id)
    except Exception as e:
        logger.error(f"Error getting user preferences: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get preferences: {str(e)}",
        )


@router.put("", response_model=PreferencesResponse)
def write_preferences(
    preferences_data: PreferencesUpdate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Update preferences.

    - **darkMode**: Dark theme on/off (optional)
    - **language**: One of en, fr, de, ja (optional)
    """
    try:
        return update_preferences(db, user_id, preferences_data.model_dump(exclude_unset=True))
    except Exception as e:
        logger.error(f"Error updating user preferences: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update preferences: {str(e)}",
        )
