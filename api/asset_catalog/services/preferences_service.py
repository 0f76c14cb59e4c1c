"""User preferences service."""

from typing import Any, Dict

from sqlalchemy.orm import Session

from asset_catalog.models.user_preferences import UserPreferences
from asset_catalog.services.asset_service import utc_now_iso

DEFAULT_DARK_MODE = False
DEFAULT_LANGUAGE = "en"


def _defaults(user_id: str) -> UserPreferences:
    return UserPreferences(
        user_id=user_id,
        dark_mode=DEFAULT_DARK_MODE,
        language=DEFAULT_LANGUAGE,
        updated_at=utc_now_iso(),
    )


def get_preferences(db: Session, user_id: str) -> UserPreferences:
    """Stored preferences, or unsaved defaults when the user has none."""
    return db.get(UserPreferences, user_id) or _defaults(user_id)


def update_preferences(db: Session, user_id: str, changes: Dict[str, Any]) -> UserPreferences:
    """Upsert preferences; fields missing from ``changes`` keep their previous value.

    Examples:
        >>> update_preferences(db, "user-1", {"language": "fr"})
        >>> prefs = update_preferences(db, "user-1", {"dark_mode": True})
        >>> prefs.language, prefs.dark_mode
        ('fr', True)
    """
    preferences = db.get(UserPreferences, user_id)
    if preferences is None:
        preferences = _defaults(user_id)
        db.add(preferences)

    if changes.get("dark_mode") is not None:
        preferences.dark_mode = changes["dark_mode"]
    if changes.get("language") is not None:
        preferences.language = changes["language"]
    preferences.updated_at = utc_now_iso()

    db.commit()
    db.refresh(preferences)
    return preferences
