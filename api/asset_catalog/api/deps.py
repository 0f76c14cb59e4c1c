"""API dependencies.

Long-lived handles (session factory, image store, advisor) are built once by
``create_app`` and stored on ``app.state``; these dependencies hand them to
endpoints.
"""

from typing import Generator

from fastapi import HTTPException, Request, status
from sqlalchemy.orm import Session

from asset_catalog.config import Settings
from asset_catalog.services.image_store import ImageStore
from asset_catalog.services.insurance_advisor import InsuranceAdvisor


def get_db(request: Request) -> Generator[Session, None, None]:
    """Get database session."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_advisor(request: Request) -> InsuranceAdvisor:
    return request.app.state.advisor


def _require_identity(request: Request) -> str:
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        settings: Settings = request.app.state.settings
        if settings.is_local_development:
            detail = (
                "Unauthorized - authentication required. Provide x-ms-client-principal "
                "or x-household-id (local dev only) header."
            )
        else:
            detail = (
                "Unauthorized - authentication required. Request must include "
                "x-ms-client-principal header."
            )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
    return user_id


def get_household_id(request: Request) -> str:
    """Household partition of the authenticated caller."""
    return _require_identity(request)


def get_user_id(request: Request) -> str:
    """Authenticated caller's user id (same identity as the household)."""
    return _require_identity(request)
