"""API v1 router."""

from fastapi import APIRouter

from asset_catalog.api.v1.endpoints import advice, assets, health, images, preferences

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(assets.router, prefix="/assets", tags=["assets"])
api_router.include_router(images.router, tags=["images"])
api_router.include_router(preferences.router, prefix="/user/preferences", tags=["preferences"])
api_router.include_router(advice.router, tags=["advice"])
