"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from asset_catalog.api.v1 import api_router
from asset_catalog.config import Settings, settings as default_settings
from asset_catalog.database import Base, build_engine, build_session_factory
from asset_catalog.middleware.identity import DEV_HOUSEHOLD_HEADER, IdentityMiddleware
from asset_catalog.services.image_store import ImageStore
from asset_catalog.services.insurance_advisor import InsuranceAdvisor
from asset_catalog.storage.factory import get_storage_driver

import asset_catalog.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.settings.auto_create_tables:
        Base.metadata.create_all(bind=app.state.engine)
    yield
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and the handles its endpoints share."""
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Household Asset Catalog",
        description="Household asset catalog with insurance advice",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    engine = build_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.image_store = ImageStore(
        get_storage_driver(settings),
        signed_url_ttl=timedelta(days=settings.signed_url_ttl_days),
    )
    app.state.advisor = InsuranceAdvisor(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        max_tokens=settings.openai_max_tokens,
    )

    app.add_middleware(IdentityMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", DEV_HOUSEHOLD_HEADER],
        max_age=86400,
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        db_status = "disconnected"
        try:
            with app.state.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                db_status = "connected"
        except Exception as e:
            db_status = f"error: {str(e)}"

        blob_status = "disconnected"
        try:
            if await app.state.image_store.driver.test_connection():
                blob_status = "connected"
        except Exception as e:
            blob_status = f"error: {str(e)}"

        overall_status = "ok" if db_status == "connected" and blob_status == "connected" else "degraded"

        return {
            "status": overall_status,
            "db": db_status,
            "blob": blob_status,
            "llm": "enabled" if app.state.advisor.llm_enabled else "rule-based",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "asset_catalog.main:app",
        host=default_settings.api_host,
        port=default_settings.api_port,
        reload=default_settings.api_reload,
    )
