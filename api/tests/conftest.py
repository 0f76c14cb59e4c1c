"""Pytest configuration and fixtures."""

import base64
import io
import json

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from asset_catalog.config import Settings
from asset_catalog.main import create_app

HOUSEHOLD_ID = "household-1"


def make_image_bytes(size=(2400, 1200), fmt="PNG", mode="RGB", color=(200, 30, 30)):
    """Encode a solid-colour test image."""
    if mode == "RGBA":
        color = color + (128,)
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_principal(user_id="entra-user-1", provider="aad", **overrides):
    """Base64 client principal header as forwarded by the hosting platform."""
    principal = {
        "userId": user_id,
        "userDetails": "someone@example.com",
        "identityProvider": provider,
        "userRoles": ["anonymous", "authenticated"],
    }
    principal.update(overrides)
    return base64.b64encode(json.dumps(principal).encode()).decode()


@pytest.fixture
def test_settings(tmp_path):
    """Settings for an isolated app: in-memory database, blobs under tmp_path."""
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        environment="development",
        blob_provider="local",
        blob_base_path=str(tmp_path / "blobs"),
        public_base_url="http://testserver",
        secret_key="test-secret",
        openai_api_key=None,
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """Create a test client (runs startup so tables exist)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"x-household-id": HOUSEHOLD_ID}


@pytest.fixture
def image_store(app):
    return app.state.image_store


@pytest.fixture
def png_bytes():
    return make_image_bytes()
