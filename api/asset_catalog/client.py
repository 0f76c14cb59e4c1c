"""
Python client for the asset catalog API.

``CatalogClient`` wraps the REST endpoints. ``PreferenceSync`` keeps user
preferences local-first: changes apply to a local cache immediately and are
pushed to the server best-effort, with the outcome exposed as
``sync_status`` instead of being dropped silently.
"""

import json
import logging
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Union

import requests

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES = {"darkMode": False, "language": "en"}


class CatalogAPIError(Exception):
    """Non-2xx response from the catalog API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class CatalogClient:
    """Thin wrapper over the catalog HTTP API.

    Args:
        base_url: API root including the prefix, e.g. ``http://localhost:8000/api``
        household_id: Sent as ``x-household-id`` (local development only)
        session: Optional ``requests.Session`` (or compatible) to reuse
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        household_id: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.household_id = household_id
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        if self.household_id:
            return {"x-household-id": self.household_id}
        return {}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            headers=self._headers(),
            timeout=self.timeout,
            **kwargs,
        )

        if response.status_code >= 400:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise CatalogAPIError(response.status_code, str(detail))

        return response.json()

    def list_assets(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/assets")

    def get_asset(self, asset_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/assets/{asset_id}")

    def create_asset(self, asset: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/assets", json=asset)

    def update_asset(self, asset_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/assets/{asset_id}", json=changes)

    def delete_asset(self, asset_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/assets/{asset_id}")

    def portfolio_summary(self) -> Dict[str, Any]:
        return self._request("GET", "/assets/summary")

    def upload_image(
        self, filename: str, content: Union[bytes, BinaryIO], content_type: str
    ) -> Dict[str, Any]:
        return self._request(
            "POST", "/upload", files={"image": (filename, content, content_type)}
        )

    def chat(
        self, message: str, assets: List[Dict[str, Any]], language: str = "en"
    ) -> str:
        body = {"message": message, "assets": assets, "language": language}
        return self._request("POST", "/chat", json=body)["response"]

    def get_preferences(self) -> Dict[str, Any]:
        return self._request("GET", "/user/preferences")

    def update_preferences(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", "/user/preferences", json=changes)


class PreferenceSync:
    """Local-first user preferences with best-effort server sync.

    ``sync_status`` is one of ``idle``, ``pending``, ``synced`` or
    ``failed``; on failure ``last_error`` holds the reason.
    """

    IDLE = "idle"
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"

    def __init__(self, client: CatalogClient, cache_path: Union[str, Path]):
        self.client = client
        self.cache_path = Path(cache_path)
        self.sync_status = self.IDLE
        self.last_error: Optional[str] = None
        self._preferences = self._read_cache()
        # Last values the server acknowledged (the cache until it answers)
        self._confirmed = dict(self._preferences)
        # Local changes the server has not acknowledged yet
        self._unsynced: Dict[str, Any] = {}

    @property
    def preferences(self) -> Dict[str, Any]:
        return dict(self._preferences)

    def _read_cache(self) -> Dict[str, Any]:
        try:
            cached = json.loads(self.cache_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return dict(DEFAULT_PREFERENCES)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences cache {self.cache_path}: {e}")
            return dict(DEFAULT_PREFERENCES)
        if not isinstance(cached, dict):
            logger.warning(
                f"Ignoring unreadable preferences cache {self.cache_path}: "
                f"expected an object, got {type(cached).__name__}"
            )
            return dict(DEFAULT_PREFERENCES)
        return {**DEFAULT_PREFERENCES, **cached}

    def _write_cache(self) -> None:
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.cache_path.write_text(json.dumps(self._preferences), encoding="utf-8")

    def _discard(self, rejected: Dict[str, Any]) -> None:
        """Forget changes the server refused and restore its last known values."""
        for key in rejected:
            self._unsynced.pop(key, None)
            self._preferences[key] = self._confirmed.get(key, DEFAULT_PREFERENCES.get(key))
        self._write_cache()

    def _sync(self, call, pending: Optional[Dict[str, Any]] = None) -> bool:
        self.sync_status = self.PENDING
        try:
            remote = call()
        except (CatalogAPIError, requests.RequestException) as e:
            self.sync_status = self.FAILED
            self.last_error = str(e)
            logger.warning(f"Preferences sync failed: {e}")
            # A 4xx will never succeed on retry; 5xx and transport errors stay queued
            if pending and isinstance(e, CatalogAPIError) and 400 <= e.status_code < 500:
                self._discard(pending)
            return False

        self._preferences = {
            "darkMode": remote.get("darkMode", self._preferences["darkMode"]),
            "language": remote.get("language") or self._preferences["language"],
        }
        self._confirmed = dict(self._preferences)
        self._write_cache()
        self._unsynced = {}
        self.sync_status = self.SYNCED
        self.last_error = None
        return True

    def load(self) -> Dict[str, Any]:
        """Refresh from the server when reachable; otherwise keep the cached values.

        Pending local changes are pushed first so a refresh never reverts them.
        """
        if self._unsynced:
            pending = dict(self._unsynced)
            self._sync(lambda: self.client.update_preferences(pending), pending)
        else:
            self._sync(self.client.get_preferences)
        return self.preferences

    def set(self, **changes: Any) -> Dict[str, Any]:
        """Apply changes locally at once, then push them to the server.

        Changes the server rejects as invalid are rolled back locally; changes
        that fail to reach it stay queued for the next ``set`` or ``load``.

        Example:
            >>> sync.set(darkMode=True)
            {'darkMode': True, 'language': 'en'}
            >>> sync.sync_status
            'synced'
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        self._preferences.update(changes)
        self._unsynced.update(changes)
        self._write_cache()

        pending = dict(self._unsynced)
        self._sync(lambda: self.client.update_preferences(pending), pending)
        return self.preferences
