"""Tests for the Python API client and local-first preference sync."""

import json

import pytest
import requests

from asset_catalog.client import CatalogAPIError, CatalogClient, PreferenceSync

from conftest import make_image_bytes


@pytest.fixture
def api(client):
    """CatalogClient driving the in-process app through the test client."""
    return CatalogClient("http://testserver/api", household_id="household-1", session=client)


class OfflineSession:
    """Session whose every request fails at the transport level."""

    def __init__(self):
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs.get("json")))
        raise requests.ConnectionError("network unreachable")


class Reply:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = json.dumps(body)

    def json(self):
        return self._body


class ScriptedSession:
    """Session answering with queued replies, in order."""

    def __init__(self):
        self.responses = []

    def request(self, method, url, **kwargs):
        return self.responses.pop(0)


class TestCatalogClient:
    """CatalogClient against the running app."""

    def test_asset_lifecycle(self, api):
        created = api.create_asset({"make": "Sony", "model": "A7", "value": 1200})
        assert api.get_asset(created["id"])["make"] == "Sony"

        updated = api.update_asset(created["id"], {"value": 1100})
        assert updated["value"] == 1100

        assert [a["id"] for a in api.list_assets()] == [created["id"]]
        assert api.portfolio_summary()["totalValue"] == 1100

        assert api.delete_asset(created["id"]) == {"deleted": True, "id": created["id"]}
        assert api.list_assets() == []

    def test_error_carries_detail(self, api):
        with pytest.raises(CatalogAPIError) as exc_info:
            api.get_asset("missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Asset missing not found"

    def test_upload_and_chat(self, api):
        urls = api.upload_image("photo.png", make_image_bytes(size=(50, 50)), "image/png")
        assert urls["imageUrl"] == urls["imageUrls"]["high"]

        answer = api.chat("How do I file a claim?", [{"make": "Sony", "value": 10}])
        assert answer.startswith("When filing an insurance claim")


class TestPreferenceSync:
    """Tests for PreferenceSync."""

    def test_defaults_without_cache(self, api, tmp_path):
        sync = PreferenceSync(api, tmp_path / "prefs.json")
        assert sync.preferences == {"darkMode": False, "language": "en"}
        assert sync.sync_status == PreferenceSync.IDLE

    def test_set_syncs_and_caches(self, api, tmp_path):
        cache = tmp_path / "prefs.json"
        sync = PreferenceSync(api, cache)

        result = sync.set(language="fr")

        assert result["language"] == "fr"
        assert sync.sync_status == PreferenceSync.SYNCED
        assert sync.last_error is None
        assert json.loads(cache.read_text()) == {"darkMode": False, "language": "fr"}
        assert api.get_preferences()["language"] == "fr"

    def test_failed_sync_is_reported_and_kept_locally(self, tmp_path):
        cache = tmp_path / "prefs.json"
        sync = PreferenceSync(CatalogClient("http://offline/api", session=OfflineSession()), cache)

        result = sync.set(darkMode=True)

        assert result["darkMode"] is True
        assert sync.sync_status == PreferenceSync.FAILED
        assert "network unreachable" in sync.last_error
        assert json.loads(cache.read_text())["darkMode"] is True

    def test_load_offline_keeps_cache(self, tmp_path):
        cache = tmp_path / "prefs.json"
        cache.write_text(json.dumps({"darkMode": True, "language": "de"}))
        sync = PreferenceSync(CatalogClient("http://offline/api", session=OfflineSession()), cache)

        assert sync.load() == {"darkMode": True, "language": "de"}
        assert sync.sync_status == PreferenceSync.FAILED

    def test_corrupt_cache_uses_defaults(self, api, tmp_path):
        cache = tmp_path / "prefs.json"
        cache.write_text("{not json")
        assert PreferenceSync(api, cache).preferences["language"] == "en"

    def test_load_pushes_unsynced_changes_first(self, api, tmp_path):
        cache = tmp_path / "prefs.json"
        offline = PreferenceSync(CatalogClient("http://offline/api", session=OfflineSession()), cache)
        offline.set(language="ja")
        assert offline.sync_status == PreferenceSync.FAILED

        # Connectivity returns
        offline.client = api
        assert offline.load()["language"] == "ja"
        assert offline.sync_status == PreferenceSync.SYNCED
        assert api.get_preferences()["language"] == "ja"

    def test_server_rejection_is_failed(self, api, tmp_path):
        sync = PreferenceSync(api, tmp_path / "prefs.json")
        sync.set(language="xx")
        assert sync.sync_status == PreferenceSync.FAILED
        assert sync.last_error.startswith("400")

    def test_rejected_change_does_not_block_later_syncs(self, api, tmp_path):
        cache = tmp_path / "prefs.json"
        sync = PreferenceSync(api, cache)

        rejected = sync.set(language="xx")
        assert sync.sync_status == PreferenceSync.FAILED
        assert rejected["language"] == "en"
        assert json.loads(cache.read_text())["language"] == "en"

        sync.set(darkMode=True)
        assert sync.sync_status == PreferenceSync.SYNCED
        server = api.get_preferences()
        assert (server["darkMode"], server["language"]) == (True, "en")

        assert sync.load() == {"darkMode": True, "language": "en"}
        assert sync.sync_status == PreferenceSync.SYNCED

    def test_rejection_restores_last_confirmed_value(self, api, tmp_path):
        sync = PreferenceSync(api, tmp_path / "prefs.json")
        sync.set(language="de")

        assert sync.set(language="xx")["language"] == "de"

    def test_server_error_keeps_change_queued(self, tmp_path):
        session = ScriptedSession()
        sync = PreferenceSync(CatalogClient("http://flaky/api", session=session), tmp_path / "p.json")

        session.responses.append(Reply(503, {"detail": "unavailable"}))
        assert sync.set(language="fr")["language"] == "fr"
        assert sync.sync_status == PreferenceSync.FAILED

        session.responses.append(Reply(200, {"darkMode": False, "language": "fr"}))
        assert sync.load()["language"] == "fr"
        assert sync.sync_status == PreferenceSync.SYNCED

    @pytest.mark.parametrize("content", ["[]", "null", "1", '"en"'])
    def test_non_object_cache_uses_defaults(self, api, tmp_path, content):
        cache = tmp_path / "prefs.json"
        cache.write_text(content)
        assert PreferenceSync(api, cache).preferences == {"darkMode": False, "language": "en"}
