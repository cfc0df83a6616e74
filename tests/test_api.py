import importlib
import sys
from pathlib import Path

import pytest

from app.causelist import db
from app.causelist.selectors import TSHC_SELECTORS
from app.causelist.sync import SyncOrchestrator
from tests.test_db_causelists import _configure_temp_paths, make_result
from tests.test_portal_navigation import aphc_ready_page, tshc_ready_page
from tests.test_portal_parsing import APHC_RESULTS_HTML, TSHC_RESULTS_HTML
from tests.test_sync_orchestrator import CountingProvider

HEADERS = {"X-User-Id": "user-1"}


def _reload_main_module():
    if "app.main" in sys.modules:
        del sys.modules["app.main"]
    return importlib.import_module("app.main")


def _client_with(main, provider: CountingProvider, **kwargs):
    main.app.config["SYNC_ORCHESTRATOR"] = SyncOrchestrator(session_provider=provider, **kwargs)
    return main.app.test_client()


def test_sync_requires_user(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()
    client = _client_with(main, CountingProvider())

    resp = client.post("/api/sync", json={"advocateIdentifier": "12345", "court": "andhra_pradesh"})

    assert resp.status_code == 401
    assert client.get("/api/causelist").status_code == 401


def test_sync_requires_advocate_identifier(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()
    provider = CountingProvider()
    client = _client_with(main, provider)

    resp = client.post("/api/sync", json={"court": "telangana"}, headers=HEADERS)

    assert resp.status_code == 400
    assert provider.acquired == 0


def test_sync_rejects_unsupported_court(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()
    provider = CountingProvider()
    client = _client_with(main, provider)

    resp = client.post(
        "/api/sync", json={"advocateIdentifier": "12345", "court": "Bombay"}, headers=HEADERS
    )

    assert resp.status_code == 400
    payload = resp.get_json()
    assert payload["error_code"] == "unsupported_court"
    assert payload["supported"] == ["andhra_pradesh", "telangana"]
    assert provider.acquired == 0


def test_sync_then_read_back(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()
    client = _client_with(main, CountingProvider(aphc_ready_page(APHC_RESULTS_HTML)))

    assert client.get("/api/causelist", headers=HEADERS).get_json()["count"] == 0

    resp = client.post(
        "/api/sync",
        json={"advocateCode": "12345", "highCourt": "Andhra Pradesh"},
        headers=HEADERS,
    )
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["ok"] is True
    assert payload["count"] == 2
    assert payload["empty"] is False
    assert payload["data"][0]["case_number"] == "WP/1234/2024"

    stored = client.get("/api/causelist", headers=HEADERS).get_json()
    assert stored["count"] == 2
    assert stored["court"] == "andhra_pradesh"
    assert stored["lastSyncedAt"] == payload["lastSyncedAt"]

    runs = client.get("/api/sync/runs?limit=500", headers=HEADERS).get_json()["runs"]
    assert len(runs) == 1
    assert runs[0]["status"] == "completed"


def test_sync_empty_result_is_success(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()
    client = _client_with(main, CountingProvider(tshc_ready_page(results=False)))

    resp = client.post(
        "/api/sync", json={"advocateIdentifier": "K SRINIVAS", "court": "telangana"}, headers=HEADERS
    )

    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["empty"] is True
    assert payload["count"] == 0
    assert payload["data"] == []


def test_sync_navigation_failure_maps_to_502(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()
    page = tshc_ready_page(TSHC_RESULTS_HTML)
    page.present.discard(TSHC_SELECTORS.advocate_input)
    provider = CountingProvider(page)
    client = _client_with(main, provider)

    resp = client.post(
        "/api/sync", json={"advocateIdentifier": "K SRINIVAS", "court": "telangana"}, headers=HEADERS
    )

    assert resp.status_code == 502
    payload = resp.get_json()
    assert payload["error_code"] == "navigation_error"
    assert payload["step"] == "advocate_input"
    assert provider.released == 1


def test_sync_launch_failure_maps_to_503(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()
    client = _client_with(main, CountingProvider(fail_launch=True))

    resp = client.post(
        "/api/sync", json={"advocateIdentifier": "12345", "court": "ap"}, headers=HEADERS
    )

    assert resp.status_code == 503
    assert resp.get_json()["error_code"] == "launch_error"


def test_sync_persistence_failure_still_returns_data(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()

    def _failing_persist(result):  # noqa: ANN001
        raise RuntimeError("disk I/O error")

    client = _client_with(
        main, CountingProvider(tshc_ready_page(TSHC_RESULTS_HTML)), persist=_failing_persist
    )

    resp = client.post(
        "/api/sync", json={"advocateIdentifier": "K SRINIVAS", "court": "telangana"}, headers=HEADERS
    )

    assert resp.status_code == 500
    payload = resp.get_json()
    assert payload["ok"] is False
    assert payload["error_code"] == "persistence_error"
    assert payload["count"] == 2
    assert len(payload["data"]) == 2


def test_export_requires_stored_causelist(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    main = _reload_main_module()
    client = main.app.test_client()

    assert client.get("/api/causelist/export.xlsx", headers=HEADERS).status_code == 404

    db.upsert_user_causelist(make_result(2, synced_at="2024-06-01T09:00:00.000000Z"))
    resp = client.get("/api/causelist/export.xlsx", headers=HEADERS)

    assert resp.status_code == 200
    assert "attachment" in resp.headers["Content-Disposition"]
    assert resp.data[:2] == b"PK"
    resp.close()
