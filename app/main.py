from __future__ import annotations

import os

from flask import Flask, Response, jsonify, request, send_file

from app.causelist import config, courts, db
from app.causelist.config_validation import validate_runtime_config
from app.causelist.errors import (
    LaunchError,
    NavigationError,
    PersistenceError,
    UnsupportedCourt,
)
from app.causelist.export_excel import export_causelist_to_excel
from app.causelist.healthcheck import run_health_checks
from app.causelist.models import SyncRequest, SyncResult
from app.causelist.error_codes import ErrorCode
from app.causelist.logging_utils import _sync_event
from app.causelist.sync import SyncOrchestrator
from app.causelist.utils import ensure_dirs, log_line

app = Flask(__name__)

# Initialise storage paths and SQLite schema on import so WSGI entrypoints
# also have the expected environment ready. Idempotent.
ensure_dirs()
db.initialize_schema()

USER_HEADER = "X-User-Id"


def get_orchestrator() -> SyncOrchestrator:
    """Return the orchestrator used by the sync endpoint.

    Tests replace ``app.config["SYNC_ORCHESTRATOR"]`` with one wired to fakes.
    """

    orchestrator = app.config.get("SYNC_ORCHESTRATOR")
    if orchestrator is None:
        orchestrator = SyncOrchestrator()
    return orchestrator


def _current_user_id() -> str | None:
    # Identity is resolved by the upstream auth proxy and trusted as given.
    user_id = (request.headers.get(USER_HEADER) or "").strip()
    return user_id or None


def _unauthorised() -> tuple[Response, int]:
    return jsonify({"ok": False, "error": "unauthorized"}), 401


def _result_payload(result: SyncResult | None) -> dict[str, object]:
    if result is None:
        return {"ok": True, "count": 0, "data": [], "lastSyncedAt": None}
    document = result.to_document()
    return {
        "ok": True,
        "count": document["count"],
        "data": document["data"],
        "lastSyncedAt": document["lastSyncedAt"],
        "court": document["court"],
        "advocateIdentifier": document["advocateIdentifier"],
    }


def _parse_sync_payload() -> dict[str, object]:
    payload: dict[str, object] = {}
    if request.is_json:
        payload.update(request.get_json(silent=True) or {})
    else:
        payload.update(request.form or {})
    return payload


@app.post("/api/sync")
def api_sync() -> tuple[Response, int]:
    """Scrape the requested court portal and replace the stored causelist."""

    user_id = _current_user_id()
    if not user_id:
        return _unauthorised()

    payload = _parse_sync_payload()
    advocate_identifier = str(
        payload.get("advocateIdentifier") or payload.get("advocateCode") or ""
    ).strip()
    court = str(payload.get("court") or payload.get("highCourt") or "").strip()

    if not advocate_identifier:
        return jsonify({"ok": False, "error": "advocate identifier is required"}), 400

    try:
        validate_runtime_config("api")
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 503

    sync_request = SyncRequest(
        user_id=user_id,
        advocate_identifier=advocate_identifier,
        court=court,
    )

    try:
        result = get_orchestrator().sync(sync_request)
    except UnsupportedCourt as exc:
        return (
            jsonify(
                {
                    "ok": False,
                    "error": str(exc),
                    "error_code": exc.error_code,
                    "supported": list(courts.ALL_COURTS),
                }
            ),
            400,
        )
    except LaunchError as exc:
        return jsonify({"ok": False, "error": str(exc), "error_code": exc.error_code}), 503
    except NavigationError as exc:
        return (
            jsonify(
                {"ok": False, "error": str(exc), "error_code": exc.error_code, "step": exc.step}
            ),
            502,
        )
    except PersistenceError as exc:
        # The scraped data is returned, but the sync is not reported as successful.
        partial = exc.result
        return (
            jsonify(
                {
                    "ok": False,
                    "error": str(exc),
                    "error_code": exc.error_code,
                    "count": partial.count if partial else 0,
                    "data": partial.to_document()["data"] if partial else [],
                }
            ),
            500,
        )
    except Exception as exc:  # noqa: BLE001
        log_line(f"[API] Sync failed unexpectedly: {exc}")
        _sync_event("error", phase="api", error=str(exc), user_id=user_id)
        return (
            jsonify({"ok": False, "error": "failed to sync", "error_code": ErrorCode.INTERNAL}),
            500,
        )

    body = _result_payload(result)
    body["empty"] = result.empty
    court_name = courts.DISPLAY_NAMES.get(result.court, result.court)
    if result.empty:
        body["message"] = f"No matters listed for this advocate in the {court_name}."
    else:
        body["message"] = f"Synced {result.count} records from the {court_name}."
    return jsonify(body), 200


@app.get("/api/causelist")
def api_causelist() -> tuple[Response, int]:
    """Return the most recently synced causelist for the current user."""

    user_id = _current_user_id()
    if not user_id:
        return _unauthorised()

    result = db.get_latest_user_causelist(user_id)
    return jsonify(_result_payload(result)), 200


@app.get("/api/causelist/export.xlsx")
def api_causelist_export() -> Response:
    user_id = _current_user_id()
    if not user_id:
        return _unauthorised()

    result = db.get_latest_user_causelist(user_id)
    if result is None:
        return jsonify({"ok": False, "error": "no causelist"}), 404

    path = export_causelist_to_excel(result)
    return send_file(path, as_attachment=True, download_name=os.path.basename(path))


@app.get("/api/sync/runs")
def api_sync_runs() -> tuple[Response, int]:
    user_id = _current_user_id()
    if not user_id:
        return _unauthorised()

    try:
        limit = int(request.args.get("limit", config.SYNC_RUNS_LIST_LIMIT))
    except (TypeError, ValueError):
        limit = config.SYNC_RUNS_LIST_LIMIT
    limit = max(1, min(limit, 100))

    runs = db.list_sync_runs(user_id, limit=limit)
    return jsonify({"ok": True, "runs": runs}), 200


@app.get("/api/health")
def api_health() -> tuple[Response, int]:
    """Return a JSON health summary for configuration, DB and portals."""

    result = run_health_checks(entrypoint="api")
    status = 200 if result.ok else 503
    return jsonify({"ok": result.ok, "checks": result.checks}), status
