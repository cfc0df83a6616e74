from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from . import config, courts, db
from .config_validation import validate_runtime_config
from .logging_utils import _sync_event
from .utils import ensure_dirs, log_line

PORTAL_ORIGINS = {
    courts.ANDHRA_PRADESH: config.APHC_SEARCH_URL,
    courts.TELANGANA: config.TSHC_START_URL,
}


@dataclass
class HealthResult:
    ok: bool
    checks: dict[str, dict[str, Any]]


def _probe_portals(http_get: Callable[..., Any]) -> dict[str, Any]:
    """GET each portal landing page and report reachability.

    Certificate verification is disabled for these two origins only; they
    serve self-signed certificates.
    """

    results: dict[str, Any] = {}
    ok = True
    for court, url in PORTAL_ORIGINS.items():
        try:
            response = http_get(
                url,
                timeout=config.HEALTHCHECK_PROBE_TIMEOUT_SECONDS,
                verify=False,
                headers={"User-Agent": config.USER_AGENT},
            )
            reachable = response.status_code < 500
            results[court] = {"ok": reachable, "status": response.status_code}
        except requests.RequestException as exc:
            reachable = False
            results[court] = {"ok": False, "error": str(exc)}
        ok = ok and reachable
    return {"ok": ok, "portals": results}


def run_health_checks(
    entrypoint: str = "cli",
    *,
    probe_portals: Optional[bool] = None,
    http_get: Optional[Callable[..., Any]] = None,
) -> HealthResult:
    checks: dict[str, dict[str, Any]] = {}

    try:
        validate_runtime_config(entrypoint or "cli")
        checks["config"] = {"ok": True, "deploy_mode": config.DEPLOY_MODE}
    except ValueError as exc:
        checks["config"] = {"ok": False, "error": str(exc)}

    try:
        ensure_dirs()
        db.initialize_schema()
        conn = db.get_connection()
        conn.execute("SELECT COUNT(*) FROM user_causelists")
        checks["database"] = {"ok": True}
    except Exception as exc:  # noqa: BLE001
        checks["database"] = {"ok": False, "error": str(exc)}

    if probe_portals is None:
        probe_portals = config.HEALTHCHECK_PROBE_PORTALS
    if probe_portals:
        checks["portals"] = _probe_portals(http_get or requests.get)

    # Portal outages are reported but do not make the service itself unhealthy.
    overall_ok = all(
        check.get("ok", False) for name, check in checks.items() if name != "portals"
    )

    _sync_event(
        "state" if overall_ok else "error",
        phase="health",
        context="healthcheck",
        ok=overall_ok,
        checks=checks,
    )

    return HealthResult(ok=overall_ok, checks=checks)


if __name__ == "__main__":  # pragma: no cover
    result = run_health_checks(entrypoint="cli")
    for name, info in result.checks.items():
        status = "OK" if info.get("ok") else "FAIL"
        log_line(f"[HEALTH] {name}: {status} {info}")
    raise SystemExit(0 if result.ok else 1)
