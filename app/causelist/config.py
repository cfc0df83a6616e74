"""Configuration constants for the causelist synchronisation engine."""
from __future__ import annotations

import os
from pathlib import Path

DATA_DIR: Path = Path(os.getenv("CAUSELIST_DATA_DIR", "/app/data"))
LOG_DIR: Path = DATA_DIR / "logs"
LOG_FILE: Path = LOG_DIR / "latest.log"
DEBUG_DIR: Path = DATA_DIR / "debug"
EXPORTS_DIR: Path = DATA_DIR / "exports"
REPLAY_FIXTURES_DIR: Path = DATA_DIR / "replay_fixtures"
DB_PATH: Path = DATA_DIR / "causelist.db"

APHC_SEARCH_URL: str = "https://aphc.gov.in/Hcdbs/search.jsp"
TSHC_START_URL: str = "https://causelist.tshc.gov.in/"

DEPLOY_MODE_SERVERLESS = "serverless"
DEPLOY_MODE_LOCAL = "local"
DEPLOY_MODES = (DEPLOY_MODE_SERVERLESS, DEPLOY_MODE_LOCAL)


def _env_flag(env_var: str, default: str = "0") -> bool:
    return os.getenv(env_var, default).strip().lower() not in {"", "0", "false", "no"}


def _default_deploy_mode() -> str:
    if os.getenv("VERCEL") or os.getenv("APP_ENV", "").strip().lower() == "production":
        return DEPLOY_MODE_SERVERLESS
    return DEPLOY_MODE_LOCAL


DEPLOY_MODE: str = (
    os.getenv("CAUSELIST_DEPLOY_MODE", "").strip().lower() or _default_deploy_mode()
)

# Bundled minimal Chromium used in constrained/serverless environments.
CHROMIUM_EXECUTABLE: str = os.getenv("CAUSELIST_CHROMIUM_EXECUTABLE", "/usr/bin/chromium")
# Local runs open a visible window unless told otherwise.
LOCAL_HEADLESS: bool = _env_flag("CAUSELIST_LOCAL_HEADLESS", "0")
VIEWPORT: dict[str, int] = {"width": 1280, "height": 800}


def _parse_timeout_seconds(env_var: str, default: int, *, minimum: int = 1) -> int:
    """Parse a timeout value in seconds from the environment with bounds."""

    try:
        value = int(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    return max(minimum, value)


# Landing page navigation (page.goto) per portal.
APHC_NAV_TIMEOUT_SECONDS: int = _parse_timeout_seconds("CAUSELIST_APHC_NAV_TIMEOUT_SECONDS", 30)
TSHC_NAV_TIMEOUT_SECONDS: int = _parse_timeout_seconds("CAUSELIST_TSHC_NAV_TIMEOUT_SECONDS", 45)
# Intermediate menu buttons ("Daily Cause List", "Advocate Wise", ...).
STEP_TIMEOUT_SECONDS: int = _parse_timeout_seconds("CAUSELIST_STEP_TIMEOUT_SECONDS", 10)
# Advocate identifier input field.
INPUT_TIMEOUT_SECONDS: int = _parse_timeout_seconds("CAUSELIST_INPUT_TIMEOUT_SECONDS", 10)
# Submit/search control.
SUBMIT_TIMEOUT_SECONDS: int = _parse_timeout_seconds("CAUSELIST_SUBMIT_TIMEOUT_SECONDS", 10)
# Results table; expiry means "no matters listed", not a failure.
RESULTS_TIMEOUT_SECONDS: int = _parse_timeout_seconds("CAUSELIST_RESULTS_TIMEOUT_SECONDS", 15)
RESULTS_TIMEOUT_MAX_SECONDS: int = 120
# Data rows rendering once the results table is attached.
ROWS_TIMEOUT_SECONDS: int = _parse_timeout_seconds("CAUSELIST_ROWS_TIMEOUT_SECONDS", 5)

RECORD_REPLAY_FIXTURES: bool = _env_flag("CAUSELIST_RECORD_REPLAY_FIXTURES")
DEBUG_SCREENSHOTS: bool = _env_flag("CAUSELIST_DEBUG_SCREENSHOTS")
HEALTHCHECK_PROBE_PORTALS: bool = _env_flag("CAUSELIST_HEALTHCHECK_PROBE_PORTALS")
HEALTHCHECK_PROBE_TIMEOUT_SECONDS: int = _parse_timeout_seconds(
    "CAUSELIST_HEALTHCHECK_PROBE_TIMEOUT_SECONDS", 10
)

SYNC_RUNS_LIST_LIMIT: int = int(os.getenv("CAUSELIST_SYNC_RUNS_LIST_LIMIT", "20"))

USER_AGENT: str = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def is_serverless(mode: str | None = None) -> bool:
    """Return ``True`` when ``mode`` (or the configured mode) is serverless."""

    return str(mode or DEPLOY_MODE).strip().lower() == DEPLOY_MODE_SERVERLESS
