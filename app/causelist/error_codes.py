from __future__ import annotations

"""Error code taxonomy for sync failures.

These codes are persisted in the sync_runs.error_code column, returned in
API error payloads and included in structured logs. Keep them stable.
"""


class ErrorCode:
    UNSUPPORTED_COURT = "unsupported_court"
    LAUNCH = "launch_error"
    NAVIGATION = "navigation_error"
    PERSISTENCE = "persistence_error"
    INTERNAL = "internal_error"


__all__ = ["ErrorCode"]
