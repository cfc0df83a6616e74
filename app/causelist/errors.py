"""Exceptions raised by the sync pipeline."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .error_codes import ErrorCode

if TYPE_CHECKING:  # pragma: no cover
    from .models import SyncResult


class SyncError(Exception):
    error_code: str = ErrorCode.INTERNAL


class UnsupportedCourt(SyncError):
    """No portal adapter is registered for the requested court."""

    error_code = ErrorCode.UNSUPPORTED_COURT

    def __init__(self, court: Optional[str]) -> None:
        super().__init__(f"Unsupported court: {court!r}")
        self.court = court


class LaunchError(SyncError):
    """The browser session could not be started."""

    error_code = ErrorCode.LAUNCH


class NavigationError(SyncError):
    """A structurally required portal step did not complete in time."""

    error_code = ErrorCode.NAVIGATION

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"{step}: {message}")
        self.step = step


class PersistenceError(SyncError):
    """The causelist upsert failed.

    ``result`` carries the extracted data so callers can still show it
    without reporting the sync as successful.
    """

    error_code = ErrorCode.PERSISTENCE

    def __init__(self, message: str, result: Optional["SyncResult"] = None) -> None:
        super().__init__(message)
        self.result = result


__all__ = [
    "SyncError",
    "UnsupportedCourt",
    "LaunchError",
    "NavigationError",
    "PersistenceError",
]
