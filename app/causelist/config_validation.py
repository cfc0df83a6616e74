from __future__ import annotations

from typing import Literal

from . import config
from .logging_utils import _sync_event
from .utils import log_line

Entrypoint = Literal["api", "cli", "replay", "tests"]


def _raise_config_error(message: str, *, entrypoint: Entrypoint, error: str) -> None:
    _sync_event(
        "error",
        phase="config",
        context="runtime_validation",
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ValueError(message)


def validate_runtime_config(entrypoint: Entrypoint) -> None:
    """Validate runtime configuration for the given entrypoint.

    Raises ``ValueError`` when a blocking misconfiguration is detected.
    """

    if config.DEPLOY_MODE not in config.DEPLOY_MODES:
        _raise_config_error(
            f"CAUSELIST_DEPLOY_MODE must be one of {config.DEPLOY_MODES}, got {config.DEPLOY_MODE!r}.",
            entrypoint=entrypoint,
            error="deploy_mode_invalid",
        )

    if config.is_serverless() and not config.CHROMIUM_EXECUTABLE:
        _raise_config_error(
            "CAUSELIST_CHROMIUM_EXECUTABLE is required in serverless mode.",
            entrypoint=entrypoint,
            error="chromium_executable_missing",
        )

    timeout_fields = [
        ("APHC_NAV_TIMEOUT_SECONDS", config.APHC_NAV_TIMEOUT_SECONDS),
        ("TSHC_NAV_TIMEOUT_SECONDS", config.TSHC_NAV_TIMEOUT_SECONDS),
        ("STEP_TIMEOUT_SECONDS", config.STEP_TIMEOUT_SECONDS),
        ("INPUT_TIMEOUT_SECONDS", config.INPUT_TIMEOUT_SECONDS),
        ("SUBMIT_TIMEOUT_SECONDS", config.SUBMIT_TIMEOUT_SECONDS),
        ("RESULTS_TIMEOUT_SECONDS", config.RESULTS_TIMEOUT_SECONDS),
        ("ROWS_TIMEOUT_SECONDS", config.ROWS_TIMEOUT_SECONDS),
    ]

    for field_name, value in timeout_fields:
        if value <= 0:
            _raise_config_error(
                f"{field_name} must be greater than zero.",
                entrypoint=entrypoint,
                error="invalid_timeout",
            )

    if config.RESULTS_TIMEOUT_SECONDS > config.RESULTS_TIMEOUT_MAX_SECONDS:
        _raise_config_error(
            f"RESULTS_TIMEOUT_SECONDS must not exceed {config.RESULTS_TIMEOUT_MAX_SECONDS}.",
            entrypoint=entrypoint,
            error="results_timeout_unbounded",
        )


__all__ = ["validate_runtime_config", "Entrypoint"]
