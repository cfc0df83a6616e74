from __future__ import annotations

"""Court identifiers for the supported high court portals.

These values are persisted (user_causelists.court, sync_runs.court) and
should be treated as stable identifiers.
"""

import logging
import re

LOGGER = logging.getLogger("causelist")

ANDHRA_PRADESH = "andhra_pradesh"
TELANGANA = "telangana"

ALL_COURTS = (ANDHRA_PRADESH, TELANGANA)

DISPLAY_NAMES = {
    ANDHRA_PRADESH: "High Court of Andhra Pradesh",
    TELANGANA: "High Court for the State of Telangana",
}

_ALIASES = {
    "andhra_pradesh": ANDHRA_PRADESH,
    "andhrapradesh": ANDHRA_PRADESH,
    "ap": ANDHRA_PRADESH,
    "aphc": ANDHRA_PRADESH,
    "telangana": TELANGANA,
    "ts": TELANGANA,
    "tshc": TELANGANA,
}

_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_court(value: str | None) -> str | None:
    """Return the canonical court identifier for ``value``.

    Matching ignores case, spaces and dashes, so "Andhra Pradesh",
    "Andhrapradesh" and "andhra-pradesh" all resolve to ``andhra_pradesh``.
    Unknown or empty values return ``None``; there is no default court.
    """

    if not value:
        return None

    raw = value.strip().lower()
    if raw in ALL_COURTS:
        return raw

    underscored = _SEPARATORS.sub("_", raw)
    if underscored in _ALIASES:
        return _ALIASES[underscored]

    squashed = underscored.replace("_", "")
    if squashed in _ALIASES:
        return _ALIASES[squashed]

    LOGGER.warning("[COURTS][WARN] Unknown court %r", value)
    return None


__all__ = ["ANDHRA_PRADESH", "TELANGANA", "ALL_COURTS", "DISPLAY_NAMES", "normalize_court"]
