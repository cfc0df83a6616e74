"""Map raw results-table rows onto the canonical causelist record.

``normalize`` is total: portal markup is outside our control, so missing
or malformed pieces degrade to sentinel values and the row is kept.
"""
from __future__ import annotations

import re
from typing import Any, Iterable, List, Tuple

from . import courts
from .models import UNKNOWN, CauselistRecord, RawRow
from .utils import clean_text

_VS_SEPARATOR = re.compile(r"(?:^|\s+)(?:vs|v/s)\.?(?:\s+|$)", re.IGNORECASE)
_VS_TOKEN = re.compile(r"\s+(?:vs|v/s)\.?\s+", re.IGNORECASE)

ADVOCATE_DELIMITER = ", "


def _lines(values: Any) -> List[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split("\n")
    out: List[str] = []
    for value in values:
        cleaned = clean_text(value if isinstance(value, str) else str(value or ""))
        if cleaned:
            out.append(cleaned)
    return out


def split_party(text: str | None) -> Tuple[str, str]:
    """Split ``"A Vs B"`` into ``("A", "B")``.

    The separator is matched case-insensitively. A side that is missing or
    empty becomes ``UNKNOWN``.
    """

    flattened = clean_text(text)
    if not flattened:
        return UNKNOWN, UNKNOWN

    parts = _VS_SEPARATOR.split(flattened, maxsplit=1)
    petitioner = clean_text(parts[0]) or UNKNOWN
    respondent = clean_text(parts[1]) if len(parts) > 1 else ""
    return petitioner, respondent or UNKNOWN


def normalize_vs_token(text: str) -> str:
    """Rewrite the first "vs"-style separator as `` Vs ``."""

    return _VS_TOKEN.sub(" Vs ", text, count=1)


def join_advocates(lines: Iterable[str]) -> str:
    return ADVOCATE_DELIMITER.join(_lines(list(lines))) or UNKNOWN


def derive_case_number(anchor: str | None, flattened_details: str) -> str:
    """Prefer the linked case number; else the first token of the details."""

    from_anchor = clean_text(anchor)
    if from_anchor:
        return from_anchor
    tokens = flattened_details.split()
    return tokens[0] if tokens else UNKNOWN


def normalize(raw: RawRow, portal_kind: str) -> CauselistRecord:
    detail_lines = _lines(raw.case_details_lines)
    case_details = clean_text(" ".join(detail_lines))

    party = clean_text(" ".join(_lines(raw.party_lines)))
    if portal_kind == courts.TELANGANA:
        # TSHC free-text names use assorted separators; keep one display form.
        party = normalize_vs_token(party)
    petitioner, respondent = split_party(party)

    return CauselistRecord(
        serial_no=clean_text(raw.serial_no if isinstance(raw.serial_no, str) else ""),
        case_number=derive_case_number(raw.case_anchor, case_details),
        case_details=case_details,
        case_details_raw="\n".join(detail_lines),
        party=party,
        petitioner=petitioner,
        respondent=respondent,
        petitioner_advocate=join_advocates(raw.petitioner_advocate_lines or []),
        respondent_advocate=join_advocates(raw.respondent_advocate_lines or []),
        district=clean_text(" ".join(_lines(raw.district_lines))),
    )


def normalize_rows(rows: Iterable[RawRow], portal_kind: str) -> List[CauselistRecord]:
    return [normalize(row, portal_kind) for row in rows]


__all__ = ["normalize", "normalize_rows", "split_party", "join_advocates", "UNKNOWN"]
