"""Excel export of a persisted causelist."""

from __future__ import annotations

import os
from typing import Optional

import pandas as pd

from . import config, courts
from .models import CauselistRecord, SyncResult
from .utils import sanitize_filename_component

MAX_EXPORTS = int(os.environ.get("CAUSELIST_EXPORTS_KEEP_MAX", "20"))

COLUMNS = {
    "serial_no": "S.No",
    "case_number": "Case Number",
    "case_details": "Case Details",
    "petitioner": "Petitioner",
    "respondent": "Respondent",
    "petitioner_advocate": "Petitioner Advocate",
    "respondent_advocate": "Respondent Advocate",
    "district": "District",
}


def prune_old_exports() -> None:
    if not config.EXPORTS_DIR.is_dir():
        return
    files = sorted(config.EXPORTS_DIR.glob("*.xlsx"), key=lambda p: p.stat().st_mtime)
    while len(files) > MAX_EXPORTS:
        old = files.pop(0)
        try:
            old.unlink()
        except OSError:
            continue


def export_causelist_to_excel(result: SyncResult, dest_path: Optional[str] = None) -> str:
    """Write ``result`` to an .xlsx workbook and return its path.

    Sheet ``Causelist`` holds one row per record; ``Summary`` holds the sync
    key, timestamp and per-district counts.
    """

    rows = [_record_row(record) for record in result.records]
    df = pd.DataFrame(rows, columns=list(COLUMNS.values()))

    summary = pd.DataFrame(
        [
            {"field": "Court", "value": courts.DISPLAY_NAMES.get(result.court, result.court)},
            {"field": "Advocate", "value": result.advocate_identifier},
            {"field": "Last synced", "value": result.last_synced_at},
            {"field": "Records", "value": result.count},
        ]
    )
    by_district = (
        df.groupby("District").size().reset_index(name="count").sort_values("count", ascending=False)
        if not df.empty
        else pd.DataFrame()
    )

    config.EXPORTS_DIR.mkdir(parents=True, exist_ok=True)
    if not dest_path:
        stamp = sanitize_filename_component(result.last_synced_at.replace(":", ""))
        advocate = sanitize_filename_component(result.advocate_identifier) or "advocate"
        dest_path = str(config.EXPORTS_DIR / f"causelist_{result.court}_{advocate}_{stamp}.xlsx")

    with pd.ExcelWriter(dest_path, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Causelist")
        summary.to_excel(writer, index=False, sheet_name="Summary")
        if not by_district.empty:
            by_district.to_excel(writer, index=False, sheet_name="By_District")

    prune_old_exports()
    return dest_path


def _record_row(record: CauselistRecord) -> dict:
    data = record.to_dict()
    return {label: data.get(key, "") for key, label in COLUMNS.items()}


__all__ = ["export_causelist_to_excel", "prune_old_exports"]
