from __future__ import annotations

import os
from pathlib import Path

import pandas as pd
import pytest

from app.causelist import config, export_excel
from tests.test_db_causelists import _configure_temp_paths, make_result


def test_export_writes_causelist_and_summary(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)

    path = export_excel.export_causelist_to_excel(
        make_result(3, synced_at="2024-06-01T09:00:00.000000Z")
    )

    assert Path(path).parent == config.EXPORTS_DIR
    sheets = pd.read_excel(path, sheet_name=None)
    assert set(sheets) == {"Causelist", "Summary", "By_District"}

    causelist = sheets["Causelist"]
    assert list(causelist.columns) == list(export_excel.COLUMNS.values())
    assert causelist["Case Number"].tolist() == ["WP/1/2024", "WP/2/2024", "WP/3/2024"]
    assert sheets["By_District"].to_dict("records") == [{"District": "GUNTUR", "count": 3}]


def test_export_of_empty_causelist_has_headers_only(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    dest = tmp_path / "empty.xlsx"

    export_excel.export_causelist_to_excel(
        make_result(0, synced_at="2024-06-01T09:00:00.000000Z"), dest_path=str(dest)
    )

    sheets = pd.read_excel(dest, sheet_name=None)
    assert "By_District" not in sheets
    assert sheets["Causelist"].empty


def test_prune_old_exports_keeps_newest(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_temp_paths(tmp_path, monkeypatch)
    monkeypatch.setattr(export_excel, "MAX_EXPORTS", 2)
    config.EXPORTS_DIR.mkdir(parents=True)
    for index in range(4):
        target = config.EXPORTS_DIR / f"causelist_{index}.xlsx"
        target.write_bytes(b"x")
        stamp = 1_700_000_000 + index
        os.utime(target, (stamp, stamp))

    export_excel.prune_old_exports()

    remaining = sorted(p.name for p in config.EXPORTS_DIR.glob("*.xlsx"))
    assert remaining == ["causelist_2.xlsx", "causelist_3.xlsx"]
