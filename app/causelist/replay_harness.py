"""Offline replay of recorded portal results pages.

Results pages saved with ``CAUSELIST_RECORD_REPLAY_FIXTURES=1`` (or saved by
hand from a browser) are parsed with the court's adapter and normalised
exactly as a live sync would, without launching a browser or touching the
database. Useful when a portal changes its markup.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config_validation import validate_runtime_config
from .logging_utils import _sync_event
from .models import CauselistRecord
from .normalizer import normalize_rows
from .portals import resolve_adapter
from .utils import log_line


@dataclass
class ReplayConfig:
    fixture_path: Path
    court: str
    output_path: Optional[Path] = None


def replay_results_html(fixture_path: Path, court: str) -> List[CauselistRecord]:
    adapter = resolve_adapter(court)
    html = Path(fixture_path).read_text(encoding="utf-8", errors="ignore")
    raw_rows = adapter.parse_results_html(html)
    records = normalize_rows(raw_rows, adapter.court)
    _sync_event(
        "replay",
        phase="parsed",
        fixture=str(fixture_path),
        court=adapter.court,
        rows=len(raw_rows),
    )
    return records


def run_replay(config_obj: ReplayConfig) -> Dict[str, Any]:
    validate_runtime_config("replay")
    records = replay_results_html(config_obj.fixture_path, config_obj.court)
    payload = {
        "fixture": str(config_obj.fixture_path),
        "court": config_obj.court,
        "count": len(records),
        "data": [record.to_dict() for record in records],
    }
    if config_obj.output_path:
        config_obj.output_path.parent.mkdir(parents=True, exist_ok=True)
        config_obj.output_path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        log_line(f"[REPLAY] Wrote {len(records)} records to {config_obj.output_path}")
    return payload


if __name__ == "__main__":  # pragma: no cover
    import argparse

    parser = argparse.ArgumentParser(description="Replay a saved causelist results page.")
    parser.add_argument("fixture", help="Path to a saved results page (.html)")
    parser.add_argument("--court", required=True, help="Court identifier, e.g. telangana")
    parser.add_argument("--output", default=None, help="Write the records as JSON here")
    args = parser.parse_args()

    cfg = ReplayConfig(
        fixture_path=Path(args.fixture),
        court=args.court,
        output_path=Path(args.output) if args.output else None,
    )
    summary = run_replay(cfg)
    if not cfg.output_path:
        print(json.dumps(summary, ensure_ascii=False, indent=2))
