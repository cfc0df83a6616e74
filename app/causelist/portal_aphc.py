"""Adapter for the Andhra Pradesh High Court daily cause list."""
from __future__ import annotations

from typing import List

from . import config, courts
from .html_rows import cell_lines, cell_text, first_anchor_text, parse_html
from .logging_utils import _sync_event
from .models import RawRow
from .portal_base import ACTION_WAIT, NavigationStep, PortalAdapter
from .selectors import APHC_SELECTORS, AphcSelectors
from .utils import clean_text


class AphcAdapter(PortalAdapter):
    """Search page -> "Daily Cause List" -> "ADVOCATE CODE WISE" -> ``#advcd``.

    Every intermediate button is structurally required: without them the
    advocate code input is never rendered. The portal keys on the advocate
    code, so the identifier is only trimmed and space-stripped.
    """

    court = courts.ANDHRA_PRADESH

    def __init__(self, selectors: AphcSelectors = APHC_SELECTORS) -> None:
        self.selectors = selectors
        self.start_url = config.APHC_SEARCH_URL
        self.input_selector = selectors.advocate_input
        self.submit_selector = selectors.submit_button
        self.results_selector = selectors.results_table
        self.rows_ready_selector = f"{selectors.results_table} {selectors.serial_cell}"

    @property
    def nav_timeout_seconds(self) -> int:
        return config.APHC_NAV_TIMEOUT_SECONDS

    def navigation_steps(self) -> List[NavigationStep]:
        return [
            NavigationStep(
                name="daily_cause_list",
                locator=self.selectors.daily_cause_list_button,
                timeout_seconds=config.STEP_TIMEOUT_SECONDS,
            ),
            NavigationStep(
                name="advocate_code_wise",
                locator=self.selectors.advocate_code_wise_button,
                timeout_seconds=config.STEP_TIMEOUT_SECONDS,
            ),
            NavigationStep(
                name="advocate_input",
                locator=self.selectors.advocate_input,
                timeout_seconds=config.INPUT_TIMEOUT_SECONDS,
                action=ACTION_WAIT,
            ),
        ]

    def prepare_identifier(self, advocate_identifier: str) -> str:
        return clean_text(advocate_identifier).replace(" ", "")

    def parse_results_html(self, html: str) -> List[RawRow]:
        sel = self.selectors
        soup = parse_html(html)
        rows: List[RawRow] = []

        for tr in soup.select(sel.row_selector):
            serial_cell = tr.select_one(sel.serial_cell)
            # Header and group-title rows carry no labelled S.No cell.
            if serial_cell is None:
                continue
            if len(tr.find_all("td")) < sel.min_cells:
                continue

            try:
                case_cell = tr.select_one(sel.case_details_cell)
                anchor = first_anchor_text(case_cell)
                rows.append(
                    RawRow(
                        serial_no=cell_text(serial_cell),
                        case_details_lines=cell_lines(case_cell),
                        case_anchor=anchor,
                        party_lines=cell_lines(tr.select_one(sel.party_cell)),
                        petitioner_advocate_lines=cell_lines(tr.select_one(sel.petitioner_advocate_cell)),
                        respondent_advocate_lines=cell_lines(tr.select_one(sel.respondent_advocate_cell)),
                        district_lines=cell_lines(tr.select_one(sel.district_cell)),
                    )
                )
            except Exception as exc:  # noqa: BLE001
                _sync_event("warn", phase="extract", court=self.court, kind="row_degraded", error=str(exc))
                rows.append(RawRow(serial_no=cell_text(serial_cell)))

        return rows


__all__ = ["AphcAdapter"]
