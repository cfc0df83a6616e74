"""Adapter for the Telangana High Court causelist portal."""
from __future__ import annotations

from typing import List

from . import config, courts
from .html_rows import cell_lines, cell_text, first_anchor_text, parse_html
from .logging_utils import _sync_event
from .models import RawRow
from .portal_base import ACTION_WAIT, NavigationStep, PortalAdapter
from .selectors import TSHC_SELECTORS, TshcSelectors


class TshcAdapter(PortalAdapter):
    """Landing page -> "Daily List" -> "Advocate Wise" -> search input.

    The menu entries render as links, divs or spans depending on the day's
    build of the site and are sometimes absent when the portal opens
    directly on the advocate search, so both clicks are best-effort. Only the
    search input is required. The portal accepts a free-text advocate name.
    """

    court = courts.TELANGANA

    def __init__(self, selectors: TshcSelectors = TSHC_SELECTORS) -> None:
        self.selectors = selectors
        self.start_url = config.TSHC_START_URL
        self.input_selector = selectors.advocate_input
        self.submit_selector = selectors.submit_button
        self.results_selector = selectors.results_table
        self.rows_ready_selector = f"{selectors.results_table} {selectors.row_selector}"

    @property
    def nav_timeout_seconds(self) -> int:
        return config.TSHC_NAV_TIMEOUT_SECONDS

    def navigation_steps(self) -> List[NavigationStep]:
        return [
            NavigationStep(
                name="daily_list",
                locator=self.selectors.daily_list_button,
                timeout_seconds=config.STEP_TIMEOUT_SECONDS,
                required=False,
            ),
            NavigationStep(
                name="advocate_wise",
                locator=self.selectors.advocate_wise_button,
                timeout_seconds=config.STEP_TIMEOUT_SECONDS,
                required=False,
            ),
            NavigationStep(
                name="advocate_input",
                locator=self.selectors.advocate_input,
                timeout_seconds=config.INPUT_TIMEOUT_SECONDS,
                action=ACTION_WAIT,
            ),
        ]

    def parse_results_html(self, html: str) -> List[RawRow]:
        sel = self.selectors
        soup = parse_html(html)
        rows: List[RawRow] = []

        # Several tables share id="dataTable"; read all of them in page order.
        for table in soup.select(sel.results_table):
            for tr in table.select(sel.row_selector):
                cells = tr.find_all("td", recursive=False)
                if len(cells) != sel.column_count:
                    continue
                serial_no = cell_text(cells[0])
                if not serial_no.isdigit():
                    continue

                try:
                    rows.append(
                        RawRow(
                            serial_no=serial_no,
                            case_details_lines=cell_lines(cells[1]),
                            case_anchor=first_anchor_text(cells[1]),
                            party_lines=cell_lines(cells[2]),
                            petitioner_advocate_lines=cell_lines(cells[3]),
                            respondent_advocate_lines=cell_lines(cells[4]),
                            district_lines=cell_lines(cells[5]),
                        )
                    )
                except Exception as exc:  # noqa: BLE001
                    _sync_event("warn", phase="extract", court=self.court, kind="row_degraded", error=str(exc))
                    rows.append(RawRow(serial_no=serial_no))

        return rows


__all__ = ["TshcAdapter"]
