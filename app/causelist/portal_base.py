"""Common contract for court portal adapters.

An adapter knows how to walk one portal from its landing page to the
advocate search form, submit the identifier, wait for the results table and
read its rows. Navigation is an ordered list of ``NavigationStep`` entries,
each "wait for locator up to T, then act". Steps marked ``required=False``
are best-effort: when their element never appears the adapter logs a
warning and carries on, assuming the page is already past that point.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from playwright.sync_api import Error as PWError, Page, TimeoutError as PWTimeout

from . import config
from .browser import PortalSession
from .errors import NavigationError
from .logging_utils import _sync_event
from .models import RawRow, ResultsPresence, SyncRequest
from .utils import clean_text, ensure_dirs, log_line

ACTION_CLICK = "click"
ACTION_WAIT = "wait"


@dataclass(frozen=True)
class NavigationStep:
    name: str
    locator: str
    timeout_seconds: int
    action: str = ACTION_CLICK
    required: bool = True


class PortalAdapter(ABC):
    court: str = ""
    start_url: str = ""
    input_selector: str = ""
    submit_selector: str = ""
    results_selector: str = ""
    rows_ready_selector: Optional[str] = None

    @property
    def nav_timeout_seconds(self) -> int:
        return config.STEP_TIMEOUT_SECONDS

    @abstractmethod
    def navigation_steps(self) -> List[NavigationStep]:
        """Steps from the landing page to a visible identifier input."""

    @abstractmethod
    def parse_results_html(self, html: str) -> List[RawRow]:
        """Return one ``RawRow`` per data row found in ``html``."""

    def prepare_identifier(self, advocate_identifier: str) -> str:
        return clean_text(advocate_identifier)

    # -- navigation -----------------------------------------------------

    def navigate(self, session: PortalSession, request: SyncRequest) -> List[str]:
        """Drive the portal to the search form. Return names of skipped steps."""

        page = session.page
        self._open_start_page(page)

        skipped: List[str] = []
        for step in self.navigation_steps():
            if not self._run_step(page, step):
                skipped.append(step.name)
        return skipped

    def _open_start_page(self, page: Page) -> None:
        _sync_event("nav", step="goto", court=self.court, url=self.start_url)
        try:
            page.goto(
                self.start_url,
                wait_until="domcontentloaded",
                timeout=self.nav_timeout_seconds * 1000,
            )
        except PWError as exc:
            _sync_event("error", phase="nav", step="open_portal", court=self.court, error=str(exc))
            raise NavigationError("open_portal", f"Could not load {self.start_url}: {exc}") from exc

    def _run_step(self, page: Page, step: NavigationStep) -> bool:
        locator = page.locator(step.locator).first
        try:
            locator.wait_for(state="visible", timeout=step.timeout_seconds * 1000)
            if step.action == ACTION_CLICK:
                locator.click(timeout=step.timeout_seconds * 1000)
                self._settle(page)
        except PWError as exc:
            if step.required:
                _sync_event(
                    "error",
                    phase="nav",
                    step=step.name,
                    court=self.court,
                    timeout_seconds=step.timeout_seconds,
                    error=str(exc),
                )
                raise NavigationError(
                    step.name,
                    f"{step.locator!r} not usable within {step.timeout_seconds}s",
                ) from exc
            # Skipped steps are reported so the fallback stays visible in monitoring.
            _sync_event(
                "warn",
                phase="nav",
                kind="step_skipped",
                step=step.name,
                court=self.court,
                timeout_seconds=step.timeout_seconds,
            )
            return False

        _sync_event("nav", step=step.name, court=self.court, action=step.action)
        return True

    def _settle(self, page: Page) -> None:
        try:
            page.wait_for_load_state("domcontentloaded", timeout=self.nav_timeout_seconds * 1000)
        except PWTimeout:
            log_line(f"[NAV] {self.court}: load state wait timed out; continuing.")

    # -- search -----------------------------------------------------------

    def submit(self, session: PortalSession, advocate_identifier: str) -> None:
        page = session.page
        value = self.prepare_identifier(advocate_identifier)
        input_field = page.locator(self.input_selector).first
        try:
            input_field.wait_for(state="visible", timeout=config.INPUT_TIMEOUT_SECONDS * 1000)
            input_field.fill(value)
        except PWError as exc:
            _sync_event("error", phase="submit", step="advocate_input", court=self.court, error=str(exc))
            raise NavigationError("advocate_input", f"Could not enter identifier: {exc}") from exc

        button = page.locator(self.submit_selector).first
        try:
            button.wait_for(state="visible", timeout=config.SUBMIT_TIMEOUT_SECONDS * 1000)
            button.click(timeout=config.SUBMIT_TIMEOUT_SECONDS * 1000)
            _sync_event("submit", court=self.court, via="button")
            return
        except PWError as exc:
            log_line(f"[SUBMIT] {self.court}: no submit control ({exc}); pressing Enter.")

        try:
            input_field.press("Enter")
        except PWError as exc:
            _sync_event("error", phase="submit", step="submit", court=self.court, error=str(exc))
            raise NavigationError("submit", f"Could not submit search: {exc}") from exc
        _sync_event("submit", court=self.court, via="enter")

    # -- results ----------------------------------------------------------

    def wait_for_results(self, session: PortalSession) -> ResultsPresence:
        page = session.page
        try:
            page.wait_for_selector(
                self.results_selector,
                state="attached",
                timeout=config.RESULTS_TIMEOUT_SECONDS * 1000,
            )
        except PWTimeout:
            _sync_event(
                "results",
                court=self.court,
                presence=ResultsPresence.EMPTY.value,
                timeout_seconds=config.RESULTS_TIMEOUT_SECONDS,
            )
            return ResultsPresence.EMPTY
        except PWError as exc:
            raise NavigationError("results_table", str(exc)) from exc

        if self.rows_ready_selector:
            try:
                page.wait_for_selector(
                    self.rows_ready_selector,
                    state="attached",
                    timeout=config.ROWS_TIMEOUT_SECONDS * 1000,
                )
            except PWTimeout:
                log_line(f"[RESULTS] {self.court}: table present but no data rows yet.")

        _sync_event("results", court=self.court, presence=ResultsPresence.PRESENT.value)
        return ResultsPresence.PRESENT

    def extract(self, session: PortalSession) -> List[RawRow]:
        try:
            html = session.page.content()
        except PWError as exc:
            raise NavigationError("read_results", str(exc)) from exc

        if config.RECORD_REPLAY_FIXTURES:
            self._record_fixture(html)

        rows = self.parse_results_html(html)
        _sync_event("extract", court=self.court, rows=len(rows))
        return rows

    def _record_fixture(self, html: str) -> None:
        try:
            ensure_dirs()
            config.REPLAY_FIXTURES_DIR.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            path = config.REPLAY_FIXTURES_DIR / f"{self.court}_{stamp}.html"
            path.write_text(html, encoding="utf-8")
            log_line(f"[REPLAY] Recorded results page to {path}")
        except OSError as exc:
            log_line(f"[REPLAY] Failed to record results page: {exc}")


__all__ = ["NavigationStep", "PortalAdapter", "ACTION_CLICK", "ACTION_WAIT"]
