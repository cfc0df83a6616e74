"""Causelist sync orchestrator.

One ``sync`` call walks a fixed state machine::

    Idle -> SessionAcquired -> Navigated -> Submitted -> ResultsAwaited
         -> Extracted | EmptyResult -> Persisted -> Released

with ``Errored`` reachable from every non-terminal state. The court is
checked against the adapter registry before any browser work. The browser
session is acquired through ``portal_session`` so it is released exactly
once on every exit path, including errors raised by persistence.

An empty results table is a successful outcome: a zero-record result is
persisted so a stale list from a previous day does not survive.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Iterator, List, Mapping, Optional

from playwright.sync_api import Error as PWError

from . import db
from .browser import BrowserSessionProvider, PortalSession, capture_screenshot
from .error_codes import ErrorCode
from .errors import NavigationError, PersistenceError, SyncError, UnsupportedCourt
from .logging_utils import _sync_event
from .models import ResultsPresence, SyncRequest, SyncResult
from .normalizer import normalize_rows
from .portal_base import PortalAdapter
from .portals import ADAPTERS, AdapterFactory, resolve_adapter
from .utils import log_line, utc_now_precise


class SyncState(str, Enum):
    IDLE = "idle"
    SESSION_ACQUIRED = "session_acquired"
    NAVIGATED = "navigated"
    SUBMITTED = "submitted"
    RESULTS_AWAITED = "results_awaited"
    EXTRACTED = "extracted"
    EMPTY_RESULT = "empty_result"
    PERSISTED = "persisted"
    RELEASED = "released"
    ERRORED = "errored"


TERMINAL_STATES = frozenset({SyncState.RELEASED, SyncState.ERRORED})


@dataclass
class SyncTrace:
    """Per-invocation state history. Never shared between invocations."""

    request: SyncRequest
    state: SyncState = SyncState.IDLE
    history: List[SyncState] = field(default_factory=lambda: [SyncState.IDLE])

    def advance(self, state: SyncState, **fields: object) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Sync already finished in state {self.state.value}")
        self.state = state
        self.history.append(state)
        _sync_event(
            "state",
            phase=state.value,
            user_id=self.request.user_id,
            court=self.request.court,
            **fields,
        )


@contextmanager
def portal_session(provider: BrowserSessionProvider) -> Iterator[PortalSession]:
    """Acquire a session and release it on every way out of the block."""

    session = provider.acquire()
    try:
        yield session
    finally:
        provider.release(session)


PersistFn = Callable[[SyncResult], None]


class SyncOrchestrator:
    def __init__(
        self,
        *,
        session_provider: Optional[BrowserSessionProvider] = None,
        adapters: Optional[Mapping[str, AdapterFactory]] = None,
        persist: Optional[PersistFn] = None,
        record_runs: bool = True,
        clock: Callable[[], str] = utc_now_precise,
    ) -> None:
        self.session_provider = session_provider or BrowserSessionProvider()
        self.adapters = ADAPTERS if adapters is None else adapters
        self.persist = persist or db.upsert_user_causelist
        self.record_runs = record_runs
        self.clock = clock

    def _resolve(self, request: SyncRequest) -> tuple[SyncRequest, PortalAdapter]:
        try:
            adapter = resolve_adapter(request.court, self.adapters)
        except UnsupportedCourt:
            _sync_event(
                "error",
                phase="validate",
                error=ErrorCode.UNSUPPORTED_COURT,
                court=request.court,
                user_id=request.user_id,
            )
            raise
        return replace(request, court=adapter.court), adapter

    def sync(self, request: SyncRequest) -> SyncResult:
        request, adapter = self._resolve(request)
        trace = SyncTrace(request=request)
        run_id = self._start_run(request)
        skipped: List[str] = []

        try:
            with portal_session(self.session_provider) as session:
                trace.advance(SyncState.SESSION_ACQUIRED, strategy=session.strategy)
                result = self._drive(adapter, session, request, trace, skipped)
                self._persist(result, trace)
            trace.advance(SyncState.RELEASED, records=result.count)
        except SyncError as exc:
            trace.advance(SyncState.ERRORED, error_code=exc.error_code, error=str(exc))
            self._finish_run(
                run_id,
                "failed",
                error_code=exc.error_code,
                error_message=str(exc),
                skipped_steps=skipped,
            )
            raise
        except Exception as exc:
            trace.advance(SyncState.ERRORED, error_code=ErrorCode.INTERNAL, error=str(exc))
            self._finish_run(
                run_id,
                "failed",
                error_code=ErrorCode.INTERNAL,
                error_message=str(exc),
                skipped_steps=skipped,
            )
            raise

        self._finish_run(
            run_id,
            "empty" if result.empty else "completed",
            record_count=result.count,
            skipped_steps=skipped,
        )
        log_line(
            f"[SYNC] {request.court}: {result.count} records for advocate "
            f"{request.advocate_identifier!r} (user {request.user_id})"
        )
        return result

    def _drive(
        self,
        adapter: PortalAdapter,
        session: PortalSession,
        request: SyncRequest,
        trace: SyncTrace,
        skipped: List[str],
    ) -> SyncResult:
        try:
            skipped.extend(_browser_step("navigate", adapter.navigate, session, request))
            trace.advance(SyncState.NAVIGATED, skipped_steps=list(skipped))

            _browser_step("submit", adapter.submit, session, request.advocate_identifier)
            trace.advance(SyncState.SUBMITTED)

            presence = _browser_step("wait_for_results", adapter.wait_for_results, session)
            trace.advance(SyncState.RESULTS_AWAITED, presence=presence.value)

            if presence is ResultsPresence.EMPTY:
                capture_screenshot(session, f"{request.court}_empty_results")
                trace.advance(SyncState.EMPTY_RESULT)
                return self._result(request, [], empty=True, skipped=skipped)

            raw_rows = _browser_step("extract", adapter.extract, session)
        except NavigationError:
            capture_screenshot(session, f"{request.court}_navigation_error")
            raise

        records = normalize_rows(raw_rows, request.court)
        trace.advance(SyncState.EXTRACTED, records=len(records))
        return self._result(request, records, empty=not records, skipped=skipped)

    def _result(
        self,
        request: SyncRequest,
        records: list,
        *,
        empty: bool,
        skipped: List[str],
    ) -> SyncResult:
        return SyncResult(
            user_id=request.user_id,
            advocate_identifier=request.advocate_identifier,
            court=request.court,
            records=records,
            last_synced_at=self.clock(),
            empty=empty,
            skipped_steps=list(skipped),
        )

    def _persist(self, result: SyncResult, trace: SyncTrace) -> None:
        try:
            self.persist(result)
        except PersistenceError as exc:
            if exc.result is None:
                exc.result = result
            raise
        except Exception as exc:  # noqa: BLE001
            raise PersistenceError(f"Failed to store causelist: {exc}", result) from exc
        trace.advance(SyncState.PERSISTED, records=result.count, last_synced_at=result.last_synced_at)

    def _start_run(self, request: SyncRequest) -> Optional[int]:
        if not self.record_runs:
            return None
        try:
            return db.create_sync_run(request.user_id, request.advocate_identifier, request.court)
        except Exception as exc:  # noqa: BLE001
            log_line(f"[SYNC] Could not record sync run start: {exc}")
            return None

    def _finish_run(self, run_id: Optional[int], status: str, **fields) -> None:
        if run_id is None:
            return
        try:
            db.finish_sync_run(run_id, status, **fields)
        except Exception as exc:  # noqa: BLE001
            log_line(f"[SYNC] Could not record sync run {run_id} outcome: {exc}")


def _browser_step(step: str, func, *args):
    """Run an adapter call, mapping raw Playwright errors to ``NavigationError``."""

    try:
        return func(*args)
    except PWError as exc:
        raise NavigationError(step, str(exc)) from exc


def sync_causelist(user_id: str, advocate_identifier: str, court: str) -> SyncResult:
    """Run one sync with the default provider, adapters and SQLite store."""

    return SyncOrchestrator().sync(
        SyncRequest(user_id=user_id, advocate_identifier=advocate_identifier, court=court)
    )


__all__ = [
    "SyncState",
    "SyncTrace",
    "SyncOrchestrator",
    "portal_session",
    "sync_causelist",
]
