"""Headless browser sessions for the court portals.

Two launch strategies exist. ``serverless`` drives a bundled minimal
Chromium with a reduced argument set suited to sandboxed hosts; ``local``
uses Playwright's own Chromium with a visible window by default so portal
flows can be watched while debugging.

Both strategies create the browser context with ``ignore_https_errors``:
the two portals serve self-signed or misconfigured certificates. The
relaxation is scoped to the context a session owns, and a session only
ever visits its portal's origin.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Tuple

from playwright.sync_api import (
    Browser,
    BrowserContext,
    Error as PWError,
    Page,
    Playwright,
    sync_playwright,
)

from . import config
from .errors import LaunchError
from .logging_utils import _sync_event
from .utils import ensure_dirs, log_line, sanitize_filename_component, utc_now


@dataclass(frozen=True)
class LaunchStrategy:
    name: str
    headless: bool
    args: Tuple[str, ...]
    executable_path: Optional[str] = None


def serverless_strategy() -> LaunchStrategy:
    return LaunchStrategy(
        name=config.DEPLOY_MODE_SERVERLESS,
        headless=True,
        executable_path=config.CHROMIUM_EXECUTABLE,
        args=(
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-gpu",
            "--no-zygote",
            "--single-process",
        ),
    )


def local_strategy() -> LaunchStrategy:
    return LaunchStrategy(
        name=config.DEPLOY_MODE_LOCAL,
        headless=config.LOCAL_HEADLESS,
        args=(
            "--no-sandbox",
            "--disable-setuid-sandbox",
            f"--window-size={config.VIEWPORT['width']},{config.VIEWPORT['height']}",
        ),
    )


def select_strategy(mode: Optional[str] = None) -> LaunchStrategy:
    """Pick the launch strategy for ``mode`` (defaults to ``DEPLOY_MODE``)."""

    if config.is_serverless(mode):
        return serverless_strategy()
    return local_strategy()


@dataclass
class PortalSession:
    """A browser plus the single page a sync invocation drives.

    A session belongs to exactly one invocation and is closed exactly once;
    later ``close`` calls are no-ops.
    """

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    strategy: str
    opened_at: str = field(default_factory=utc_now)
    _closed: bool = field(default=False, repr=False)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> bool:
        """Close page, context, browser and driver. Return ``False`` if already closed."""

        if self._closed:
            return False
        self._closed = True

        for label, closer in (
            ("context", self.context.close),
            ("browser", self.browser.close),
            ("playwright", self.playwright.stop),
        ):
            try:
                closer()
            except Exception as exc:  # noqa: BLE001
                log_line(f"[BROWSER] Ignoring error while closing {label}: {exc}")
        _sync_event("session", phase="closed", strategy=self.strategy)
        return True


class BrowserSessionProvider:
    """Acquire and release ``PortalSession`` objects."""

    def __init__(
        self,
        mode: Optional[str] = None,
        *,
        playwright_factory: Callable[[], object] = sync_playwright,
    ) -> None:
        self.mode = mode
        self._playwright_factory = playwright_factory

    def acquire(self) -> PortalSession:
        strategy = select_strategy(self.mode)
        _sync_event(
            "session",
            phase="launch",
            strategy=strategy.name,
            headless=strategy.headless,
            executable_path=strategy.executable_path,
        )

        playwright = None
        browser = None
        try:
            playwright = self._playwright_factory().start()
            launch_kwargs = {"headless": strategy.headless, "args": list(strategy.args)}
            if strategy.executable_path:
                launch_kwargs["executable_path"] = strategy.executable_path
            browser = playwright.chromium.launch(**launch_kwargs)
            context = browser.new_context(
                ignore_https_errors=True,
                user_agent=config.USER_AGENT,
                viewport=dict(config.VIEWPORT),
                locale="en-US",
            )
            page = context.new_page()
        except Exception as exc:  # noqa: BLE001
            _sync_event("error", phase="launch", strategy=strategy.name, error=str(exc))
            if browser is not None:
                try:
                    browser.close()
                except Exception as close_exc:  # noqa: BLE001
                    log_line(f"[BROWSER] Ignoring error while closing browser: {close_exc}")
            if playwright is not None:
                try:
                    playwright.stop()
                except Exception as stop_exc:  # noqa: BLE001
                    log_line(f"[BROWSER] Ignoring error while stopping playwright: {stop_exc}")
            raise LaunchError(f"Failed to launch browser ({strategy.name}): {exc}") from exc

        return PortalSession(
            playwright=playwright,
            browser=browser,
            context=context,
            page=page,
            strategy=strategy.name,
        )

    def release(self, session: PortalSession) -> None:
        session.close()


def capture_screenshot(session: PortalSession, name: str) -> Optional[Path]:
    """Best-effort full-page screenshot into ``DEBUG_DIR``."""

    if not config.DEBUG_SCREENSHOTS or session.closed:
        return None

    ensure_dirs()
    path = config.DEBUG_DIR / f"{sanitize_filename_component(name) or 'portal'}.png"
    try:
        session.page.screenshot(path=str(path), full_page=True)
    except PWError as exc:
        log_line(f"[BROWSER] Screenshot {path.name} failed: {exc}")
        return None
    log_line(f"[BROWSER] Saved debug screenshot {path}")
    return path


__all__ = [
    "LaunchStrategy",
    "PortalSession",
    "BrowserSessionProvider",
    "select_strategy",
    "capture_screenshot",
]
