from __future__ import annotations

import pytest

from app.causelist import browser, config
from app.causelist.errors import LaunchError


class _Recorder:
    def __init__(self, name: str, log: list) -> None:
        self.name = name
        self.log = log

    def close(self) -> None:
        self.log.append(f"{self.name}.close")


class FakeContext(_Recorder):
    def new_page(self) -> str:
        return "page"


class FakeBrowser(_Recorder):
    def __init__(self, log: list) -> None:
        super().__init__("browser", log)
        self.context_kwargs: dict = {}

    def new_context(self, **kwargs) -> FakeContext:
        self.context_kwargs = kwargs
        return FakeContext("context", self.log)


class FakeChromium:
    def __init__(self, log: list, fail: bool = False) -> None:
        self.log = log
        self.fail = fail
        self.launch_kwargs: dict = {}
        self.browser: FakeBrowser | None = None

    def launch(self, **kwargs) -> FakeBrowser:
        self.launch_kwargs = kwargs
        if self.fail:
            raise RuntimeError("Executable doesn't exist")
        self.browser = FakeBrowser(self.log)
        return self.browser


class FakePlaywright:
    def __init__(self, log: list, fail: bool = False) -> None:
        self.log = log
        self.chromium = FakeChromium(log, fail=fail)

    def stop(self) -> None:
        self.log.append("playwright.stop")


class FakeFactory:
    def __init__(self, fail: bool = False) -> None:
        self.log: list = []
        self.playwright = FakePlaywright(self.log, fail=fail)

    def __call__(self) -> "FakeFactory":
        return self

    def start(self) -> FakePlaywright:
        return self.playwright


def test_serverless_strategy_uses_bundled_binary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "CHROMIUM_EXECUTABLE", "/opt/chromium/chrome")
    factory = FakeFactory()

    provider = browser.BrowserSessionProvider("serverless", playwright_factory=factory)
    session = provider.acquire()

    launch = factory.playwright.chromium.launch_kwargs
    assert launch["headless"] is True
    assert launch["executable_path"] == "/opt/chromium/chrome"
    assert "--single-process" in launch["args"]
    assert session.strategy == "serverless"
    assert session.page == "page"
    assert factory.playwright.chromium.browser.context_kwargs["ignore_https_errors"] is True


def test_local_strategy_defaults_to_visible_browser(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "LOCAL_HEADLESS", False)
    factory = FakeFactory()

    session = browser.BrowserSessionProvider("local", playwright_factory=factory).acquire()

    launch = factory.playwright.chromium.launch_kwargs
    assert launch["headless"] is False
    assert "executable_path" not in launch
    assert session.strategy == "local"
    assert factory.playwright.chromium.browser.context_kwargs["ignore_https_errors"] is True


def test_strategy_follows_configured_deploy_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DEPLOY_MODE", "serverless")
    assert browser.select_strategy().name == "serverless"

    monkeypatch.setattr(config, "DEPLOY_MODE", "local")
    assert browser.select_strategy().name == "local"


def test_launch_failure_raises_launch_error_and_stops_driver() -> None:
    factory = FakeFactory(fail=True)

    with pytest.raises(LaunchError):
        browser.BrowserSessionProvider("local", playwright_factory=factory).acquire()

    assert factory.log == ["playwright.stop"]


def test_session_closes_exactly_once() -> None:
    factory = FakeFactory()
    provider = browser.BrowserSessionProvider("local", playwright_factory=factory)
    session = provider.acquire()

    provider.release(session)
    assert session.close() is False
    provider.release(session)

    assert factory.log == ["context.close", "browser.close", "playwright.stop"]
    assert session.closed is True
