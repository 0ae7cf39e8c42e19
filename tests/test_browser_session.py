import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PWTimeout

from cnki_crawler.core import browser_session
from cnki_crawler.core.browser_session import BrowserSession
from cnki_crawler.core.errors import NavigationTimeout, SessionLaunchFailure


class StubPage:
    """Just enough of a Playwright page for the session's own logic."""

    def __init__(self, present=(), log=None, close_error=None):
        self.present = set(present)
        self.log = log if log is not None else []
        self.close_error = close_error
        self.closed = False
        self.url = "https://www.cnki.net/"
        self.waits = []
        self.routes = []
        self.handlers = {}
        self.init_scripts = []

    async def wait_for_selector(self, selector, timeout=None, state="attached"):
        self.waits.append((selector, timeout))
        if selector not in self.present:
            raise PWTimeout(f"Timeout {timeout}ms exceeded.")

    async def add_init_script(self, script):
        self.init_scripts.append(script)

    async def route(self, pattern, handler):
        self.routes.append((pattern, handler))

    def on(self, event, handler):
        self.handlers[event] = handler

    async def close(self):
        self.log.append("page")
        if self.close_error:
            raise self.close_error
        self.closed = True


class StubResource:
    def __init__(self, name, log):
        self.name = name
        self.log = log

    async def close(self):
        self.log.append(self.name)

    async def stop(self):
        self.log.append(self.name)


class StubContext(StubResource):
    def __init__(self, log, page):
        super().__init__("context", log)
        self.page = page
        self.default_timeout = None

    def set_default_timeout(self, timeout):
        self.default_timeout = timeout

    async def new_page(self):
        return self.page


class StubBrowser(StubResource):
    def __init__(self, log, context):
        super().__init__("browser", log)
        self.context = context
        self.context_options = None

    async def new_context(self, **options):
        self.context_options = options
        return self.context


class StubChromium:
    def __init__(self, browser):
        self.browser = browser
        self.launch_options = None

    async def launch(self, **options):
        self.launch_options = options
        return self.browser


class StubPlaywright(StubResource):
    def __init__(self, log, chromium):
        super().__init__("playwright", log)
        self.chromium = chromium


class StubManager:
    def __init__(self, playwright):
        self.playwright = playwright

    async def start(self):
        return self.playwright


def _stub_stack(page_close_error=None):
    log = []
    page = StubPage(log=log, close_error=page_close_error)
    context = StubContext(log, page)
    browser = StubBrowser(log, context)
    playwright = StubPlaywright(log, StubChromium(browser))
    return log, page, playwright


class StubRoute:
    def __init__(self):
        self.continued = 0

    async def continue_(self):
        self.continued += 1


def _session_with(page) -> BrowserSession:
    session = BrowserSession(timeout=250)
    session._page = page
    return session


def test_requests_are_passed_through() -> None:
    route = StubRoute()

    asyncio.run(BrowserSession()._continue_request(route))

    assert route.continued == 1


def test_wait_timeout_becomes_navigation_timeout() -> None:
    session = _session_with(StubPage())

    with pytest.raises(NavigationTimeout) as excinfo:
        asyncio.run(session.wait_for_element("#gridTable", step="open_first_result"))

    assert excinfo.value.step == "open_first_result"
    assert excinfo.value.selector == "#gridTable"
    assert excinfo.value.timeout == 250


def test_wait_for_settle_falls_back_to_delay() -> None:
    session = _session_with(StubPage(present={"#ready"}))

    assert asyncio.run(session.wait_for_settle("#ready")) is True
    assert asyncio.run(session.wait_for_settle("#missing", timeout=10, fallback_delay=0)) is False


def test_methods_require_a_started_session() -> None:
    with pytest.raises(RuntimeError):
        asyncio.run(BrowserSession().wait_for_element("#x"))


def test_close_is_idempotent() -> None:
    page = StubPage()
    session = _session_with(page)

    asyncio.run(session.close())
    asyncio.run(session.close())

    assert page.closed
    assert not session.is_open


def test_launch_error_becomes_session_launch_failure(monkeypatch) -> None:
    class FailingManager:
        async def start(self):
            raise PlaywrightError("Executable doesn't exist at /nowhere/chrome")

    monkeypatch.setattr(browser_session, "async_playwright", lambda: FailingManager())
    session = BrowserSession(executable_path="/nowhere/chrome")

    with pytest.raises(SessionLaunchFailure) as excinfo:
        asyncio.run(session.start())

    assert excinfo.value.fatal
    assert not session.is_open


def test_start_installs_interception_and_error_sinks(monkeypatch) -> None:
    log, page, playwright = _stub_stack()
    monkeypatch.setattr(browser_session, "async_playwright", lambda: StubManager(playwright))
    session = BrowserSession(executable_path="/usr/bin/google-chrome", headless=True, timeout=1234)

    asyncio.run(session.start())

    assert session.page is page
    assert playwright.chromium.launch_options["executable_path"] == "/usr/bin/google-chrome"
    assert playwright.chromium.browser.context_options["no_viewport"] is True
    assert playwright.chromium.browser.context.default_timeout == 1234
    assert [pattern for pattern, _ in page.routes] == ["**/*"]
    assert page.routes[0][1] == session._continue_request
    assert {"crash", "pageerror"} <= set(page.handlers)
    assert page.init_scripts


def test_error_sinks_only_log(monkeypatch) -> None:
    log, page, playwright = _stub_stack()
    monkeypatch.setattr(browser_session, "async_playwright", lambda: StubManager(playwright))
    session = BrowserSession()
    asyncio.run(session.start())

    page.handlers["crash"](page)
    page.handlers["pageerror"](Exception("ReferenceError: foo is not defined"))

    assert session.is_open


def test_close_releases_everything_when_page_close_fails(monkeypatch) -> None:
    log, page, playwright = _stub_stack(page_close_error=PlaywrightError("Target crashed"))
    monkeypatch.setattr(browser_session, "async_playwright", lambda: StubManager(playwright))
    session = BrowserSession()
    asyncio.run(session.start())

    asyncio.run(session.close())

    assert log == ["page", "context", "browser", "playwright"]
    assert not session.is_open

    asyncio.run(session.close())
    assert log == ["page", "context", "browser", "playwright"]


def test_explicit_zero_timeout_is_kept() -> None:
    page = StubPage(present={"#ready"})
    session = _session_with(page)

    asyncio.run(session.wait_for_element("#ready", timeout=0))
    asyncio.run(session.wait_for_element("#ready"))

    assert page.waits == [("#ready", 0), ("#ready", 250)]
