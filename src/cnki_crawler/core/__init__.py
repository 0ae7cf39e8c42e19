"""Core components for browser automation."""

from cnki_crawler.core.browser_session import BrowserSession
from cnki_crawler.core.platform import resolve_browser_path

__all__ = ["BrowserSession", "resolve_browser_path"]
