"""Configuration management for the CNKI crawler."""

import os
from typing import Optional

from dotenv import load_dotenv, find_dotenv

# Load .env file (override=True to ensure .env values take precedence over system env vars)
load_dotenv(find_dotenv(usecwd=True), override=True)


def _env_or_default(name: str, default: str) -> str:
    """Get environment variable or return default."""
    v = os.getenv(name)
    return v if (v is not None and str(v).strip() != "") else default


# Site
CNKI_HOME_URL = _env_or_default("CNKI_HOME_URL", "https://www.cnki.net/")

# Browser Configuration
BROWSER_HEADLESS = os.getenv("BROWSER_HEADLESS", "false").lower() == "true"
BROWSER_SLOW_MO = int(os.getenv("BROWSER_SLOW_MO", "0"))
BROWSER_TIMEOUT = int(os.getenv("BROWSER_TIMEOUT", "30000"))
BROWSER_EXECUTABLE_PATH: Optional[str] = os.getenv("CNKI_BROWSER_PATH") or None

# Typing delays (milliseconds per keystroke)
TYPE_DELAY_MS = int(os.getenv("CNKI_TYPE_DELAY_MS", "50"))
TOPIC_TYPE_DELAY_MS = int(os.getenv("CNKI_TOPIC_TYPE_DELAY_MS", "10"))

# Fallback settle delays (seconds), used only when a readiness poll times out
FORM_SETTLE_DELAY = float(os.getenv("CNKI_FORM_SETTLE_DELAY", "0.5"))
DETAIL_SETTLE_DELAY = float(os.getenv("CNKI_DETAIL_SETTLE_DELAY", "0.1"))

# Bounded wait for the first result row once the results grid is on screen (ms)
RESULT_ROW_TIMEOUT = int(os.getenv("CNKI_RESULT_ROW_TIMEOUT", "5000"))

# Index into the results-per-page dropdown; 2 selects 50 rows per page
PAGE_SIZE_OPTION = int(os.getenv("CNKI_PAGE_SIZE_OPTION", "2"))

# Pause between batch records (seconds)
RECORD_DELAY = float(os.getenv("CNKI_RECORD_DELAY", "0"))

# Logging
LOG_FILE = _env_or_default("CNKI_LOG_FILE", "/tmp/cnki_crawler.log")


class CrawlerConfig:
    """Configuration container for the CNKI crawler."""

    def __init__(
        self,
        home_url: str = CNKI_HOME_URL,
        headless: bool = BROWSER_HEADLESS,
        slow_mo: int = BROWSER_SLOW_MO,
        timeout: int = BROWSER_TIMEOUT,
        executable_path: Optional[str] = BROWSER_EXECUTABLE_PATH,
        type_delay_ms: int = TYPE_DELAY_MS,
        topic_type_delay_ms: int = TOPIC_TYPE_DELAY_MS,
        form_settle_delay: float = FORM_SETTLE_DELAY,
        detail_settle_delay: float = DETAIL_SETTLE_DELAY,
        result_row_timeout: int = RESULT_ROW_TIMEOUT,
        page_size_option: int = PAGE_SIZE_OPTION,
        record_delay: float = RECORD_DELAY,
        max_pages: int = 0,
    ):
        # Site settings
        self.home_url = home_url

        # Browser settings
        self.headless = headless
        self.slow_mo = slow_mo
        self.timeout = timeout
        self.executable_path = executable_path

        # Workflow timing
        self.type_delay_ms = type_delay_ms
        self.topic_type_delay_ms = topic_type_delay_ms
        self.form_settle_delay = form_settle_delay
        self.detail_settle_delay = detail_settle_delay
        self.result_row_timeout = result_row_timeout

        # Listing settings
        self.page_size_option = page_size_option
        self.max_pages = max_pages

        # Batch settings
        self.record_delay = record_delay

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "home_url": self.home_url,
            "headless": self.headless,
            "slow_mo": self.slow_mo,
            "timeout": self.timeout,
            "executable_path": self.executable_path,
            "type_delay_ms": self.type_delay_ms,
            "topic_type_delay_ms": self.topic_type_delay_ms,
            "form_settle_delay": self.form_settle_delay,
            "detail_settle_delay": self.detail_settle_delay,
            "result_row_timeout": self.result_row_timeout,
            "page_size_option": self.page_size_option,
            "max_pages": self.max_pages,
            "record_delay": self.record_delay,
        }


# Default configuration instance
default_config = CrawlerConfig()
