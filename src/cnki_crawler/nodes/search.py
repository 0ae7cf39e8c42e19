"""Search protocol - drives the home page into a submitted search."""

from typing import Mapping

from cnki_crawler.agent.configuration import (
    CNKI_HOME_URL,
    FORM_SETTLE_DELAY,
    TOPIC_TYPE_DELAY_MS,
    TYPE_DELAY_MS,
)
from cnki_crawler.core import selectors
from cnki_crawler.core.browser_session import BrowserSession
from cnki_crawler.core.selectors import SearchField
from cnki_crawler.utils.log_utils import get_logger

logger = get_logger(__name__)


async def open_homepage(browser: BrowserSession, url: str = CNKI_HOME_URL) -> None:
    """Open the site root and wait for the network to go idle."""
    await browser.navigate(url, wait_until="networkidle")


async def enable_same_tab_navigation(browser: BrowserSession) -> None:
    """Name the tab so the site's new-window links open in it instead."""
    await browser.set_window_name(selectors.SAME_TAB_WINDOW_NAME)


async def open_advanced_search(
    browser: BrowserSession,
    settle_delay: float = FORM_SETTLE_DELAY,
) -> None:
    """Click through to the advanced search form and wait for it to attach."""
    await browser.click(selectors.ADVANCED_SEARCH_LINK, step="open_advanced_search")
    await browser.wait_for_settle(
        selectors.field_selector(SearchField.TITLE),
        fallback_delay=settle_delay,
    )


async def fill_and_submit(
    browser: BrowserSession,
    fields: Mapping[SearchField, str],
    delay: int = TYPE_DELAY_MS,
) -> None:
    """Type the query fields into the advanced form and submit it.

    Args:
        browser: Open browser session
        fields: Field -> text; fields are typed in the order given
        delay: Delay between keystrokes in milliseconds

    Raises:
        ValueError: If no field is given
        NavigationTimeout: If the form never renders
    """
    if not fields:
        raise ValueError("At least one search field is required")

    await browser.wait_for_element(
        selectors.field_selector(SearchField.TITLE),
        step="fill_and_submit",
    )

    for search_field, text in fields.items():
        await browser.type_into(
            selectors.field_selector(search_field),
            text,
            delay=delay,
            step="fill_and_submit",
        )

    # the submit control opens a new tab unless retargeted
    await browser.set_attribute(selectors.SEARCH_SUBMIT, "target", "_self", step="fill_and_submit")
    await browser.click(selectors.SEARCH_SUBMIT, step="fill_and_submit")
    logger.debug(f"Submitted advanced search: {dict((k.value, v) for k, v in fields.items())}")


async def search_by_title_and_source(
    browser: BrowserSession,
    title: str,
    source: str,
    home_url: str = CNKI_HOME_URL,
    settle_delay: float = FORM_SETTLE_DELAY,
    delay: int = TYPE_DELAY_MS,
) -> None:
    """Run the full advanced search for one article."""
    await open_homepage(browser, home_url)
    await enable_same_tab_navigation(browser)
    await open_advanced_search(browser, settle_delay=settle_delay)
    await fill_and_submit(
        browser,
        {SearchField.TITLE: title, SearchField.SOURCE: source},
        delay=delay,
    )


async def submit_topic(
    browser: BrowserSession,
    topic: str,
    delay: int = TOPIC_TYPE_DELAY_MS,
) -> None:
    """Type a topic into the home page search box and press Enter."""
    await browser.wait_for_element(selectors.TOPIC_SEARCH_INPUT, step="submit_topic")
    await browser.type_into(selectors.TOPIC_SEARCH_INPUT, topic, delay=delay, step="submit_topic")
    await browser.press_key("Enter")
    logger.info(f"Searching topic: {topic}")
