"""Result navigator - opens the first search result in the current tab."""

from cnki_crawler.agent.configuration import DETAIL_SETTLE_DELAY, RESULT_ROW_TIMEOUT
from cnki_crawler.core import selectors
from cnki_crawler.core.browser_session import BrowserSession
from cnki_crawler.core.errors import NavigationTimeout, NoResultsFound
from cnki_crawler.utils.log_utils import get_logger

logger = get_logger(__name__)


async def open_first_result(
    browser: BrowserSession,
    row_timeout: int = RESULT_ROW_TIMEOUT,
    settle_delay: float = DETAIL_SETTLE_DELAY,
) -> None:
    """Open the detail page of the first result row.

    Waits for the result grid, then for its first title link. A grid with no
    row is an empty result, not a timeout.

    Raises:
        NavigationTimeout: If the result grid never renders
        NoResultsFound: If the grid renders without a result row
    """
    await browser.wait_for_element(selectors.RESULT_GRID, step="open_first_result")

    try:
        await browser.wait_for_element(
            selectors.FIRST_ROW_TITLE_LINK,
            timeout=row_timeout,
            step="open_first_result",
        )
    except NavigationTimeout as e:
        raise NoResultsFound("Search returned no result rows") from e

    await browser.set_attribute(selectors.FIRST_ROW_TITLE_LINK, "target", "_self", step="open_first_result")

    # A synthetic UI click on this link sometimes does nothing; clicking from page script does not
    clicked = await browser.click_in_page(selectors.FIRST_ROW_TITLE_LINK)
    if not clicked:
        raise NoResultsFound("First result row disappeared before it could be opened")

    ready = await browser.wait_for_settle(selectors.AUTHOR_ENTRIES, fallback_delay=settle_delay)
    logger.debug(f"Detail page {'ready' if ready else 'not confirmed, continuing'}")
