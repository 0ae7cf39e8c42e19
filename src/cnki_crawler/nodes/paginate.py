"""Pagination controller - reads listing totals and walks result pages."""

import re
from typing import Awaitable, Callable, Dict, List, Optional

from cnki_crawler.agent.configuration import PAGE_SIZE_OPTION
from cnki_crawler.core import selectors
from cnki_crawler.core.browser_session import BrowserSession
from cnki_crawler.core.errors import CrawlerError, ExtractionFailure
from cnki_crawler.models.metadata import ListingSummary, PageListing, ResultRow
from cnki_crawler.utils.log_utils import get_logger
from cnki_crawler.utils.text_utils import clean_author_name, parse_count, parse_page_mark

logger = get_logger(__name__)

PageVisitor = Callable[[int, PageListing], Awaitable[None]]

_AUTHOR_SEPARATORS = re.compile(r"[;；]")


async def set_page_size(browser: BrowserSession, option_index: int = PAGE_SIZE_OPTION) -> None:
    """Pick a larger results-per-page option.

    The page count depends on the page size, so this must run before
    ``read_listing_summary``.
    """
    await browser.wait_for_element(selectors.PAGE_SIZE_TOGGLE, step="set_page_size")
    await browser.click(selectors.PAGE_SIZE_TOGGLE, step="set_page_size")
    await browser.click_nth(selectors.PAGE_SIZE_OPTIONS, option_index, step="set_page_size")
    # the listing re-renders from page 1 at the new size
    await browser.wait_for_text_prefix(selectors.PAGE_MARK, "1/", step="set_page_size")


async def read_listing_summary(browser: BrowserSession) -> ListingSummary:
    """Read the total result count and total page count.

    Raises:
        ExtractionFailure: If either indicator is missing or malformed
    """
    await browser.wait_for_element(selectors.PAGE_MARK, step="read_listing_summary")

    count_text = await browser.text_of(selectors.TOTAL_COUNT)
    total_count = parse_count(count_text)
    if total_count is None:
        raise ExtractionFailure(f"Unreadable total count: {count_text!r}")

    mark_text = await browser.text_of(selectors.PAGE_MARK)
    try:
        total_pages = parse_page_mark(mark_text or "")
    except ValueError as e:
        raise ExtractionFailure(str(e)) from e

    logger.info(f"Got totalCount: {total_count}, totalPage: {total_pages}")
    return ListingSummary(total_count=total_count, total_pages=total_pages)


def _first(entries: List[Dict[str, Optional[str]]], key: str = "text") -> Optional[str]:
    return entries[0].get(key) if entries else None


def _row_from_cells(cells: Dict[str, List[Dict[str, Optional[str]]]]) -> ResultRow:
    author_links = cells.get("authors", [])
    if author_links:
        authors = [clean_author_name(e.get("text") or "") for e in author_links]
        author_urls = [e["href"] for e in author_links if e.get("href")]
    else:
        # authors without a profile page are plain text separated by semicolons
        cell_text = _first(cells.get("author_cell", [])) or ""
        authors = [clean_author_name(part) for part in _AUTHOR_SEPARATORS.split(cell_text)]
        author_urls = []
    authors = [a for a in authors if a]

    return ResultRow(
        title=_first(cells.get("title", [])) or "",
        article_url=_first(cells.get("title", []), "href"),
        authors=authors,
        author_urls=author_urls,
        source=_first(cells.get("source", [])) or "",
        source_url=_first(cells.get("source", []), "href"),
        release_date=_first(cells.get("release_date", [])) or "",
        database=_first(cells.get("database", [])) or "",
        reference_count=_first(cells.get("reference", [])),
        reference_url=_first(cells.get("reference_link", []), "href"),
        download_count=_first(cells.get("download", [])),
        download_url=_first(cells.get("download_link", []), "href"),
    )


async def read_result_rows(browser: BrowserSession) -> List[ResultRow]:
    """Read every row currently rendered in the result table."""
    raw_rows = await browser.query_rows(selectors.RESULT_ROWS, selectors.ROW_CELLS)
    return [_row_from_cells(cells) for cells in raw_rows]


async def go_to_next_page(browser: BrowserSession, next_index: int) -> None:
    """Click through to the next page and wait for the page marker to follow.

    Args:
        browser: Open browser session
        next_index: Zero-based index of the page being opened
    """
    await browser.click(selectors.NEXT_PAGE, step="go_to_next_page")
    await browser.wait_for_text_prefix(selectors.PAGE_MARK, f"{next_index + 1}/", step="go_to_next_page")


async def for_each_page(
    browser: BrowserSession,
    total_pages: int,
    visit: PageVisitor,
    max_pages: int = 0,
) -> List[int]:
    """Visit result pages ``0 .. total_pages - 1`` in order.

    Each page's rows are read fresh. A failure on one page is logged and the
    walk moves on; a failure to reach the next page ends the walk.

    Args:
        browser: Open browser session, showing page 0 of the listing
        total_pages: Page count from ``read_listing_summary``
        visit: Awaited with the page index and its listing
        max_pages: Stop after this many pages (0 = all)

    Returns:
        Indices of the pages that were visited successfully
    """
    limit = total_pages if max_pages <= 0 else min(total_pages, max_pages)
    visited: List[int] = []

    for index in range(limit):
        logger.info(f"Processing [{index + 1}/{limit}] ...")
        try:
            await browser.wait_for_element(selectors.RESULT_ROWS, step="for_each_page")
            listing = PageListing(page_index=index, row_count=await browser.count(selectors.RESULT_ROWS))
            await visit(index, listing)
            visited.append(index)
            logger.info(f"Processed [{index + 1}/{limit}]")
        except Exception as e:
            if isinstance(e, CrawlerError) and e.fatal:
                raise
            logger.warning(f"Page {index + 1} failed: {e}")

        if index + 1 < limit:
            try:
                await go_to_next_page(browser, index + 1)
            except Exception as e:
                if isinstance(e, CrawlerError) and e.fatal:
                    raise
                logger.error(f"Could not open page {index + 2}, stopping: {e}")
                break

    return visited
