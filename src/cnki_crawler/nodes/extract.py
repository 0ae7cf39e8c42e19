"""Metadata extractor - reads authorship and release date from a detail page."""

from cnki_crawler.core import selectors
from cnki_crawler.core.browser_session import BrowserSession
from cnki_crawler.core.errors import ExtractionFailure, NavigationTimeout
from cnki_crawler.models.metadata import DetailMetadata
from cnki_crawler.utils.log_utils import get_logger
from cnki_crawler.utils.text_utils import clean_author_name, normalize_text

logger = get_logger(__name__)


async def extract_detail_metadata(browser: BrowserSession) -> DetailMetadata:
    """Read the author list and release date from the rendered detail page.

    Returns:
        DetailMetadata with cleaned author names in page order

    Raises:
        ExtractionFailure: If the author region or the release date is missing
    """
    try:
        await browser.wait_for_element(selectors.AUTHOR_ENTRIES, step="extract_detail_metadata")
    except NavigationTimeout as e:
        raise ExtractionFailure(f"Author list never rendered: {e}") from e

    raw_authors = await browser.texts_of(selectors.AUTHOR_ENTRIES)
    authors = [clean_author_name(text) for text in raw_authors]
    # entries that are only footnote markers clean down to nothing
    authors = [a for a in authors if a]
    logger.debug(f"Authors: {raw_authors} -> {authors}")

    release_date = await browser.text_of(selectors.RELEASE_DATE)
    if release_date is None:
        raise ExtractionFailure("Release date not found on detail page")

    return DetailMetadata(authors=authors, release_date=normalize_text(release_date))
