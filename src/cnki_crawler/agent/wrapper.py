"""High-level API: batch detail lookup and topic listing crawl."""

import asyncio
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Callable, Mapping, Sequence

from cnki_crawler.agent.configuration import CrawlerConfig, default_config
from cnki_crawler.core.browser_session import BrowserSession
from cnki_crawler.core.errors import CrawlerError, InvalidRecord, error_code_for
from cnki_crawler.core.platform import browser_path_or_default
from cnki_crawler.models.metadata import DetailMetadata, ListingSummary, PageListing, ResultRow
from cnki_crawler.models.record import ArticleRecord
from cnki_crawler.nodes.extract import extract_detail_metadata
from cnki_crawler.nodes.navigate import open_first_result
from cnki_crawler.nodes.paginate import for_each_page, read_listing_summary, read_result_rows, set_page_size
from cnki_crawler.nodes.search import open_homepage, search_by_title_and_source, submit_topic
from cnki_crawler.utils.log_utils import BatchProgress, get_logger

logger = get_logger(__name__)

BrowserFactory = Callable[[CrawlerConfig], BrowserSession]


def default_browser_factory(config: CrawlerConfig) -> BrowserSession:
    """Build a session for the local Chrome install.

    Resolving the executable happens here, before anything is launched, so an
    unsupported platform fails without starting a browser.
    """
    return BrowserSession(
        executable_path=browser_path_or_default(config.executable_path),
        headless=config.headless,
        slow_mo=config.slow_mo,
        timeout=config.timeout,
    )


@dataclass
class RecordResult:
    """Outcome of one record in a batch.

    Attributes:
        index: Position of the record in the input
        label: Title used to identify the record in logs
        success: Whether the record was enriched
        metadata: Extracted metadata on success
        error_code: Stable error code on failure
        error: Error message on failure
    """
    index: int
    label: str
    success: bool
    metadata: Optional[DetailMetadata] = None
    error_code: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "label": self.label,
            "success": self.success,
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "error_code": self.error_code,
            "error": self.error,
        }


@dataclass
class BatchResult:
    """Output of a batch run.

    Attributes:
        records: Output rows, in input order
        results: Per-record outcomes, in input order
    """
    records: List[Dict[str, Any]]
    results: List[RecordResult]

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    def failures(self) -> List[RecordResult]:
        return [r for r in self.results if not r.success]


@dataclass
class TopicResult:
    """Output of a topic crawl."""
    topic: str
    summary: Optional[ListingSummary] = None
    rows: List[ResultRow] = field(default_factory=list)
    pages_visited: List[int] = field(default_factory=list)


class BatchOrchestrator:
    """Looks up every input record on CNKI and fills in its authorship metadata.

    One browser session serves the whole batch. A record that cannot be
    looked up is passed through unchanged; it never stops the batch.

    Example:
        orchestrator = BatchOrchestrator()
        rows = await orchestrator.run([{"title": "...", "source": "..."}])
    """

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        browser_factory: Optional[BrowserFactory] = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Optional CrawlerConfig instance
            browser_factory: Builds the session; defaults to the local Chrome install
        """
        self._config = config or default_config
        self._browser_factory = browser_factory or default_browser_factory

    async def run(self, records: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Enrich records and return the output rows in input order."""
        result = await self.run_detailed(records)
        return result.records

    async def run_detailed(self, records: Sequence[Mapping[str, Any]]) -> BatchResult:
        """Enrich records and return output rows with per-record outcomes.

        Raises:
            PlatformUnsupported: If no browser executable can be resolved
            SessionLaunchFailure: If the browser cannot be started
        """
        articles = [ArticleRecord.from_mapping(r) for r in records]
        progress = BatchProgress(len(articles))

        browser = self._browser_factory(self._config)
        await browser.start()

        results: List[RecordResult] = []
        try:
            for index, article in enumerate(articles):
                results.append(await self._process_record(browser, index, article, progress))

                if self._config.record_delay > 0 and index + 1 < len(articles):
                    await asyncio.sleep(self._config.record_delay)
        finally:
            await browser.close()

        logger.info(f"Batch finished: {progress.summary()}")
        return BatchResult(records=[a.to_dict() for a in articles], results=results)

    async def _process_record(
        self,
        browser: BrowserSession,
        index: int,
        article: ArticleRecord,
        progress: BatchProgress,
    ) -> RecordResult:
        """Run search, navigation and extraction for one record."""
        label = article.title or f"record {index + 1}"
        progress.log_record_start(index, label)

        try:
            if not article.is_searchable:
                raise InvalidRecord("Record needs both a title and a source")

            await search_by_title_and_source(
                browser,
                article.title,
                article.source,
                home_url=self._config.home_url,
                settle_delay=self._config.form_settle_delay,
                delay=self._config.type_delay_ms,
            )
            await open_first_result(
                browser,
                row_timeout=self._config.result_row_timeout,
                settle_delay=self._config.detail_settle_delay,
            )
            metadata = await extract_detail_metadata(browser)
        except Exception as e:
            if isinstance(e, CrawlerError) and e.fatal:
                raise
            code = error_code_for(e)
            progress.log_error(index, f"{label}: {code}: {e}")
            progress.log_record_end(index, label, success=False)
            return RecordResult(index=index, label=label, success=False, error_code=code, error=str(e))

        article.enrich(metadata)
        progress.log_record_end(index, label, success=True, details=article.enrichment())
        return RecordResult(index=index, label=label, success=True, metadata=metadata)


class TopicCrawler:
    """Searches a topic and reads every row of every result page."""

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        browser_factory: Optional[BrowserFactory] = None,
    ):
        self._config = config or default_config
        self._browser_factory = browser_factory or default_browser_factory

    async def crawl(self, topic: str) -> TopicResult:
        """Run the topic search and collect the result rows.

        Raises:
            PlatformUnsupported: If no browser executable can be resolved
            SessionLaunchFailure: If the browser cannot be started
            RecordError: If the search or the listing summary fails
        """
        result = TopicResult(topic=topic)

        browser = self._browser_factory(self._config)
        await browser.start()

        async def collect(index: int, listing: PageListing) -> None:
            listing.rows = await read_result_rows(browser)
            result.rows.extend(listing.rows)
            logger.debug(f"Page {index + 1}: {len(listing.rows)} of {listing.row_count} rows read")

        try:
            await open_homepage(browser, self._config.home_url)
            await submit_topic(browser, topic, delay=self._config.topic_type_delay_ms)
            await set_page_size(browser, self._config.page_size_option)
            result.summary = await read_listing_summary(browser)
            result.pages_visited = await for_each_page(
                browser,
                result.summary.total_pages,
                collect,
                max_pages=self._config.max_pages,
            )
        finally:
            await browser.close()

        logger.info(
            f"Topic {topic!r}: {len(result.rows)} rows from {len(result.pages_visited)} pages"
        )
        return result


__all__ = [
    "BatchOrchestrator",
    "TopicCrawler",
    "BatchResult",
    "RecordResult",
    "TopicResult",
    "default_browser_factory",
]
