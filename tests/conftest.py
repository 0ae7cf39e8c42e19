import pytest

from cnki_crawler.agent.configuration import CrawlerConfig


@pytest.fixture
def config() -> CrawlerConfig:
    """Config with every wait and pause shortened for the fake browser."""
    return CrawlerConfig(
        home_url="https://example.test/",
        executable_path="/opt/chrome/chrome",
        type_delay_ms=0,
        topic_type_delay_ms=0,
        form_settle_delay=0,
        detail_settle_delay=0,
        result_row_timeout=100,
        page_size_option=2,
        record_delay=0,
    )
