import asyncio

import pytest

from cnki_crawler.core import selectors
from cnki_crawler.core.errors import ExtractionFailure, NavigationTimeout, NoResultsFound
from cnki_crawler.nodes.extract import extract_detail_metadata
from cnki_crawler.nodes.navigate import open_first_result
from fakes import FakeBrowser, detail_dom, empty_results_dom


def _browser_on(dom) -> FakeBrowser:
    browser = FakeBrowser()
    browser.dom = dict(dom)
    return browser


def test_open_first_result_retargets_and_clicks_in_page() -> None:
    browser = _browser_on(detail_dom(["张三"], "2021-03-15"))

    asyncio.run(open_first_result(browser, row_timeout=100, settle_delay=0))

    assert browser.attributes[selectors.FIRST_ROW_TITLE_LINK] == {"target": "_self"}
    assert ("click_in_page", selectors.FIRST_ROW_TITLE_LINK) in browser.actions
    assert ("click", selectors.FIRST_ROW_TITLE_LINK) not in browser.actions


def test_empty_grid_is_no_results() -> None:
    browser = _browser_on(empty_results_dom())

    with pytest.raises(NoResultsFound) as excinfo:
        asyncio.run(open_first_result(browser, row_timeout=100))

    assert excinfo.value.code == "no_results_found"


def test_missing_grid_is_navigation_timeout() -> None:
    browser = _browser_on({})

    with pytest.raises(NavigationTimeout) as excinfo:
        asyncio.run(open_first_result(browser, row_timeout=100))

    assert not isinstance(excinfo.value, NoResultsFound)
    assert excinfo.value.selector == selectors.RESULT_GRID


def test_extract_cleans_author_names() -> None:
    browser = _browser_on(detail_dom(["张三1", "李四 2,3", "王五"], " 2021-03-15 "))

    metadata = asyncio.run(extract_detail_metadata(browser))

    assert metadata.authors == ["张三", "李四", "王五"]
    assert metadata.author_count == 3
    assert metadata.release_date == "2021-03-15"


def test_extract_without_author_region_fails() -> None:
    browser = _browser_on({selectors.RELEASE_DATE: ["2021-03-15"]})

    with pytest.raises(ExtractionFailure):
        asyncio.run(extract_detail_metadata(browser))


def test_extract_without_release_date_fails() -> None:
    browser = _browser_on({selectors.AUTHOR_ENTRIES: ["张三"]})

    with pytest.raises(ExtractionFailure):
        asyncio.run(extract_detail_metadata(browser))


def test_extract_drops_entries_that_are_only_markers() -> None:
    browser = _browser_on(detail_dom(["张三1", "2,3", "李四"], "2021-03-15"))

    metadata = asyncio.run(extract_detail_metadata(browser))

    assert metadata.authors == ["张三", "李四"]
    assert metadata.author_count == 2
