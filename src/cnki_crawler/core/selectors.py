"""CSS selectors for the CNKI search, result and detail pages."""

from enum import Enum


class SearchField(str, Enum):
    """Advanced-search form fields the crawler knows how to fill."""

    TITLE = "title"
    SOURCE = "source"


# Home page
ADVANCED_SEARCH_LINK = "a#highSearch"
TOPIC_SEARCH_INPUT = "input#txt_SearchText"

# Name given to the tab so links targeting it reuse the same tab
SAME_TAB_WINDOW_NAME = "highsearch"

# Advanced search form
ADVANCED_FIELD_INPUTS = {
    SearchField.TITLE: 'input[data-tipid="gradetxt-1"]',
    SearchField.SOURCE: 'input[data-tipid="gradetxt-3"]',
}
SEARCH_SUBMIT = 'input[class="btn-search"]'

# Result listing
RESULT_GRID = "#gridTable"
RESULT_ROWS = "#gridTable > table > tbody > tr"
FIRST_ROW_TITLE_LINK = "#gridTable > table > tbody > tr > td.name > a"

# Cells inside one result row
ROW_CELLS = {
    "title": "td.name a",
    "authors": "td.author a",
    "author_cell": "td.author",
    "source": "td.source a",
    "release_date": "td.date",
    "database": "td.data",
    "reference": "td.quote",
    "reference_link": "td.quote a",
    "download": "td.download",
    "download_link": "td.download a",
}

# Listing summary and paging
PAGE_SIZE_TOGGLE = "#perPageDiv > div"
PAGE_SIZE_OPTIONS = "#perPageDiv > ul > li"
TOTAL_COUNT = "#countPageDiv > span.pagerTitleCell > em"
PAGE_MARK = "#countPageDiv > span.countPageMark"
NEXT_PAGE = "#PageNext"

# Detail page
AUTHOR_ENTRIES = "#authorpart > span"
RELEASE_DATE = "div.top-first > div.top-tip > span > a:nth-child(2)"


def field_selector(field: SearchField) -> str:
    """Return the input selector for an advanced-search field."""
    return ADVANCED_FIELD_INPUTS[SearchField(field)]
