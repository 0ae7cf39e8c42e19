"""Workflow steps: search, open result, extract metadata, walk pages."""

from cnki_crawler.nodes.search import search_by_title_and_source, submit_topic
from cnki_crawler.nodes.navigate import open_first_result
from cnki_crawler.nodes.extract import extract_detail_metadata
from cnki_crawler.nodes.paginate import for_each_page, read_listing_summary, read_result_rows

__all__ = [
    "search_by_title_and_source",
    "submit_topic",
    "open_first_result",
    "extract_detail_metadata",
    "for_each_page",
    "read_listing_summary",
    "read_result_rows",
]
