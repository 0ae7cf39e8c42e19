"""Data models for records and scraped page content."""

from cnki_crawler.models.metadata import DetailMetadata, ListingSummary, PageListing, ResultRow
from cnki_crawler.models.record import ArticleRecord

__all__ = [
    "ArticleRecord",
    "DetailMetadata",
    "ListingSummary",
    "PageListing",
    "ResultRow",
]
