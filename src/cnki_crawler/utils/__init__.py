"""Utility functions for the crawler."""

from cnki_crawler.utils.log_utils import get_logger
from cnki_crawler.utils.text_utils import clean_author_name, parse_page_mark

__all__ = ["get_logger", "clean_author_name", "parse_page_mark"]
