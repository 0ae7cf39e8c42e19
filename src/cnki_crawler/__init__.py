"""
CNKI Crawler

Browser automation that looks up articles on CNKI and collects their
authorship metadata, built on Playwright.
"""

__version__ = "0.1.0"

from cnki_crawler.agent.wrapper import BatchOrchestrator, TopicCrawler

__all__ = ["BatchOrchestrator", "TopicCrawler", "__version__"]
