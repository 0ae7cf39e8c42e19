"""Agent module - configuration and the batch/topic workflows."""

from cnki_crawler.agent.configuration import CrawlerConfig, default_config
from cnki_crawler.agent.wrapper import BatchOrchestrator, TopicCrawler, BatchResult, RecordResult

__all__ = ["CrawlerConfig", "default_config", "BatchOrchestrator", "TopicCrawler", "BatchResult", "RecordResult"]
