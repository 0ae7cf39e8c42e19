"""Command-line entry points.

Usage:
    cnki-crawler --input input.xlsx --output output.xlsx

    cnki-topic --topic 图书情报工作 --output topic_output.xlsx --max-pages 3
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from cnki_crawler import __version__
from cnki_crawler.agent.configuration import CrawlerConfig
from cnki_crawler.agent.wrapper import BatchOrchestrator, TopicCrawler
from cnki_crawler.core.errors import CrawlerError
from cnki_crawler.utils.log_utils import configure_logging, get_logger
from cnki_crawler.utils.spreadsheet import read_records, write_records

logger = get_logger(__name__)

DEFAULT_TOPIC = "图书情报工作"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Output extra debugging",
    )
    parser.add_argument(
        "--headless", "-l",
        action="store_true",
        help="Run browser in headless mode",
    )
    parser.add_argument(
        "--browser-path",
        default=None,
        help="Chrome executable to use instead of the platform default",
    )


def _config_from_args(args: argparse.Namespace, **overrides) -> CrawlerConfig:
    config = CrawlerConfig()
    config.headless = args.headless or config.headless
    if args.browser_path:
        config.executable_path = args.browser_path
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fill in CNKI author metadata for a spreadsheet of articles")
    _add_common_arguments(parser)
    parser.add_argument(
        "--input", "-i",
        default="input.xlsx",
        help="Input xlsx data file (default: input.xlsx)",
    )
    parser.add_argument(
        "--output", "-o",
        default="output.xlsx",
        help="Output xlsx data file (default: output.xlsx)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to pause between records",
    )
    return parser


def build_topic_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="List every CNKI search result for a topic")
    _add_common_arguments(parser)
    parser.add_argument(
        "--topic", "-t",
        default=DEFAULT_TOPIC,
        help=f"Topic to search (default: {DEFAULT_TOPIC})",
    )
    parser.add_argument(
        "--output", "-o",
        default="topic_output.xlsx",
        help="Output xlsx data file (default: topic_output.xlsx)",
    )
    parser.add_argument(
        "--max-pages", "-m",
        type=int,
        default=0,
        help="Maximum result pages to read (default: 0 = all)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.debug)

    if not os.path.exists(args.input):
        logger.error(f"input: {args.input} does not exist!")
        return 1
    if os.path.exists(args.output):
        logger.warning(f"output: {args.output} exists already, will overwrite!")

    try:
        records = read_records(args.input)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read {args.input}: {e}")
        return 1
    logger.debug(f"Got parsed input data: {records}")

    overrides = {"record_delay": args.delay} if args.delay is not None else {}
    orchestrator = BatchOrchestrator(config=_config_from_args(args, **overrides))

    try:
        result = asyncio.run(orchestrator.run_detailed(records))
    except CrawlerError as e:
        logger.error(f"{e.code}: {e}")
        return 1

    for failure in result.failures():
        logger.warning(f"Not enriched [{failure.index + 1}] {failure.label}: {failure.error_code}")

    write_records(args.output, result.records)
    logger.info(f"Done: {result.succeeded} enriched, {result.failed} unchanged")
    return 0


def topic_main(argv: Optional[List[str]] = None) -> int:
    args = build_topic_parser().parse_args(argv)
    configure_logging(verbose=args.debug)

    if os.path.exists(args.output):
        logger.warning(f"output: {args.output} exists already, will overwrite!")

    crawler = TopicCrawler(config=_config_from_args(args, max_pages=args.max_pages))

    try:
        result = asyncio.run(crawler.crawl(args.topic))
    except CrawlerError as e:
        logger.error(f"{e.code}: {e}")
        return 1

    write_records(args.output, [row.to_row() for row in result.rows])
    return 0


def run() -> None:
    sys.exit(main())


def run_topic() -> None:
    sys.exit(topic_main())


if __name__ == "__main__":
    run()
