"""
Main entry point for RSS Delta.

Runs one pass over the configured feeds and records which items are new.
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

import coloredlogs
import yaml
from pydantic import ValidationError

from rss_delta.config import AppConfig, collect_feed_urls, load_config
from rss_delta.notifier import DeliveryHook, LogDelivery
from rss_delta.reconcile import reconcile
from rss_delta.rss_parser import FeedItem, FeedParser
from rss_delta.storage import ProcessedState, StateStore, StorageError

logger = logging.getLogger(__name__)


def redact_proxy_url(proxy_url: str) -> str:
    """
    Redact credentials from a proxy URL for safe logging.

    Parameters
    ----------
    proxy_url : str
        The proxy URL potentially containing credentials.

    Returns
    -------
    str
        The proxy URL with password redacted.
    """
    try:
        parsed = urlparse(proxy_url)
        if parsed.password:
            netloc = parsed.hostname or ""
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            if parsed.username:
                netloc = f"{parsed.username}:****@{netloc}"
            return f"{parsed.scheme}://{netloc}{parsed.path}"
        return proxy_url
    except ValueError:
        return "<proxy url>"


@dataclass
class NewItem:
    """A newly discovered item together with its origin."""

    url: str
    feed_key: str
    item: FeedItem


@dataclass
class PassResult:
    """
    Summary of one pass over the feed list.

    Attributes
    ----------
    processed_urls : list[str]
        URLs that were fetched, parsed and reconciled.
    failed_urls : list[str]
        URLs skipped because of a fetch or parse failure.
    new_items : list[NewItem]
        New items in feed-then-item order.
    """

    processed_urls: list[str] = field(default_factory=list)
    failed_urls: list[str] = field(default_factory=list)
    new_items: list[NewItem] = field(default_factory=list)


class FeedWatcher:
    """
    Pipeline driver for a single pass.

    Owns the processed state for the duration of the pass and
    processes feed URLs strictly one after another.
    """

    def __init__(self, config: AppConfig, delivery: DeliveryHook | None = None):
        """
        Initialize the watcher.

        Parameters
        ----------
        config : AppConfig
            Application configuration.
        delivery : DeliveryHook | None
            Receiver for new items, defaults to logging them.
        """
        self.config = config
        self.delivery: DeliveryHook = delivery or LogDelivery()
        self.store = StateStore(config.storage.state_path)

    def _create_parser(self) -> FeedParser:
        proxy_url = self.config.defaults.proxy
        if proxy_url:
            logger.info("Using proxy: %s", redact_proxy_url(proxy_url))

        return FeedParser(
            timeout=self.config.defaults.request_timeout,
            user_agent=self.config.defaults.user_agent,
            proxy_url=proxy_url,
        )

    async def run_pass(self) -> PassResult:
        """
        Process every configured feed once and persist the state.

        Returns
        -------
        PassResult
            What was processed and which items are new.

        Raises
        ------
        StateLoadError
            If the existing state cannot be loaded. Nothing is processed.
        StateSaveError
            If the updated state cannot be written.
        """
        logger.info("Processing RSS feeds")
        urls = collect_feed_urls(self.config)
        state = self.store.load()
        result = PassResult()

        async with self._create_parser() as parser:
            for url in urls:
                try:
                    processed = await self._process_url(parser, url, state, result)
                except Exception as e:
                    logger.error("Error processing feed %s: %s", url, e)
                    processed = False

                if processed:
                    result.processed_urls.append(url)
                else:
                    result.failed_urls.append(url)

        self.store.save(state)

        logger.info(
            "Processed %d of %d feed(s): %d new item(s), %d item(s) tracked",
            len(result.processed_urls),
            len(urls),
            len(result.new_items),
            state.seen_count(),
        )
        return result

    async def _process_url(
        self,
        parser: FeedParser,
        url: str,
        state: ProcessedState,
        result: PassResult,
    ) -> bool:
        """Fetch, parse and reconcile one URL. Returns False if it was skipped."""
        content = await parser.fetch(url)
        if content is None:
            return False

        feed = parser.parse(content)
        if feed is None:
            logger.warning("Skipping feed %s: unable to parse", url)
            return False

        logger.info("Got feed: %s, %s, %s", feed.title, feed.description, feed.link)
        logger.debug("Got %d items from %s", len(feed.items), url)

        reconciled = reconcile(feed, state)
        for item in reconciled.new_items:
            result.new_items.append(NewItem(url, reconciled.feed_key, item))
            try:
                await self.delivery.deliver(reconciled.feed_key, item)
            except Exception as e:
                logger.error(
                    "Delivery failed for item '%s': %s", (item.title or "")[:50], e
                )
        return True


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Detect new items in RSS feeds since the previous run",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to configuration file (defaults are used if omitted)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.config is None:
        config = AppConfig()
    else:
        config_path = Path(args.config)
        try:
            config = load_config(config_path)
        except FileNotFoundError:
            logger.error("Configuration file not found: %s", config_path)
            return 1
        except (ValueError, yaml.YAMLError, ValidationError) as e:
            logger.error("Invalid configuration in %s: %s", config_path, e)
            return 1

    watcher = FeedWatcher(config)
    try:
        asyncio.run(watcher.run_pass())
    except StorageError as e:
        logger.error("%s", e)
        return 1

    logger.info("Processing RSS feeds done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
