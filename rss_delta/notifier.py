"""
Delivery hook for newly discovered feed items.

Defines the interface a delivery backend implements and a default
hook that only logs.
"""

import logging
from typing import Protocol, runtime_checkable

from rss_delta.rss_parser import FeedItem

logger = logging.getLogger(__name__)


@runtime_checkable
class DeliveryHook(Protocol):
    """
    Protocol for receivers of new feed items.

    The pipeline calls ``deliver`` at most once per new item per pass,
    in feed-then-item order.
    """

    async def deliver(self, feed_key: str, item: FeedItem) -> None:
        """
        Handle one new item.

        Parameters
        ----------
        feed_key : str
            Fingerprint of the feed the item belongs to.
        item : FeedItem
            The new item.
        """
        ...


class LogDelivery:
    """Delivery hook that writes each new item to the log."""

    async def deliver(self, feed_key: str, item: FeedItem) -> None:
        logger.info("New item in feed %s: %s <%s>", feed_key, item.title, item.link)
