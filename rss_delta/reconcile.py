"""
Reconciliation of parsed feeds against the processed state.
"""

import logging
from dataclasses import dataclass, field

from rss_delta.fingerprint import fingerprint
from rss_delta.rss_parser import Feed, FeedItem
from rss_delta.storage import ProcessedState

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """
    Outcome of reconciling one feed.

    Attributes
    ----------
    feed_key : str
        Fingerprint of the feed's channel.
    new_items : list[FeedItem]
        Items not seen before, in feed order.
    """

    feed_key: str
    new_items: list[FeedItem] = field(default_factory=list)


def feed_fingerprint(feed: Feed) -> str:
    """Fingerprint identifying a channel across runs."""
    return fingerprint([feed.title, feed.link])


def item_fingerprint(item: FeedItem) -> str:
    """Fingerprint identifying an item within its channel."""
    return fingerprint([item.title, item.link])


def reconcile(feed: Feed, state: ProcessedState) -> ReconcileResult:
    """
    Find the items of a feed that are not yet recorded and record them.

    Mutates ``state`` in place: the feed is registered if unknown and
    every new item fingerprint is appended to its seen-set.

    Parameters
    ----------
    feed : Feed
        Parsed feed snapshot.
    state : ProcessedState
        Processed state for the current pass.

    Returns
    -------
    ReconcileResult
        The feed fingerprint and the newly seen items.
    """
    feed_key = feed_fingerprint(feed)
    if state.ensure_feed(feed_key):
        logger.info("New feed detected: %s (%s)", feed.title, feed_key)

    result = ReconcileResult(feed_key=feed_key)
    for item in feed.items:
        if state.add_item(feed_key, item_fingerprint(item)):
            result.new_items.append(item)

    logger.debug(
        "Feed %s: %d item(s), %d new",
        feed_key,
        len(feed.items),
        len(result.new_items),
    )
    return result
