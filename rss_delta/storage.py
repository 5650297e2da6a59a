"""
JSON storage for tracking processed feed items.

Persists, per feed fingerprint, the fingerprints of every item already
seen so that later runs only report new items.
"""

import json
import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for processed-state persistence failures."""


class StateLoadError(StorageError):
    """Raised when an existing state file cannot be read or is corrupt."""


class StateSaveError(StorageError):
    """Raised when the state file cannot be written."""


class ProcessedState:
    """
    In-memory record of seen item fingerprints, grouped by feed fingerprint.

    Each feed keeps its item fingerprints in insertion order with set
    semantics. Entries are only ever added, never removed.
    """

    def __init__(self) -> None:
        self._feeds: dict[str, list[str]] = {}
        self._index: dict[str, set[str]] = {}

    def __contains__(self, feed_key: object) -> bool:
        return feed_key in self._feeds

    def __len__(self) -> int:
        return len(self._feeds)

    def __iter__(self) -> Iterator[str]:
        return iter(self._feeds)

    def ensure_feed(self, feed_key: str) -> bool:
        """
        Register a feed with an empty seen-set if it is not known yet.

        Returns
        -------
        bool
            True if the feed was newly added.
        """
        if feed_key in self._feeds:
            return False
        self._feeds[feed_key] = []
        self._index[feed_key] = set()
        return True

    def has_item(self, feed_key: str, item_key: str) -> bool:
        """Check whether an item fingerprint is recorded under a feed."""
        return item_key in self._index.get(feed_key, ())

    def add_item(self, feed_key: str, item_key: str) -> bool:
        """
        Record an item fingerprint under a feed.

        The feed is registered first if needed.

        Returns
        -------
        bool
            True if the item was not recorded before.
        """
        self.ensure_feed(feed_key)
        if item_key in self._index[feed_key]:
            return False
        self._feeds[feed_key].append(item_key)
        self._index[feed_key].add(item_key)
        return True

    def items(self, feed_key: str) -> list[str]:
        """Return a copy of the item fingerprints recorded for a feed."""
        return list(self._feeds.get(feed_key, []))

    def seen_count(self, feed_key: str | None = None) -> int:
        """
        Count recorded item fingerprints.

        Parameters
        ----------
        feed_key : str | None
            If provided, count only items of this feed.
        """
        if feed_key is not None:
            return len(self._feeds.get(feed_key, []))
        return sum(len(keys) for keys in self._feeds.values())

    def to_dict(self) -> dict[str, list[str]]:
        """Return the persisted representation of the state."""
        return {feed_key: list(keys) for feed_key, keys in self._feeds.items()}

    @classmethod
    def from_dict(cls, data: Any) -> "ProcessedState":
        """
        Build a state from its persisted representation.

        Parameters
        ----------
        data : Any
            Decoded JSON, expected to map strings to lists of strings.

        Raises
        ------
        ValueError
            If the data does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        state = cls()
        for feed_key, item_keys in data.items():
            if not isinstance(item_keys, list):
                raise ValueError(f"entry for feed {feed_key!r} is not a list")
            state.ensure_feed(feed_key)
            for item_key in item_keys:
                if not isinstance(item_key, str):
                    raise ValueError(
                        f"entry for feed {feed_key!r} contains a non-string value"
                    )
                state.add_item(feed_key, item_key)
        return state


class StateStore:
    """
    File-backed store for ``ProcessedState``.

    The whole state is read once and written once per pass.
    """

    def __init__(self, state_path: str | Path):
        """
        Initialize storage with the state file path.

        Parameters
        ----------
        state_path : str | Path
            Path to the JSON state file.
        """
        self.state_path = Path(state_path)

    def load(self) -> ProcessedState:
        """
        Load the processed state.

        Returns
        -------
        ProcessedState
            The persisted state, or an empty state if no file exists.

        Raises
        ------
        StateLoadError
            If the file exists but cannot be read or decoded.
        """
        if not self.state_path.exists():
            logger.info("No processed state at %s, starting empty", self.state_path)
            return ProcessedState()

        try:
            raw = self.state_path.read_text(encoding="utf-8")
            state = ProcessedState.from_dict(json.loads(raw))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            raise StateLoadError(
                f"Unable to load processed state from {self.state_path}: {e}"
            ) from e

        logger.info(
            "Loaded processed state: %d feed(s), %d item(s)",
            len(state),
            state.seen_count(),
        )
        return state

    def save(self, state: ProcessedState) -> None:
        """
        Persist the processed state.

        Writes to a temporary file next to the target and renames it
        into place, creating the parent directory if needed.

        Raises
        ------
        StateSaveError
            If the state could not be written.
        """
        tmp_path: str | None = None
        try:
            self.state_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.state_path.parent,
                prefix=f".{self.state_path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f)
            os.replace(tmp_path, self.state_path)
            tmp_path = None
        except OSError as e:
            raise StateSaveError(
                f"Unable to save processed state to {self.state_path}: {e}"
            ) from e
        finally:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)

        logger.debug("Saved processed state to %s", self.state_path)
