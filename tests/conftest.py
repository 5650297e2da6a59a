"""
Shared fixtures for RSS Delta tests.

Provides common test fixtures for use across all test modules.
"""

from pathlib import Path
from typing import Any

import pytest

from rss_delta.config import AppConfig, SourcesConfig, StorageConfig
from rss_delta.rss_parser import Feed, FeedItem
from rss_delta.storage import ProcessedState, StateStore


# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample config file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def sample_rss_content(fixtures_dir: Path) -> str:
    """Return contents of sample RSS feed with four items."""
    return (fixtures_dir / "sample_rss.xml").read_text()


@pytest.fixture
def single_item_rss_content(fixtures_dir: Path) -> str:
    """Return contents of an RSS feed with exactly one item."""
    return (fixtures_dir / "single_item_rss.xml").read_text()


@pytest.fixture
def sample_atom_content(fixtures_dir: Path) -> str:
    """Return contents of sample Atom feed."""
    return (fixtures_dir / "sample_atom.xml").read_text()


@pytest.fixture
def extensions_rss_content(fixtures_dir: Path) -> str:
    """Return contents of an RSS feed using namespaced extension elements."""
    return (fixtures_dir / "extensions_rss.xml").read_text()


@pytest.fixture
def sample_rdf_content(fixtures_dir: Path) -> str:
    """Return contents of an RSS 1.0 (RDF) feed."""
    return (fixtures_dir / "sample_rdf.xml").read_text()


@pytest.fixture
def sample_feed() -> Feed:
    """
    Create a feed with two items.

    Returns
    -------
    Feed
        Channel "Feed F" with items A and B.
    """
    return Feed(
        title="Feed F",
        description="Scenario feed",
        link="https://example.com/f",
        items=[
            FeedItem(title="A", link="u1"),
            FeedItem(title="B", link="u2"),
        ],
    )


@pytest.fixture
def empty_state() -> ProcessedState:
    """Create an empty processed state."""
    return ProcessedState()


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Return a state file path inside a directory that does not exist yet."""
    return tmp_path / "output" / "processed.json"


@pytest.fixture
def state_store(state_path: Path) -> StateStore:
    """Create a state store backed by a temporary file."""
    return StateStore(state_path)


@pytest.fixture
def feeds_file(tmp_path: Path) -> Path:
    """
    Create a feed list with two HTTPS URLs.

    Returns
    -------
    Path
        Path to the feed list.
    """
    path = tmp_path / "feeds.txt"
    path.write_text(
        "https://example.com/one.xml\n"
        "https://example.com/two.xml\n"
    )
    return path


@pytest.fixture
def app_config(feeds_file: Path, state_path: Path) -> AppConfig:
    """Create an app configuration pointing at temporary files."""
    return AppConfig(
        sources=SourcesConfig(feeds_file=str(feeds_file)),
        storage=StorageConfig(state_path=str(state_path)),
    )


@pytest.fixture
def minimal_config_dict() -> dict[str, Any]:
    """
    Create a minimal valid configuration dictionary.

    Returns
    -------
    dict
        Configuration dictionary that can be used to create AppConfig.
    """
    return {
        "sources": {"feeds_file": "feeds.txt"},
        "storage": {"state_path": "output/processed.json"},
    }


def rss_document(title: str, link: str, items: list[tuple[str, str]]) -> str:
    """Build a small RSS 2.0 document from (title, link) item pairs."""
    item_xml = "".join(
        f"<item><title>{item_title}</title><link>{item_link}</link></item>"
        for item_title, item_link in items
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"<title>{title}</title><link>{link}</link>"
        "<description>Generated</description>"
        f"{item_xml}</channel></rss>"
    )


@pytest.fixture
def make_rss():
    """Return the RSS document builder."""
    return rss_document
