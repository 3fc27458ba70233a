"""
Pytest fixtures for feedhub tests.
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from feedhub.config import config, state
from feedhub.database import Database
from feedhub.exceptions import FetchError
from feedhub.feed_parser import FeedEntry, ParsedFeed
from feedhub.ingestion import IngestionEngine
from feedhub.server import app
from feedhub.tasks import TaskRunner
from feedhub.url_resolver import URLResolver

FEED_URL = "https://example.com/feed.xml"


def make_entries(count: int, start: int = 1) -> list[FeedEntry]:
    """Build `count` distinct entries with links /post-<n>."""
    return [
        FeedEntry(
            title=f"Post {n}",
            link=f"https://example.com/post-{n}",
            content=f"<p>Body of post {n}</p>",
            summary=f"Summary {n}",
            author=f"Author {n}",
            published=datetime(2026, 1, n % 28 + 1, 12, 0, tzinfo=timezone.utc),
        )
        for n in range(start, start + count)
    ]


def make_feed(url: str = FEED_URL, entries: list[FeedEntry] | None = None,
              title: str = "Example Feed") -> ParsedFeed:
    return ParsedFeed(
        url=url,
        title=title,
        description="An example feed",
        entries=entries if entries is not None else [],
    )


class StubFeedParser:
    """
    Stands in for FeedParser without touching the network.

    Each URL maps to a ParsedFeed or an exception; unknown URLs fail the
    way an unreachable host would.
    """

    def __init__(self):
        self.documents: dict[str, ParsedFeed | Exception] = {}
        self.calls: list[str] = []

    def set(self, url: str, document: ParsedFeed | Exception):
        self.documents[url] = document

    async def fetch(self, url: str) -> ParsedFeed:
        self.calls.append(url)
        document = self.documents.get(url)
        if document is None:
            raise FetchError(f"could not fetch {url}: connection refused")
        if isinstance(document, Exception):
            raise document
        return document


class StubPageFetcher:
    """Returns canned (status, body) pages for the URL resolver."""

    def __init__(self):
        self.pages: dict[str, tuple[int, str] | Exception] = {}
        self.calls: list[str] = []

    async def __call__(self, url: str) -> tuple[int, str]:
        self.calls.append(url)
        page = self.pages.get(url, (404, "not found"))
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    return Database(temp_db_path)


@pytest.fixture
def stub_parser():
    return StubFeedParser()


@pytest.fixture
def stub_pages():
    return StubPageFetcher()


@pytest.fixture
def runner():
    return TaskRunner()


@pytest.fixture
def engine(test_db, stub_parser, stub_pages, runner):
    """Ingestion engine wired to the temp database and network stubs."""
    return IngestionEngine(
        db=test_db,
        feed_parser=stub_parser,
        resolver=URLResolver(page_fetcher=stub_pages),
        runner=runner,
    )


def _install_state(db, parser, resolver, runner, engine):
    original = (state.db, state.feed_parser, state.resolver, state.runner,
                state.engine, state.scheduler)
    state.db = db
    state.feed_parser = parser
    state.resolver = resolver
    state.runner = runner
    state.engine = engine
    state.scheduler = None
    return original


def _restore_state(original):
    (state.db, state.feed_parser, state.resolver, state.runner,
     state.engine, state.scheduler) = original


@pytest.fixture
def client(test_db, stub_parser, engine, runner, monkeypatch):
    """Test client with isolated database and stubbed network."""
    monkeypatch.setattr(config, "ENABLE_SCHEDULER", False)
    monkeypatch.setattr(config, "AUTH_API_KEY", "")
    original = _install_state(test_db, stub_parser, engine.resolver, runner, engine)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    _restore_state(original)


@pytest.fixture
def client_with_data(client, test_db):
    """Test client with one feed and two articles, one of them read."""
    feed_id = test_db.add_feed(FEED_URL, "Test Feed", "Sample data")

    article1_id = test_db.add_article(
        feed_id=feed_id,
        url="https://example.com/article1",
        title="Test Article 1",
        content="This is the content of test article 1.",
        author="Alice",
        published_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    article2_id = test_db.add_article(
        feed_id=feed_id,
        url="https://example.com/article2",
        title="Test Article 2",
        content="This is the content of test article 2.",
        author="Bob",
        published_at=datetime(2026, 1, 2, tzinfo=timezone.utc),
    )
    test_db.articles.mark_read(article1_id, True)

    return client, {
        "feed_id": feed_id,
        "article_ids": [article1_id, article2_id],
    }
