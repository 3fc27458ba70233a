"""
Tests for the repositories behind the Database facade.
"""

import sqlite3
from datetime import datetime, timezone

import pytest

from feedhub.database import FeedHealth

PUBLISHED = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


class TestFeedHealth:

    @pytest.mark.parametrize("count,expected", [
        (0, FeedHealth.HEALTHY),
        (1, FeedHealth.WARNING),
        (2, FeedHealth.WARNING),
        (3, FeedHealth.ERROR),
        (10, FeedHealth.ERROR),
    ])
    def test_from_error_count(self, count, expected):
        assert FeedHealth.from_error_count(count) == expected


class TestFeedRepository:

    def test_new_feed_defaults(self, test_db):
        feed = test_db.get_feed(test_db.add_feed("https://example.com/rss", "Feed"))

        assert feed.health == FeedHealth.HEALTHY
        assert feed.error_count == 0
        assert feed.last_fetch is None
        assert feed.folder_id is None
        assert feed.created_at.tzinfo is not None

    def test_url_is_unique(self, test_db):
        test_db.add_feed("https://example.com/rss", "Feed")
        with pytest.raises(sqlite3.IntegrityError):
            test_db.add_feed("https://example.com/rss", "Again")

    def test_health_update_round_trip(self, test_db):
        feed_id = test_db.add_feed("https://example.com/rss", "Feed")
        fetched_at = datetime(2026, 3, 2, 8, 30, tzinfo=timezone.utc)

        test_db.update_feed_health(
            feed_id, title="Renamed", description=None,
            health=FeedHealth.WARNING, error_count=2, last_fetch=fetched_at,
        )

        feed = test_db.get_feed(feed_id)
        assert feed.title == "Renamed"
        assert feed.health == FeedHealth.WARNING
        assert feed.error_count == 2
        assert feed.last_fetch == fetched_at

    def test_get_in_folder(self, test_db):
        folder_id = test_db.folders.add("News")
        inside = test_db.add_feed("https://a.example.com/rss", "A", folder_id=folder_id)
        outside = test_db.add_feed("https://b.example.com/rss", "B")

        assert [f.id for f in test_db.feeds.get_in_folder(folder_id)] == [inside]
        assert [f.id for f in test_db.feeds.get_in_folder(None)] == [outside]

    def test_move_to_folder(self, test_db):
        folder_id = test_db.folders.add("News")
        ids = [test_db.add_feed(f"https://{n}.example.com/rss", n) for n in ("a", "b")]

        assert test_db.feeds.move_to_folder(ids, folder_id) == 2
        assert all(test_db.get_feed(i).folder_id == folder_id for i in ids)

    def test_delete_missing_feed(self, test_db):
        assert test_db.delete_feed(12345) is False


class TestArticleRepository:

    @pytest.fixture
    def feed_id(self, test_db):
        return test_db.add_feed("https://example.com/rss", "Feed")

    def _add(self, test_db, feed_id, url="https://example.com/a", title="A"):
        return test_db.add_article(
            feed_id=feed_id, url=url, title=title, content="body",
            author="", published_at=PUBLISHED,
        )

    def test_insert_if_absent(self, test_db, feed_id):
        first = self._add(test_db, feed_id)
        second = self._add(test_db, feed_id, title="Different title")

        assert first is not None
        assert second is None
        assert test_db.get_article(first).title == "A"
        assert test_db.article_exists(feed_id, "https://example.com/a")
        assert not test_db.article_exists(feed_id, "https://example.com/b")

    def test_new_article_flags(self, test_db, feed_id):
        article = test_db.get_article(self._add(test_db, feed_id))
        assert article.read is False
        assert article.saved is False
        assert article.published_at == PUBLISHED

    def test_mark_missing_article(self, test_db):
        assert test_db.articles.mark_read(999, True) is False
        assert test_db.articles.mark_saved(999, True) is False

    def test_mark_all_read_scoped_to_feed(self, test_db, feed_id):
        other = test_db.add_feed("https://other.example.com/rss", "Other")
        self._add(test_db, feed_id)
        self._add(test_db, other)

        assert test_db.articles.mark_all_read(feed_id) == 1
        assert test_db.get_stats().unread_articles == 1

    def test_search_pagination(self, test_db, feed_id):
        for n in range(3):
            self._add(test_db, feed_id, url=f"https://example.com/{n}", title=f"Python {n}")

        assert len(test_db.search("python", limit=2)) == 2
        assert len(test_db.search("python", limit=2, offset=2)) == 1


class TestFolderRepository:

    def test_find_sibling_scoped_to_parent(self, test_db):
        parent = test_db.folders.add("Parent")
        child = test_db.folders.add("Misc", parent)

        assert test_db.folders.find_sibling("Misc", parent).id == child
        assert test_db.folders.find_sibling("Misc", None) is None
        assert test_db.folders.find_sibling("Misc", parent, exclude_id=child) is None

    def test_count_children(self, test_db):
        parent = test_db.folders.add("Parent")
        test_db.folders.add("Child", parent)
        test_db.add_feed("https://example.com/rss", "Feed", folder_id=parent)

        assert test_db.folders.count_children(parent) == (1, 1)

    def test_delete_cascades_subfolders(self, test_db):
        parent = test_db.folders.add("Parent")
        child = test_db.folders.add("Child", parent)

        assert test_db.folders.delete(parent) is True
        assert test_db.get_folder(child) is None
