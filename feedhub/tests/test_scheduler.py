"""
Tests for the refresh scheduler and background task runner.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from feedhub.exceptions import FetchError
from feedhub.scheduler import RefreshScheduler
from feedhub.tasks import TaskRunner
from feedhub.tests.conftest import make_entries, make_feed


@pytest.fixture
def scheduler(engine, test_db, runner):
    return RefreshScheduler(
        engine=engine,
        db=test_db,
        runner=runner,
        interval_minutes=15,
        retention_days=30,
        initial_delay=0,
    )


class TestSweep:

    @pytest.mark.asyncio
    async def test_one_refresh_per_feed(self, scheduler, stub_parser, test_db, runner):
        urls = [f"https://site{n}.example.com/rss" for n in range(3)]
        for url in urls:
            test_db.add_feed(url, url)
            stub_parser.set(url, make_feed(url=url, entries=make_entries(2)))

        tasks = scheduler.sweep()
        await runner.wait_idle()

        assert len(tasks) == 3
        assert sorted(stub_parser.calls) == sorted(urls)
        assert test_db.get_stats().total_articles == 6

    @pytest.mark.asyncio
    async def test_failing_feed_does_not_affect_others(self, scheduler, stub_parser, test_db, runner):
        good = test_db.add_feed("https://good.example.com/rss", "Good")
        bad = test_db.add_feed("https://bad.example.com/rss", "Bad")
        stub_parser.set("https://good.example.com/rss", make_feed(entries=make_entries(2)))
        stub_parser.set("https://bad.example.com/rss", FetchError("down"))

        tasks = scheduler.sweep()
        await runner.wait_idle()

        assert test_db.articles.count_for_feed(good) == 2
        assert test_db.get_feed(bad).error_count == 1
        assert sum(1 for t in tasks if t.exception() is not None) == 1

    @pytest.mark.asyncio
    async def test_no_feeds(self, scheduler):
        assert scheduler.sweep() == []


class TestCleanup:

    def _old_read_article(self, test_db, feed_id, url, saved=False):
        article_id = test_db.add_article(
            feed_id=feed_id, url=url, title=url, content="", author="",
            published_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        old = (datetime.now(timezone.utc) - timedelta(days=45)).isoformat()
        with test_db._connection.conn() as conn:
            conn.execute("UPDATE articles SET created_at = ? WHERE id = ?", (old, article_id))
        test_db.articles.mark_read(article_id, True)
        if saved:
            test_db.articles.mark_saved(article_id, True)
        return article_id

    def test_removes_old_read_unsaved(self, scheduler, test_db):
        feed_id = test_db.add_feed("https://example.com/rss", "Feed")
        stale = self._old_read_article(test_db, feed_id, "https://example.com/stale")
        kept_saved = self._old_read_article(test_db, feed_id, "https://example.com/saved", saved=True)
        fresh = test_db.add_article(
            feed_id=feed_id, url="https://example.com/fresh", title="fresh", content="",
            author="", published_at=datetime.now(timezone.utc),
        )
        test_db.articles.mark_read(fresh, True)

        removed = scheduler.cleanup_if_due()

        assert removed == 1
        assert test_db.get_article(stale) is None
        assert test_db.get_article(kept_saved) is not None
        assert test_db.get_article(fresh) is not None

    def test_runs_once_per_interval(self, scheduler, test_db):
        assert scheduler.cleanup_if_due() == 0
        assert scheduler.cleanup_if_due() is None


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_start_stop(self, scheduler):
        assert not scheduler.running
        await scheduler.start()
        assert scheduler.running
        await scheduler.stop()
        assert not scheduler.running

    @pytest.mark.asyncio
    async def test_loop_runs_sweep(self, scheduler, stub_parser, test_db, runner):
        test_db.add_feed("https://example.com/rss", "Feed")
        stub_parser.set("https://example.com/rss", make_feed(entries=make_entries(1)))

        await scheduler.start()
        for _ in range(50):
            await asyncio.sleep(0.01)
            if stub_parser.calls:
                break
        await scheduler.stop()
        await runner.wait_idle()

        assert stub_parser.calls == ["https://example.com/rss"]


class TestTaskRunner:

    @pytest.mark.asyncio
    async def test_wait_idle_includes_tasks_submitted_meanwhile(self):
        runner = TaskRunner()
        done = []

        async def child():
            done.append("child")

        async def parent():
            runner.submit(child())
            done.append("parent")

        runner.submit(parent())
        await runner.wait_idle()

        assert done == ["parent", "child"]
        assert runner.pending == 0

    @pytest.mark.asyncio
    async def test_failed_task_is_logged_not_raised(self, caplog):
        runner = TaskRunner()

        async def boom():
            raise RuntimeError("kaboom")

        task = runner.submit(boom(), name="boom-task")
        await runner.wait_idle()

        assert isinstance(task.exception(), RuntimeError)
        assert "boom-task" in caplog.text

    @pytest.mark.asyncio
    async def test_shutdown_cancels_outstanding(self):
        runner = TaskRunner()
        task = runner.submit(asyncio.sleep(60))

        await runner.shutdown()

        assert task.cancelled()
        assert runner.pending == 0
