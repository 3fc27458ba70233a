"""
Tests for feed fetching and parsing.
"""

import asyncio
import socket
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import pytest
from aiohttp import web
from aiohttp import test_utils

from feedhub.exceptions import FetchError
from feedhub.feed_parser import FeedParser, parse_feed_sync

RSS_SAMPLE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example Blog</title>
    <link>https://example.com/</link>
    <description>Posts about examples</description>
    <item>
      <title>First post</title>
      <link>https://example.com/first</link>
      <description>Short summary</description>
      <author>writer@example.com (Jane Writer)</author>
      <pubDate>Mon, 05 Jan 2026 10:30:00 GMT</pubDate>
    </item>
    <item>
      <title>Undated post</title>
      <link>https://example.com/second</link>
    </item>
  </channel>
</rss>
"""

ATOM_SAMPLE = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <subtitle>An Atom feed</subtitle>
  <id>urn:uuid:feed</id>
  <updated>2026-02-01T00:00:00Z</updated>
  <entry>
    <title>Atom entry</title>
    <link rel="alternate" href="https://example.org/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <updated>2026-02-01T08:00:00Z</updated>
    <author><name>Sam Author</name></author>
    <summary>Entry summary</summary>
    <content type="html">&lt;p&gt;Full entry body&lt;/p&gt;</content>
  </entry>
</feed>
"""


class TestParseRSS:

    def test_feed_metadata(self):
        parsed = parse_feed_sync(RSS_SAMPLE, url="https://example.com/rss")

        assert parsed.url == "https://example.com/rss"
        assert parsed.title == "Example Blog"
        assert parsed.description == "Posts about examples"
        assert len(parsed.entries) == 2

    def test_entries_in_document_order(self):
        parsed = parse_feed_sync(RSS_SAMPLE)

        first, second = parsed.entries
        assert first.title == "First post"
        assert first.link == "https://example.com/first"
        assert first.summary == "Short summary"
        assert first.published == datetime(2026, 1, 5, 10, 30, tzinfo=timezone.utc)
        assert second.link == "https://example.com/second"

    def test_missing_fields_are_empty(self):
        parsed = parse_feed_sync(RSS_SAMPLE)
        undated = parsed.entries[1]

        assert undated.published is None
        assert undated.content == ""
        assert undated.author is None


class TestParseAtom:

    def test_feed_metadata_uses_subtitle(self):
        parsed = parse_feed_sync(ATOM_SAMPLE)

        assert parsed.title == "Atom Example"
        assert parsed.description == "An Atom feed"

    def test_entry_fields(self):
        entry = parse_feed_sync(ATOM_SAMPLE).entries[0]

        assert entry.title == "Atom entry"
        assert entry.link == "https://example.org/entry-1"
        assert entry.author == "Sam Author"
        assert "Full entry body" in entry.content
        assert entry.summary == "Entry summary"
        # No <published>, so the updated timestamp is used
        assert entry.published == datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)


class TestParseFailures:

    def test_not_a_feed(self):
        with pytest.raises(FetchError, match="failed to parse feed"):
            parse_feed_sync("<html><body><p>Just a web page</p></body></html>")

    def test_garbage(self):
        with pytest.raises(FetchError):
            parse_feed_sync("this is not xml at all {")

    def test_empty_but_valid_feed(self):
        """A well-formed feed with no items is not an error."""
        doc = '<?xml version="1.0"?><rss version="2.0"><channel><title>Quiet</title></channel></rss>'
        parsed = parse_feed_sync(doc)
        assert parsed.title == "Quiet"
        assert parsed.entries == []


@asynccontextmanager
async def serve(routes: dict):
    """Run a local aiohttp app serving GET handlers keyed by path."""
    app = web.Application()
    for path, handler in routes.items():
        app.router.add_get(path, handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


def _free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestFetch:
    """Tests for FeedParser.fetch against a local HTTP server."""

    @pytest.mark.asyncio
    async def test_fetch_success(self):
        async def rss(request):
            return web.Response(text=RSS_SAMPLE, content_type="application/rss+xml")

        async with serve({"/rss": rss}) as server:
            url = str(server.make_url("/rss"))
            parsed = await FeedParser(timeout=5).fetch(url)

        assert parsed.url == url
        assert parsed.title == "Example Blog"
        assert len(parsed.entries) == 2

    @pytest.mark.asyncio
    async def test_sends_user_agent(self):
        seen = {}

        async def rss(request):
            seen["ua"] = request.headers.get("User-Agent")
            return web.Response(text=RSS_SAMPLE)

        async with serve({"/rss": rss}) as server:
            await FeedParser(timeout=5, user_agent="TestAgent/2.0").fetch(str(server.make_url("/rss")))

        assert seen["ua"] == "TestAgent/2.0"

    @pytest.mark.asyncio
    async def test_server_error_status(self):
        async def broken(request):
            return web.Response(status=500, text="oops")

        async with serve({"/rss": broken}) as server:
            with pytest.raises(FetchError, match="returned status 500"):
                await FeedParser(timeout=5).fetch(str(server.make_url("/rss")))

    @pytest.mark.asyncio
    async def test_not_found_status(self):
        async with serve({}) as server:
            with pytest.raises(FetchError, match="returned status 404"):
                await FeedParser(timeout=5).fetch(str(server.make_url("/missing")))

    @pytest.mark.asyncio
    async def test_html_page_is_not_a_feed(self):
        async def page(request):
            return web.Response(text="<html><body>hello</body></html>", content_type="text/html")

        async with serve({"/": page}) as server:
            with pytest.raises(FetchError, match="failed to parse feed"):
                await FeedParser(timeout=5).fetch(str(server.make_url("/")))

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        url = f"http://127.0.0.1:{_free_port()}/rss"
        with pytest.raises(FetchError, match="could not fetch"):
            await FeedParser(timeout=5).fetch(url)

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        with pytest.raises(FetchError):
            await FeedParser(timeout=5).fetch("notaurl")

    @pytest.mark.asyncio
    async def test_timeout(self):
        """A slow server is reported as a fetch failure once the timeout expires."""
        release = asyncio.Event()

        async def slow(request):
            await release.wait()
            return web.Response(text=RSS_SAMPLE)

        async with serve({"/rss": slow}) as server:
            parser = FeedParser(timeout=0.2)
            try:
                with pytest.raises(FetchError, match="could not fetch"):
                    await parser.fetch(str(server.make_url("/rss")))
            finally:
                release.set()
