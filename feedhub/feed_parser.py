"""
Feed Parser - Fetch and parse RSS/Atom feeds.

Handles:
- RSS 2.0 and Atom 1.0 formats (via feedparser)
- Entry normalization (content vs. summary, author, publish time)
- Network and parse errors, reported uniformly as FetchError
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone

import aiohttp
import feedparser

from .exceptions import FetchError


@dataclass
class FeedEntry:
    """A single normalized item/entry from a feed."""
    title: str
    link: str
    content: str = ""
    summary: str = ""
    author: str | None = None
    published: datetime | None = None


@dataclass
class ParsedFeed:
    """Feed-level metadata plus entries in document order."""
    url: str
    title: str
    description: str | None
    entries: list[FeedEntry] = field(default_factory=list)


def _struct_to_datetime(value) -> datetime | None:
    """Convert a feedparser time.struct_time (always UTC) to an aware datetime."""
    if not value:
        return None
    try:
        return datetime(*value[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def _entry_link(entry) -> str:
    link = entry.get("link", "")
    if not link and hasattr(entry, "links"):
        for candidate in entry.links:
            if candidate.get("rel") == "alternate" or candidate.get("type") == "text/html":
                link = candidate.get("href", "")
                break
    return link.strip()


def _entry_author(entry) -> str | None:
    detail = entry.get("author_detail")
    if detail and detail.get("name"):
        return detail["name"]
    return entry.get("author") or None


class FeedParser:
    """Downloads feed documents and normalizes them into ParsedFeed objects."""

    def __init__(self, timeout: float = 30, user_agent: str | None = None):
        self.timeout = timeout
        self.user_agent = user_agent or "FeedHub/1.0 (+https://github.com/feedhub)"

    async def fetch(self, url: str) -> ParsedFeed:
        """Fetch and parse a feed URL. Raises FetchError on any failure."""
        headers = {"User-Agent": self.user_agent}

        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as resp:
                    resp.raise_for_status()
                    content = await resp.read()
        except aiohttp.ClientResponseError as e:
            raise FetchError(f"{url} returned status {e.status}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(f"could not fetch {url}: {e or type(e).__name__}") from e

        return self._parse(url, content)

    def _parse(self, url: str, content: bytes | str) -> ParsedFeed:
        """Parse feed content using feedparser."""
        parsed = feedparser.parse(content)

        if parsed.bozo and not parsed.entries:
            raise FetchError(f"failed to parse feed: {parsed.bozo_exception}")
        if not parsed.version and not parsed.entries:
            raise FetchError("failed to parse feed: document is not RSS or Atom")

        entries = []
        for entry in parsed.entries:
            content_text = ""
            if entry.get("content"):
                content_text = entry.content[0].get("value", "")

            published = _struct_to_datetime(entry.get("published_parsed"))
            if published is None:
                published = _struct_to_datetime(entry.get("updated_parsed"))

            entries.append(FeedEntry(
                title=entry.get("title", "Untitled"),
                link=_entry_link(entry),
                content=content_text,
                summary=entry.get("summary", "") or entry.get("description", ""),
                author=_entry_author(entry),
                published=published,
            ))

        feed_title = parsed.feed.get("title") or "Unknown Feed"
        feed_description = parsed.feed.get("description") or parsed.feed.get("subtitle")

        return ParsedFeed(
            url=url,
            title=feed_title,
            description=feed_description,
            entries=entries,
        )


def parse_feed_sync(content: str, url: str = "") -> ParsedFeed:
    """
    Synchronous feed parsing (for use when content is already fetched).

    Useful for testing or when you already have the feed content.
    """
    parser = FeedParser()
    return parser._parse(url, content)
