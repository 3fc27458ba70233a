"""
URL Resolver - map a user-supplied subscription URL to a fetchable feed URL.

Most URLs are returned unchanged. YouTube channel, custom-name, user and
handle pages are mapped to the channel's videos.xml feed; when the channel
ID is not part of the URL it is scraped from the channel page.
"""

import asyncio
import logging
import re
from typing import Awaitable, Callable
from urllib.parse import urlparse

import aiohttp
from bs4 import BeautifulSoup

from .exceptions import ResolutionError

logger = logging.getLogger(__name__)

PageFetcher = Callable[[str], Awaitable[tuple[int, str]]]

YOUTUBE_FEED_URL = "https://www.youtube.com/feeds/videos.xml?channel_id={channel_id}"

FEED_MARKERS = ("rss", "atom", "feed")

CHANNEL_ID_RE = re.compile(r"^UC[A-Za-z0-9_-]{22}$")

# Channel ID embedded directly in the URL
_CHANNEL_PATH_RE = re.compile(r"youtube\.com/channel/([A-Za-z0-9_-]+)")

# URL shapes that need the channel page to find the ID
_PROFILE_PATH_RES = [
    (re.compile(r"youtube\.com/c/([A-Za-z0-9_-]+)"), "https://www.youtube.com/c/{}"),
    (re.compile(r"youtube\.com/user/([A-Za-z0-9_-]+)"), "https://www.youtube.com/user/{}"),
    (re.compile(r"youtube\.com/@([A-Za-z0-9_.-]+)"), "https://www.youtube.com/@{}"),
]

# Searched in order over the raw page body
_PAGE_ID_RES = [
    re.compile(r'"channelId":"([A-Za-z0-9_-]+)"'),
    re.compile(r'<meta property="og:url" content="https://www\.youtube\.com/channel/([A-Za-z0-9_-]+)">'),
    re.compile(r"channel/([A-Za-z0-9_-]+)"),
]


async def fetch_page(url: str, timeout: int = 10, user_agent: str | None = None) -> tuple[int, str]:
    """GET a page and return (status, body)."""
    headers = {"User-Agent": user_agent or "Mozilla/5.0 (compatible; FeedHub/1.0)"}
    async with aiohttp.ClientSession() as session:
        async with session.get(
            url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=timeout)
        ) as resp:
            body = await resp.text(errors="replace")
            return resp.status, body


def looks_like_feed_url(url: str) -> bool:
    lowered = url.lower()
    return any(marker in lowered for marker in FEED_MARKERS)


def is_youtube_url(url: str) -> bool:
    host = urlparse(url if "://" in url else f"https://{url}").netloc.lower()
    return host == "youtu.be" or host == "youtube.com" or host.endswith(".youtube.com")


def extract_channel_id(html: str) -> str | None:
    """
    Find a YouTube channel ID in a channel page.

    Structured tags are checked first, then raw-text patterns. Candidates
    that don't have the UC + 22 character shape are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    candidates: list[str] = []

    if meta := soup.find("meta", itemprop="channelId"):
        candidates.append(meta.get("content", ""))
    for tag in (soup.find("meta", property="og:url"), soup.find("link", rel="canonical")):
        if tag is None:
            continue
        href = tag.get("content") or tag.get("href") or ""
        if match := _CHANNEL_PATH_RE.search(href):
            candidates.append(match.group(1))

    for pattern in _PAGE_ID_RES:
        candidates.extend(pattern.findall(html))

    for candidate in candidates:
        if CHANNEL_ID_RE.match(candidate):
            return candidate
    return None


class URLResolver:
    """Resolves subscription URLs to canonical feed URLs."""

    def __init__(
        self,
        page_fetcher: PageFetcher | None = None,
        timeout: int = 10,
        user_agent: str | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._fetch_page = page_fetcher or self._default_fetch

    async def _default_fetch(self, url: str) -> tuple[int, str]:
        return await fetch_page(url, timeout=self.timeout, user_agent=self.user_agent)

    async def resolve(self, url: str) -> str:
        """Return the canonical feed URL for `url`. Raises ResolutionError."""
        if looks_like_feed_url(url):
            return url

        if is_youtube_url(url):
            return await self._resolve_youtube(url)

        # Assume it already is a feed; the fetch step fails loudly if not
        return url

    async def _resolve_youtube(self, url: str) -> str:
        if match := _CHANNEL_PATH_RE.search(url):
            return YOUTUBE_FEED_URL.format(channel_id=match.group(1))

        for pattern, page_template in _PROFILE_PATH_RES:
            if match := pattern.search(url):
                channel_id = await self._channel_id_from_page(page_template.format(match.group(1)))
                return YOUTUBE_FEED_URL.format(channel_id=channel_id)

        raise ResolutionError(f"unsupported YouTube URL format: {url}")

    async def _channel_id_from_page(self, page_url: str) -> str:
        try:
            status, body = await self._fetch_page(page_url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ResolutionError(f"failed to fetch channel page: {e or type(e).__name__}") from e

        if status != 200:
            raise ResolutionError(f"channel page returned status {status}")

        channel_id = extract_channel_id(body)
        if channel_id is None:
            raise ResolutionError(f"could not find channel ID for {page_url}")

        logger.debug(f"Resolved {page_url} to channel {channel_id}")
        return channel_id
