"""
Error taxonomy shared by the ingestion core and the HTTP layer.

Every error carries the HTTP status it maps to, so routes can let them
propagate and the app-level handler renders them as ``{"detail": ...}``.
"""

from typing import TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse

T = TypeVar("T")


class FeedHubError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    headers: dict[str, str] | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FeedHubError):
    """Bad input; no I/O was attempted."""

    status_code = 400


class ResolutionError(FeedHubError):
    """A subscription URL could not be mapped to a feed endpoint."""

    status_code = 400


class FetchError(FeedHubError):
    """The feed document could not be downloaded or parsed."""

    status_code = 400


class DuplicateFeedError(FeedHubError):
    """A feed with the same URL is already registered."""

    status_code = 409


class NotFoundError(FeedHubError):

    status_code = 404


class AuthenticationError(FeedHubError):
    """Missing or wrong API key."""

    status_code = 401
    headers = {"WWW-Authenticate": "ApiKey"}


class ServiceUnavailableError(FeedHubError):
    """A required component was not initialized."""

    status_code = 500


async def feedhub_error_handler(request: Request, exc: FeedHubError) -> JSONResponse:
    """Render a FeedHubError as a JSON error response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=exc.headers,
    )


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise NotFoundError if resource is None, otherwise return the resource.

    Usage:
        article = require_resource(db.get_article(id), "Article not found")
    """
    if resource is None:
        raise NotFoundError(detail)
    return resource


def require_article(article: T | None) -> T:
    """Raise NotFoundError if article is None."""
    return require_resource(article, "Article not found")


def require_feed(feed: T | None) -> T:
    """Raise NotFoundError if feed is None."""
    return require_resource(feed, "Feed not found")


def require_folder(folder: T | None) -> T:
    """Raise NotFoundError if folder is None."""
    return require_resource(folder, "Folder not found")
