from __future__ import annotations


class EpisodeGuideError(Exception):
    """Base class for every error raised by episode_guide."""


class LinkError(EpisodeGuideError, ValueError):
    """A catalog entry locator could not be turned into a valid URL."""

    def __init__(self, message: str, href: str | None = None):
        super().__init__(message)
        self.href = href


class FetchError(EpisodeGuideError):
    """Retrieving or parsing a remote document failed.

    ``season`` is set when the failure happened inside a scheduled
    per-season task.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        season: int | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.season = season


class ParseError(EpisodeGuideError, ValueError):
    """Required structure could not be read from a document."""
