from __future__ import annotations

import re
from urllib.parse import quote_plus, urlparse, urlsplit, urlunsplit

from episode_guide.errors import LinkError
from episode_guide.utils.config import AppConfig
from .types import ALL_SEASONS, SearchResult, Season

_SUMMARY_SUFFIX = re.compile(r"summary[.]html[?].*")


def episode_guide_location(href: str) -> str:
    """Turn a search hit href into the absolute URL of the series' episode guide.

    Search hits point at ``.../summary.html?...``; the guide lives at
    ``.../episode.html`` next to it. Raises LinkError for anything that is
    not an absolute http(s) URL.
    """
    raw = (href or "").strip()
    if not raw:
        raise LinkError("Empty href", href=href)

    location = _SUMMARY_SUFFIX.sub("episode.html", raw)
    try:
        parsed = urlparse(location)
    except ValueError as e:
        raise LinkError(f"Invalid href: {href}", href=href) from e
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise LinkError(f"Invalid href: {href}", href=href)
    return location


class LinkBuilder:
    """Pure string templating of catalog URLs."""

    def __init__(self, cfg: AppConfig | None = None):
        self.cfg = cfg or AppConfig()

    def search_link(self, query: str) -> str:
        return (
            f"{self.cfg.base_url}/search.php?type=Search&stype=ajax_search"
            f"&search_type=program&qs={quote_plus(query)}"
        )

    def build_link(self, search_result: SearchResult, season: Season = ALL_SEASONS) -> str:
        if season == ALL_SEASONS:
            token = self.cfg.all_seasons_token
        elif isinstance(season, int) and not isinstance(season, bool) and season > 0:
            token = str(season)
        else:
            raise LinkError(f"Season must be a positive integer or ALL_SEASONS: {season!r}")

        base = search_result.url
        if not base:
            raise LinkError(f"Search result has no locator: {search_result.name}")
        parts = urlsplit(base)
        param = f"{self.cfg.season_param}={token}"
        query = f"{parts.query}&{param}" if parts.query else param
        return urlunsplit(parts._replace(query=query))
