"""
Shared test fixtures for episode_guide tests.

Providers get an in-memory DocumentFetcher, so no test ever touches the network.
"""
import threading

import pytest

from episode_guide.errors import FetchError
from episode_guide.scraper.document import parse_html
from episode_guide.scraper.types import SearchResult
from episode_guide.utils.config import AppConfig

GUIDE_URL = "http://www.tv.com/firefly/show/7/episode.html"


def season_page(entries, season_label=None) -> str:
    """Build a season listing page.

    entries: (title, meta) pairs in page order (latest episode first).
    season_label: text of the season count label; None omits the header.
    """
    header = ""
    if season_label is not None:
        header = (
            '<div id="episode_list_header"><h2>Episodes</h2>'
            f'<ul><li class="number">{season_label}</li></ul></div>'
        )
    items = "".join(
        '<li><div class="info">'
        f'<h3><a href="/ep">{title}</a></h3>'
        f'<p class="meta">{meta}</p>'
        "</div></li>"
        for title, meta in entries
    )
    return f'<html><body>{header}<ul id="episode_guide_list">{items}</ul></body></html>'


def season_entries(season: int, count: int) -> list[tuple[str, str]]:
    """``count`` well-formed entries for ``season``, latest first."""
    return [
        (f"S{season} Ep {ep}", f"Season {season}, Episode {ep}\n   Aired: {ep}/1/200{season}")
        for ep in range(count, 0, -1)
    ]


def search_page(hits) -> str:
    """hits: (title, href) pairs."""
    body = "".join(f'<div class="result"><h2><a href="{href}">{title}</a></h2></div>' for title, href in hits)
    return f"<html><body>{body}</body></html>"


class FakeFetcher:
    """DocumentFetcher serving canned HTML by URL; unknown URLs fail like a 404."""

    def __init__(self, pages=None, errors=None):
        self.pages = dict(pages or {})
        self.errors = dict(errors or {})
        self.calls = []
        self._lock = threading.Lock()

    def fetch_document(self, url):
        with self._lock:
            self.calls.append(url)
        if url in self.errors:
            raise self.errors[url]
        if url not in self.pages:
            raise FetchError(f"HTTP 404: {url}", url=url, status_code=404)
        return parse_html(self.pages[url], url=url)


@pytest.fixture
def cfg():
    return AppConfig()


@pytest.fixture
def series():
    return SearchResult(name="Firefly", url=GUIDE_URL)


@pytest.fixture
def make_series_pages():
    """Pages for an N-season series with ``per_season`` episodes each."""

    def _make(total_seasons: int, per_season: int = 3, label_fmt: str = "{n} Seasons"):
        pages = {}
        for season in range(1, total_seasons + 1):
            label = label_fmt.format(n=total_seasons) if season == 1 and total_seasons > 1 else None
            pages[f"{GUIDE_URL}?season={season}"] = season_page(season_entries(season, per_season), label)
        return pages

    return _make
