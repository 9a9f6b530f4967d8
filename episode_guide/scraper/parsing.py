from __future__ import annotations

import re
from datetime import date

from episode_guide.errors import ParseError
from episode_guide.utils.logger import logger
from .document import Document, LxmlQuery, StructuredQuery
from .types import Episode

SEASON_COUNT_QUERY = "//*[@id='episode_list_header']//*[contains(@class, 'number')]"
EPISODE_NODES_QUERY = "//*[@id='episode_guide_list']//*[@class='info']"
TITLE_QUERY = "./h3/a"
META_QUERY = "./*[@class='meta']"

# e.g. "Season 3, Episode 12" / "Season 3 ... Episode 12"
EPISODE_PATTERN = re.compile(r"Season\W*(\d+)\D+?Episode\W*(\d+)")
# e.g. 5/20/2003 (month/day/year)
AIRDATE_PATTERN = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4})(?!\d)")

_WHITESPACE = re.compile(r"\s+")
_NON_DIGITS = re.compile(r"\D+")


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def match_episode(meta: str) -> tuple[int, int] | None:
    """First (season, episode) pair in ``meta``, or None."""
    m = EPISODE_PATTERN.search(meta or "")
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def match_airdate(meta: str) -> date | None:
    """First M/D/YYYY token in ``meta`` as a date; None when absent or not a real date."""
    m = AIRDATE_PATTERN.search(meta or "")
    if not m:
        return None
    month, day, year = (int(g) for g in m.groups())
    try:
        return date(year, month, day)
    except ValueError:
        logger.debug(f"ignoring invalid air date {m.group(0)!r}")
        return None


def parse_season_count(label: str) -> int:
    if not (label or "").strip():
        # No label means the series only has one season
        return 1

    digits = _NON_DIGITS.sub("", label)
    if not digits:
        raise ParseError(f"Season count label has no digits: {label!r}")

    count = int(digits)
    if count < 1:
        raise ParseError(f"Season count must be positive: {label!r}")
    return count


def discover_season_count(document: Document, query: StructuredQuery | None = None) -> int:
    """Read the number of seasons from the header of a season listing.

    Seasons are listed latest first, so the first number label holds the
    season count (e.g. "7 Seasons" -> 7).
    """
    q = query or LxmlQuery()
    return parse_season_count(q.select_string(SEASON_COUNT_QUERY, document))


def parse_season(document: Document, series_name: str, query: StructuredQuery | None = None) -> list[Episode]:
    """Parse every episode of one season page, ascending by episode number.

    Nodes whose metadata has no season/episode information are skipped.
    """
    q = query or LxmlQuery()
    episodes: list[Episode] = []

    for node in q.select_nodes(EPISODE_NODES_QUERY, document):
        title = q.select_string(TITLE_QUERY, node)
        meta = normalize_whitespace(q.select_string(META_QUERY, node))

        numbers = match_episode(meta)
        if numbers is None:
            logger.debug(f"skip node without season/episode info: title={title!r} meta={meta!r}")
            continue

        season, episode = numbers
        episodes.append(
            Episode(
                series_name=series_name,
                season=season,
                episode=episode,
                title=title,
                airdate=match_airdate(meta),
            )
        )

    # Pages list episodes latest first
    episodes.reverse()
    return episodes
