from __future__ import annotations

from typing import Callable

from episode_guide.errors import LinkError
from episode_guide.utils.config import AppConfig
from episode_guide.utils.logger import logger
from ..document import DocumentFetcher, StructuredQuery
from ..links import LinkBuilder, episode_guide_location
from ..parsing import discover_season_count, parse_season
from ..scheduler import BoundedFetchScheduler, merge_results
from ..types import ALL_SEASONS, Episode, SearchResult
from .base import EpisodeListProvider

SEARCH_HITS_QUERY = "//h2/a"


class TVDotComClient(EpisodeListProvider):
    """Episode guides from TV.com.

    Notes:
    - Season pages list episodes latest first; the header of the season 1 page
      carries the total season count.
    - Seasons 2..N are fetched in parallel (bounded by cfg.max_season_workers).
    - Nothing is retried; a failed season fails the whole listing.
    """

    name = "TV.com"

    def __init__(
        self,
        cfg: AppConfig | None = None,
        fetcher: DocumentFetcher | None = None,
        query: StructuredQuery | None = None,
        scheduler: BoundedFetchScheduler | None = None,
        log_fn: Callable[[str], None] | None = None,
    ):
        super().__init__(cfg=cfg, fetcher=fetcher, query=query, log_fn=log_fn)
        self.links = LinkBuilder(self.cfg)
        self.scheduler = scheduler or BoundedFetchScheduler(max_workers=self.cfg.max_season_workers)

    def has_single_season_support(self) -> bool:
        return True

    def search(self, query: str) -> list[SearchResult]:
        # ajax search returns just the hit list, not the whole result page
        dom = self._fetch(self.links.search_link(query))

        results: list[SearchResult] = []
        for node in self.query.select_nodes(SEARCH_HITS_QUERY, dom):
            title = self.query.get_text_content(node)
            href = self.query.get_attribute("href", node)
            try:
                results.append(SearchResult(name=title, url=episode_guide_location(href)))
            except LinkError as e:
                logger.warning(f"Invalid href: {href!r} ({e})")
                self._emit(f"skip invalid href {href!r}")

        logger.info(f"search {query!r}: {len(results)} results")
        return results

    def get_episode_link(self, search_result: SearchResult, season: int | None = None) -> str:
        return self.links.build_link(search_result, ALL_SEASONS if season is None else season)

    def get_episode_list(self, search_result: SearchResult, season: int | None = None) -> list[Episode]:
        if season is not None:
            return self.get_season(search_result, season)

        dom = self._fetch(self.get_episode_link(search_result, 1))
        season_count = discover_season_count(dom, self.query)
        logger.info(f"{search_result.name}: {season_count} season(s)")

        season_one = parse_season(dom, search_result.name, self.query)
        scheduled = self.scheduler.schedule_seasons(search_result, season_count, self.get_season)
        return merge_results(season_one, scheduled)

    def get_season(self, search_result: SearchResult, season: int) -> list[Episode]:
        # the all-seasons page is a link target only, never a single season
        if isinstance(season, bool) or not isinstance(season, int) or season < 1:
            raise LinkError(f"Season must be a positive integer: {season!r}")
        dom = self._fetch(self.get_episode_link(search_result, season))
        return parse_season(dom, search_result.name, self.query)
