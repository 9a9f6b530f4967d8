from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Sequence

from episode_guide.errors import FetchError
from episode_guide.utils.logger import logger, task_context
from .types import Episode, SearchResult

FetchSeasonFn = Callable[[SearchResult, int], Sequence[Episode]]

DEFAULT_MAX_WORKERS = 12


class BoundedFetchScheduler:
    """Fetch seasons 2..N on a bounded thread pool.

    Results land in a season-indexed list as tasks complete, so a slow early
    season never holds back the bookkeeping of later ones; the caller gets
    them back in season order once every task has settled.
    """

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS, thread_name_prefix: str = "season-fetch"):
        self.max_workers = max(1, int(max_workers))
        self.thread_name_prefix = thread_name_prefix

    def pool_size(self, total_seasons: int) -> int:
        return max(0, min(total_seasons - 1, self.max_workers))

    def schedule_seasons(
        self,
        search_result: SearchResult,
        total_seasons: int,
        fetch_season: FetchSeasonFn,
    ) -> list[list[Episode]]:
        """Return the episode lists of seasons 2..total_seasons, in season order.

        Any failed season fails the whole call with a FetchError naming the
        lowest failed season; nothing partial is returned.
        """
        if total_seasons <= 1:
            return []

        seasons = range(2, total_seasons + 1)
        workers = self.pool_size(total_seasons)
        logger.info(f"{search_result.name}: fetching seasons 2..{total_seasons} with {workers} workers")

        results: list[list[Episode] | None] = [None] * len(seasons)
        failures: dict[int, BaseException] = {}

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=self.thread_name_prefix)
        try:
            futures: dict[Future, int] = {
                executor.submit(self._run_task, fetch_season, search_result, season): season
                for season in seasons
            }
        finally:
            # No further submissions; running tasks finish on their own
            executor.shutdown(wait=False)

        for fut in as_completed(futures):
            season = futures[fut]
            try:
                results[season - 2] = fut.result()
            except Exception as e:
                logger.error(f"{search_result.name}: season {season} failed: {e}")
                failures[season] = e

        if failures:
            season = min(failures)
            cause = failures[season]
            raise FetchError(
                f"Failed to fetch season {season} of {search_result.name}: {cause}",
                url=getattr(cause, "url", None),
                status_code=getattr(cause, "status_code", None),
                season=season,
            ) from cause

        return [list(r or []) for r in results]

    @staticmethod
    def _run_task(fetch_season: FetchSeasonFn, search_result: SearchResult, season: int) -> list[Episode]:
        with task_context(f"season-{season:02d}"):
            episodes = list(fetch_season(search_result, season))
            logger.debug(f"season {season}: {len(episodes)} episodes")
            return episodes


def merge_results(season_one: Iterable[Episode], scheduled: Iterable[Iterable[Episode]]) -> list[Episode]:
    """Season 1 first, then every scheduled season in order. No dedup, no validation."""
    merged = list(season_one)
    for episodes in scheduled:
        merged.extend(episodes)
    return merged
