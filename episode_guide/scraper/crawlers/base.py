from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from episode_guide.utils.config import AppConfig
from episode_guide.utils.network import NetworkHandler
from ..document import DocumentFetcher, HtmlDocumentFetcher, LxmlQuery, StructuredQuery
from ..types import Episode, SearchResult


class EpisodeListProvider(ABC):
    """Base class for episode list sources with shared fetch/query/logging plumbing.

    The document fetcher and the structured query engine are injected so tests
    can substitute in-memory fakes for the network.
    """

    name: str

    def __init__(
        self,
        cfg: AppConfig | None = None,
        fetcher: DocumentFetcher | None = None,
        query: StructuredQuery | None = None,
        log_fn: Callable[[str], None] | None = None,
    ):
        self.cfg = cfg or AppConfig()
        self.fetcher = fetcher or HtmlDocumentFetcher(NetworkHandler(self.cfg))
        self.query = query or LxmlQuery()
        self._log = log_fn

    # -- Logging --

    def _emit(self, msg: str) -> None:
        if self._log:
            try:
                self._log(msg)
            except Exception:
                pass

    def _fetch(self, url: str):
        self._emit(f"GET {url}")
        document = self.fetcher.fetch_document(url)
        self._emit(f"<- ok {url}")
        return document

    # -- Abstract --

    def has_single_season_support(self) -> bool:
        return False

    @abstractmethod
    def search(self, query: str) -> list[SearchResult]:
        raise NotImplementedError

    @abstractmethod
    def get_episode_list(self, search_result: SearchResult, season: int | None = None) -> list[Episode]:
        raise NotImplementedError

    @abstractmethod
    def get_episode_link(self, search_result: SearchResult, season: int | None = None) -> str:
        raise NotImplementedError
