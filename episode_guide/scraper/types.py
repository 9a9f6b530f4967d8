from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, Union

# Sentinel accepted by the link builder in place of a season number.
ALL_SEASONS: Literal["all"] = "all"

Season = Union[int, Literal["all"]]


@dataclass(frozen=True)
class SearchResult:
    """A catalog entry: series name plus the locator of its episode guide."""

    name: str
    url: str


@dataclass(frozen=True)
class Episode:
    series_name: str
    season: int
    episode: int
    title: str = ""
    airdate: date | None = None

    def __str__(self) -> str:
        return f"{self.series_name} - {self.season}x{self.episode:02d} - {self.title}"
