"""Data models for the search-then-fetch pipeline and the tool results."""

from dataclasses import dataclass
from typing import Literal, TypeAlias

from pydantic import BaseModel, Field

SearchLang: TypeAlias = Literal["en", "jp"]
Country: TypeAlias = Literal["US", "JP"]


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """One search request, built once per tool invocation."""

    query: str
    language: SearchLang = "en"
    country: Country | None = "US"


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    url: str
    raw_body: str


@dataclass(frozen=True, slots=True)
class FetchFailure:
    url: str
    reason: str


FetchOutcome: TypeAlias = FetchSuccess | FetchFailure


class FetchReport(BaseModel):
    """Aggregate result of one pipeline run.

    ``success`` is False only when the search returned no URLs at all.
    """

    success: bool
    pages: list[str] = Field(default_factory=list, serialization_alias="htmlData")

    @classmethod
    def empty(cls) -> "FetchReport":
        return cls(success=False, pages=[])

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class SearchErrorResult(BaseModel):
    """Error envelope returned by the parallel-search tool on terminal failures."""

    success: Literal[False] = False
    message: str
    pages: list[str] = Field(default_factory=list, serialization_alias="htmlData")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class CountResult(BaseModel):
    """Result of the str-counter tool."""

    success: bool = True
    message: str
    count: int = 0
    is_exceeded: bool = Field(default=False, serialization_alias="isExceeded")
    is_fall_below: bool = Field(default=False, serialization_alias="isFallBelow")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
