"""ResearchResult envelope and the Success/Failure tagged union."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SourceName(str, enum.Enum):
    WEB_SEARCH = "webSearch"
    ACADEMIC_RESEARCH = "academicResearch"
    MARKET_DATA = "marketData"


class Success(BaseModel):
    status: Literal["success"] = "success"
    value: Any


class Failure(BaseModel):
    status: Literal["failure"] = "failure"
    reason: str


SourceResult = Annotated[Union[Success, Failure], Field(discriminator="status")]


class WebSearchHit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = ""
    url: str = ""
    content: str = ""
    score: float | None = None

    @field_validator("title", "url", "content", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class AcademicRecord(BaseModel):
    title: str
    summary: str
    published: str = ""
    link: str = ""  # PDF link
    id: str = ""


class AcademicResearch(BaseModel):
    raw: str = ""
    parsed: list[AcademicRecord] = []


MarketData = dict[str, SourceResult]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResearchResult(BaseModel):
    """Terminal envelope of one research run. Serialises with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: str
    timestamp: datetime = Field(default_factory=_utcnow)
    sources: dict[SourceName, SourceResult] = Field(default_factory=dict)
    ai_analysis: SourceResult = Failure(reason="AI analysis not run")

    @property
    def web_search(self) -> SourceResult | None:
        return self.sources.get(SourceName.WEB_SEARCH)

    @property
    def academic_research(self) -> SourceResult | None:
        return self.sources.get(SourceName.ACADEMIC_RESEARCH)

    @property
    def market_data(self) -> SourceResult | None:
        return self.sources.get(SourceName.MARKET_DATA)

    def to_response(self) -> dict[str, Any]:
        """JSON-ready dict with the envelope's wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)
