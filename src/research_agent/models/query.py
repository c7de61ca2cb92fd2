"""ResearchQuery Pydantic model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class ResearchQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    include_web_search: bool = True
    include_academic_research: bool = True
    include_market_data: bool = True
    target_symbols: tuple[str, ...] = ()
    model: str | None = None

    @field_validator("target_symbols", mode="before")
    @classmethod
    def _normalize_symbols(cls, value):
        if value is None:
            return ()
        return tuple(str(s).strip().upper() for s in value if str(s).strip())
