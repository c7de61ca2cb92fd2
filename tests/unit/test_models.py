"""Unit tests for ResearchQuery / ResearchResult models."""

from __future__ import annotations

import pydantic
import pytest

from research_agent.models.query import ResearchQuery
from research_agent.models.result import (
    Failure,
    ResearchResult,
    SourceName,
    Success,
    WebSearchHit,
)


class TestResearchQuery:
    def test_defaults_include_every_source(self):
        query = ResearchQuery(text="ESG")
        assert query.include_web_search
        assert query.include_academic_research
        assert query.include_market_data
        assert query.target_symbols == ()
        assert query.model is None

    def test_is_frozen(self):
        query = ResearchQuery(text="ESG")
        with pytest.raises(pydantic.ValidationError):
            query.text = "changed"

    def test_target_symbols_normalised(self):
        query = ResearchQuery(text="q", target_symbols=[" aapl", "MSFT", ""])
        assert query.target_symbols == ("AAPL", "MSFT")

    def test_none_symbols_become_empty(self):
        assert ResearchQuery(text="q", target_symbols=None).target_symbols == ()


class TestResearchResult:
    def test_new_result_has_no_sources(self):
        result = ResearchResult(query="q")
        assert result.sources == {}
        assert result.web_search is None
        assert result.academic_research is None
        assert result.market_data is None
        assert isinstance(result.ai_analysis, Failure)

    def test_sources_are_not_shared(self):
        first = ResearchResult(query="a")
        first.sources[SourceName.WEB_SEARCH] = Success(value=[])
        assert ResearchResult(query="b").sources == {}

    def test_accessors(self):
        result = ResearchResult(
            query="q",
            sources={SourceName.WEB_SEARCH: Failure(reason="Web search failed: down")},
        )
        assert isinstance(result.web_search, Failure)

    def test_to_response_uses_camel_case(self):
        result = ResearchResult(
            query="q",
            sources={SourceName.WEB_SEARCH: Success(value=[WebSearchHit(title="t", url="u", content="c")])},
            ai_analysis=Success(value="text"),
        )
        response = result.to_response()
        assert response["aiAnalysis"] == {"status": "success", "value": "text"}
        assert response["sources"]["webSearch"]["value"][0]["title"] == "t"
        assert isinstance(response["timestamp"], str)

    def test_round_trips_tagged_union_from_json(self):
        result = ResearchResult.model_validate(
            {
                "query": "q",
                "sources": {"marketData": {"status": "failure", "reason": "Market data failed"}},
                "aiAnalysis": {"status": "success", "value": "ok"},
            }
        )
        assert isinstance(result.market_data, Failure)
        assert isinstance(result.ai_analysis, Success)
