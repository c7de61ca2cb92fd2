"""Unit tests for PromptBuilder: synthesis prompt assembly and truncation."""

from __future__ import annotations

import pytest

from research_agent.models.result import (
    AcademicRecord,
    AcademicResearch,
    Failure,
    SourceName,
    Success,
    WebSearchHit,
)
from research_agent.prompt_builder import TRUNCATION_MARKER, PromptBuilder

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def builder():
    return PromptBuilder()


@pytest.fixture
def web_hits():
    return [
        WebSearchHit(title=f"Article {i}", url=f"https://example.com/{i}", content=f"content-{i} " + "x" * 600)
        for i in range(1, 6)
    ]


@pytest.fixture
def papers():
    return AcademicResearch(
        raw="<feed/>",
        parsed=[
            AcademicRecord(title=f"Paper {i}", summary=f"summary-{i} " + "y" * 400) for i in range(1, 4)
        ],
    )


@pytest.fixture
def all_sources(web_hits, papers):
    return {
        SourceName.WEB_SEARCH: Success(value=web_hits),
        SourceName.ACADEMIC_RESEARCH: Success(value=papers),
        SourceName.MARKET_DATA: Success(value={"AAPL": Success(value={}), "MSFT": Failure(reason="x")}),
    }


# ---------------------------------------------------------------------------
# Section assembly
# ---------------------------------------------------------------------------


class TestBuildAnalysisPrompt:
    def test_empty_sources_has_header_and_instructions(self, builder):
        prompt = builder.build_analysis_prompt("ESG investing", {})
        assert '"ESG investing"' in prompt
        assert "WEB SEARCH RESULTS" not in prompt
        assert "ACADEMIC RESEARCH" not in prompt
        assert "MARKET DATA" not in prompt
        for line in (
            "1. Key insights and trends",
            "2. Investment implications",
            "3. Risk considerations",
            "4. Recommendations for wealth management",
            "5. Academic research implications",
        ):
            assert line in prompt

    def test_section_order(self, all_sources):
        prompt = PromptBuilder(max_chars=None).build_analysis_prompt("q", all_sources)
        web = prompt.index("WEB SEARCH RESULTS:")
        academic = prompt.index("ACADEMIC RESEARCH:")
        market = prompt.index("MARKET DATA AVAILABLE FOR:")
        instructions = prompt.index("Please provide:")
        assert web < academic < market < instructions

    def test_web_results_capped_at_three_and_truncated(self, all_sources):
        prompt = PromptBuilder(max_chars=None).build_analysis_prompt("q", all_sources)
        assert "3. Article 3" in prompt
        assert "Article 4" not in prompt
        line = next(l for l in prompt.splitlines() if l.startswith("1. Article 1"))
        assert line == "1. Article 1: " + ("content-1 " + "x" * 600)[:500]

    def test_papers_capped_at_two_and_truncated(self, all_sources):
        prompt = PromptBuilder(max_chars=None).build_analysis_prompt("q", all_sources)
        assert "2. Paper 2" in prompt
        assert "Paper 3" not in prompt
        line = next(l for l in prompt.splitlines() if l.startswith("1. Paper 1"))
        assert line == "1. Paper 1: " + ("summary-1 " + "y" * 400)[:300]

    def test_market_data_lists_symbols_only(self, all_sources):
        prompt = PromptBuilder(max_chars=None).build_analysis_prompt("q", all_sources)
        assert "MARKET DATA AVAILABLE FOR: AAPL, MSFT" in prompt

    def test_failed_sources_contribute_nothing(self, builder):
        sources = {
            SourceName.WEB_SEARCH: Failure(reason="Web search failed"),
            SourceName.ACADEMIC_RESEARCH: Failure(reason="Academic research failed"),
            SourceName.MARKET_DATA: Failure(reason="Market data failed"),
        }
        prompt = builder.build_analysis_prompt("q", sources)
        assert prompt == builder.build_analysis_prompt("q", {})

    def test_empty_market_data_is_omitted(self, builder):
        prompt = builder.build_analysis_prompt("q", {SourceName.MARKET_DATA: Success(value={})})
        assert "MARKET DATA" not in prompt

    def test_missing_title_and_content_placeholders(self, builder):
        sources = {SourceName.WEB_SEARCH: Success(value=[WebSearchHit()])}
        prompt = builder.build_analysis_prompt("q", sources)
        assert "1. No title: No content available" in prompt

    def test_raw_dict_hits_are_accepted(self, builder):
        sources = {SourceName.WEB_SEARCH: Success(value=[{"title": "T", "content": "C", "url": "u"}])}
        assert "1. T: C" in builder.build_analysis_prompt("q", sources)


# ---------------------------------------------------------------------------
# Truncation
# ---------------------------------------------------------------------------


class TestTruncation:
    def test_over_budget_prompt_is_truncated_with_marker(self, all_sources):
        builder = PromptBuilder(max_chars=200)
        prompt = builder.build_analysis_prompt("q", all_sources)
        assert prompt.endswith(TRUNCATION_MARKER)
        assert len(prompt) == 200 + len(TRUNCATION_MARKER)

    def test_under_budget_prompt_is_unchanged(self, builder):
        prompt = builder.build_analysis_prompt("q", {})
        assert TRUNCATION_MARKER not in prompt
        assert len(prompt) < 4000

    def test_default_budget_is_4000(self):
        assert PromptBuilder().max_chars == 4000


class TestUnbounded:
    def test_no_caps_and_no_truncation(self, all_sources):
        prompt = PromptBuilder.unbounded().build_analysis_prompt("q", all_sources)
        assert "5. Article 5" in prompt
        assert "3. Paper 3" in prompt
        assert "x" * 600 in prompt
        assert TRUNCATION_MARKER not in prompt
