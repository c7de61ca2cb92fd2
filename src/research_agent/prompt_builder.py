"""Build the synthesis prompt from whichever sources succeeded."""

from __future__ import annotations

import structlog

from research_agent.models.result import (
    AcademicResearch,
    SourceName,
    SourceResult,
    Success,
    WebSearchHit,
)

logger = structlog.get_logger()

TRUNCATION_MARKER = "\n\n[Content truncated due to length]"

ANALYSIS_INSTRUCTIONS = """Please provide:
1. Key insights and trends
2. Investment implications
3. Risk considerations
4. Recommendations for wealth management
5. Academic research implications
"""


class PromptBuilder:
    """Deterministic prompt assembly.

    The default instance is the bounded variant: 3 web hits of 500 chars, 2 papers
    of 300 chars, 4000 chars overall. ``PromptBuilder.unbounded()`` drops every cap.
    """

    def __init__(
        self,
        max_chars: int | None = 4000,
        max_web_results: int | None = 3,
        web_content_chars: int | None = 500,
        max_papers: int | None = 2,
        summary_chars: int | None = 300,
    ) -> None:
        self.max_chars = max_chars
        self.max_web_results = max_web_results
        self.web_content_chars = web_content_chars
        self.max_papers = max_papers
        self.summary_chars = summary_chars

    @classmethod
    def unbounded(cls) -> PromptBuilder:
        return cls(
            max_chars=None,
            max_web_results=None,
            web_content_chars=None,
            max_papers=None,
            summary_chars=None,
        )

    def build_analysis_prompt(self, query: str, sources: dict[SourceName, SourceResult]) -> str:
        parts = [
            f'You are a financial research analyst. Analyze the following information about "{query}" '
            "and provide comprehensive insights for wealth and asset management.",
            "",
        ]

        # --- Web search ---
        web = sources.get(SourceName.WEB_SEARCH)
        if isinstance(web, Success) and isinstance(web.value, list):
            parts.append("WEB SEARCH RESULTS:")
            for i, hit in enumerate(web.value[: self.max_web_results], start=1):
                parts.append(f"{i}. {self._web_line(hit)}")
            parts.append("")

        # --- Academic research ---
        academic = sources.get(SourceName.ACADEMIC_RESEARCH)
        if isinstance(academic, Success) and isinstance(academic.value, AcademicResearch):
            parts.append("ACADEMIC RESEARCH:")
            for i, paper in enumerate(academic.value.parsed[: self.max_papers], start=1):
                summary = paper.summary[: self.summary_chars] if paper.summary else "No summary available"
                parts.append(f"{i}. {paper.title or 'No title'}: {summary}")
            parts.append("")

        # --- Market data (symbols only) ---
        market = sources.get(SourceName.MARKET_DATA)
        if isinstance(market, Success) and market.value:
            parts.append(f"MARKET DATA AVAILABLE FOR: {', '.join(market.value.keys())}")
            parts.append("")

        prompt = "\n".join(parts) + "\n" + ANALYSIS_INSTRUCTIONS
        return self._truncate(prompt)

    def _web_line(self, hit: WebSearchHit | dict) -> str:
        if isinstance(hit, dict):
            hit = WebSearchHit.model_validate(hit)
        content = hit.content[: self.web_content_chars] if hit.content else "No content available"
        return f"{hit.title or 'No title'}: {content}"

    def _truncate(self, prompt: str) -> str:
        if self.max_chars is None or len(prompt) <= self.max_chars:
            return prompt
        logger.info("prompt_truncated", original_chars=len(prompt), max_chars=self.max_chars)
        return prompt[: self.max_chars] + TRUNCATION_MARKER
