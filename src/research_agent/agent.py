"""Research agent: sequential source stages + LLM synthesis."""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import structlog
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from research_agent.arxiv_parser import parse_arxiv_feed
from research_agent.errors import ValidationError
from research_agent.models.result import (
    AcademicResearch,
    Failure,
    MarketData,
    ResearchResult,
    SourceName,
    SourceResult,
    Success,
)
from research_agent.prompt_builder import PromptBuilder
from research_agent.sources.arxiv_client import arxiv_search
from research_agent.sources.tavily_client import tavily_search
from research_agent.sources.yahoo_client import yahoo_chart
from research_agent.symbols import extract_symbols, select_symbols
from research_agent.tracing import NullTracer, traced

if TYPE_CHECKING:
    from research_agent.config import Settings
    from research_agent.llm_client import LLMClient
    from research_agent.models.query import ResearchQuery
    from research_agent.tracing import Tracer

logger = structlog.get_logger()


class ResearchStage(enum.Enum):
    WEB_SEARCH = "web_search"
    ACADEMIC_RESEARCH = "academic_research"
    MARKET_DATA = "market_data"
    SYNTHESIS = "synthesis"


class FinancialResearchAgent:
    """Runs web search, academic search, market data and synthesis in that order.

    Each stage is isolated: a failure is recorded as ``Failure`` in its slot of the
    result and the next stage still runs. Only an empty query raises.
    """

    def __init__(
        self,
        settings: Settings,
        llm: LLMClient,
        *,
        tracer: Tracer | None = None,
        prompt_builder: PromptBuilder | None = None,
        tavily_api_key: str | None = None,
        llm_api_key: str | None = None,
        web_search: Callable[..., Awaitable[Any]] = tavily_search,
        academic_search: Callable[..., Awaitable[str]] = arxiv_search,
        market_data: Callable[..., Awaitable[dict]] = yahoo_chart,
    ) -> None:
        self.settings = settings
        self.llm = llm
        self.tracer = tracer or NullTracer()
        self.prompt_builder = prompt_builder or PromptBuilder(max_chars=settings.PROMPT_MAX_CHARS)
        self.tavily_api_key = tavily_api_key or settings.TAVILY_API_KEY
        self.llm_api_key = llm_api_key
        self.web_search = web_search
        self.academic_search = academic_search
        self.market_data = market_data

    @staticmethod
    def _enter(stage: ResearchStage, query: ResearchQuery) -> None:
        logger.info("stage_started", stage=stage.value, query=query.text[:50])

    async def research(self, query: ResearchQuery) -> ResearchResult:
        """Run every requested stage and return the complete envelope."""
        if not query.text or not query.text.strip():
            raise ValidationError("Query is required")

        if query.model is None:
            query = query.model_copy(update={"model": self.settings.DEFAULT_MODEL})

        logger.info(
            "research_started",
            query=query.text[:80],
            model=query.model,
            tracing=self.tracer.enabled,
        )
        run = traced(
            self.tracer,
            "Financial Research Agent",
            inputs=lambda q: {"query": q.text, "options": q.model_dump(mode="json"), "model": q.model},
        )(self._run)
        result = await run(query)
        logger.info("research_completed", query=query.text[:80], sources=[s.value for s in result.sources])
        return result

    async def _run(self, query: ResearchQuery) -> ResearchResult:
        result = ResearchResult(query=query.text)

        if query.include_web_search:
            self._enter(ResearchStage.WEB_SEARCH, query)
            result.sources[SourceName.WEB_SEARCH] = await self._guard(
                "Web search", self._search_web, query.text
            )

        if query.include_academic_research:
            self._enter(ResearchStage.ACADEMIC_RESEARCH, query)
            result.sources[SourceName.ACADEMIC_RESEARCH] = await self._guard(
                "Academic research", self._search_academic, query.text
            )

        if query.include_market_data:
            self._enter(ResearchStage.MARKET_DATA, query)
            result.sources[SourceName.MARKET_DATA] = await self._guard(
                "Market data", self._collect_market_data, query
            )

        self._enter(ResearchStage.SYNTHESIS, query)
        result.ai_analysis = await self._guard("AI analysis", self._synthesize, query, result.sources)
        return result

    async def _guard(self, stage: str, fn: Callable[..., Awaitable[Any]], *args: Any) -> SourceResult:
        """Run one stage; any exception becomes a Failure."""
        try:
            return Success(value=await fn(*args))
        except Exception as e:
            reason = f"{stage} failed: {str(e) or type(e).__name__}"
            logger.warning("stage_failed", stage=stage, error=str(e), error_type=type(e).__name__)
            return Failure(reason=reason)

    async def _with_retry(self, fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.STAGE_MAX_ATTEMPTS)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        ):
            with attempt:
                result = await fn(*args, **kwargs)
        return result

    # --- Stages ---

    async def _search_web(self, text: str) -> list:
        decorated = f"financial research {text} wealth management asset management"
        return await self.tracer.trace(
            "tavily_search",
            "tool",
            {"query": decorated},
            lambda: self._with_retry(
                self.web_search,
                decorated,
                self.tavily_api_key,
                max_results=self.settings.TAVILY_MAX_RESULTS,
                timeout=self.settings.REQUEST_TIMEOUT_SECONDS,
            ),
        )

    async def _search_academic(self, text: str) -> AcademicResearch:
        decorated = f"finance wealth management asset management {text}"
        raw = await self.tracer.trace(
            "arxiv_search",
            "tool",
            {"query": decorated},
            lambda: self._with_retry(
                self.academic_search,
                decorated,
                max_results=self.settings.ARXIV_MAX_RESULTS,
                timeout=self.settings.REQUEST_TIMEOUT_SECONDS,
            ),
        )
        return AcademicResearch(raw=raw, parsed=parse_arxiv_feed(raw))

    async def _collect_market_data(self, query: ResearchQuery) -> MarketData:
        extracted = extract_symbols(query.text, self.settings.SYMBOL_STOPWORDS)
        symbols = select_symbols(
            query.target_symbols,
            extracted,
            limit=self.settings.MAX_MARKET_SYMBOLS,
            default=self.settings.DEFAULT_MARKET_SYMBOL,
        )
        logger.info("market_symbols_selected", symbols=symbols, extracted=extracted)

        snapshots: MarketData = {}
        for symbol in symbols:
            try:
                payload = await self.tracer.trace(
                    "yahoo_chart",
                    "tool",
                    {"symbol": symbol},
                    lambda symbol=symbol: self._with_retry(
                        self.market_data, symbol, timeout=self.settings.REQUEST_TIMEOUT_SECONDS
                    ),
                )
                snapshots[symbol] = Success(value=payload)
            except Exception as e:
                logger.warning("market_symbol_failed", symbol=symbol, error=str(e))
                snapshots[symbol] = Failure(reason=f"Failed to fetch data for {symbol}")
        return snapshots

    async def _synthesize(self, query: ResearchQuery, sources: dict[SourceName, SourceResult]) -> str:
        prompt = self.prompt_builder.build_analysis_prompt(query.text, sources)
        logger.info("analysis_prompt_built", chars=len(prompt))
        return await self.tracer.trace(
            "ai_analysis",
            "llm",
            {"prompt": prompt, "model": query.model},
            lambda: self.llm.complete(prompt, model=query.model, api_key=self.llm_api_key),
        )
