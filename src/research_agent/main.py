"""Entry point: research, standalone search and analysis, LangSmith key check.

Every command prints one JSON document on stdout.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Any

from research_agent.agent import FinancialResearchAgent
from research_agent.config import Settings
from research_agent.errors import ResearchError, ValidationError
from research_agent.llm_client import LLMClient
from research_agent.log_config import configure_logging
from research_agent.models.query import ResearchQuery
from research_agent.prompt_builder import PromptBuilder
from research_agent.sources.tavily_client import tavily_search
from research_agent.tracing import NullTracer, create_tracer, traced, verify_langsmith_key


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def build_agent(
    settings: Settings,
    *,
    simple: bool = False,
    langsmith_api_key: str | None = None,
    tavily_api_key: str | None = None,
    llm_api_key: str | None = None,
) -> FinancialResearchAgent:
    """Traced agent with the bounded prompt when a LangSmith key is available.

    Without a key, or with ``simple``, the agent is untraced and the prompt unbounded.
    """
    tracer = NullTracer() if simple else create_tracer(settings, api_key=langsmith_api_key)
    if tracer.enabled:
        prompt_builder = PromptBuilder(max_chars=settings.PROMPT_MAX_CHARS)
    else:
        prompt_builder = PromptBuilder.unbounded()
    return FinancialResearchAgent(
        settings,
        LLMClient(settings),
        tracer=tracer,
        prompt_builder=prompt_builder,
        tavily_api_key=tavily_api_key,
        llm_api_key=llm_api_key,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="research-agent",
        description="Financial research from web search, arXiv and market data, synthesized by an LLM.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available subcommands")

    # -- research ----------------------------------------------------------
    research_parser = subparsers.add_parser("research", help="Run the full research pipeline.")
    research_parser.add_argument("query", nargs="?", default="", help="Research query")
    research_parser.add_argument("--no-web", action="store_true", help="Skip Tavily web search")
    research_parser.add_argument("--no-academic", action="store_true", help="Skip arXiv search")
    research_parser.add_argument("--no-market", action="store_true", help="Skip Yahoo Finance market data")
    research_parser.add_argument(
        "--symbol", action="append", default=[], dest="symbols", help="Ticker to include (repeatable)"
    )
    research_parser.add_argument("--model", default=None, help="Model identifier (default: DEFAULT_MODEL)")
    research_parser.add_argument("--simple", action="store_true", help="No tracing, unbounded prompt")
    research_parser.add_argument("--langsmith-key", default=None, help="LangSmith API key (enables tracing)")
    research_parser.add_argument("--tavily-key", default=None, help="Tavily API key for this request")
    research_parser.add_argument("--openai-key", default=None, help="Language-model API key for this request")

    # -- search ------------------------------------------------------------
    search_parser = subparsers.add_parser("search", help="Run one Tavily web search.")
    search_parser.add_argument("query", nargs="?", default="", help="Search query")
    search_parser.add_argument("--tavily-key", default=None, help="Tavily API key for this request")
    search_parser.add_argument("--langsmith-key", default=None, help="LangSmith API key (enables tracing)")

    # -- analyze -----------------------------------------------------------
    analyze_parser = subparsers.add_parser("analyze", help="Send one prompt to the language model.")
    analyze_parser.add_argument("prompt", nargs="?", default="", help="Analysis request")
    analyze_parser.add_argument("--context", default=None, help="Context placed before the request")
    analyze_parser.add_argument("--model", default=None, help="Model identifier (default: DEFAULT_MODEL)")
    analyze_parser.add_argument("--openai-key", default=None, help="Language-model API key for this request")
    analyze_parser.add_argument("--langsmith-key", default=None, help="LangSmith API key (enables tracing)")

    # -- check-langsmith ---------------------------------------------------
    check_parser = subparsers.add_parser("check-langsmith", help="Verify a LangSmith API key.")
    check_parser.add_argument("--langsmith-key", default=None, help="Key to check (default: LANGSMITH_API_KEY)")

    return parser


async def _cmd_research(args: argparse.Namespace, settings: Settings) -> int:
    agent = build_agent(
        settings,
        simple=args.simple,
        langsmith_api_key=args.langsmith_key,
        tavily_api_key=args.tavily_key,
        llm_api_key=args.openai_key,
    )
    query = ResearchQuery(
        text=args.query,
        include_web_search=not args.no_web,
        include_academic_research=not args.no_academic,
        include_market_data=not args.no_market,
        target_symbols=args.symbols,
        model=args.model,
    )

    try:
        result = await agent.research(query)
    except ValidationError as e:
        _emit({"error": str(e)})
        return 2

    _emit(
        {
            "success": True,
            "results": result.to_response(),
            "query": query.text,
            "model": query.model or settings.DEFAULT_MODEL,
            "useLangSmith": agent.tracer.enabled,
            "timestamp": _now(),
        }
    )
    return 0


async def _cmd_search(args: argparse.Namespace, settings: Settings) -> int:
    if not args.query.strip():
        _emit({"error": "Query is required"})
        return 2

    tracer = create_tracer(settings, api_key=args.langsmith_key)
    search = traced(
        tracer, "tavily_search", "tool", inputs=lambda query, *a, **kw: {"query": query}
    )(tavily_search)
    try:
        hits = await search(
            args.query,
            args.tavily_key or settings.TAVILY_API_KEY,
            max_results=settings.TAVILY_MAX_RESULTS,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
    except ResearchError as e:
        _emit({"error": "Tavily search failed", "details": str(e)})
        return 1

    _emit(
        {
            "success": True,
            "results": [hit.model_dump(mode="json") for hit in hits],
            "query": args.query,
            "timestamp": _now(),
        }
    )
    return 0


async def _cmd_analyze(args: argparse.Namespace, settings: Settings) -> int:
    if not args.prompt.strip():
        _emit({"error": "Prompt is required"})
        return 2

    model = args.model or settings.DEFAULT_MODEL
    tracer = create_tracer(settings, api_key=args.langsmith_key)
    llm = LLMClient(settings)
    complete = traced(
        tracer,
        "ai_analysis",
        "llm",
        inputs=lambda prompt, **kw: {"prompt": prompt, "context": kw.get("context"), "model": kw.get("model")},
    )(llm.complete)
    try:
        text = await complete(args.prompt, model=model, api_key=args.openai_key, context=args.context)
    except ResearchError as e:
        _emit({"error": "Analysis failed", "details": str(e)})
        return 1

    _emit(
        {
            "success": True,
            "response": text,
            "prompt": args.prompt,
            "context": "provided" if args.context else "none",
            "model": model,
            "timestamp": _now(),
        }
    )
    return 0


async def _cmd_check_langsmith(args: argparse.Namespace, settings: Settings) -> int:
    key = args.langsmith_key or settings.LANGSMITH_API_KEY
    if not key:
        _emit({"success": False, "error": "API key is required"})
        return 2
    ok, error = await verify_langsmith_key(key, settings.LANGSMITH_ENDPOINT)
    _emit({"success": ok, "error": error})
    return 0 if ok else 1


async def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    configure_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stderr)
        return 2

    handlers = {
        "research": _cmd_research,
        "search": _cmd_search,
        "analyze": _cmd_analyze,
        "check-langsmith": _cmd_check_langsmith,
    }
    return await handlers[args.command](args, settings)


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
