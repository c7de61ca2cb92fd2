"""Tavily web search fetcher."""

from __future__ import annotations

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from research_agent.errors import TransportError
from research_agent.models.result import WebSearchHit

logger = structlog.get_logger()

TAVILY_API_URL = "https://api.tavily.com/search"


async def tavily_search(
    query: str,
    api_key: str | None = None,
    *,
    max_results: int = 10,
    timeout: float = 10.0,
) -> list[WebSearchHit]:
    """POST one search to Tavily and return its ordered result list."""
    try:
        async with httpx.AsyncClient() as http:
            response = await http.post(
                TAVILY_API_URL,
                json={
                    "api_key": api_key or "",
                    "query": query,
                    "search_depth": "basic",
                    "max_results": max_results,
                },
                timeout=timeout,
            )
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as e:
        raise TransportError("tavily", str(e) or type(e).__name__) from e
    except ValueError as e:
        raise TransportError("tavily", f"invalid JSON body: {e}") from e

    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        raise TransportError("tavily", "response has no results list")

    hits: list[WebSearchHit] = []
    for position, raw in enumerate(results):
        if not isinstance(raw, dict):
            logger.warning(
                "tavily_hit_invalid", position=position, error=f"expected object, got {type(raw).__name__}"
            )
            continue
        try:
            hits.append(WebSearchHit.model_validate(raw))
        except PydanticValidationError as e:
            logger.warning("tavily_hit_invalid", position=position, error=str(e))

    logger.info("tavily_search", query=query[:50], hits=len(hits))
    return hits
