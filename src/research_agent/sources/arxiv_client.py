"""arXiv Atom feed fetcher."""

from __future__ import annotations

import httpx
import structlog

from research_agent.errors import TransportError

logger = structlog.get_logger()

ARXIV_API_URL = "http://export.arxiv.org/api/query"


async def arxiv_search(query: str, *, max_results: int = 5, timeout: float = 10.0) -> str:
    """GET the raw Atom feed for ``query``. Parsing is left to the caller."""
    try:
        async with httpx.AsyncClient() as http:
            response = await http.get(
                ARXIV_API_URL,
                params={
                    "search_query": f"all:{query}",
                    "start": 0,
                    "max_results": max_results,
                },
                timeout=timeout,
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise TransportError("arxiv", str(e) or type(e).__name__) from e

    logger.info("arxiv_search", query=query[:50], chars=len(response.text))
    return response.text
