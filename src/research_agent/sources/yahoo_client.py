"""Yahoo Finance chart snapshot fetcher."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from research_agent.errors import TransportError

logger = structlog.get_logger()

YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
DEFAULT_SYMBOL = "SPY"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


async def yahoo_chart(symbol: str | None = None, *, timeout: float = 10.0) -> dict[str, Any]:
    """GET the chart payload for ``symbol`` (S&P 500 ETF when omitted)."""
    symbol = symbol or DEFAULT_SYMBOL
    try:
        async with httpx.AsyncClient() as http:
            response = await http.get(
                YAHOO_CHART_URL.format(symbol=symbol),
                headers={"User-Agent": USER_AGENT},
                timeout=timeout,
            )
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as e:
        raise TransportError("yahoo", f"{symbol}: {str(e) or type(e).__name__}") from e
    except ValueError as e:
        raise TransportError("yahoo", f"{symbol}: invalid JSON body: {e}") from e

    if not isinstance(data, dict):
        raise TransportError("yahoo", f"{symbol}: unexpected payload type {type(data).__name__}")

    logger.info("yahoo_chart", symbol=symbol)
    return data
