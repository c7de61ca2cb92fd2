"""Shared fixtures for research-agent tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from research_agent.config import Settings


def make_entry(
    title: str = "Robo-Advisors and Portfolio Choice",
    summary: str = "We study how automated advice changes household allocation.",
    published: str = "2024-03-01T00:00:00Z",
    pdf: str | None = "http://arxiv.org/pdf/2403.00001v1",
    arxiv_id: str | None = "http://arxiv.org/abs/2403.00001v1",
) -> str:
    parts = ["<entry>"]
    if arxiv_id is not None:
        parts.append(f"  <id>{arxiv_id}</id>")
    parts.append(f"  <published>{published}</published>")
    if title:
        parts.append(f"  <title>\n    {title}\n  </title>")
    if summary:
        parts.append(f"  <summary>  {summary}\n  </summary>")
    parts.append('  <link href="http://arxiv.org/abs/2403.00001v1" rel="alternate" type="text/html"/>')
    if pdf is not None:
        parts.append(f'  <link title="pdf" href="{pdf}" rel="related" type="application/pdf"/>')
    parts.append("</entry>")
    return "\n".join(parts)


def make_feed(*entries: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<feed xmlns="http://www.w3.org/2005/Atom">\n'
        "  <title>ArXiv Query: search_query=all:finance</title>\n"
        "  <id>http://arxiv.org/api/feed-id</id>\n"
        + "\n".join(entries)
        + "\n</feed>"
    )


def mock_http_client(response=None, *, get_side_effect=None, post_side_effect=None):
    """AsyncMock standing in for ``httpx.AsyncClient()`` used as a context manager."""
    http = AsyncMock()
    http.get = AsyncMock(return_value=response, side_effect=get_side_effect)
    http.post = AsyncMock(return_value=response, side_effect=post_side_effect)
    http.__aenter__ = AsyncMock(return_value=http)
    http.__aexit__ = AsyncMock(return_value=False)
    return http


def mock_response(json_data=None, text: str = "", status_code: int = 200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = text
    response.raise_for_status = MagicMock()
    return response


@pytest.fixture
def settings():
    return Settings(
        OPENAI_API_KEY="test-openai-key",
        ANTHROPIC_API_KEY="test-anthropic-key",
        TAVILY_API_KEY="test-tavily-key",
        LANGSMITH_API_KEY="",
        DEFAULT_MODEL="gpt-3.5-turbo",
        REQUEST_TIMEOUT_SECONDS=10.0,
        STAGE_MAX_ATTEMPTS=1,
        PROMPT_MAX_CHARS=4000,
    )
