"""Parse arXiv Atom feed text into AcademicRecords."""

from __future__ import annotations

import re

import structlog

from research_agent.errors import ParseError
from research_agent.models.result import AcademicRecord

logger = structlog.get_logger()

ENTRY_RE = re.compile(r"<entry>([\s\S]*?)</entry>")
TITLE_RE = re.compile(r"<title[^>]*>([\s\S]*?)</title>")
SUMMARY_RE = re.compile(r"<summary[^>]*>([\s\S]*?)</summary>")
PUBLISHED_RE = re.compile(r"<published[^>]*>([\s\S]*?)</published>")
PDF_LINK_RE = re.compile(r"<link[^>]*title=\"pdf\"[^>]*href=\"([^\"]*)\"[^>]*>")
ID_RE = re.compile(r"<id[^>]*>([\s\S]*?)</id>")


def _field(pattern: re.Pattern[str], block: str) -> str:
    match = pattern.search(block)
    return match.group(1).strip() if match else ""


def _parse_entry(block: str) -> AcademicRecord:
    title = _field(TITLE_RE, block)
    summary = _field(SUMMARY_RE, block)
    if not title or not summary:
        raise ParseError("entry has no title or summary")
    return AcademicRecord(
        title=title,
        summary=summary,
        published=_field(PUBLISHED_RE, block),
        link=_field(PDF_LINK_RE, block),
        id=_field(ID_RE, block),
    )


def parse_arxiv_feed(text: str) -> list[AcademicRecord]:
    """Extract well-formed entries; never raises.

    Fields are matched independently per entry. Entries without both a title and
    a summary are dropped; a missing PDF link or id becomes an empty string.
    """
    if not isinstance(text, str):
        logger.warning("arxiv_parse_error", error=f"expected str, got {type(text).__name__}")
        return []

    blocks = ENTRY_RE.findall(text)
    if not blocks:
        logger.warning("arxiv_no_entries")
        return []

    records: list[AcademicRecord] = []
    for position, block in enumerate(blocks):
        try:
            records.append(_parse_entry(block))
        except ParseError as e:
            logger.debug("arxiv_entry_skipped", position=position, error=str(e))

    logger.debug("arxiv_parsed", entries=len(blocks), records=len(records))
    return records
