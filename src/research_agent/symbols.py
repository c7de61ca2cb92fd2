"""Heuristic ticker extraction and market-data fan-out selection."""

from __future__ import annotations

import re
from collections.abc import Iterable

SYMBOL_RE = re.compile(r"\b[A-Z]{1,5}\b")


def extract_symbols(text: str, stopwords: Iterable[str] = ()) -> list[str]:
    """Uppercase runs of 2-5 letters, in order of appearance.

    Candidates only: acronyms match too and nothing is checked against a real
    ticker list. ``stopwords`` removes known non-ticker acronyms.
    """
    ignore = {w.upper() for w in stopwords}
    seen: dict[str, None] = {}
    for match in SYMBOL_RE.findall(text or ""):
        if len(match) >= 2 and match not in ignore:
            seen.setdefault(match, None)
    return list(seen)


def select_symbols(
    target: Iterable[str],
    extracted: Iterable[str],
    limit: int = 5,
    default: str | None = "SPY",
) -> list[str]:
    """Caller-supplied symbols first, then extracted, deduplicated, capped at ``limit``.

    Falls back to ``[default]`` when both inputs are empty.
    """
    merged: dict[str, None] = {}
    for symbol in [*target, *extracted]:
        symbol = symbol.strip().upper()
        if symbol:
            merged.setdefault(symbol, None)
    selected = list(merged)[:limit]
    if not selected and default:
        return [default]
    return selected
