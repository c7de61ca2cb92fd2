"""Error taxonomy for the research pipeline.

Only ``ValidationError`` escapes ``FinancialResearchAgent.research``; every other
kind is caught at its stage and recorded as a ``Failure`` in the result.
"""


class ResearchError(Exception):
    """Base class for research pipeline errors."""


class ValidationError(ResearchError):
    """The research query is missing or empty."""


class TransportError(ResearchError):
    """A source fetch failed (network, timeout, non-2xx, undecodable body)."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class ParseError(ResearchError):
    """A source payload could not be parsed. Treated as zero results."""


class ModelError(ResearchError):
    """The language-model call failed or returned no content."""


class TracingError(ResearchError):
    """A tracing backend call failed. Logged, never propagated."""
