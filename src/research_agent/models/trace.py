"""TraceRun Pydantic model."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field

RunType = Literal["chain", "tool", "llm"]


class TraceRun(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    run_type: RunType = "chain"
    inputs: dict[str, Any] = {}
    outputs: dict[str, Any] | None = None
    error: str | None = None
    start_time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    end_time: datetime | None = None
    parent_run_id: str | None = None
    project_name: str = "financial-research-agent"
