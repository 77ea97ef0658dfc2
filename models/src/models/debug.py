"""LLM trace debug models."""

from typing import Any
from pydantic import BaseModel, Field


class DebugTrace(BaseModel):
    """LLM diagnostics recorded for a single interaction."""

    input: dict[str, Any] = Field(..., description="The llm_analytics row")
    output: list[dict[str, Any]] = Field(default_factory=list, description="The llm_calls rows")
