"""Outbound request assembly for the Responses API."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from turnwire.core.model_family import ModelFamily
from turnwire.prompt.prompt import Prompt

TOOL_CHOICE = "auto"
PARALLEL_TOOL_CALLS = False
REASONING_INCLUDE = "reasoning.encrypted_content"

# Dropped from the wire form when unset instead of being sent as null.
_OMIT_WHEN_NONE = ("reasoning", "prompt_cache_key")


class ReasoningEffort(str, Enum):
    MINIMAL = "minimal"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReasoningSummary(str, Enum):
    AUTO = "auto"
    CONCISE = "concise"
    DETAILED = "detailed"
    NONE = "none"


class Reasoning(BaseModel):
    model_config = ConfigDict(frozen=True)

    effort: ReasoningEffort
    summary: ReasoningSummary


class ResponsesApiRequest(BaseModel):
    """Request body POSTed for one streaming turn."""

    model_config = ConfigDict(frozen=True)

    model: str
    instructions: str
    input: list[dict[str, Any]]
    tools: list[dict[str, Any]]
    tool_choice: str = TOOL_CHOICE
    parallel_tool_calls: bool = PARALLEL_TOOL_CALLS
    reasoning: Reasoning | None = None
    store: bool
    stream: bool = True
    include: list[str]
    prompt_cache_key: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json")
        for key in _OMIT_WHEN_NONE:
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload


def create_reasoning_param_for_request(
    model_family: ModelFamily,
    effort: ReasoningEffort,
    summary: ReasoningSummary,
) -> Reasoning | None:
    if model_family.supports_reasoning_summaries:
        return Reasoning(effort=effort, summary=summary)
    return None


def build_request(
    prompt: Prompt,
    *,
    model: str,
    instructions: str,
    reasoning: Reasoning | None,
    tool_choice: str = TOOL_CHOICE,
    parallel_tool_calls: bool = PARALLEL_TOOL_CALLS,
    prompt_cache_key: str | None = None,
) -> ResponsesApiRequest:
    """Assemble the request; `store` mirrors the prompt and `stream` is always on."""
    include = [REASONING_INCLUDE] if reasoning is not None else []
    return ResponsesApiRequest(
        model=model,
        instructions=instructions,
        input=prompt.get_formatted_input(),
        tools=prompt.tools_payload(),
        tool_choice=tool_choice,
        parallel_tool_calls=parallel_tool_calls,
        reasoning=reasoning,
        store=prompt.store,
        stream=True,
        include=include,
        prompt_cache_key=prompt_cache_key,
    )
