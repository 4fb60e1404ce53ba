"""Response events and decoding of Responses API stream chunks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from turnwire.core.errors import ErrorKind, TurnwireError


def field(data: Any, key: str, default: Any = None) -> Any:
    if isinstance(data, dict):
        return data.get(key, default)
    return getattr(data, key, default)


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int = 0
    cached_input_tokens: int | None = None
    output_tokens: int = 0
    reasoning_output_tokens: int | None = None
    total_tokens: int = 0


@dataclass(frozen=True)
class Created:
    pass


@dataclass(frozen=True)
class OutputItemDone:
    item: dict[str, Any]


@dataclass(frozen=True)
class Completed:
    response_id: str
    token_usage: TokenUsage | None = None


@dataclass(frozen=True)
class OutputTextDelta:
    text: str


@dataclass(frozen=True)
class ReasoningSummaryDelta:
    text: str


@dataclass(frozen=True)
class ReasoningContentDelta:
    text: str


@dataclass(frozen=True)
class ReasoningSummaryPartAdded:
    pass


ResponseEvent = (
    Created
    | OutputItemDone
    | Completed
    | OutputTextDelta
    | ReasoningSummaryDelta
    | ReasoningContentDelta
    | ReasoningSummaryPartAdded
)


def _as_dict(value: Any) -> dict[str, Any]:
    if hasattr(value, "model_dump"):
        return value.model_dump(exclude_none=True)
    if isinstance(value, dict):
        return dict(value)
    return dict(vars(value))


def _optional_int(value: Any) -> int | None:
    return value if isinstance(value, int) else None


def parse_token_usage(usage: Any) -> TokenUsage | None:
    if usage is None:
        return None
    return TokenUsage(
        input_tokens=field(usage, "input_tokens") or 0,
        cached_input_tokens=_optional_int(field(field(usage, "input_tokens_details"), "cached_tokens")),
        output_tokens=field(usage, "output_tokens") or 0,
        reasoning_output_tokens=_optional_int(field(field(usage, "output_tokens_details"), "reasoning_tokens")),
        total_tokens=field(usage, "total_tokens") or 0,
    )


def _text_delta(chunk: Any) -> str | None:
    delta = field(chunk, "delta")
    if isinstance(delta, str):
        return delta
    return None


def _failure_message(response: Any) -> str:
    error = field(response, "error")
    message = field(error, "message")
    if isinstance(message, str) and message:
        return message
    return "response.failed event received"


def decode_stream_event(chunk: Any) -> ResponseEvent | None:
    """Map one stream chunk to a ResponseEvent; None when the chunk is not tracked.

    Raises:
        TurnwireError: For `response.failed`, or a `response.completed` without an id.
    """
    event_type = field(chunk, "type")
    if event_type == "response.created":
        return Created()
    if event_type == "response.output_item.done":
        item = field(chunk, "item")
        if item is None:
            return None
        return OutputItemDone(_as_dict(item))
    if event_type == "response.output_text.delta":
        text = _text_delta(chunk)
        return OutputTextDelta(text) if text is not None else None
    if event_type == "response.reasoning_summary_text.delta":
        text = _text_delta(chunk)
        return ReasoningSummaryDelta(text) if text is not None else None
    if event_type == "response.reasoning_text.delta":
        text = _text_delta(chunk)
        return ReasoningContentDelta(text) if text is not None else None
    if event_type == "response.reasoning_summary_part.added":
        return ReasoningSummaryPartAdded()
    if event_type == "response.completed":
        response = field(chunk, "response")
        response_id = field(response, "id")
        if not isinstance(response_id, str) or not response_id:
            raise TurnwireError(ErrorKind.PROVIDER, "response.completed event is missing a response id")
        return Completed(response_id=response_id, token_usage=parse_token_usage(field(response, "usage")))
    if event_type == "response.failed":
        raise TurnwireError(ErrorKind.PROVIDER, _failure_message(field(chunk, "response")))
    return None
