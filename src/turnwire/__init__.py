"""Turnwire public API."""

from turnwire.__about__ import DEFAULT_MODEL
from turnwire.client import Turnwire
from turnwire.clients import TurnClient
from turnwire.core import ErrorKind, ModelFamily, TurnwireError, find_family_for_model, instrument_turnwire
from turnwire.events import (
    Completed,
    Created,
    OutputItemDone,
    OutputTextDelta,
    ReasoningContentDelta,
    ReasoningSummaryDelta,
    ReasoningSummaryPartAdded,
    ResponseEvent,
    TokenUsage,
    decode_stream_event,
)
from turnwire.prompt import Prompt, compose_instructions, format_user_instructions_message
from turnwire.request import (
    Reasoning,
    ReasoningEffort,
    ReasoningSummary,
    ResponsesApiRequest,
    build_request,
    create_reasoning_param_for_request,
)
from turnwire.security import compute_security_advice
from turnwire.stream import (
    AsyncResponseStream,
    EventSender,
    ResponseStream,
    StreamState,
    SyncEventSender,
    response_channel,
    sync_response_channel,
)
from turnwire.tools import Tool, ToolSet, schema_from_model, tool

__all__ = [
    "DEFAULT_MODEL",
    "AsyncResponseStream",
    "Completed",
    "Created",
    "ErrorKind",
    "EventSender",
    "ModelFamily",
    "OutputItemDone",
    "OutputTextDelta",
    "Prompt",
    "Reasoning",
    "ReasoningContentDelta",
    "ReasoningEffort",
    "ReasoningSummary",
    "ReasoningSummaryDelta",
    "ReasoningSummaryPartAdded",
    "ResponseEvent",
    "ResponseStream",
    "ResponsesApiRequest",
    "StreamState",
    "SyncEventSender",
    "TokenUsage",
    "Tool",
    "ToolSet",
    "TurnClient",
    "Turnwire",
    "TurnwireError",
    "build_request",
    "compose_instructions",
    "compute_security_advice",
    "create_reasoning_param_for_request",
    "decode_stream_event",
    "find_family_for_model",
    "format_user_instructions_message",
    "instrument_turnwire",
    "response_channel",
    "schema_from_model",
    "sync_response_channel",
    "tool",
]
