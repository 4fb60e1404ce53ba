from __future__ import annotations

from types import SimpleNamespace

import pytest

from turnwire import (
    Completed,
    Created,
    ErrorKind,
    OutputItemDone,
    OutputTextDelta,
    ReasoningContentDelta,
    ReasoningSummaryDelta,
    ReasoningSummaryPartAdded,
    TokenUsage,
    TurnwireError,
    decode_stream_event,
)


class TestDecodeStreamEvent:
    @pytest.mark.parametrize(
        ("chunk", "expected"),
        [
            ({"type": "response.created", "response": {"id": "r"}}, Created()),
            ({"type": "response.output_text.delta", "delta": "Hel"}, OutputTextDelta("Hel")),
            ({"type": "response.reasoning_summary_text.delta", "delta": "why"}, ReasoningSummaryDelta("why")),
            ({"type": "response.reasoning_text.delta", "delta": "think"}, ReasoningContentDelta("think")),
            ({"type": "response.reasoning_summary_part.added"}, ReasoningSummaryPartAdded()),
        ],
    )
    def test_simple_events(self, chunk, expected) -> None:
        assert decode_stream_event(chunk) == expected

    def test_output_item_done_keeps_item(self) -> None:
        item = {"type": "message", "role": "assistant", "content": [{"type": "output_text", "text": "hi"}]}
        assert decode_stream_event({"type": "response.output_item.done", "item": item}) == OutputItemDone(item)

    def test_accepts_attribute_objects(self) -> None:
        chunk = SimpleNamespace(type="response.output_text.delta", delta="x")
        assert decode_stream_event(chunk) == OutputTextDelta("x")

    def test_untracked_events_are_skipped(self) -> None:
        assert decode_stream_event({"type": "response.in_progress"}) is None
        assert decode_stream_event({"type": "response.output_text.delta", "delta": None}) is None
        assert decode_stream_event({"type": "response.output_item.done"}) is None

    def test_completed_with_usage(self) -> None:
        chunk = {
            "type": "response.completed",
            "response": {
                "id": "resp_42",
                "usage": {
                    "input_tokens": 100,
                    "input_tokens_details": {"cached_tokens": 40},
                    "output_tokens": 20,
                    "output_tokens_details": {"reasoning_tokens": 5},
                    "total_tokens": 120,
                },
            },
        }

        assert decode_stream_event(chunk) == Completed(
            response_id="resp_42",
            token_usage=TokenUsage(
                input_tokens=100,
                cached_input_tokens=40,
                output_tokens=20,
                reasoning_output_tokens=5,
                total_tokens=120,
            ),
        )

    def test_completed_without_usage(self) -> None:
        event = decode_stream_event({"type": "response.completed", "response": {"id": "resp_1"}})
        assert event == Completed(response_id="resp_1", token_usage=None)

    def test_completed_without_id_is_a_provider_error(self) -> None:
        with pytest.raises(TurnwireError) as exc_info:
            decode_stream_event({"type": "response.completed", "response": {}})
        assert exc_info.value.kind == ErrorKind.PROVIDER

    def test_failed_event_carries_server_message(self) -> None:
        chunk = {"type": "response.failed", "response": {"error": {"message": "context too long"}}}
        with pytest.raises(TurnwireError) as exc_info:
            decode_stream_event(chunk)
        assert exc_info.value.kind == ErrorKind.PROVIDER
        assert exc_info.value.message == "context too long"
