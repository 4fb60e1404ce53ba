"""Streaming turns over the Responses API."""

from __future__ import annotations

import asyncio
import threading
from typing import Any

from any_llm import AnyLLM

from turnwire.core.errors import ErrorKind, TurnwireError
from turnwire.core.execution import TurnCore
from turnwire.core.model_family import family_for_model
from turnwire.core.telemetry import span
from turnwire.events import Completed, decode_stream_event
from turnwire.prompt.prompt import Prompt
from turnwire.request import (
    ReasoningEffort,
    ReasoningSummary,
    ResponsesApiRequest,
    build_request,
    create_reasoning_param_for_request,
)
from turnwire.stream import (
    AsyncResponseStream,
    EventSender,
    ResponseStream,
    SyncEventSender,
    response_channel,
    sync_response_channel,
)

_INCOMPLETE_STREAM = "stream closed before response.completed"


class TurnClient:
    """Composes turn requests and streams their events back.

    The provider call runs as the producer of a bounded channel; the caller pulls
    events from the returned stream at its own pace.
    """

    def __init__(
        self,
        core: TurnCore,
        *,
        reasoning_effort: ReasoningEffort,
        reasoning_summary: ReasoningSummary,
        buffer_size: int,
    ) -> None:
        self._core = core
        self._reasoning_effort = reasoning_effort
        self._reasoning_summary = reasoning_summary
        self._buffer_size = buffer_size
        self._tasks: set[asyncio.Task[None]] = set()

    def _resolve_provider_model(self, model: str | None, provider: str | None) -> tuple[str, str]:
        if model is None and provider is None:
            return self._core.provider, self._core.model
        return self._core.resolve_model_provider(model or self._core.model, provider)

    def build_request(
        self,
        prompt: Prompt,
        *,
        model: str | None = None,
        provider: str | None = None,
        prompt_cache_key: str | None = None,
    ) -> ResponsesApiRequest:
        _, model_id = self._resolve_provider_model(model, provider)
        return self._build_request(prompt, model_id, prompt_cache_key)

    def _build_request(self, prompt: Prompt, model_id: str, prompt_cache_key: str | None) -> ResponsesApiRequest:
        family = family_for_model(model_id)
        return build_request(
            prompt,
            model=model_id,
            instructions=prompt.get_full_instructions(family),
            reasoning=create_reasoning_param_for_request(family, self._reasoning_effort, self._reasoning_summary),
            prompt_cache_key=prompt_cache_key,
        )

    @staticmethod
    def _call_kwargs(request: ResponsesApiRequest) -> dict[str, Any]:
        payload = request.to_payload()
        return {
            "model": payload.pop("model"),
            "input_data": payload.pop("input"),
            **payload,
        }

    async def stream(
        self,
        prompt: Prompt,
        *,
        model: str | None = None,
        provider: str | None = None,
        prompt_cache_key: str | None = None,
    ) -> AsyncResponseStream:
        provider_name, model_id = self._resolve_provider_model(model, provider)
        request = self._build_request(prompt, model_id, prompt_cache_key)
        client = self._core.get_client(provider_name)
        sender, events = response_channel(self._buffer_size)

        task = asyncio.create_task(self._produce(client, request, sender, provider_name, model_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return events

    async def _produce(
        self,
        client: AnyLLM,
        request: ResponsesApiRequest,
        sender: EventSender,
        provider_name: str,
        model_id: str,
    ) -> None:
        async with sender:
            completed = False
            try:
                with span("turnwire.responses.stream", provider=provider_name, model=model_id, stream=True):
                    chunks = await client.aresponses(**self._call_kwargs(request))
                    try:
                        async for chunk in chunks:
                            event = decode_stream_event(chunk)
                            if event is None:
                                continue
                            if not await sender.send(event):
                                return
                            if isinstance(event, Completed):
                                completed = True
                                break
                    finally:
                        aclose = getattr(chunks, "aclose", None)
                        if aclose is not None:
                            await aclose()
            except Exception as exc:
                error = self._core.wrap_error(exc, provider_name, model_id)
                self._core.log_error(error, provider_name, model_id)
                await sender.fail(error)
                return
            if not completed:
                await sender.fail(TurnwireError(ErrorKind.PROVIDER, _INCOMPLETE_STREAM))

    def stream_sync(
        self,
        prompt: Prompt,
        *,
        model: str | None = None,
        provider: str | None = None,
        prompt_cache_key: str | None = None,
    ) -> ResponseStream:
        """Blocking variant: a worker thread drives the provider call."""
        provider_name, model_id = self._resolve_provider_model(model, provider)
        request = self._build_request(prompt, model_id, prompt_cache_key)
        client = self._core.get_client(provider_name)
        sender, events = sync_response_channel(self._buffer_size)

        worker = threading.Thread(
            target=self._produce_sync,
            args=(client, request, sender, provider_name, model_id),
            name=f"turnwire-{provider_name}-{model_id}",
            daemon=True,
        )
        worker.start()
        return events

    def _produce_sync(
        self,
        client: AnyLLM,
        request: ResponsesApiRequest,
        sender: SyncEventSender,
        provider_name: str,
        model_id: str,
    ) -> None:
        with sender:
            completed = False
            try:
                with span("turnwire.responses.stream", provider=provider_name, model=model_id, stream=True):
                    chunks = client.responses(**self._call_kwargs(request))
                    try:
                        for chunk in chunks:
                            event = decode_stream_event(chunk)
                            if event is None:
                                continue
                            if not sender.send(event):
                                return
                            if isinstance(event, Completed):
                                completed = True
                                break
                    finally:
                        close = getattr(chunks, "close", None)
                        if close is not None:
                            close()
            except Exception as exc:
                error = self._core.wrap_error(exc, provider_name, model_id)
                self._core.log_error(error, provider_name, model_id)
                sender.fail(error)
                return
            if not completed:
                sender.fail(TurnwireError(ErrorKind.PROVIDER, _INCOMPLETE_STREAM))
