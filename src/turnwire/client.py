"""Turnwire client facade."""

from __future__ import annotations

import warnings
from collections.abc import Callable, Sequence
from typing import Any

from turnwire.__about__ import DEFAULT_MODEL
from turnwire.clients.responses import TurnClient
from turnwire.core.errors import ErrorKind, TurnwireError
from turnwire.core.execution import TurnCore
from turnwire.prompt.instructions import format_user_instructions_message
from turnwire.prompt.prompt import Prompt
from turnwire.request import ReasoningEffort, ReasoningSummary
from turnwire.stream import DEFAULT_BUFFER_SIZE
from turnwire.tools.schema import ToolInput, normalize_tools


def _coerce_enum(enum_type: type[Any], value: Any, name: str) -> Any:
    try:
        return enum_type(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise TurnwireError(ErrorKind.INVALID_INPUT, f"{name} must be one of: {allowed}").with_cause(exc) from exc


class Turnwire:
    """Build turn prompts and stream Responses API events, powered by any-llm."""

    def __init__(
        self,
        model: str | None = None,
        *,
        provider: str | None = None,
        api_key: str | dict[str, str] | None = None,
        api_base: str | dict[str, str] | None = None,
        client_args: dict[str, Any] | None = None,
        reasoning_effort: ReasoningEffort | str = ReasoningEffort.MEDIUM,
        reasoning_summary: ReasoningSummary | str = ReasoningSummary.AUTO,
        base_instructions: str | None = None,
        user_instructions: str | None = None,
        disable_response_storage: bool = False,
        stream_buffer_size: int = DEFAULT_BUFFER_SIZE,
        verbose: int = 0,
        error_classifier: Callable[[Exception], ErrorKind | None] | None = None,
    ) -> None:
        if verbose not in (0, 1, 2):
            raise TurnwireError(ErrorKind.INVALID_INPUT, "verbose must be 0, 1, or 2")
        if stream_buffer_size < 1:
            raise TurnwireError(ErrorKind.INVALID_INPUT, "stream_buffer_size must be >= 1")

        if not model:
            model = DEFAULT_MODEL
            warnings.warn(f"No model was provided, defaulting to {model}", UserWarning, stacklevel=2)

        resolved_provider, resolved_model = TurnCore.resolve_model_provider(model, provider)

        self._core = TurnCore(
            provider=resolved_provider,
            model=resolved_model,
            api_key=api_key,
            api_base=api_base,
            client_args=client_args or {},
            verbose=verbose,
            error_classifier=error_classifier,
        )
        self._base_instructions = base_instructions
        self._user_instructions = user_instructions
        self._store = not disable_response_storage
        self.turns: TurnClient = TurnClient(
            self._core,
            reasoning_effort=_coerce_enum(ReasoningEffort, reasoning_effort, "reasoning_effort"),
            reasoning_summary=_coerce_enum(ReasoningSummary, reasoning_summary, "reasoning_summary"),
            buffer_size=stream_buffer_size,
        )

    @property
    def provider(self) -> str:
        return self._core.provider

    @property
    def model(self) -> str:
        return self._core.model

    def prompt(self, input_items: Sequence[dict[str, Any]] | str, *, tools: ToolInput = None) -> Prompt:
        """Build the Prompt for one turn from conversation items and tools."""
        if isinstance(input_items, str):
            items = [{"type": "message", "role": "user", "content": [{"type": "input_text", "text": input_items}]}]
        else:
            items = [dict(item) for item in input_items]
        if self._user_instructions:
            items.insert(0, format_user_instructions_message(self._user_instructions))
        try:
            toolset = normalize_tools(tools)
        except (ValueError, TypeError) as exc:
            raise TurnwireError(ErrorKind.INVALID_INPUT, str(exc)).with_cause(exc) from exc
        return Prompt(
            input=items,
            store=self._store,
            tools=tuple(toolset.tools),
            base_instructions_override=self._base_instructions,
        )

    def __repr__(self) -> str:
        return f"<Turnwire provider={self._core.provider} model={self._core.model}>"
