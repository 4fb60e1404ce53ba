"""Per-turn prompt state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from turnwire.core.model_family import ModelFamily
from turnwire.prompt.instructions import base_instructions, compose_instructions
from turnwire.tools.schema import Tool


@dataclass(frozen=True)
class Prompt:
    """Everything a single turn sends to the model.

    Attributes:
        input: Conversation items in order.
        store: Whether the server keeps the response (`disable_response_storage` inverted).
        tools: Tool descriptors offered to the model, in wire order.
        base_instructions_override: Replaces the built-in instructions entirely.
    """

    input: tuple[dict[str, Any], ...] = ()
    store: bool = False
    tools: tuple[Tool | dict[str, Any], ...] = ()
    base_instructions_override: str | None = None

    def __post_init__(self) -> None:
        # Copies: the caller's lists and dicts stay independent of this turn.
        object.__setattr__(self, "input", tuple(dict(item) for item in self.input))
        object.__setattr__(self, "tools", tuple(item if isinstance(item, Tool) else dict(item) for item in self.tools))

    def get_full_instructions(self, model: ModelFamily) -> str:
        return compose_instructions(
            base_instructions(),
            override=self.base_instructions_override,
            tools=self.tools,
            needs_special_apply_patch_instructions=model.needs_special_apply_patch_instructions,
        )

    def get_formatted_input(self) -> list[dict[str, Any]]:
        return [dict(item) for item in self.input]

    def tools_payload(self) -> list[dict[str, Any]]:
        return [item.schema() if isinstance(item, Tool) else dict(item) for item in self.tools]
