"""Prompt assembly for Turnwire."""

from turnwire.prompt.instructions import (
    USER_INSTRUCTIONS_END,
    USER_INSTRUCTIONS_START,
    apply_patch_tool_instructions,
    base_instructions,
    compose_instructions,
    format_user_instructions_message,
)
from turnwire.prompt.prompt import Prompt

__all__ = [
    "USER_INSTRUCTIONS_END",
    "USER_INSTRUCTIONS_START",
    "Prompt",
    "apply_patch_tool_instructions",
    "base_instructions",
    "compose_instructions",
    "format_user_instructions_message",
]
