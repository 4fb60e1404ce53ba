"""Instruction composition for a single model turn."""

from __future__ import annotations

from collections.abc import Sequence
from functools import cache
from importlib import resources
from typing import Any

from turnwire.tools.schema import is_apply_patch_tool_present

USER_INSTRUCTIONS_START = "<user_instructions>\n\n"
USER_INSTRUCTIONS_END = "\n\n</user_instructions>"


@cache
def _read_asset(name: str) -> str:
    return resources.files("turnwire.prompt.assets").joinpath(name).read_text(encoding="utf-8").strip()


def base_instructions() -> str:
    """Built-in instructions every payload starts with when no override is given."""
    return _read_asset("prompt.md")


def apply_patch_tool_instructions() -> str:
    return _read_asset("apply_patch_instructions.md")


def compose_instructions(
    base: str,
    *,
    override: str | None,
    tools: Sequence[Any],
    needs_special_apply_patch_instructions: bool,
) -> str:
    """Build the final `instructions` string.

    An override is returned verbatim. Otherwise the apply-patch guidance is appended
    when the model asks for it or when no `apply_patch` tool is offered. The result is
    deterministic for identical inputs.
    """
    if override is not None:
        return override

    sections = [base]
    if needs_special_apply_patch_instructions or not is_apply_patch_tool_present(tools):
        sections.append(apply_patch_tool_instructions())
    return "\n".join(sections)


def format_user_instructions_message(text: str) -> dict[str, Any]:
    """Wrap free-form user instructions in a user message with structural markers."""
    return {
        "type": "message",
        "role": "user",
        "content": [
            {
                "type": "input_text",
                "text": f"{USER_INSTRUCTIONS_START}{text}{USER_INSTRUCTIONS_END}",
            }
        ],
    }
