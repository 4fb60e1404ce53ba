"""Tool descriptors for Turnwire."""

from turnwire.tools.schema import (
    APPLY_PATCH_TOOL_NAME,
    Tool,
    ToolInput,
    ToolSet,
    is_apply_patch_tool_present,
    normalize_tools,
    schema_from_model,
    tool,
    tool_name,
)

__all__ = [
    "APPLY_PATCH_TOOL_NAME",
    "Tool",
    "ToolInput",
    "ToolSet",
    "is_apply_patch_tool_present",
    "normalize_tools",
    "schema_from_model",
    "tool",
    "tool_name",
]
