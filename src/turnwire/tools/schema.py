"""Tool descriptors in the Responses API wire shape."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, NoReturn, TypeVar, cast

from pydantic import BaseModel, TypeAdapter

ModelT = TypeVar("ModelT", bound=BaseModel)

APPLY_PATCH_TOOL_NAME = "apply_patch"

# Built-in tool types that carry no function name on the wire.
BUILTIN_TOOL_TYPES = frozenset({"local_shell", "web_search", "web_search_preview"})


def _to_snake_case(name: str) -> str:
    return "".join(["_" + c.lower() if c.isupper() else c for c in name]).lstrip("_")


def _callable_name(func: Callable[..., Any]) -> str:
    name = getattr(func, "__name__", None)
    if isinstance(name, str) and name:
        return name
    return func.__class__.__name__


def _schema_from_annotation(annotation: Any) -> dict[str, Any]:
    """Convert Python type annotations to JSON schema via Pydantic."""
    if annotation is inspect.Parameter.empty:
        annotation = Any
    try:
        return TypeAdapter(annotation).json_schema()
    except Exception as exc:
        _raise_value_error(f"Failed to build JSON schema for type: {annotation!r}", cause=exc)


def _raise_value_error(message: str, *, cause: Exception | None = None) -> NoReturn:
    if cause is None:
        raise ValueError(message)
    raise ValueError(message) from cause


def _raise_type_error(message: str, *, cause: Exception | None = None) -> NoReturn:
    if cause is None:
        raise TypeError(message)
    raise TypeError(message) from cause


def _schema_from_signature(signature: inspect.Signature) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        properties[param.name] = _schema_from_annotation(param.annotation)
        if param.default is param.empty:
            required.append(param.name)
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _validate_tool_schema(tool_schema: dict[str, Any]) -> str | None:
    tool_type = tool_schema.get("type")
    if tool_type in BUILTIN_TOOL_TYPES:
        return None
    if tool_type != "function":
        _raise_value_error(f"Unsupported tool type: {tool_type!r}")
    name = tool_schema.get("name")
    if not isinstance(name, str):
        _raise_type_error("Function tool schema must include a non-empty name.")
    name = cast(str, name)
    if not name.strip():
        _raise_value_error("Function tool schema must include a non-empty name.")
    if "parameters" not in tool_schema:
        _raise_value_error("Function tool schema must include parameters.")
    return name


@dataclass(frozen=True)
class Tool:
    """A function tool the model can call."""

    name: str
    description: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    strict: bool = False

    def schema(self) -> dict[str, Any]:
        return {
            "type": "function",
            "name": self.name,
            "description": self.description,
            "strict": self.strict,
            "parameters": self.parameters,
        }

    @classmethod
    def from_callable(
        cls,
        func: Callable[..., Any],
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> Tool:
        tool_name = name or _to_snake_case(_callable_name(func))
        tool_description = description if description is not None else (inspect.getdoc(func) or "")
        parameters = _schema_from_signature(inspect.signature(func))
        return cls(name=tool_name, description=tool_description, parameters=parameters)


@dataclass(frozen=True)
class ToolSet:
    """Ordered tool descriptors with their pre-serialized wire payload."""

    tools: list[Tool | dict[str, Any]]
    schemas: list[dict[str, Any]]

    @classmethod
    def from_tools(cls, tools: ToolInput) -> ToolSet:
        return normalize_tools(tools)


def schema_from_model(
    model: type[ModelT],
    *,
    name: str | None = None,
    description: str | None = None,
    strict: bool = False,
) -> dict[str, Any]:
    """Create a function tool schema from a Pydantic model."""
    model_name = name or _to_snake_case(model.__name__)
    model_description = description if description is not None else (model.__doc__ or "")
    return Tool(
        name=model_name,
        description=model_description,
        parameters=model.model_json_schema(),
        strict=strict,
    ).schema()


ToolInput = ToolSet | Sequence[Any] | None


def tool_name(descriptor: Any) -> str | None:
    """Name of a tool descriptor, or None for built-ins without one."""
    if isinstance(descriptor, dict):
        name = descriptor.get("name")
    else:
        name = getattr(descriptor, "name", None)
    if isinstance(name, str):
        return name
    return None


def is_apply_patch_tool_present(tools: Sequence[Any]) -> bool:
    return any(tool_name(descriptor) == APPLY_PATCH_TOOL_NAME for descriptor in tools)


def _ensure_unique(name: str | None, seen_names: set[str]) -> None:
    if name is None:
        return
    if not name:
        _raise_value_error("Tool name cannot be empty.")
    if name in seen_names:
        _raise_value_error(f"Duplicate tool name: {name}")
    seen_names.add(name)


def _normalize_tool_item(tool_item: Any, seen_names: set[str]) -> Tool | dict[str, Any]:
    if isinstance(tool_item, dict):
        _ensure_unique(_validate_tool_schema(tool_item), seen_names)
        return tool_item

    if isinstance(tool_item, Tool):
        tool_obj = tool_item
    elif callable(tool_item):
        tool_obj = Tool.from_callable(tool_item)
    else:
        _raise_type_error(f"Unsupported tool type: {type(tool_item)}")

    _ensure_unique(tool_obj.name, seen_names)
    return tool_obj


def normalize_tools(tools: ToolInput) -> ToolSet:
    """Normalize tool-like objects into a ToolSet, preserving order."""
    if tools is None:
        return ToolSet([], [])
    if isinstance(tools, ToolSet):
        return tools
    if isinstance(tools, Sequence) and any(isinstance(tool_item, ToolSet) for tool_item in tools):
        _raise_type_error("ToolSet cannot be mixed with other tool definitions.")
    if not tools:
        return ToolSet([], [])

    normalized: list[Tool | dict[str, Any]] = []
    schemas: list[dict[str, Any]] = []
    seen_names: set[str] = set()

    for tool_item in tools:
        entry = _normalize_tool_item(tool_item, seen_names)
        normalized.append(entry)
        schemas.append(entry.schema() if isinstance(entry, Tool) else dict(entry))

    return ToolSet(normalized, schemas)


def tool(
    func: Callable[..., Any] | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
) -> Tool | Callable[..., Any]:
    """Decorator to describe a function as a Tool."""

    def _create_tool(f: Callable[..., Any]) -> Tool:
        return Tool.from_callable(f, name=name, description=description)

    if func is None:
        return _create_tool
    return _create_tool(func)
