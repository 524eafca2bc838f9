"""Encoding of tools and tool choice for the native Gemini API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from .compat import build_google_search_tool
from .options import ProviderOptions
from .schema import sanitize_schema
from .types import ToolChoice, ToolDefinition

_MODES = {"auto": "AUTO", "none": "NONE", "required": "ANY", "tool": "ANY"}


@dataclass
class NativeTools:
    """The ``tools`` array and ``toolConfig`` object of a native request."""

    tools: list[dict[str, Any]] = field(default_factory=list)
    tool_config: dict[str, Any] | None = None


def encode_tool_config(tool_choice: ToolChoice) -> dict[str, Any]:
    """Map a tool choice to the native ``functionCallingConfig`` form."""
    fcc: dict[str, Any] = {}
    mode = _MODES.get(tool_choice.type)
    if mode is not None:
        fcc["mode"] = mode
    if tool_choice.type == "tool" and tool_choice.tool_name:
        fcc["allowedFunctionNames"] = [tool_choice.tool_name]
    return {"functionCallingConfig": fcc}


def _declaration(tool: ToolDefinition) -> dict[str, Any]:
    decl: dict[str, Any] = {"name": tool.name, "description": tool.description}
    if tool.input_schema is not None:
        decl["parameters"] = sanitize_schema(tool.input_schema)
    return decl


def encode_native_tools(
    tools: Sequence[ToolDefinition] | None,
    tool_choice: ToolChoice | None,
    options: ProviderOptions | None,
) -> NativeTools:
    """Group function tools into one declarations entry and add search grounding."""
    options = options or ProviderOptions()
    result = NativeTools()
    if tools:
        result.tools.append({"functionDeclarations": [_declaration(t) for t in tools]})
    if options.enable_google_search:
        result.tools.append(build_google_search_tool(options.google_search_config))
    if tool_choice is not None:
        result.tool_config = encode_tool_config(tool_choice)
    return result