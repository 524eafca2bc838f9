"""Removal of JSON Schema keywords that the Gemini API rejects."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

DISALLOWED_SCHEMA_KEYS = frozenset(
    {"$ref", "$defs", "additionalProperties", "examples", "default"}
)


def sanitize_schema(schema: Mapping[str, Any]) -> dict[str, Any]:
    """Return a deep copy of the schema with disallowed keys removed at every level."""
    return {
        key: _sanitize_value(value)
        for key, value in schema.items()
        if key not in DISALLOWED_SCHEMA_KEYS
    }


def sanitize_tool_schemas(
    tools: Sequence[Mapping[str, Any]] | None,
) -> list[dict[str, Any]] | None:
    """Return sanitized deep copies of tool definitions, or None for None."""
    if tools is None:
        return None
    return [sanitize_schema(tool) for tool in tools]


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return sanitize_schema(value)
    if isinstance(value, list):
        return [_sanitize_value(item) for item in value]
    return value