"""Request shaping for the Gemini OpenAI-compatible endpoint."""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Iterator

from .options import GoogleSearchConfig, parse_provider_options
from .types import LanguageModelRequest, StreamEvent, StreamEventType, Warning

_SEARCH_TOOL_KEY = "_google_search_tool"


def build_google_search_tool(config: GoogleSearchConfig | None) -> dict[str, Any]:
    """Build the ``{"googleSearch": {...}}`` tool entry."""
    search_cfg: dict[str, Any] = {}
    if config is not None:
        if config.dynamic_retrieval_threshold is not None:
            search_cfg["dynamic_retrieval_config"] = {
                "mode": "MODE_DYNAMIC",
                "dynamic_threshold": config.dynamic_retrieval_threshold,
            }
        if config.search_types:
            search_cfg["search_types"] = list(config.search_types)
        if config.time_range_filter is not None:
            search_cfg["time_range_filter"] = {
                "start_time": config.time_range_filter.start_time,
                "end_time": config.time_range_filter.end_time,
            }
    return {"googleSearch": search_cfg}


def extra_body_fields_for_request(request: LanguageModelRequest) -> dict[str, Any] | None:
    """Top-level body fields derived from Gemini options, or None if there are none.

    A search tool is stored under a temporary key that
    :func:`merge_google_search_tools` moves into the tools array.
    """
    opts = parse_provider_options(request.provider_options)
    result: dict[str, Any] = {}

    thinking = opts.thinking_config
    if thinking is not None:
        thinking_map: dict[str, Any] = {}
        if thinking.thinking_budget is not None:
            thinking_map["thinking_budget"] = thinking.thinking_budget
        if thinking.include_thoughts is not None:
            thinking_map["include_thoughts"] = thinking.include_thoughts
        if thinking.thinking_level:
            thinking_map["thinking_level"] = thinking.thinking_level
        if thinking_map:
            result.setdefault("google", {})["thinking_config"] = thinking_map

    if opts.enable_google_search:
        result[_SEARCH_TOOL_KEY] = build_google_search_tool(opts.google_search_config)

    return result or None


def merge_google_search_tools(body: dict[str, Any]) -> dict[str, Any]:
    """Move the temporary search tool entry into ``body["tools"]``."""
    if _SEARCH_TOOL_KEY not in body:
        return body
    search_tool = body.pop(_SEARCH_TOOL_KEY)
    existing = body.get("tools")
    if isinstance(existing, list):
        body["tools"] = [*existing, search_tool]
    else:
        body["tools"] = [search_tool]
    return body


def warnings_for_request(model_id: str, request: LanguageModelRequest) -> list[Warning]:
    """Warnings for settings that Google Search grounding ignores."""
    opts = parse_provider_options(request.provider_options)
    if not opts.enable_google_search:
        return []
    warnings: list[Warning] = []
    if request.settings.top_k is not None:
        warnings.append(
            Warning(
                type="unsupported-setting",
                setting="topK",
                message="topK is not supported when Google Search grounding is enabled "
                "and will be ignored",
            )
        )
    if request.settings.seed is not None:
        warnings.append(
            Warning(
                type="unsupported-setting",
                setting="seed",
                message="seed is not supported when Google Search grounding is enabled "
                "(grounding is non-deterministic)",
            )
        )
    return warnings


def inject_warnings(
    events: Iterable[StreamEvent], warnings: list[Warning]
) -> Iterator[StreamEvent]:
    """Yield the events, prepending the warnings to the first finish event."""
    injected = not warnings
    for event in events:
        if not injected and event.type is StreamEventType.FINISH:
            event = dataclasses.replace(event, warnings=[*warnings, *event.warnings])
            injected = True
        yield event