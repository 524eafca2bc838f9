"""Decoding of native Gemini server-sent events into normalized stream events."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Iterable, Iterator

from .grounding import grounding_sources
from .types import FinishReason, GeminiError, StreamEvent, StreamEventType, Usage

_DATA_PREFIX = "data: "
_MAX_LINE = 1024 * 1024

_FINISH_REASONS = {
    "MAX_TOKENS": FinishReason.LENGTH,
    "SAFETY": FinishReason.CONTENT_FILTER,
    "RECITATION": FinishReason.CONTENT_FILTER,
    "BLOCKLIST": FinishReason.CONTENT_FILTER,
    "MALFORMED_FUNCTION_CALL": FinishReason.ERROR,
}


def map_native_finish_reason(raw: str, has_tool_calls: bool) -> tuple[FinishReason, str]:
    """Normalized finish reason for a native one, paired with the raw value."""
    if raw == "STOP":
        return (FinishReason.TOOL_CALLS if has_tool_calls else FinishReason.STOP), raw
    return _FINISH_REASONS.get(raw, FinishReason.UNKNOWN), raw


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{what} is not an object")
    return value


def _objects(value: Any, what: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} is not an array")
    return [_mapping(item, what) for item in value]


def _string(value: Any, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{what} is not a string")
    return value


def _parse_chunk(data: str) -> dict[str, Any]:
    """Parse and check the shape of one chunk, raising ValueError if it is malformed."""
    chunk = json.loads(data)
    if not isinstance(chunk, dict):
        raise ValueError("chunk is not an object")
    candidates = _objects(chunk.get("candidates"), "candidates")
    if candidates:
        first = candidates[0]
        content = _mapping(first.get("content"), "content")
        for part in _objects(content.get("parts"), "parts"):
            _string(part.get("text"), "text")
            _string(part.get("thoughtSignature"), "thoughtSignature")
            call = _mapping(part.get("functionCall"), "functionCall")
            _string(call.get("name"), "functionCall.name")
        _string(first.get("finishReason"), "finishReason")
        _mapping(first.get("groundingMetadata"), "groundingMetadata")
    _mapping(chunk.get("usageMetadata"), "usageMetadata")
    return chunk


def _usage_event(usage: dict[str, Any]) -> StreamEvent:
    return StreamEvent(
        type=StreamEventType.USAGE,
        usage=Usage(
            prompt_tokens=int(usage.get("promptTokenCount") or 0),
            completion_tokens=int(usage.get("candidatesTokenCount") or 0),
            total_tokens=int(usage.get("totalTokenCount") or 0),
            reasoning_tokens=int(usage.get("thoughtsTokenCount") or 0),
        ),
    )


def _google_metadata(candidate: dict[str, Any]) -> dict[str, Any] | None:
    result: dict[str, Any] = {}
    if candidate.get("groundingMetadata") is not None:
        result["groundingMetadata"] = candidate["groundingMetadata"]
    if candidate.get("safetyRatings") is not None:
        result["safetyRatings"] = candidate["safetyRatings"]
    return result or None


class _StreamState:
    """State carried across the chunks of one stream."""

    def __init__(self) -> None:
        self.seen: set[str] = set()
        self.last_meta: dict[str, Any] | None = None
        self.tool_call_index = 0

    def events(self, chunk: dict[str, Any]) -> Iterator[StreamEvent]:
        """Events for one chunk, in order: sources, content, usage, finish."""
        usage = chunk.get("usageMetadata")
        candidates = chunk.get("candidates") or []
        if not candidates:
            if usage is not None:
                yield _usage_event(usage)
            return

        candidate = candidates[0]
        meta = _google_metadata(candidate)
        if meta is not None:
            self.last_meta = meta

        for source in grounding_sources(candidate.get("groundingMetadata"), self.seen):
            yield StreamEvent(
                type=StreamEventType.SOURCE,
                source=dataclasses.replace(source, provider_metadata=None),
            )

        has_tool_calls = False
        content = candidate.get("content") or {}
        for part in content.get("parts") or []:
            signature = part.get("thoughtSignature") or ""
            call = part.get("functionCall")
            if call is not None:
                has_tool_calls = True
                args = (
                    json.dumps(call["args"], separators=(",", ":"), ensure_ascii=False)
                    if "args" in call
                    else ""
                )
                yield StreamEvent(
                    type=StreamEventType.TOOL_CALL_DELTA,
                    tool_call_index=self.tool_call_index,
                    tool_call_id=f"call_{self.tool_call_index}",
                    tool_call_name=call.get("name") or "",
                    tool_call_args_delta=args,
                    thought_signature=signature,
                )
                self.tool_call_index += 1
                continue
            text = part.get("text") or ""
            if part.get("thought") is True:
                yield StreamEvent(
                    type=StreamEventType.REASONING_DELTA,
                    text_delta=text,
                    thought_signature=signature,
                )
            elif text:
                yield StreamEvent(
                    type=StreamEventType.TEXT_DELTA,
                    text_delta=text,
                    thought_signature=signature,
                )

        if usage is not None:
            yield _usage_event(usage)

        raw = candidate.get("finishReason") or ""
        if raw:
            reason, raw = map_native_finish_reason(raw, has_tool_calls)
            yield StreamEvent(
                type=StreamEventType.FINISH,
                finish_reason=reason,
                raw_finish_reason=raw,
                provider_metadata=(
                    {"google": self.last_meta} if self.last_meta is not None else None
                ),
            )


def decode_native_sse(lines: Iterable[str | bytes]) -> Iterator[StreamEvent]:
    """Turn the lines of a native Gemini SSE stream into normalized stream events.

    A chunk that cannot be parsed yields an error event and decoding goes on;
    a line longer than one mebibyte yields an error event and ends the stream.
    """
    state = _StreamState()
    for raw_line in lines:
        line = (
            raw_line.decode("utf-8", errors="replace")
            if isinstance(raw_line, bytes)
            else raw_line
        )
        line = line.removesuffix("\n").removesuffix("\r")
        if len(line) > _MAX_LINE:
            yield StreamEvent(
                type=StreamEventType.ERROR,
                error=GeminiError("gemini-native: read stream: line too long"),
            )
            return
        if not line.startswith(_DATA_PREFIX):
            continue
        data = line[len(_DATA_PREFIX):]
        if not data:
            continue
        try:
            chunk = _parse_chunk(data)
        except ValueError as exc:
            yield StreamEvent(
                type=StreamEventType.ERROR,
                error=GeminiError(f"gemini-native: unmarshal chunk: {exc}"),
            )
            continue
        yield from state.events(chunk)