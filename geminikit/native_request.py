"""Encoding of language-model requests for the native Gemini streamGenerateContent API."""

from __future__ import annotations

import base64
import itertools
import json
from typing import Any, Iterable

from .options import parse_provider_options
from .schema import sanitize_schema
from .types import (
    ContentPart,
    ContentPartType,
    GeminiError,
    LanguageModelRequest,
    Message,
    Role,
)

_OCTET_STREAM = "application/octet-stream"

_MIME_BY_SUFFIX: tuple[tuple[tuple[str, ...], str], ...] = (
    ((".png",), "image/png"),
    ((".jpg", ".jpeg"), "image/jpeg"),
    ((".gif",), "image/gif"),
    ((".webp",), "image/webp"),
    ((".pdf",), "application/pdf"),
    ((".mp4",), "video/mp4"),
    ((".mp3",), "audio/mpeg"),
    ((".wav",), "audio/wav"),
)

_USER_PARTS = frozenset(
    {ContentPartType.TEXT, ContentPartType.IMAGE_URL, ContentPartType.FILE}
)
_ASSISTANT_PARTS = frozenset(
    {
        ContentPartType.TEXT,
        ContentPartType.REASONING,
        ContentPartType.TOOL_CALL,
        ContentPartType.IMAGE_URL,
        ContentPartType.FILE,
    }
)
_TOOL_PARTS = frozenset({ContentPartType.TOOL_RESULT})

# Message role -> (native role, content part types that are encoded).
_ROLES: dict[Role, tuple[str, frozenset[ContentPartType]]] = {
    Role.USER: ("user", _USER_PARTS),
    Role.ASSISTANT: ("model", _ASSISTANT_PARTS),
    Role.TOOL: ("user", _TOOL_PARTS),
}

_JSON_OUTPUT_TYPES = frozenset({"json_object", "object", "array"})
_SCHEMA_OUTPUT_TYPES = frozenset({"object", "array"})


def guess_mime_type(url: str) -> str:
    """MIME type guessed from a URL's file extension."""
    lower = url.lower()
    for suffixes, mime in _MIME_BY_SUFFIX:
        if lower.endswith(suffixes):
            return mime
    return _OCTET_STREAM


def parse_data_uri(uri: str) -> tuple[str, str] | None:
    """Split a ``data:`` URI into (MIME type, base64 payload), or None if it is not one."""
    if not uri.startswith("data:"):
        return None
    meta, comma, payload = uri[len("data:"):].partition(",")
    if not comma:
        return None
    is_base64 = meta.endswith(";base64")
    mime = meta[: -len(";base64")] if is_base64 else meta
    mime = mime or _OCTET_STREAM
    if is_base64:
        return mime, payload
    return mime, base64.b64encode(payload.encode("utf-8")).decode("ascii")


def _compact(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not None and v != ""}


def _media_part(data: bytes, url: str, mime_type: str) -> dict[str, Any]:
    if data:
        return {
            "inlineData": {
                "mimeType": mime_type,
                "data": base64.b64encode(data).decode("ascii"),
            }
        }
    parsed = parse_data_uri(url)
    if parsed is not None:
        mime, payload = parsed
        return {"inlineData": {"mimeType": mime, "data": payload}}
    return {"fileData": {"mimeType": mime_type or guess_mime_type(url), "fileUri": url}}


def _tool_call_args(part: ContentPart) -> Any:
    if not part.tool_call_args:
        return None
    try:
        return json.loads(part.tool_call_args)
    except ValueError as exc:
        raise GeminiError(
            f"gemini-native: invalid arguments for tool call {part.tool_call_name!r}: {exc}"
        ) from exc


def _encode_part(part: ContentPart) -> dict[str, Any]:
    kind = part.type
    if kind is ContentPartType.TEXT:
        return _compact({"text": part.text})
    if kind is ContentPartType.REASONING:
        return _compact(
            {
                "text": part.reasoning_text,
                "thought": True,
                "thoughtSignature": part.thought_signature,
            }
        )
    if kind is ContentPartType.TOOL_CALL:
        return _compact(
            {
                "thoughtSignature": part.thought_signature,
                "functionCall": {
                    "name": part.tool_call_name,
                    "args": _tool_call_args(part),
                },
            }
        )
    if kind is ContentPartType.TOOL_RESULT:
        return {
            "functionResponse": {
                "name": part.tool_result_name,
                "response": {
                    "name": part.tool_result_name,
                    "content": part.tool_result_output,
                },
            }
        }
    if kind is ContentPartType.IMAGE_URL:
        return _media_part(part.data, part.image_url, part.mime_type)
    return _media_part(part.data, part.file_url, part.mime_type)


def _leading_system(messages: Iterable[Message]) -> Iterable[Message]:
    return itertools.takewhile(lambda m: m.role is Role.SYSTEM, messages)


def _system_instruction(request: LanguageModelRequest) -> dict[str, Any] | None:
    texts = [request.system] if request.system else []
    texts.extend(
        part.text
        for message in _leading_system(request.messages)
        for part in message.content
        if part.type is ContentPartType.TEXT and part.text
    )
    if not texts:
        return None
    return {"parts": [{"text": text} for text in texts]}


def _contents(messages: list[Message]) -> list[dict[str, Any]]:
    contents = []
    rest = itertools.dropwhile(lambda m: m.role is Role.SYSTEM, messages)
    for message in rest:
        mapping = _ROLES.get(message.role)
        if mapping is None:
            continue
        role, allowed = mapping
        parts = [_encode_part(p) for p in message.content if p.type in allowed]
        contents.append({"role": role, "parts": parts})
    return contents


def _thinking_config(request: LanguageModelRequest) -> dict[str, Any] | None:
    thinking = parse_provider_options(request.provider_options).thinking_config
    if thinking is None:
        return None
    cfg = _compact(
        {
            "thinkingBudget": thinking.thinking_budget,
            "includeThoughts": thinking.include_thoughts,
            "thinkingLevel": thinking.thinking_level,
        }
    )
    return cfg or None


def _generation_config(request: LanguageModelRequest) -> dict[str, Any] | None:
    settings = request.settings
    cfg: dict[str, Any] = {}
    if settings.max_tokens > 0:
        cfg["maxOutputTokens"] = settings.max_tokens
    if settings.temperature is not None:
        cfg["temperature"] = settings.temperature
    if settings.top_p is not None:
        cfg["topP"] = settings.top_p
    if settings.top_k is not None:
        cfg["topK"] = settings.top_k
    if settings.seed is not None:
        cfg["seed"] = settings.seed
    if settings.stop_sequences:
        cfg["stopSequences"] = list(settings.stop_sequences)

    thinking = _thinking_config(request)
    if thinking is not None:
        cfg["thinkingConfig"] = thinking

    output = request.output
    if output is not None:
        if output.type in _JSON_OUTPUT_TYPES:
            cfg["responseMimeType"] = "application/json"
        if output.type in _SCHEMA_OUTPUT_TYPES and output.schema is not None:
            cfg["responseSchema"] = sanitize_schema(output.schema)

    return cfg or None


def encode_native_request(request: LanguageModelRequest) -> dict[str, Any]:
    """JSON body for :streamGenerateContent, without tools or tool config."""
    body: dict[str, Any] = {"contents": _contents(request.messages)}
    system = _system_instruction(request)
    if system is not None:
        body["systemInstruction"] = system
    generation = _generation_config(request)
    if generation is not None:
        body["generationConfig"] = generation
    return body