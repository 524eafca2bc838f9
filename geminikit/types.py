"""Core request, message and stream-event types shared by the Gemini models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


class GeminiError(Exception):
    """Raised when a Gemini request cannot be built, sent or decoded."""


class Role(str, Enum):
    """Author of a conversation message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ContentPartType(str, Enum):
    """Kind of content carried by a message part."""

    TEXT = "text"
    IMAGE_URL = "image_url"
    FILE = "file"
    REASONING = "reasoning"
    TOOL_CALL = "tool_call"
    TOOL_RESULT = "tool_result"


@dataclass
class ContentPart:
    """One piece of a message: text, media, reasoning, a tool call or a tool result."""

    type: ContentPartType
    text: str = ""
    image_url: str = ""
    file_url: str = ""
    data: bytes = b""
    mime_type: str = ""
    filename: str = ""
    reasoning_text: str = ""
    thought_signature: str = ""
    tool_call_id: str = ""
    tool_call_name: str = ""
    tool_call_args: str = ""
    tool_result_name: str = ""
    tool_result_output: str = ""


@dataclass
class Message:
    """A conversation message with its role and content parts."""

    role: Role
    content: list[ContentPart] = field(default_factory=list)


@dataclass
class ToolDefinition:
    """A function tool the model may call."""

    name: str
    description: str = ""
    input_schema: dict[str, Any] | None = None


@dataclass(frozen=True)
class ToolChoice:
    """How the model is allowed to choose tools."""

    type: str
    tool_name: str = ""

    AUTO: ClassVar[ToolChoice]
    NONE: ClassVar[ToolChoice]
    REQUIRED: ClassVar[ToolChoice]

    @classmethod
    def specific(cls, tool_name: str) -> ToolChoice:
        """Force a call to the named tool."""
        return cls("tool", tool_name)


ToolChoice.AUTO = ToolChoice("auto")
ToolChoice.NONE = ToolChoice("none")
ToolChoice.REQUIRED = ToolChoice("required")


@dataclass
class CallSettings:
    """Sampling and length settings for a generation call."""

    max_tokens: int = 0
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    seed: int | None = None
    stop_sequences: list[str] = field(default_factory=list)


@dataclass
class Output:
    """Requested structured output format."""

    type: str
    schema: dict[str, Any] | None = None


@dataclass
class LanguageModelRequest:
    """Everything needed for one language-model call."""

    system: str = ""
    messages: list[Message] = field(default_factory=list)
    tools: list[ToolDefinition] = field(default_factory=list)
    tool_choice: ToolChoice | None = None
    settings: CallSettings = field(default_factory=CallSettings)
    output: Output | None = None
    provider_options: dict[str, Any] | None = None


class StreamEventType(str, Enum):
    """Kind of a normalized stream event."""

    TEXT_DELTA = "text_delta"
    REASONING_DELTA = "reasoning_delta"
    TOOL_CALL_DELTA = "tool_call_delta"
    SOURCE = "source"
    USAGE = "usage"
    FINISH = "finish"
    ERROR = "error"


class FinishReason(str, Enum):
    """Normalized reason why generation stopped."""

    STOP = "stop"
    LENGTH = "length"
    TOOL_CALLS = "tool_calls"
    CONTENT_FILTER = "content_filter"
    ERROR = "error"
    UNKNOWN = "unknown"


@dataclass
class Source:
    """A grounding source cited by the model."""

    source_type: str
    url: str = ""
    title: str = ""
    provider_metadata: dict[str, Any] | None = None


@dataclass
class Usage:
    """Token counts reported for a call."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    reasoning_tokens: int = 0


@dataclass
class Warning:
    """Advisory about a setting that the provider ignores."""

    type: str
    setting: str = ""
    message: str = ""


@dataclass
class StreamEvent:
    """A normalized event emitted while streaming a response."""

    type: StreamEventType
    text_delta: str = ""
    tool_call_index: int = 0
    tool_call_id: str = ""
    tool_call_name: str = ""
    tool_call_args_delta: str = ""
    thought_signature: str = ""
    source: Source | None = None
    usage: Usage | None = None
    finish_reason: FinishReason | None = None
    raw_finish_reason: str = ""
    provider_metadata: dict[str, Any] | None = None
    warnings: list[Warning] = field(default_factory=list)
    error: BaseException | None = None


def text_part(text: str) -> ContentPart:
    """A plain text part."""
    return ContentPart(type=ContentPartType.TEXT, text=text)


def image_url_part(url: str) -> ContentPart:
    """An image referenced by URL or data URI."""
    return ContentPart(type=ContentPartType.IMAGE_URL, image_url=url)


def image_data_part(data: bytes, mime_type: str) -> ContentPart:
    """An image given as raw bytes."""
    return ContentPart(type=ContentPartType.IMAGE_URL, data=bytes(data), mime_type=mime_type)


def file_part(url: str, mime_type: str) -> ContentPart:
    """A file referenced by URL or data URI."""
    return ContentPart(type=ContentPartType.FILE, file_url=url, mime_type=mime_type)


def file_data_part(data: bytes, mime_type: str, filename: str) -> ContentPart:
    """A file given as raw bytes."""
    return ContentPart(
        type=ContentPartType.FILE, data=bytes(data), mime_type=mime_type, filename=filename
    )


def tool_result_part(tool_call_id: str, tool_name: str, output: str) -> ContentPart:
    """The result of a tool call."""
    return ContentPart(
        type=ContentPartType.TOOL_RESULT,
        tool_call_id=tool_call_id,
        tool_result_name=tool_name,
        tool_result_output=output,
    )


def user_message(text: str) -> Message:
    """A user message holding one text part."""
    return Message(role=Role.USER, content=[text_part(text)])


def system_message(text: str) -> Message:
    """A system message holding one text part."""
    return Message(role=Role.SYSTEM, content=[text_part(text)])


def output_json_object() -> Output:
    """Ask for free-form JSON output."""
    return Output(type="json_object")


def output_object(schema: dict[str, Any]) -> Output:
    """Ask for a JSON object matching the schema."""
    return Output(type="object", schema=schema)


def output_array(item_schema: dict[str, Any]) -> Output:
    """Ask for a JSON array whose items match the item schema."""
    return Output(type="array", schema={"type": "array", "items": item_schema})