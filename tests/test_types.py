import pytest

from geminikit.types import (
    ContentPartType,
    Role,
    StreamEvent,
    StreamEventType,
    ToolChoice,
    file_data_part,
    file_part,
    image_data_part,
    image_url_part,
    output_array,
    output_json_object,
    output_object,
    system_message,
    text_part,
    tool_result_part,
    user_message,
)


def test_text_part_holds_text():
    part = text_part("Hello")
    assert part.type is ContentPartType.TEXT
    assert part.text == "Hello"


def test_image_parts():
    by_url = image_url_part("https://example.com/img.png")
    assert by_url.type is ContentPartType.IMAGE_URL
    assert by_url.image_url == "https://example.com/img.png"
    assert by_url.data == b""

    by_data = image_data_part(b"PNG data", "image/png")
    assert by_data.type is ContentPartType.IMAGE_URL
    assert by_data.data == b"PNG data"
    assert by_data.mime_type == "image/png"


def test_file_parts():
    by_url = file_part("https://storage.example.com/file.pdf", "application/pdf")
    assert by_url.type is ContentPartType.FILE
    assert by_url.file_url == "https://storage.example.com/file.pdf"
    assert by_url.mime_type == "application/pdf"

    by_data = file_data_part(b"PDF content", "application/pdf", "doc.pdf")
    assert by_data.data == b"PDF content"
    assert by_data.filename == "doc.pdf"


def test_tool_result_part():
    part = tool_result_part("call_1", "get_weather", "Sunny")
    assert part.type is ContentPartType.TOOL_RESULT
    assert part.tool_call_id == "call_1"
    assert part.tool_result_name == "get_weather"
    assert part.tool_result_output == "Sunny"


@pytest.mark.parametrize(
    ("factory", "role"), [(user_message, Role.USER), (system_message, Role.SYSTEM)]
)
def test_message_helpers(factory, role):
    msg = factory("hi")
    assert msg.role is role
    assert [p.text for p in msg.content] == ["hi"]


def test_tool_choice_specific():
    choice = ToolChoice.specific("my_tool")
    assert choice.type == "tool"
    assert choice.tool_name == "my_tool"
    assert ToolChoice.REQUIRED.tool_name == ""


def test_output_helpers():
    assert output_json_object().type == "json_object"
    assert output_json_object().schema is None
    schema = {"type": "object"}
    obj = output_object(schema)
    assert obj.type == "object"
    assert obj.schema == schema
    item = {"type": "string"}
    arr = output_array(item)
    assert arr.type == "array"
    assert arr.schema["items"] == item


def test_stream_event_warnings_not_shared():
    first = StreamEvent(type=StreamEventType.FINISH)
    second = StreamEvent(type=StreamEventType.FINISH)
    first.warnings.append("x")
    assert second.warnings == []