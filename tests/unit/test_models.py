"""Tests for the unified data model."""

import pytest
from pydantic import ValidationError

from llm_connector_hub.models import (
    CompletionRequest,
    CompletionResponse,
    FinishReason,
    FunctionDefinition,
    ImageBase64Part,
    Message,
    MessageRole,
    StreamChunk,
    TextPart,
    ToolDefinition,
    Usage,
)


class TestMessage:
    """Message invariants."""

    def test_tool_message_requires_tool_call_id(self):
        with pytest.raises(ValidationError):
            Message(role=MessageRole.TOOL, content="42")

    def test_function_message_requires_tool_call_id(self):
        with pytest.raises(ValidationError):
            Message(role="function", content="42", name="lookup")

    def test_tool_message_with_reference(self):
        message = Message(role="tool", content="42", tool_call_id="call_1")
        assert message.role == MessageRole.TOOL
        assert message.tool_call_id == "call_1"

    def test_content_parts_are_discriminated(self):
        message = Message(
            role="user",
            content=[
                {"type": "text", "text": "What is this?"},
                {"type": "image_base64", "image_base64": "AAAA", "media_type": "image/png"},
            ],
        )
        assert isinstance(message.content[0], TextPart)
        assert isinstance(message.content[1], ImageBase64Part)
        assert message.content[1].media_type == "image/png"

    def test_unknown_content_part_rejected(self):
        with pytest.raises(ValidationError):
            Message(role="user", content=[{"type": "audio", "data": "..."}])


class TestUsage:
    """Token accounting."""

    @pytest.mark.parametrize("prompt,completion", [(0, 0), (10, 5), (1234, 1)])
    def test_total_is_sum(self, prompt, completion):
        usage = Usage(prompt_tokens=prompt, completion_tokens=completion)
        assert usage.total_tokens == prompt + completion

    def test_reported_total_is_recomputed(self):
        usage = Usage(prompt_tokens=3, completion_tokens=4, total_tokens=99)
        assert usage.total_tokens == 7


class TestCompletionRequest:
    def test_stop_sequences_normalized(self):
        assert CompletionRequest(model="m", stop="END").stop_sequences() == ["END"]
        assert CompletionRequest(model="m", stop=["a", "b"]).stop_sequences() == ["a", "b"]
        assert CompletionRequest(model="m").stop_sequences() == []

    def test_function_definitions_merge_functions_and_tools(self):
        request = CompletionRequest(
            model="m",
            functions=[FunctionDefinition(name="a")],
            tools=[ToolDefinition(function=FunctionDefinition(name="b"))],
        )
        assert [d.name for d in request.function_definitions()] == ["a", "b"]

    def test_out_of_range_values_accepted_until_validation(self):
        # range checks belong to ProviderAdapter.validate_request
        request = CompletionRequest(model="m", temperature=5, max_tokens=-1)
        assert request.temperature == 5


class TestCompletionResponse:
    def test_content_and_tool_calls_accessors(self):
        response = CompletionResponse(
            model="m",
            provider="openai",
            message=Message(role="assistant", content="hi"),
            finish_reason=FinishReason.STOP,
        )
        assert response.content == "hi"
        assert response.tool_calls == []
        assert response.usage is None


class TestStreamChunk:
    def test_empty_chunk(self):
        assert StreamChunk().is_empty()
        assert not StreamChunk(content="x").is_empty()
        assert not StreamChunk(finish_reason=FinishReason.STOP).is_empty()
