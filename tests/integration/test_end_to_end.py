"""
End-to-end conversations through the provider facade.

Each scenario drives a full tool round trip against a mocked vendor API:
the model asks for a tool, the caller answers, the model replies.
"""

import json

import pytest

from llm_connector_hub.core.normalization import system_message, tool_message, user_message
from llm_connector_hub.models import CompletionRequest, FinishReason, Message, MessageRole
from tests.helpers.http_mocks import json_response, split_bytes, sse_events, sse_lines, stream_response

pytestmark = pytest.mark.integration

ARGS = {"location": "Paris"}


def openai_tool_call():
    return {
        "id": "chatcmpl-1",
        "model": "gpt-4o-mini",
        "choices": [{
            "index": 0,
            "message": {
                "role": "assistant",
                "content": None,
                "tool_calls": [{"id": "call_1", "type": "function", "function": {"name": "get_weather", "arguments": json.dumps(ARGS)}}],
            },
            "finish_reason": "tool_calls",
        }],
        "usage": {"prompt_tokens": 30, "completion_tokens": 10},
    }


def openai_text(text):
    return {
        "id": "chatcmpl-2",
        "model": "gpt-4o-mini",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": text}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 45, "completion_tokens": 6},
    }


def openai_stream(pieces):
    chunks = [{"choices": [{"index": 0, "delta": {"role": "assistant"}, "finish_reason": None}]}]
    chunks += [{"choices": [{"index": 0, "delta": {"content": p}, "finish_reason": None}]} for p in pieces]
    chunks.append({"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]})
    return sse_lines(chunks)


def anthropic_tool_call():
    return {
        "id": "msg_1",
        "model": "claude-3-5-sonnet-20241022",
        "content": [{"type": "tool_use", "id": "toolu_1", "name": "get_weather", "input": ARGS}],
        "stop_reason": "tool_use",
        "usage": {"input_tokens": 30, "output_tokens": 10},
    }


def anthropic_text(text):
    return {
        "id": "msg_2",
        "model": "claude-3-5-sonnet-20241022",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": 45, "output_tokens": 6},
    }


def anthropic_stream(pieces):
    events = [
        {"type": "message_start", "message": {"id": "msg_3", "usage": {"input_tokens": 45, "output_tokens": 1}}},
        {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
    ]
    events += [{"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": p}} for p in pieces]
    events += [
        {"type": "content_block_stop", "index": 0},
        {"type": "message_delta", "delta": {"stop_reason": "end_turn"}, "usage": {"output_tokens": 6}},
        {"type": "message_stop"},
    ]
    return sse_events(events)


def google_tool_call():
    return {
        "candidates": [{
            "content": {"role": "model", "parts": [{"functionCall": {"name": "get_weather", "args": ARGS}}]},
            "finishReason": "STOP",
        }],
        "usageMetadata": {"promptTokenCount": 30, "candidatesTokenCount": 10},
    }


def google_text(text):
    return {
        "candidates": [{"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}],
        "usageMetadata": {"promptTokenCount": 45, "candidatesTokenCount": 6},
    }


def google_stream(pieces):
    records = [{"candidates": [{"content": {"role": "model", "parts": [{"text": p}]}}]} for p in pieces]
    records[-1]["candidates"][0]["finishReason"] = "STOP"
    return sse_lines(records, done=False)


SCENARIOS = {
    "openai": (openai_tool_call, openai_text, openai_stream, "gpt-4o-mini"),
    "azure": (openai_tool_call, openai_text, openai_stream, "gpt-4o"),
    "anthropic": (anthropic_tool_call, anthropic_text, anthropic_stream, "claude-3-5-sonnet-20241022"),
    "google": (google_tool_call, google_text, google_stream, "gemini-1.5-flash"),
}


@pytest.fixture(params=sorted(SCENARIOS))
def scenario(request):
    name = request.param
    provider = request.getfixturevalue(f"{name}_provider")
    return name, provider, SCENARIOS[name]


@pytest.mark.asyncio
async def test_tool_round_trip(scenario, mock_server, weather_tool):
    name, provider, (tool_call, text, _, model) = scenario
    mock_server.enqueue(json_response(tool_call()), json_response(text("It is 18C and sunny in Paris.")))

    conversation = [system_message("You answer weather questions."), user_message("Weather in Paris?")]
    first = await provider.complete(CompletionRequest(model=model, messages=conversation, tools=[weather_tool]))

    assert first.finish_reason == FinishReason.TOOL_CALLS
    call = first.tool_calls[0]
    assert call.function.name == "get_weather"
    assert json.loads(call.function.arguments) == ARGS

    conversation = conversation + [first.message, tool_message(call.id, "18C and sunny")]
    second = await provider.complete(CompletionRequest(model=model, messages=conversation, tools=[weather_tool]))

    assert second.finish_reason == FinishReason.STOP
    assert second.content == "It is 18C and sunny in Paris."
    assert second.usage.total_tokens == 51
    assert len(mock_server.requests) == 2
    assert "18C and sunny" in mock_server.last_request.content.decode()


@pytest.mark.asyncio
async def test_stream_equals_complete(scenario, mock_server):
    name, provider, (_, text, stream, model) = scenario
    pieces = ["It is ", "18C", " and sunny", " in Paris", "."]
    mock_server.enqueue(
        json_response(text("".join(pieces))),
        stream_response(split_bytes(stream(pieces), 11)),
    )
    request = CompletionRequest(model=model, messages=[user_message("Weather in Paris?")])

    completed = await provider.complete(request)
    chunks = [chunk async for chunk in provider.stream(request)]

    assert "".join(c.content or "" for c in chunks) == completed.content
    assert [c.role for c in chunks if c.role] == [MessageRole.ASSISTANT]
    finishes = [c.finish_reason for c in chunks if c.finish_reason]
    assert finishes == [completed.finish_reason]


@pytest.mark.asyncio
async def test_assistant_reply_can_be_fed_back(scenario, mock_server):
    name, provider, (_, text, _, model) = scenario
    mock_server.enqueue(json_response(text("Hi!")), json_response(text("Bye!")))

    first = await provider.complete(CompletionRequest(model=model, messages=[user_message("Hello")]))
    history = [user_message("Hello"), first.message, user_message("Goodbye")]
    second = await provider.complete(CompletionRequest(model=model, messages=history))

    assert isinstance(first.message, Message)
    assert second.content == "Bye!"
