"""Unified request to Anthropic Messages payload."""

import json
from typing import Any, Dict, List, Optional, Tuple, Union

from ...core.normalization.messages import extract_text_content, parse_data_url, split_system_messages
from ...errors import RequestValidationError
from ...models.generation import CompletionRequest
from ...models.messages import ImageBase64Part, ImageUrlPart, Message, MessageRole, TextPart


def format_image(part: Union[ImageUrlPart, ImageBase64Part]) -> Dict[str, Any]:
    if isinstance(part, ImageBase64Part):
        source = {"type": "base64", "media_type": part.media_type, "data": part.image_base64}
    else:
        decoded = parse_data_url(part.image_url)
        if decoded:
            media_type, data = decoded
            source = {"type": "base64", "media_type": media_type, "data": data}
        else:
            source = {"type": "url", "url": part.image_url}
    return {"type": "image", "source": source}


def format_content(content) -> Union[str, List[Dict[str, Any]]]:
    if isinstance(content, str):
        return content
    return [
        {"type": "text", "text": part.text} if isinstance(part, TextPart) else format_image(part)
        for part in content
    ]


def content_blocks(content) -> List[Dict[str, Any]]:
    formatted = format_content(content)
    if isinstance(formatted, str):
        return [{"type": "text", "text": formatted}] if formatted else []
    return formatted


def parse_arguments(arguments: str, call_id: str) -> Dict[str, Any]:
    if not arguments:
        return {}
    try:
        return json.loads(arguments)
    except ValueError:
        raise RequestValidationError(
            f"arguments of tool call {call_id} are not valid JSON", "anthropic"
        ) from None


def format_messages(messages: List[Message]) -> Tuple[Optional[str], List[Dict[str, Any]]]:
    """
    Convert the conversation to Anthropic turns.

    System messages are lifted out and joined with a blank line. Tool and
    function results become ``tool_result`` blocks on a user turn: appended
    to the preceding user turn, or opening a new one after the assistant's
    ``tool_use`` turn.
    """
    system, conversation = split_system_messages(messages)
    formatted: List[Dict[str, Any]] = []

    for message in conversation:
        if message.role in (MessageRole.TOOL, MessageRole.FUNCTION):
            block = {
                "type": "tool_result",
                "tool_use_id": message.tool_call_id,
                "content": extract_text_content(message),
            }
            if formatted and formatted[-1]["role"] == "user":
                previous = formatted[-1]
                if isinstance(previous["content"], str):
                    previous["content"] = content_blocks(previous["content"])
                previous["content"].append(block)
            else:
                formatted.append({"role": "user", "content": [block]})
            continue

        if message.role == MessageRole.ASSISTANT and message.tool_calls:
            blocks = content_blocks(message.content)
            for call in message.tool_calls:
                blocks.append({
                    "type": "tool_use",
                    "id": call.id,
                    "name": call.function.name,
                    "input": parse_arguments(call.function.arguments, call.id),
                })
            formatted.append({"role": "assistant", "content": blocks})
            continue

        formatted.append({"role": message.role.value, "content": format_content(message.content)})

    return system, formatted


def build_messages_payload(request: CompletionRequest, max_tokens: int, stream: bool = False) -> Dict[str, Any]:
    system, messages = format_messages(request.messages)
    payload: Dict[str, Any] = {
        "model": request.model,
        "messages": messages,
        "max_tokens": max_tokens,
    }
    if system:
        payload["system"] = system
    if request.temperature is not None:
        payload["temperature"] = request.temperature
    if request.top_p is not None:
        payload["top_p"] = request.top_p
    if request.top_k is not None:
        payload["top_k"] = request.top_k
    stop = request.stop_sequences()
    if stop:
        payload["stop_sequences"] = stop
    if request.user:
        payload["metadata"] = {"user_id": request.user}

    definitions = request.function_definitions()
    if definitions:
        payload["tools"] = [
            {
                "name": definition.name,
                "description": definition.description or "",
                "input_schema": definition.parameters,
            }
            for definition in definitions
        ]

    if stream:
        payload["stream"] = True
    return payload
