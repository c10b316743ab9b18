"""Unified request to Chat Completions payload (shared with Azure OpenAI)."""

from typing import Any, Dict, List, Union

from ...core.normalization.messages import to_data_url
from ...models.generation import CompletionRequest
from ...models.messages import ImageBase64Part, ImageUrlPart, Message, MessageRole, TextPart


def format_content(content) -> Union[str, List[Dict[str, Any]], None]:
    """Text-only part lists collapse to a newline-joined string."""
    if isinstance(content, str):
        return content
    if all(isinstance(part, TextPart) for part in content):
        return "\n".join(part.text for part in content)

    parts: List[Dict[str, Any]] = []
    for part in content:
        if isinstance(part, TextPart):
            parts.append({"type": "text", "text": part.text})
            continue
        if isinstance(part, ImageUrlPart):
            image = {"url": part.image_url}
        else:
            image = {"url": to_data_url(part.image_base64, part.media_type)}
        if part.detail:
            image["detail"] = part.detail
        parts.append({"type": "image_url", "image_url": image})
    return parts


def format_message(message: Message) -> Dict[str, Any]:
    formatted: Dict[str, Any] = {
        "role": message.role.value,
        "content": format_content(message.content),
    }

    if message.role == MessageRole.FUNCTION:
        # legacy function results are addressed by function name
        formatted["name"] = message.name or message.tool_call_id
        return formatted

    if message.name:
        formatted["name"] = message.name
    if message.function_call:
        formatted["function_call"] = message.function_call.model_dump()
    if message.tool_calls:
        formatted["tool_calls"] = [call.model_dump() for call in message.tool_calls]
        if not formatted["content"]:
            formatted["content"] = None
    if message.role == MessageRole.TOOL:
        formatted["tool_call_id"] = message.tool_call_id
    return formatted


def build_chat_payload(
    request: CompletionRequest,
    stream: bool = False,
    include_model: bool = True,
    include_stream_usage: bool = False,
) -> Dict[str, Any]:
    """
    Assemble a Chat Completions body.

    Only parameters the caller set are sent. A single stop sequence is sent
    as a string, several as a list. Function declarations (legacy
    ``functions`` and ``tools``) are sent as ``tools``.
    """
    payload: Dict[str, Any] = {"messages": [format_message(m) for m in request.messages]}
    if include_model:
        payload["model"] = request.model

    if request.temperature is not None:
        payload["temperature"] = request.temperature
    if request.max_tokens is not None:
        payload["max_tokens"] = request.max_tokens
    if request.top_p is not None:
        payload["top_p"] = request.top_p
    stop = request.stop_sequences()
    if stop:
        payload["stop"] = stop[0] if len(stop) == 1 else stop
    if request.user:
        payload["user"] = request.user
    if request.seed is not None:
        payload["seed"] = request.seed

    definitions = request.function_definitions()
    if definitions:
        payload["tools"] = [
            {"type": "function", "function": definition.model_dump(exclude_none=True)}
            for definition in definitions
        ]

    if stream:
        payload["stream"] = True
        if include_stream_usage:
            payload["stream_options"] = {"include_usage": True}
    return payload
