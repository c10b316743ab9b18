"""Anthropic Messages response to unified response."""

import json
from typing import Any, Dict, List, Optional

from ...core.normalization.usage import usage_from_mapping
from ...models.generation import CompletionRequest, CompletionResponse, FinishReason
from ...models.messages import FunctionCall, Message, MessageRole, ToolCall

STOP_REASONS = {
    "end_turn": FinishReason.STOP,
    "stop_sequence": FinishReason.STOP,
    "max_tokens": FinishReason.LENGTH,
    "tool_use": FinishReason.TOOL_CALLS,
}


def map_stop_reason(value: Optional[str]) -> FinishReason:
    return STOP_REASONS.get(value or "", FinishReason.STOP)


def parse_messages_response(
    data: Dict[str, Any],
    request: CompletionRequest,
    provider: str,
) -> CompletionResponse:
    texts: List[str] = []
    tool_calls: List[ToolCall] = []
    for block in data.get("content") or []:
        if block.get("type") == "text":
            texts.append(block.get("text", ""))
        elif block.get("type") == "tool_use":
            tool_calls.append(
                ToolCall(
                    id=block.get("id", ""),
                    function=FunctionCall(
                        name=block.get("name", ""),
                        arguments=json.dumps(block.get("input") or {}),
                    ),
                )
            )

    metadata = {}
    if data.get("stop_sequence"):
        metadata["stop_sequence"] = data["stop_sequence"]

    return CompletionResponse(
        id=data.get("id"),
        model=data.get("model") or request.model,
        provider=provider,
        message=Message(
            role=MessageRole.ASSISTANT,
            content="".join(texts),
            tool_calls=tool_calls or None,
        ),
        finish_reason=map_stop_reason(data.get("stop_reason")),
        usage=usage_from_mapping(data.get("usage"), "input_tokens", "output_tokens"),
        metadata=metadata,
        raw_response=data,
    )
