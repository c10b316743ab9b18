"""Gemini generateContent response to unified response."""

import json
from typing import Any, Dict, List, Optional, Tuple

from ...core.normalization.usage import usage_from_mapping
from ...models.generation import CompletionRequest, CompletionResponse, FinishReason
from ...models.messages import FunctionCall, Message, MessageRole, ToolCall

FINISH_REASONS = {
    "STOP": FinishReason.STOP,
    "MAX_TOKENS": FinishReason.LENGTH,
    "SAFETY": FinishReason.CONTENT_FILTER,
    "RECITATION": FinishReason.CONTENT_FILTER,
    "BLOCKLIST": FinishReason.CONTENT_FILTER,
    "PROHIBITED_CONTENT": FinishReason.CONTENT_FILTER,
    "SPII": FinishReason.CONTENT_FILTER,
}


def map_finish_reason(value: Optional[str], has_tool_calls: bool = False) -> FinishReason:
    """Gemini reports STOP after function calls; those become tool_calls."""
    reason = FINISH_REASONS.get(value or "", FinishReason.STOP)
    if reason == FinishReason.STOP and has_tool_calls:
        return FinishReason.TOOL_CALLS
    return reason


def split_parts(parts: List[Dict[str, Any]]) -> Tuple[str, List[Dict[str, Any]]]:
    """Concatenated text and raw function calls of a candidate."""
    texts = []
    calls = []
    for part in parts:
        if part.get("text"):
            texts.append(part["text"])
        call = part.get("functionCall") or part.get("function_call")
        if call:
            calls.append(call)
    return "".join(texts), calls


def to_tool_call(call: Dict[str, Any], index: int) -> ToolCall:
    """Gemini calls carry no id; ids are ``call_{index}`` in emission order."""
    return ToolCall(
        id=f"call_{index}",
        function=FunctionCall(name=call.get("name", ""), arguments=json.dumps(call.get("args") or {})),
    )


def parse_usage(data: Dict[str, Any]):
    return usage_from_mapping(data.get("usageMetadata"), "promptTokenCount", "candidatesTokenCount")


def parse_generate_response(
    data: Dict[str, Any],
    request: CompletionRequest,
    provider: str,
) -> CompletionResponse:
    metadata: Dict[str, Any] = {}
    candidates = data.get("candidates") or []

    if not candidates:
        # the prompt itself was blocked
        metadata["prompt_feedback"] = data.get("promptFeedback")
        return CompletionResponse(
            id=data.get("responseId"),
            model=data.get("modelVersion") or request.model,
            provider=provider,
            message=Message(role=MessageRole.ASSISTANT, content=""),
            finish_reason=FinishReason.CONTENT_FILTER,
            usage=parse_usage(data),
            metadata=metadata,
            raw_response=data,
        )

    candidate = candidates[0]
    text, calls = split_parts((candidate.get("content") or {}).get("parts") or [])
    tool_calls = [to_tool_call(call, i) for i, call in enumerate(calls)]
    if candidate.get("safetyRatings"):
        metadata["safety_ratings"] = candidate["safetyRatings"]

    return CompletionResponse(
        id=data.get("responseId"),
        model=data.get("modelVersion") or request.model,
        provider=provider,
        message=Message(role=MessageRole.ASSISTANT, content=text, tool_calls=tool_calls or None),
        finish_reason=map_finish_reason(candidate.get("finishReason"), bool(tool_calls)),
        usage=parse_usage(data),
        metadata=metadata,
        raw_response=data,
    )
