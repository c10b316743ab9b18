"""Chat Completions response to unified response (shared with Azure OpenAI)."""

from typing import Any, Dict, List, Optional

from ...core.normalization.usage import usage_from_mapping
from ...errors import ErrorKind, ProviderError
from ...models.generation import CompletionRequest, CompletionResponse, FinishReason
from ...models.messages import FunctionCall, Message, MessageRole, ToolCall

FINISH_REASONS = {
    "stop": FinishReason.STOP,
    "length": FinishReason.LENGTH,
    "tool_calls": FinishReason.TOOL_CALLS,
    "function_call": FinishReason.FUNCTION_CALL,
    "content_filter": FinishReason.CONTENT_FILTER,
}


def map_finish_reason(value: Optional[str]) -> FinishReason:
    return FINISH_REASONS.get(value or "", FinishReason.STOP)


def parse_tool_calls(raw: Optional[List[Dict[str, Any]]]) -> Optional[List[ToolCall]]:
    if not raw:
        return None
    calls = []
    for item in raw:
        function = item.get("function") or {}
        calls.append(
            ToolCall(
                id=item.get("id", ""),
                function=FunctionCall(
                    name=function.get("name", ""),
                    arguments=function.get("arguments") or "",
                ),
            )
        )
    return calls


def parse_chat_completion(
    data: Dict[str, Any],
    request: CompletionRequest,
    provider: str,
) -> CompletionResponse:
    choices = data.get("choices") or []
    if not choices:
        raise ProviderError(
            "Response contained no choices",
            provider=provider,
            kind=ErrorKind.UNKNOWN,
            original_error=data,
        )

    choice = choices[0]
    raw_message = choice.get("message") or {}
    function_call = raw_message.get("function_call")

    message = Message(
        role=MessageRole.ASSISTANT,
        content=raw_message.get("content") or "",
        tool_calls=parse_tool_calls(raw_message.get("tool_calls")),
        function_call=FunctionCall(**function_call) if function_call else None,
    )

    metadata = {}
    for key in ("created", "system_fingerprint"):
        if data.get(key) is not None:
            metadata[key] = data[key]
    if choice.get("content_filter_results"):
        metadata["content_filter_results"] = choice["content_filter_results"]

    return CompletionResponse(
        id=data.get("id"),
        model=data.get("model") or request.model,
        provider=provider,
        message=message,
        finish_reason=map_finish_reason(choice.get("finish_reason")),
        usage=usage_from_mapping(data.get("usage"), "prompt_tokens", "completion_tokens"),
        metadata=metadata,
        raw_response=data,
    )
