"""
Gemini stream handling.

With ``alt=sse`` every record is a complete GenerateContentResponse holding
the next slice of the candidate. Function calls arrive whole; usage
metadata is cumulative and is reported on the finishing record.
"""

from typing import Any, Dict, List, Optional

from ...models.generation import FinishReason, StreamChunk, Usage
from ...models.messages import MessageRole, ToolCall
from .parsers import map_finish_reason, parse_usage, split_parts, to_tool_call


class GoogleStreamAccumulator:
    def __init__(self):
        self.content = ""
        self.function_calls: List[Dict[str, Any]] = []
        self.role_sent = False
        self.usage: Optional[Usage] = None

    def tool_calls(self) -> List[ToolCall]:
        return [to_tool_call(call, i) for i, call in enumerate(self.function_calls)]


def transform_chunk(data: Dict[str, Any], accumulator: GoogleStreamAccumulator) -> Optional[StreamChunk]:
    fields: Dict[str, Any] = {}

    usage = parse_usage(data)
    if usage is not None:
        accumulator.usage = usage

    candidates = data.get("candidates") or []
    if not candidates:
        if (data.get("promptFeedback") or {}).get("blockReason"):
            return StreamChunk(finish_reason=FinishReason.CONTENT_FILTER, usage=accumulator.usage)
        return None

    if not accumulator.role_sent:
        fields["role"] = MessageRole.ASSISTANT
        accumulator.role_sent = True

    candidate = candidates[0]
    text, calls = split_parts((candidate.get("content") or {}).get("parts") or [])
    if text:
        accumulator.content += text
        fields["content"] = text
    accumulator.function_calls.extend(calls)

    if candidate.get("finishReason"):
        tool_calls = accumulator.tool_calls()
        fields["finish_reason"] = map_finish_reason(candidate["finishReason"], bool(tool_calls))
        if tool_calls:
            fields["tool_calls"] = tool_calls
        if accumulator.usage is not None:
            fields["usage"] = accumulator.usage

    if not fields:
        return None
    return StreamChunk(**fields)
