"""
Chat Completions stream handling (shared with Azure OpenAI).

Chunks carry ``choices[0].delta`` fragments. Tool call fragments are keyed
by index: the id and name arrive once, the JSON arguments arrive in pieces
and are concatenated. Complete tool calls are only released on the chunk
that carries ``finish_reason``.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ...core.normalization.usage import usage_from_mapping
from ...models.generation import FunctionCallDelta, StreamChunk, Usage
from ...models.messages import FunctionCall, MessageRole, ToolCall
from .parsers import map_finish_reason

ROLES = {role.value for role in MessageRole}


@dataclass
class ToolCallState:
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: str = ""


class OpenAIStreamAccumulator:
    """Per-stream state; one instance per stream, never shared."""

    def __init__(self):
        self.content = ""
        self.function_name: Optional[str] = None
        self.function_arguments = ""
        self.tool_calls: Dict[int, ToolCallState] = {}
        self.usage: Optional[Usage] = None

    def add_content(self, text: str) -> None:
        self.content += text

    def add_function_call(self, delta: Dict[str, Any]) -> None:
        if delta.get("name") and self.function_name is None:
            self.function_name = delta["name"]
        if delta.get("arguments"):
            self.function_arguments += delta["arguments"]

    def add_tool_call(self, delta: Dict[str, Any]) -> None:
        state = self.tool_calls.setdefault(delta.get("index", 0), ToolCallState())
        if delta.get("id"):
            state.id = delta["id"]
        function = delta.get("function") or {}
        if function.get("name") and state.name is None:
            state.name = function["name"]
        if function.get("arguments"):
            state.arguments += function["arguments"]

    def function_call(self) -> Optional[FunctionCall]:
        if self.function_name is None:
            return None
        return FunctionCall(name=self.function_name, arguments=self.function_arguments)

    def completed_tool_calls(self) -> List[ToolCall]:
        """Tool calls in index order; entries missing an id or name are dropped."""
        return [
            ToolCall(id=state.id, function=FunctionCall(name=state.name, arguments=state.arguments))
            for _, state in sorted(self.tool_calls.items())
            if state.id and state.name
        ]


def transform_chunk(data: Dict[str, Any], accumulator: OpenAIStreamAccumulator) -> Optional[StreamChunk]:
    """Turn one decoded stream record into a StreamChunk (``None`` if empty)."""
    fields: Dict[str, Any] = {}

    usage = usage_from_mapping(data.get("usage"), "prompt_tokens", "completion_tokens")
    if usage is not None:
        accumulator.usage = usage
        fields["usage"] = usage

    choices = data.get("choices") or []
    if choices:
        choice = choices[0]
        delta = choice.get("delta") or {}

        if delta.get("role") in ROLES:
            fields["role"] = MessageRole(delta["role"])
        if delta.get("content"):
            accumulator.add_content(delta["content"])
            fields["content"] = delta["content"]
        if delta.get("function_call"):
            accumulator.add_function_call(delta["function_call"])
            fields["function_call"] = FunctionCallDelta(
                name=delta["function_call"].get("name"),
                arguments=delta["function_call"].get("arguments"),
            )
        for tool_delta in delta.get("tool_calls") or []:
            accumulator.add_tool_call(tool_delta)

        if choice.get("finish_reason"):
            fields["finish_reason"] = map_finish_reason(choice["finish_reason"])
            completed = accumulator.completed_tool_calls()
            if completed:
                fields["tool_calls"] = completed

    if not fields:
        return None
    return StreamChunk(**fields)
