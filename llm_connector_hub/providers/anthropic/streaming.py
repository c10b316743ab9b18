"""
Anthropic block-lifecycle stream handling.

A stream is a sequence of named events: ``message_start``, then for every
content block ``content_block_start`` / ``content_block_delta``* /
``content_block_stop``, then ``message_delta`` (stop reason and output
usage) and ``message_stop``. ``ping`` events are heartbeats.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ...core.normalization.usage import build_usage
from ...models.generation import StreamChunk, Usage
from ...models.messages import FunctionCall, MessageRole, ToolCall
from .parsers import map_stop_reason


@dataclass
class ContentBlockState:
    type: str
    text: str = ""
    id: Optional[str] = None
    name: Optional[str] = None
    partial_json: str = ""
    closed: bool = False


class AnthropicStreamAccumulator:
    """Per-stream content block state keyed by block index."""

    def __init__(self):
        self.blocks: Dict[int, ContentBlockState] = {}
        self.message_id: Optional[str] = None
        self.model: Optional[str] = None
        self.input_tokens: Optional[int] = None
        self.output_tokens: Optional[int] = None

    def start_message(self, message: Dict[str, Any]) -> None:
        self.message_id = message.get("id")
        self.model = message.get("model")
        usage = message.get("usage") or {}
        self.input_tokens = usage.get("input_tokens")
        self.output_tokens = usage.get("output_tokens")

    def start_block(self, index: int, block: Dict[str, Any]) -> None:
        self.blocks[index] = ContentBlockState(
            type=block.get("type", "text"),
            text=block.get("text") or "",
            id=block.get("id"),
            name=block.get("name"),
        )

    def append_text(self, index: int, text: str) -> None:
        self.blocks.setdefault(index, ContentBlockState(type="text")).text += text

    def append_json(self, index: int, partial_json: str) -> None:
        self.blocks.setdefault(index, ContentBlockState(type="tool_use")).partial_json += partial_json

    def stop_block(self, index: int) -> None:
        if index in self.blocks:
            self.blocks[index].closed = True

    @property
    def content(self) -> str:
        return "".join(block.text for _, block in sorted(self.blocks.items()) if block.type == "text")

    def completed_tool_calls(self) -> List[ToolCall]:
        return [
            ToolCall(
                id=block.id,
                function=FunctionCall(name=block.name, arguments=block.partial_json or "{}"),
            )
            for _, block in sorted(self.blocks.items())
            if block.type == "tool_use" and block.id and block.name
        ]

    def usage(self) -> Optional[Usage]:
        return build_usage(self.input_tokens, self.output_tokens)


def transform_event(data: Dict[str, Any], accumulator: AnthropicStreamAccumulator) -> Optional[StreamChunk]:
    """Turn one stream event into a StreamChunk; ``error`` events are handled by the caller."""
    event_type = data.get("type")

    if event_type == "message_start":
        accumulator.start_message(data.get("message") or {})
        return StreamChunk(role=MessageRole.ASSISTANT)

    if event_type == "content_block_start":
        block = data.get("content_block") or {}
        accumulator.start_block(data.get("index", 0), block)
        if block.get("type") == "text" and block.get("text"):
            return StreamChunk(content=block["text"])
        return None

    if event_type == "content_block_delta":
        index = data.get("index", 0)
        delta = data.get("delta") or {}
        if delta.get("type") == "text_delta" and delta.get("text"):
            accumulator.append_text(index, delta["text"])
            return StreamChunk(content=delta["text"])
        if delta.get("type") == "input_json_delta":
            accumulator.append_json(index, delta.get("partial_json") or "")
        return None

    if event_type == "content_block_stop":
        accumulator.stop_block(data.get("index", 0))
        return None

    if event_type == "message_delta":
        usage = data.get("usage") or {}
        if usage.get("output_tokens") is not None:
            accumulator.output_tokens = usage["output_tokens"]
        delta = data.get("delta") or {}
        if not delta.get("stop_reason"):
            return None
        return StreamChunk(
            finish_reason=map_stop_reason(delta["stop_reason"]),
            tool_calls=accumulator.completed_tool_calls() or None,
            usage=accumulator.usage(),
        )

    # message_stop, ping and unknown event types
    return None
