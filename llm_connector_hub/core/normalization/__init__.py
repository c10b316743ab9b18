"""Shared normalization helpers used by provider transformers."""

from .messages import (
    assistant_message,
    extract_text_content,
    parse_data_url,
    split_system_messages,
    system_message,
    to_data_url,
    tool_message,
    user_message,
)
from .tokens import estimate_tokens, truncate_to_tokens
from .usage import build_usage, usage_from_mapping

__all__ = [
    "assistant_message",
    "build_usage",
    "estimate_tokens",
    "extract_text_content",
    "parse_data_url",
    "split_system_messages",
    "system_message",
    "to_data_url",
    "tool_message",
    "truncate_to_tokens",
    "usage_from_mapping",
    "user_message",
]
