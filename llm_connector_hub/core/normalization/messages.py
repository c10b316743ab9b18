"""
Message normalization helpers.

Pure functions shared by every request transformer: building messages,
pulling text out of multi-part content, separating system prompts and
decoding data URLs.
"""

import re
from typing import List, Optional, Tuple

from ...models.messages import (
    Message,
    MessageRole,
    TextPart,
    ToolCall,
)

_DATA_URL_RE = re.compile(r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def system_message(content: str) -> Message:
    return Message(role=MessageRole.SYSTEM, content=content)


def user_message(content) -> Message:
    return Message(role=MessageRole.USER, content=content)


def assistant_message(content: str = "", tool_calls: Optional[List[ToolCall]] = None) -> Message:
    return Message(role=MessageRole.ASSISTANT, content=content, tool_calls=tool_calls or None)


def tool_message(tool_call_id: str, content: str, name: Optional[str] = None) -> Message:
    return Message(role=MessageRole.TOOL, content=content, tool_call_id=tool_call_id, name=name)


def extract_text_content(message: Message, separator: str = "\n") -> str:
    """
    Return the textual content of a message.

    Image parts are skipped; text parts are joined with ``separator``.
    """
    if isinstance(message.content, str):
        return message.content
    return separator.join(part.text for part in message.content if isinstance(part, TextPart))


def split_system_messages(messages: List[Message]) -> Tuple[Optional[str], List[Message]]:
    """
    Separate system messages from the conversation.

    Returns the system texts joined by a blank line (``None`` when there are
    none) and the remaining messages in their original order.
    """
    system_parts: List[str] = []
    rest: List[Message] = []
    for message in messages:
        if message.role == MessageRole.SYSTEM:
            text = extract_text_content(message)
            if text:
                system_parts.append(text)
        else:
            rest.append(message)
    return ("\n\n".join(system_parts) if system_parts else None), rest


def parse_data_url(url: str) -> Optional[Tuple[str, str]]:
    """Split a base64 data URL into ``(media_type, data)``; ``None`` otherwise."""
    match = _DATA_URL_RE.match(url)
    if not match:
        return None
    return match.group("media_type"), match.group("data")


def to_data_url(data: str, media_type: str = "image/jpeg") -> str:
    return f"data:{media_type};base64,{data}"
