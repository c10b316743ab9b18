from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class MessageRole(str, Enum):
    """Conversation roles understood by every provider."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    FUNCTION = "function"


class TextPart(BaseModel):
    """Plain text content part."""
    type: Literal["text"] = "text"
    text: str


class ImageUrlPart(BaseModel):
    """Image referenced by URL (http(s) or a data URL)."""
    type: Literal["image_url"] = "image_url"
    image_url: str
    detail: Optional[Literal["auto", "low", "high"]] = None


class ImageBase64Part(BaseModel):
    """Inline base64 image without the data URL prefix."""
    type: Literal["image_base64"] = "image_base64"
    image_base64: str
    media_type: str = Field(default="image/jpeg", description="MIME type of the encoded image")
    detail: Optional[Literal["auto", "low", "high"]] = None


ContentPart = Annotated[
    Union[TextPart, ImageUrlPart, ImageBase64Part],
    Field(discriminator="type"),
]


class FunctionCall(BaseModel):
    """A function invocation; arguments is a JSON-encoded string."""
    name: str
    arguments: str = ""


class ToolCall(BaseModel):
    """A tool invocation emitted by the assistant."""
    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class Message(BaseModel):
    """
    Unified conversation message.

    Content is either a plain string or an ordered list of typed parts.
    Tool and function results must reference the call they answer through
    ``tool_call_id``.
    """
    role: MessageRole
    content: Union[str, List[ContentPart]] = ""
    name: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_call_id: Optional[str] = None

    @model_validator(mode="after")
    def check_tool_reference(self):
        if self.role in (MessageRole.TOOL, MessageRole.FUNCTION) and not self.tool_call_id:
            raise ValueError(f"{self.role.value} messages require tool_call_id")
        return self


class FunctionDefinition(BaseModel):
    """Declaration of a callable function exposed to the model."""
    name: str
    description: Optional[str] = None
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        description="JSON schema of the function arguments",
    )


class ToolDefinition(BaseModel):
    """Tool wrapper around a function declaration."""
    type: Literal["function"] = "function"
    function: FunctionDefinition
