"""Unified data model shared by every provider adapter."""

from .generation import (
    CompletionRequest,
    CompletionResponse,
    FinishReason,
    FunctionCallDelta,
    HealthCheckResult,
    ProviderCapabilities,
    ProviderMetadata,
    ProviderType,
    StreamChunk,
    Usage,
)
from .messages import (
    ContentPart,
    FunctionCall,
    FunctionDefinition,
    ImageBase64Part,
    ImageUrlPart,
    Message,
    MessageRole,
    TextPart,
    ToolCall,
    ToolDefinition,
)

__all__ = [
    "CompletionRequest",
    "CompletionResponse",
    "ContentPart",
    "FinishReason",
    "FunctionCall",
    "FunctionCallDelta",
    "FunctionDefinition",
    "HealthCheckResult",
    "ImageBase64Part",
    "ImageUrlPart",
    "Message",
    "MessageRole",
    "ProviderCapabilities",
    "ProviderMetadata",
    "ProviderType",
    "StreamChunk",
    "TextPart",
    "ToolCall",
    "ToolDefinition",
    "Usage",
]
