"""
LLM Connector Hub - one interface over several LLM vendor APIs.

This package provides a unified data model and provider adapters for:
- OpenAI (Chat Completions)
- Anthropic (Messages)
- Azure OpenAI
- Google Gemini

Features:
- Vendor-neutral requests, responses and stream chunks
- Normalized error taxonomy with retryability
- Retries with exponential backoff, jitter and retry-after support
- Incremental SSE decoding with tool-call accumulation
"""

__version__ = "0.1.0"

from .errors import (
    ErrorKind,
    MappedError,
    ProviderConfigError,
    ProviderError,
    RequestValidationError,
)
from .models import (
    CompletionRequest,
    CompletionResponse,
    FinishReason,
    FunctionCall,
    FunctionDefinition,
    HealthCheckResult,
    ImageBase64Part,
    ImageUrlPart,
    Message,
    MessageRole,
    ProviderCapabilities,
    ProviderMetadata,
    ProviderType,
    StreamChunk,
    TextPart,
    ToolCall,
    ToolDefinition,
    Usage,
)
from .core.normalization import (
    assistant_message,
    estimate_tokens,
    extract_text_content,
    system_message,
    tool_message,
    truncate_to_tokens,
    user_message,
)
from .reliability import RetryConfig, RetryManager
from .providers import (
    AnthropicProvider,
    AzureOpenAIProvider,
    GoogleProvider,
    OpenAIProvider,
    ProviderAdapter,
    available_providers,
    create_provider,
    create_provider_from_env,
)

__all__ = [
    # Providers
    "ProviderAdapter",
    "OpenAIProvider",
    "AnthropicProvider",
    "AzureOpenAIProvider",
    "GoogleProvider",
    "available_providers",
    "create_provider",
    "create_provider_from_env",

    # Models
    "CompletionRequest",
    "CompletionResponse",
    "FinishReason",
    "FunctionCall",
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

    # Errors
    "ErrorKind",
    "MappedError",
    "ProviderConfigError",
    "ProviderError",
    "RequestValidationError",

    # Helpers
    "assistant_message",
    "estimate_tokens",
    "extract_text_content",
    "system_message",
    "tool_message",
    "truncate_to_tokens",
    "user_message",

    # Reliability
    "RetryConfig",
    "RetryManager",
]
