from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ..errors import ErrorKind
from .messages import FunctionDefinition, Message, MessageRole, ToolCall, ToolDefinition


class ProviderType(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    AZURE = "azure"
    GOOGLE = "google"


class FinishReason(str, Enum):
    """Normalized reason a generation stopped."""
    STOP = "stop"
    LENGTH = "length"
    TOOL_CALLS = "tool_calls"
    CONTENT_FILTER = "content_filter"
    FUNCTION_CALL = "function_call"


class CompletionRequest(BaseModel):
    """
    Vendor-neutral completion request.

    Range checks are intentionally not enforced here; adapters reject
    malformed requests in ``validate_request`` before anything is sent.
    """
    model: str = Field(..., description="Model (or deployment) identifier")
    messages: List[Message] = Field(default_factory=list, description="Ordered conversation")
    temperature: Optional[float] = Field(None, description="Sampling temperature (0..2)")
    max_tokens: Optional[int] = Field(None, description="Maximum tokens to generate")
    top_p: Optional[float] = Field(None, description="Nucleus sampling parameter (0..1)")
    top_k: Optional[int] = Field(None, description="Top-k sampling where supported")
    stop: Optional[Union[str, List[str]]] = Field(None, description="Stop sequences")
    user: Optional[str] = Field(None, description="End-user identifier forwarded to the vendor")
    seed: Optional[int] = Field(None, description="Random seed where supported")
    functions: Optional[List[FunctionDefinition]] = None
    tools: Optional[List[ToolDefinition]] = None

    def stop_sequences(self) -> List[str]:
        """Stop sequences as a list regardless of how they were given."""
        if self.stop is None:
            return []
        if isinstance(self.stop, str):
            return [self.stop]
        return list(self.stop)

    def function_definitions(self) -> List[FunctionDefinition]:
        """Functions declared either directly or through tools."""
        definitions = list(self.functions or [])
        definitions.extend(tool.function for tool in self.tools or [])
        return definitions


class Usage(BaseModel):
    """Token accounting; total is always prompt + completion."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @model_validator(mode="after")
    def derive_total(self):
        self.total_tokens = self.prompt_tokens + self.completion_tokens
        return self


class CompletionResponse(BaseModel):
    """Normalized completion result."""
    id: Optional[str] = None
    model: str
    provider: str
    message: Message
    finish_reason: FinishReason = FinishReason.STOP
    usage: Optional[Usage] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    raw_response: Optional[Dict[str, Any]] = Field(None, exclude=True)

    @property
    def content(self) -> str:
        if isinstance(self.message.content, str):
            return self.message.content
        return "".join(
            part.text for part in self.message.content if getattr(part, "text", None)
        )

    @property
    def tool_calls(self) -> List[ToolCall]:
        return list(self.message.tool_calls or [])


class FunctionCallDelta(BaseModel):
    """Partial function call carried by a stream chunk."""
    name: Optional[str] = None
    arguments: Optional[str] = None


class StreamChunk(BaseModel):
    """
    One normalized increment of a streamed completion.

    ``tool_calls`` are only ever emitted complete, on the chunk that carries
    the finish reason. ``usage`` appears on the terminal chunk when the
    vendor reports it in-stream.
    """
    role: Optional[MessageRole] = None
    content: Optional[str] = None
    function_call: Optional[FunctionCallDelta] = None
    tool_calls: Optional[List[ToolCall]] = None
    finish_reason: Optional[FinishReason] = None
    usage: Optional[Usage] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class HealthCheckResult(BaseModel):
    """Outcome of a provider health check."""
    healthy: bool
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


class ProviderCapabilities(BaseModel):
    """Feature flags advertised by an adapter."""
    streaming: bool = True
    function_calling: bool = True
    vision: bool = False
    system_messages: bool = True
    max_tokens_required: bool = False


class ProviderMetadata(BaseModel):
    """Static description of a configured adapter."""
    provider: str
    version: str
    base_url: str
    capabilities: ProviderCapabilities
    models: List[str] = Field(default_factory=list)
