"""
Base Provider Adapter Interface

This module defines the abstract base class for all LLM provider adapters.
All provider implementations must inherit from this class and implement
the required hooks to ensure consistent behavior across providers.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, ClassVar, Dict, Optional, Type, Union

import httpx

from ..config.models import get_max_output_tokens, list_models
from ..core.normalization.messages import user_message
from ..errors import ErrorKind, ProviderError, RequestValidationError
from ..http.executor import HttpExecutor
from ..models.generation import (
    CompletionRequest,
    CompletionResponse,
    HealthCheckResult,
    ProviderCapabilities,
    ProviderMetadata,
    StreamChunk,
)
from ..observability.logging import ProviderLogger
from ..reliability.retry import RetryManager
from ..streaming.sse import RecordGrammar, SSEEvent, iter_stream_payloads
from .config import ProviderConfig
from .errors import ErrorMapper

__all__ = ["ProviderAdapter", "ProviderError"]


class ProviderAdapter(ABC):
    """
    Abstract base class for LLM provider adapters.

    The base class owns the request lifecycle shared by every vendor:
    validation, retries, error normalization, stream decoding and logging.
    Vendor subclasses only describe the wire format:

    - ``build_headers`` / ``completion_url``: where and how to authenticate
    - ``build_payload``: unified request to vendor JSON
    - ``parse_response``: vendor JSON to CompletionResponse
    - ``create_accumulator`` / ``transform_stream_event``: vendor stream
      events to StreamChunks

    Provider adapters should NOT contain:
    - Retry or backoff logic
    - Cross-provider logic
    - Direct HTTP client handling
    """

    name: ClassVar[str] = "base"
    version: ClassVar[str] = "1.0.0"
    config_class: ClassVar[Type[ProviderConfig]] = ProviderConfig
    error_mapper_class: ClassVar[Type[ErrorMapper]] = ErrorMapper
    capabilities: ClassVar[ProviderCapabilities] = ProviderCapabilities()
    stream_grammar: ClassVar[RecordGrammar] = RecordGrammar.LINES
    stream_sentinel: ClassVar[Optional[str]] = None
    health_check_model: ClassVar[str] = ""

    def __init__(
        self,
        config: Union[ProviderConfig, Dict[str, Any]],
        client: Optional[httpx.AsyncClient] = None,
        retry_manager: Optional[RetryManager] = None,
    ):
        """
        Create an adapter.

        Args:
            config: Vendor config instance or a dict of its fields
            client: Optional shared ``httpx.AsyncClient`` (not closed on shutdown)
            retry_manager: Optional RetryManager (tests inject a fake sleep)
        """
        if isinstance(config, dict):
            config = self.config_class.model_validate(config)
        elif not isinstance(config, self.config_class):
            config = self.config_class.model_validate(config.model_dump())
        self.config = config
        self.error_mapper = self.error_mapper_class()
        self.logger = ProviderLogger(self.name)
        self._executor = HttpExecutor(
            error_mapper=self.error_mapper,
            timeout=config.timeout,
            retry_config=config.retry_config(),
            client=client,
            retry_manager=retry_manager or RetryManager(self.error_mapper),
        )
        self._initialized = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "ProviderAdapter":
        """Create an adapter configured from environment variables."""
        return cls(cls.config_class.from_env(**overrides))

    # Lifecycle

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Verify connectivity with a health check.

        Raises:
            ProviderError: If the vendor could not be reached or rejected
                the credentials; the error kind of the health check is preserved
        """
        result = await self.health_check()
        if not result.healthy:
            raise ProviderError(
                f"{self.name} provider failed health check: {result.error}",
                provider=self.name,
                kind=result.error_kind or ErrorKind.UNKNOWN,
            )
        self._initialized = True
        self.logger.info("Provider initialized", latency_ms=result.latency_ms)

    async def shutdown(self) -> None:
        """Release the HTTP client (if owned) and mark the adapter uninitialized."""
        self._initialized = False
        await self._executor.aclose()

    async def __aenter__(self) -> "ProviderAdapter":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    # Operations

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Send a non-streaming completion request.

        The request is validated locally, translated, sent with retries and
        the vendor response normalized.

        Raises:
            RequestValidationError: If the request is malformed
            ProviderError: For vendor or transport failures
        """
        self.validate_request(request)
        payload = self.build_payload(request, stream=False)

        with self.logger.track_request("complete", request.model) as request_info:
            self._log_payload(payload, request_info["request_id"])
            data = await self._executor.post_json(
                self.completion_url(request, stream=False), payload, self.build_headers()
            )
            response = self.parse_response(data, request)
            self.logger.log_usage(response.usage, response.model, request_info["request_id"])
        return response

    async def stream(self, request: CompletionRequest) -> AsyncIterator[StreamChunk]:
        """
        Stream a completion as normalized chunks.

        Opening the stream is retried like ``complete``; once events are
        flowing a failure is raised to the consumer without retrying.
        Closing the iterator early releases the connection.

        Yields:
            StreamChunk: role, content deltas, then a terminal chunk with
            the finish reason, completed tool calls and usage if reported
        """
        self.validate_request(request)
        payload = self.build_payload(request, stream=True)
        accumulator = self.create_accumulator()

        with self.logger.track_request("stream", request.model) as request_info:
            self._log_payload(payload, request_info["request_id"])
            response = await self._executor.open_stream(
                self.completion_url(request, stream=True), payload, self.build_headers()
            )
            started = time.monotonic()
            first_chunk_at = None
            usage = None
            chunk_count = 0
            char_count = 0
            try:
                async for event, data in iter_stream_payloads(
                    response.aiter_bytes(), self.stream_grammar, self.stream_sentinel
                ):
                    chunk = self.transform_stream_event(event, data, accumulator)
                    if chunk is None:
                        continue
                    if first_chunk_at is None:
                        first_chunk_at = time.monotonic()
                    if chunk.usage is not None:
                        usage = chunk.usage
                    chunk_count += 1
                    char_count += len(chunk.content or "")
                    yield chunk
            except httpx.TransportError as e:
                raise self._executor.transport_error(e) from e
            finally:
                await response.aclose()

            self.logger.log_streaming_metrics(
                chunk_count, char_count, time.monotonic() - started,
                first_chunk_at - started if first_chunk_at is not None else None,
                model=request.model, request_id=request_info["request_id"], usage=usage,
            )

    async def health_check(self) -> HealthCheckResult:
        """Send a minimal real request (one output token) without retries."""
        request = CompletionRequest(
            model=self.health_check_model,
            messages=[user_message("Hi")],
            max_tokens=1,
        )
        started = time.monotonic()
        try:
            await self._executor.post_json_once(
                self.completion_url(request, stream=False),
                self.build_payload(request, stream=False),
                self.build_headers(),
            )
        except ProviderError as e:
            latency = (time.monotonic() - started) * 1000
            self.logger.warning("Health check failed", kind=e.kind.value, status_code=e.status_code)
            return HealthCheckResult(healthy=False, latency_ms=latency, error=str(e), error_kind=e.kind)
        return HealthCheckResult(healthy=True, latency_ms=(time.monotonic() - started) * 1000)

    def validate_request(self, request: CompletionRequest) -> None:
        """
        Reject malformed requests before anything is sent.

        Raises:
            RequestValidationError: On missing model or messages, or an
                out of range sampling parameter
        """
        if not request.model:
            raise RequestValidationError("model is required", self.name)
        if not request.messages:
            raise RequestValidationError("messages must not be empty", self.name)
        if request.temperature is not None and not 0 <= request.temperature <= 2:
            raise RequestValidationError("temperature must be between 0 and 2", self.name)
        if request.top_p is not None and not 0 <= request.top_p <= 1:
            raise RequestValidationError("top_p must be between 0 and 1", self.name)
        if request.max_tokens is not None:
            if request.max_tokens <= 0:
                raise RequestValidationError("max_tokens must be greater than 0", self.name)
            limit = get_max_output_tokens(self.name, request.model)
            if limit is not None and request.max_tokens > limit:
                raise RequestValidationError(
                    f"max_tokens {request.max_tokens} exceeds the {limit} token limit of {request.model}",
                    self.name,
                )

    def configure(self, **updates: Any) -> None:
        """
        Apply a partial config update.

        The merged config is validated first; on failure the previous config
        stays in force and pydantic's ValidationError is raised.
        """
        config = self.config.merged(**updates)
        self.config = config
        self._executor.timeout = config.timeout
        self._executor.retry_config = config.retry_config()

    def get_metadata(self) -> ProviderMetadata:
        return ProviderMetadata(
            provider=self.name,
            version=self.version,
            base_url=self.endpoint_root(),
            capabilities=self.capabilities,
            models=list_models(self.name),
        )

    def resolve_max_tokens(self, request: CompletionRequest) -> int:
        """Requested max_tokens, else the configured default clamped to a known model limit."""
        if request.max_tokens is not None:
            return request.max_tokens
        limit = get_max_output_tokens(self.name, request.model)
        default = self.config.default_max_tokens
        return min(default, limit) if limit is not None else default

    def endpoint_root(self) -> str:
        return self.config.base_url

    def _log_payload(self, payload: Dict[str, Any], request_id: str) -> None:
        if self.config.debug:
            self.logger.debug(f"Request payload {json.dumps(payload, default=str)}", request_id=request_id)

    # Vendor hooks

    @abstractmethod
    def build_headers(self) -> Dict[str, str]:
        """Authentication and content headers (plus configured extras)."""

    @abstractmethod
    def completion_url(self, request: CompletionRequest, stream: bool) -> str:
        """Absolute URL of the completion endpoint."""

    @abstractmethod
    def build_payload(self, request: CompletionRequest, stream: bool) -> Dict[str, Any]:
        """Translate a unified request into the vendor JSON body."""

    @abstractmethod
    def parse_response(self, data: Dict[str, Any], request: CompletionRequest) -> CompletionResponse:
        """Translate a vendor JSON body into a CompletionResponse."""

    @abstractmethod
    def create_accumulator(self) -> Any:
        """Fresh per-stream state."""

    @abstractmethod
    def transform_stream_event(self, event: SSEEvent, data: Any, accumulator: Any) -> Optional[StreamChunk]:
        """Turn one decoded stream record into a chunk (``None`` to emit nothing)."""
