from typing import Any, Dict, Optional

from ...models.generation import CompletionRequest, CompletionResponse, ProviderCapabilities, StreamChunk
from ...streaming.sse import RecordGrammar, SSEEvent
from ..base import ProviderAdapter
from .config import AnthropicConfig
from .errors import AnthropicErrorMapper
from .parsers import parse_messages_response
from .payloads import build_messages_payload
from .streaming import AnthropicStreamAccumulator, transform_event


class AnthropicProvider(ProviderAdapter):
    """Anthropic Messages API adapter (``x-api-key`` auth, block-lifecycle streams)."""

    name = "anthropic"
    config_class = AnthropicConfig
    error_mapper_class = AnthropicErrorMapper
    capabilities = ProviderCapabilities(
        streaming=True, function_calling=True, vision=True, max_tokens_required=True
    )
    stream_grammar = RecordGrammar.BLOCKS
    health_check_model = "claude-3-haiku-20240307"

    config: AnthropicConfig

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "x-api-key": self.config.api_key,
            "anthropic-version": self.config.api_version,
            "Content-Type": "application/json",
        }
        headers.update(self.config.additional_headers)
        return headers

    def completion_url(self, request: CompletionRequest, stream: bool) -> str:
        return f"{self.config.base_url}/v1/messages"

    def build_payload(self, request: CompletionRequest, stream: bool) -> Dict[str, Any]:
        return build_messages_payload(request, self.resolve_max_tokens(request), stream=stream)

    def parse_response(self, data: Dict[str, Any], request: CompletionRequest) -> CompletionResponse:
        return parse_messages_response(data, request, self.name)

    def create_accumulator(self) -> AnthropicStreamAccumulator:
        return AnthropicStreamAccumulator()

    def transform_stream_event(
        self, event: SSEEvent, data: Any, accumulator: AnthropicStreamAccumulator
    ) -> Optional[StreamChunk]:
        if not isinstance(data, dict):
            return None
        if data.get("type") is None and event.event:
            data = {**data, "type": event.event}
        if data.get("type") == "error":
            raise self.error_mapper.to_exception(self.error_mapper.map(data), original_error=data)
        return transform_event(data, accumulator)
