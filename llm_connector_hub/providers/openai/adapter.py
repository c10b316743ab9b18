from typing import Any, Dict, Optional

from ...models.generation import CompletionRequest, CompletionResponse, ProviderCapabilities, StreamChunk
from ...streaming.sse import RecordGrammar, SSEEvent
from ..base import ProviderAdapter
from .config import OpenAIConfig
from .errors import OpenAIErrorMapper
from .parsers import parse_chat_completion
from .payloads import build_chat_payload
from .streaming import OpenAIStreamAccumulator, transform_chunk


class OpenAIProvider(ProviderAdapter):
    """OpenAI Chat Completions adapter (Bearer auth, ``data: [DONE]`` streams)."""

    name = "openai"
    config_class = OpenAIConfig
    error_mapper_class = OpenAIErrorMapper
    capabilities = ProviderCapabilities(streaming=True, function_calling=True, vision=True)
    stream_grammar = RecordGrammar.LINES
    stream_sentinel = "[DONE]"
    health_check_model = "gpt-4o-mini"

    config: OpenAIConfig

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        if self.config.organization_id:
            headers["OpenAI-Organization"] = self.config.organization_id
        headers.update(self.config.additional_headers)
        return headers

    def completion_url(self, request: CompletionRequest, stream: bool) -> str:
        return f"{self.config.base_url}/v1/chat/completions"

    def build_payload(self, request: CompletionRequest, stream: bool) -> Dict[str, Any]:
        return build_chat_payload(
            request,
            stream=stream,
            include_stream_usage=self.config.include_stream_usage,
        )

    def parse_response(self, data: Dict[str, Any], request: CompletionRequest) -> CompletionResponse:
        return parse_chat_completion(data, request, self.name)

    def create_accumulator(self) -> OpenAIStreamAccumulator:
        return OpenAIStreamAccumulator()

    def transform_stream_event(
        self, event: SSEEvent, data: Any, accumulator: OpenAIStreamAccumulator
    ) -> Optional[StreamChunk]:
        if not isinstance(data, dict):
            return None
        if data.get("error") and not data.get("choices"):
            raise self.error_mapper.to_exception(self.error_mapper.map(data), original_error=data)
        return transform_chunk(data, accumulator)
