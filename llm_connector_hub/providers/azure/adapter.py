from typing import Any, Dict, Optional

from ...models.generation import CompletionRequest, CompletionResponse, ProviderCapabilities, StreamChunk
from ...streaming.sse import RecordGrammar, SSEEvent
from ..base import ProviderAdapter
from ..openai.parsers import parse_chat_completion
from ..openai.payloads import build_chat_payload
from ..openai.streaming import OpenAIStreamAccumulator, transform_chunk
from .config import AzureOpenAIConfig
from .errors import AzureErrorMapper


class AzureOpenAIProvider(ProviderAdapter):
    """
    Azure OpenAI adapter.

    Wire shapes are OpenAI's; the deployment is addressed by path, the
    ``api-version`` by query string and the key by the ``api-key`` header.
    """

    name = "azure"
    config_class = AzureOpenAIConfig
    error_mapper_class = AzureErrorMapper
    capabilities = ProviderCapabilities(streaming=True, function_calling=True, vision=True)
    stream_grammar = RecordGrammar.LINES
    stream_sentinel = "[DONE]"

    config: AzureOpenAIConfig

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "api-key": self.config.api_key,
            "Content-Type": "application/json",
        }
        headers.update(self.config.additional_headers)
        return headers

    def completion_url(self, request: CompletionRequest, stream: bool) -> str:
        return (
            f"{self.config.base_url}/openai/deployments/{self.config.deployment_name}"
            f"/chat/completions?api-version={self.config.api_version}"
        )

    def build_payload(self, request: CompletionRequest, stream: bool) -> Dict[str, Any]:
        return build_chat_payload(request, stream=stream, include_model=False)

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
