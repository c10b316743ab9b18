from typing import Any, Dict, List, Optional

from ...models.generation import CompletionRequest, CompletionResponse, ProviderCapabilities, StreamChunk
from ...streaming.sse import RecordGrammar, SSEEvent
from ..base import ProviderAdapter
from .config import GoogleConfig
from .errors import GoogleErrorMapper
from .parsers import parse_generate_response
from .payloads import build_generate_payload
from .streaming import GoogleStreamAccumulator, transform_chunk


def strip_model_prefix(model: str) -> str:
    return model[len("models/"):] if model.startswith("models/") else model


class GoogleProvider(ProviderAdapter):
    """Google Gemini adapter (``x-goog-api-key`` auth, SSE via ``alt=sse``)."""

    name = "google"
    config_class = GoogleConfig
    error_mapper_class = GoogleErrorMapper
    capabilities = ProviderCapabilities(
        streaming=True, function_calling=True, vision=True, max_tokens_required=True
    )
    stream_grammar = RecordGrammar.LINES
    health_check_model = "gemini-1.5-flash"

    config: GoogleConfig

    async def list_models(self) -> List[str]:
        """
        Ids of the models served to this key, following pagination.

        Raises:
            ProviderError: For vendor or transport failures
        """
        models: List[str] = []
        params: Optional[Dict[str, str]] = None
        while True:
            data = await self._executor.get_json(f"{self.config.base_url}/models", self.build_headers(), params)
            models.extend(strip_model_prefix(model["name"]) for model in data.get("models", []) if model.get("name"))
            if not data.get("nextPageToken"):
                return models
            params = {"pageToken": data["nextPageToken"]}

    async def get_model_info(self, model: str) -> Dict[str, Any]:
        """Raw vendor description of one model (token limits, supported methods)."""
        return await self._executor.get_json(
            f"{self.config.base_url}/models/{strip_model_prefix(model)}", self.build_headers()
        )

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "x-goog-api-key": self.config.api_key,
            "Content-Type": "application/json",
        }
        headers.update(self.config.additional_headers)
        return headers

    def completion_url(self, request: CompletionRequest, stream: bool) -> str:
        model = strip_model_prefix(request.model)
        if stream:
            return f"{self.config.base_url}/models/{model}:streamGenerateContent?alt=sse"
        return f"{self.config.base_url}/models/{model}:generateContent"

    def build_payload(self, request: CompletionRequest, stream: bool) -> Dict[str, Any]:
        return build_generate_payload(
            request, self.resolve_max_tokens(request), self.config.safety_settings
        )

    def parse_response(self, data: Dict[str, Any], request: CompletionRequest) -> CompletionResponse:
        return parse_generate_response(data, request, self.name)

    def create_accumulator(self) -> GoogleStreamAccumulator:
        return GoogleStreamAccumulator()

    def transform_stream_event(
        self, event: SSEEvent, data: Any, accumulator: GoogleStreamAccumulator
    ) -> Optional[StreamChunk]:
        if not isinstance(data, dict):
            return None
        if data.get("error"):
            raise self.error_mapper.to_exception(self.error_mapper.map(data), original_error=data)
        return transform_chunk(data, accumulator)
