from typing import Any, Dict, Optional

from pydantic import Field

from ..config import ProviderConfig, env_first, env_flag


class OpenAIConfig(ProviderConfig):
    """OpenAI Chat Completions settings."""

    env_prefix = "OPENAI"

    base_url: str = Field(default="https://api.openai.com", description="API root without /v1")
    organization_id: Optional[str] = Field(None, description="Sent as the OpenAI-Organization header")
    include_stream_usage: bool = Field(
        default=True, description="Ask for a usage record at the end of streams"
    )

    @classmethod
    def env_values(cls) -> Dict[str, Any]:
        values = super().env_values()
        values["organization_id"] = env_first("OPENAI_ORGANIZATION_ID", "OPENAI_ORG_ID")
        values["include_stream_usage"] = env_flag("OPENAI_INCLUDE_STREAM_USAGE")
        return values
