import os
from typing import Any, Dict

from pydantic import Field

from ..config import ProviderConfig


class AnthropicConfig(ProviderConfig):
    """Anthropic Messages API settings."""

    env_prefix = "ANTHROPIC"

    base_url: str = Field(default="https://api.anthropic.com", description="API root without /v1")
    api_version: str = Field(default="2023-06-01", description="Sent verbatim as anthropic-version")

    @classmethod
    def env_values(cls) -> Dict[str, Any]:
        values = super().env_values()
        values["api_version"] = os.getenv("ANTHROPIC_API_VERSION")
        return values
