from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import ProviderConfig, env_first


class SafetySetting(BaseModel):
    """One Gemini safety threshold, e.g. HARM_CATEGORY_HARASSMENT / BLOCK_ONLY_HIGH."""
    category: str
    threshold: str = "BLOCK_ONLY_HIGH"


class GoogleConfig(ProviderConfig):
    """Google Gemini (Generative Language API) settings."""

    env_prefix = "GOOGLE"

    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="API root including the version segment",
    )
    default_max_tokens: int = Field(default=2048, gt=0)
    safety_settings: Optional[List[SafetySetting]] = Field(
        None, description="Sent as safetySettings when set; vendor defaults otherwise"
    )

    @classmethod
    def env_values(cls) -> Dict[str, Any]:
        values = super().env_values()
        values["api_key"] = env_first("GOOGLE_API_KEY", "GEMINI_API_KEY")
        return values
