import os
from typing import Any, Dict, Optional

from pydantic import Field, field_validator, model_validator

from ..config import ProviderConfig


class AzureOpenAIConfig(ProviderConfig):
    """
    Azure OpenAI settings.

    The deployment is addressed by path. ``base_url`` is always derived:
    ``endpoint`` when given, otherwise ``https://{resource_name}.openai.azure.com``.
    """

    env_prefix = "AZURE_OPENAI"

    base_url: Optional[str] = Field(None, description="Derived from endpoint or resource_name")
    endpoint: Optional[str] = Field(None, description="Full resource endpoint URL")
    resource_name: Optional[str] = Field(None, description="Azure resource name")
    deployment_name: str = Field(..., description="Model deployment to call")
    api_version: str = Field(default="2024-02-15-preview", description="api-version query parameter")

    @field_validator("deployment_name")
    @classmethod
    def validate_deployment_name(cls, v):
        if not v or not v.strip():
            raise ValueError("deployment_name must not be empty")
        return v.strip()

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v):
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @model_validator(mode="after")
    def derive_base_url(self):
        if self.endpoint:
            self.base_url = self.endpoint
        elif self.resource_name:
            self.base_url = f"https://{self.resource_name}.openai.azure.com"
        else:
            raise ValueError("either endpoint or resource_name is required")
        return self

    @classmethod
    def env_values(cls) -> Dict[str, Any]:
        values = super().env_values()
        values.pop("base_url", None)
        values.update({
            "endpoint": os.getenv("AZURE_OPENAI_ENDPOINT"),
            "resource_name": os.getenv("AZURE_OPENAI_RESOURCE_NAME"),
            "deployment_name": os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME"),
            "api_version": os.getenv("AZURE_OPENAI_API_VERSION"),
        })
        return values
