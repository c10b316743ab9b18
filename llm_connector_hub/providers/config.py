"""
Provider configuration.

Every adapter is configured with a pydantic model deriving from
``ProviderConfig``. Values are validated on construction and again whenever
an adapter is reconfigured. ``from_env`` builds a config from environment
variables (``.env`` files are honoured through python-dotenv).
"""

import os
from typing import Any, ClassVar, Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import ProviderConfigError
from ..reliability.retry import RetryConfig

_TRUTHY = {"1", "true", "yes", "on"}


class ProviderConfig(BaseModel):
    """Settings shared by all providers. Durations are in seconds."""

    model_config = ConfigDict(extra="forbid")

    api_key: str = Field(..., repr=False, description="Vendor API key")
    base_url: str = Field(..., description="Vendor API root")
    timeout: float = Field(default=60.0, gt=0, description="Per-attempt timeout")
    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    base_delay: float = Field(default=1.0, gt=0, description="Initial backoff delay")
    max_delay: float = Field(default=60.0, gt=0, description="Backoff ceiling")
    default_max_tokens: int = Field(default=1024, gt=0, description="Injected when a vendor requires max_tokens")
    additional_headers: Dict[str, str] = Field(default_factory=dict)
    debug: bool = Field(default=False, description="Log request payloads at DEBUG level")

    env_prefix: ClassVar[Optional[str]] = None

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v):
        if not v or not v.strip():
            raise ValueError("api_key must not be empty")
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v):
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_delays(self):
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be greater than or equal to base_delay")
        return self

    def retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
        )

    def merged(self, **updates: Any) -> "ProviderConfig":
        """Validated copy with ``updates`` applied; self is left untouched."""
        return type(self).model_validate({**self.model_dump(), **updates})

    @classmethod
    def from_env(cls, **overrides: Any) -> "ProviderConfig":
        """
        Build a config from ``<PREFIX>_*`` environment variables.

        Recognised suffixes: API_KEY, BASE_URL, TIMEOUT, MAX_RETRIES, DEBUG.
        Subclasses extend ``env_values`` for vendor specific settings.
        """
        load_dotenv(find_dotenv(usecwd=True))
        values = {k: v for k, v in cls.env_values().items() if v is not None}
        values.update(overrides)
        if not values.get("api_key"):
            raise ProviderConfigError(
                f"{cls.env_prefix}_API_KEY is not set; cannot configure {cls.__name__}"
            )
        return cls.model_validate(values)

    @classmethod
    def env_values(cls) -> Dict[str, Any]:
        prefix = cls.env_prefix
        values: Dict[str, Any] = {
            "api_key": os.getenv(f"{prefix}_API_KEY"),
            "base_url": os.getenv(f"{prefix}_BASE_URL"),
            "timeout": os.getenv(f"{prefix}_TIMEOUT"),
            "max_retries": os.getenv(f"{prefix}_MAX_RETRIES"),
        }
        debug = env_flag(f"{prefix}_DEBUG")
        if debug is not None:
            values["debug"] = debug
        return values


def env_first(*names: str) -> Optional[str]:
    """Value of the first set environment variable among ``names``."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def env_flag(name: str) -> Optional[bool]:
    """Boolean environment variable; ``None`` when unset."""
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in _TRUTHY
