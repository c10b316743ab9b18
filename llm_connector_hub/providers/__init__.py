"""
Provider Adapters Layer

This layer contains all LLM provider-specific implementations.
Each provider adapter translates between the unified data model
and the provider's wire format.
"""

from .base import ProviderAdapter, ProviderError
from .anthropic.adapter import AnthropicProvider
from .azure.adapter import AzureOpenAIProvider
from .google.adapter import GoogleProvider
from .openai.adapter import OpenAIProvider
from .registry import (
    available_providers,
    create_provider,
    create_provider_from_env,
    get_provider_class,
)

__all__ = [
    "ProviderAdapter",
    "ProviderError",
    "OpenAIProvider",
    "AnthropicProvider",
    "AzureOpenAIProvider",
    "GoogleProvider",
    "available_providers",
    "create_provider",
    "create_provider_from_env",
    "get_provider_class",
]
