from typing import Any, Dict, List, Optional, Type, Union

from ..models.generation import ProviderType
from .base import ProviderAdapter
from .anthropic.adapter import AnthropicProvider
from .azure.adapter import AzureOpenAIProvider
from .config import ProviderConfig
from .google.adapter import GoogleProvider
from .openai.adapter import OpenAIProvider


PROVIDERS: Dict[ProviderType, Type[ProviderAdapter]] = {
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.ANTHROPIC: AnthropicProvider,
    ProviderType.AZURE: AzureOpenAIProvider,
    ProviderType.GOOGLE: GoogleProvider,
}


def get_provider_class(name: Union[str, ProviderType]) -> Type[ProviderAdapter]:
    """Resolve a provider name to its adapter class."""
    try:
        return PROVIDERS[ProviderType(name)]
    except ValueError:
        raise ValueError(
            f"Unknown provider {name!r}; expected one of {', '.join(available_providers())}"
        ) from None


def available_providers() -> List[str]:
    return [provider.value for provider in PROVIDERS]


def create_provider(
    name: Union[str, ProviderType],
    config: Optional[Union[ProviderConfig, Dict[str, Any]]] = None,
    **kwargs: Any,
) -> ProviderAdapter:
    """
    Create an adapter by name.

    Args:
        name: Provider name ("openai", "anthropic", "azure", "google")
        config: Config instance or dict; when omitted, config fields are
            taken from keyword arguments
        **kwargs: Config fields (without ``config``) or adapter options
            such as ``client`` and ``retry_manager``

    Returns:
        A configured, uninitialized adapter
    """
    provider_class = get_provider_class(name)
    adapter_options = {key: kwargs.pop(key) for key in ("client", "retry_manager") if key in kwargs}
    if config is None:
        config = provider_class.config_class.model_validate(kwargs)
    elif kwargs:
        raise TypeError("pass config fields either in config or as keyword arguments, not both")
    return provider_class(config, **adapter_options)


def create_provider_from_env(name: Union[str, ProviderType], **overrides: Any) -> ProviderAdapter:
    """Create an adapter configured from the provider's environment variables."""
    return get_provider_class(name).from_env(**overrides)
