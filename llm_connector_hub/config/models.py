"""
Known model limits per provider.

Only exact model identifiers are listed. Lookups for anything else return
``None``, meaning "no known limit", which callers must not confuse with a
validated limit.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel


class ModelInfo(BaseModel):
    """Static facts about a vendor model."""
    name: str
    display_name: str
    max_output_tokens: int
    context_window: int
    supports_vision: bool = False
    supports_function_calling: bool = True


def _info(name, display_name, max_output_tokens, context_window, vision=False, functions=True) -> ModelInfo:
    return ModelInfo(
        name=name,
        display_name=display_name,
        max_output_tokens=max_output_tokens,
        context_window=context_window,
        supports_vision=vision,
        supports_function_calling=functions,
    )


OPENAI_MODELS = {
    "gpt-4o": _info("gpt-4o", "GPT-4o", 16384, 128000, vision=True),
    "gpt-4o-mini": _info("gpt-4o-mini", "GPT-4o Mini", 16384, 128000, vision=True),
    "gpt-4-turbo": _info("gpt-4-turbo", "GPT-4 Turbo", 4096, 128000, vision=True),
    "gpt-4": _info("gpt-4", "GPT-4", 8192, 8192),
    "gpt-3.5-turbo": _info("gpt-3.5-turbo", "GPT-3.5 Turbo", 4096, 16385),
}

ANTHROPIC_MODELS = {
    "claude-3-5-sonnet-20241022": _info(
        "claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet", 8192, 200000, vision=True
    ),
    "claude-3-5-haiku-20241022": _info("claude-3-5-haiku-20241022", "Claude 3.5 Haiku", 8192, 200000),
    "claude-3-opus-20240229": _info("claude-3-opus-20240229", "Claude 3 Opus", 4096, 200000, vision=True),
    "claude-3-sonnet-20240229": _info(
        "claude-3-sonnet-20240229", "Claude 3 Sonnet", 4096, 200000, vision=True
    ),
    "claude-3-haiku-20240307": _info("claude-3-haiku-20240307", "Claude 3 Haiku", 4096, 200000, vision=True),
}

GOOGLE_MODELS = {
    "gemini-1.5-pro": _info("gemini-1.5-pro", "Gemini 1.5 Pro", 8192, 2097152, vision=True),
    "gemini-1.5-flash": _info("gemini-1.5-flash", "Gemini 1.5 Flash", 8192, 1048576, vision=True),
    "gemini-2.0-flash": _info("gemini-2.0-flash", "Gemini 2.0 Flash", 8192, 1048576, vision=True),
    "gemini-1.0-pro": _info("gemini-1.0-pro", "Gemini 1.0 Pro", 2048, 32760),
}

# Azure deployments are user-named; the table is keyed by the underlying model.
MODEL_TABLES: Dict[str, Dict[str, ModelInfo]] = {
    "openai": OPENAI_MODELS,
    "azure": OPENAI_MODELS,
    "anthropic": ANTHROPIC_MODELS,
    "google": GOOGLE_MODELS,
}


def get_model_info(provider: str, model: str) -> Optional[ModelInfo]:
    """Return known facts for ``model`` or ``None`` when it is not listed."""
    return MODEL_TABLES.get(provider, {}).get(model)


def get_max_output_tokens(provider: str, model: str) -> Optional[int]:
    """Known output token ceiling, or ``None`` for "no known limit"."""
    info = get_model_info(provider, model)
    return info.max_output_tokens if info else None


def list_models(provider: str) -> List[str]:
    return sorted(MODEL_TABLES.get(provider, {}))
