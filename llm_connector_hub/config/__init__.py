"""Static model tables."""

from .models import ModelInfo, get_max_output_tokens, get_model_info, list_models

__all__ = ["ModelInfo", "get_max_output_tokens", "get_model_info", "list_models"]
