from .adapter import AnthropicProvider
from .config import AnthropicConfig
from .errors import AnthropicErrorMapper

__all__ = ["AnthropicConfig", "AnthropicErrorMapper", "AnthropicProvider"]
