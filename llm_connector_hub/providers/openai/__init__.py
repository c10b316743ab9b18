from .adapter import OpenAIProvider
from .config import OpenAIConfig
from .errors import OpenAIErrorMapper

__all__ = ["OpenAIConfig", "OpenAIErrorMapper", "OpenAIProvider"]
