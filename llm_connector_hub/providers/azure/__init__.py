from .adapter import AzureOpenAIProvider
from .config import AzureOpenAIConfig
from .errors import AzureErrorMapper

__all__ = ["AzureErrorMapper", "AzureOpenAIConfig", "AzureOpenAIProvider"]
