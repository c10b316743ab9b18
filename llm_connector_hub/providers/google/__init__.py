from .adapter import GoogleProvider
from .config import GoogleConfig, SafetySetting
from .errors import GoogleErrorMapper

__all__ = ["GoogleConfig", "GoogleErrorMapper", "GoogleProvider", "SafetySetting"]
