from typing import List, Literal

from pydantic import BaseModel

from ...errors import ErrorKind
from ..errors import ErrorMapper


class AnthropicErrorDetail(BaseModel):
    type: str
    message: str


class AnthropicErrorBody(BaseModel):
    """``{"type": "error", "error": {"type", "message"}}``; also the shape of stream error events."""
    type: Literal["error"]
    error: AnthropicErrorDetail


class AnthropicErrorMapper(ErrorMapper):
    """Maps Anthropic error bodies by ``error.type``."""

    provider = "anthropic"
    display_name = "Anthropic"
    api_key_url = "https://console.anthropic.com/"
    error_model = AnthropicErrorBody

    VENDOR_CODES = {
        "authentication_error": (ErrorKind.AUTHENTICATION, 401, None),
        "permission_error": (ErrorKind.AUTHENTICATION, 403, None),
        "not_found_error": (ErrorKind.INVALID_REQUEST, 404, None),
        "invalid_request_error": (ErrorKind.INVALID_REQUEST, 400, None),
        "request_too_large": (ErrorKind.INVALID_REQUEST, 413, None),
        "rate_limit_error": (ErrorKind.RATE_LIMIT, 429, None),
        "api_error": (ErrorKind.SERVER_ERROR, 500, None),
        "overloaded_error": (ErrorKind.SERVER_ERROR, 529, 60.0),
    }

    def vendor_codes(self, body: AnthropicErrorBody) -> List[str]:
        return [body.error.type]

    def vendor_message(self, body: AnthropicErrorBody) -> str:
        return body.error.message
