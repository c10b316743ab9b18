from typing import List, Optional, Union

from pydantic import BaseModel

from ...errors import ErrorKind
from ..errors import ErrorMapper


class OpenAIErrorDetail(BaseModel):
    message: str
    type: Optional[str] = None
    param: Optional[str] = None
    code: Optional[Union[str, int]] = None


class OpenAIErrorBody(BaseModel):
    """``{"error": {"message", "type", "param", "code"}}``"""
    error: OpenAIErrorDetail


class OpenAIErrorMapper(ErrorMapper):
    """Maps OpenAI error bodies; ``code`` is consulted before ``type``."""

    provider = "openai"
    display_name = "OpenAI"
    api_key_url = "https://platform.openai.com/api-keys"
    error_model = OpenAIErrorBody

    VENDOR_CODES = {
        "invalid_api_key": (ErrorKind.AUTHENTICATION, 401, None),
        "authentication_error": (ErrorKind.AUTHENTICATION, 401, None),
        "permission_error": (ErrorKind.AUTHENTICATION, 403, None),
        "insufficient_quota": (ErrorKind.AUTHENTICATION, 429, None),
        "rate_limit_exceeded": (ErrorKind.RATE_LIMIT, 429, None),
        "rate_limit_error": (ErrorKind.RATE_LIMIT, 429, None),
        "model_not_found": (ErrorKind.INVALID_REQUEST, 404, None),
        "context_length_exceeded": (ErrorKind.INVALID_REQUEST, 400, None),
        "invalid_request_error": (ErrorKind.INVALID_REQUEST, 400, None),
        "server_error": (ErrorKind.SERVER_ERROR, 500, None),
        "api_error": (ErrorKind.SERVER_ERROR, 500, None),
    }

    def vendor_codes(self, body: OpenAIErrorBody) -> List[str]:
        code = body.error.code
        return [str(code) if code is not None else None, body.error.type]

    def vendor_message(self, body: OpenAIErrorBody) -> str:
        return body.error.message
