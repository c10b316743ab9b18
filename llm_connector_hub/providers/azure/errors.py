from typing import List, Optional, Union

from pydantic import BaseModel

from ...errors import ErrorKind
from ..errors import ErrorMapper


class AzureInnerError(BaseModel):
    code: Optional[str] = None


class AzureErrorDetail(BaseModel):
    message: str
    code: Optional[Union[str, int]] = None
    type: Optional[str] = None
    param: Optional[str] = None
    innererror: Optional[AzureInnerError] = None


class AzureErrorBody(BaseModel):
    """``{"error": {"code", "message", "innererror": {"code"}}}``"""
    error: AzureErrorDetail


class AzureErrorMapper(ErrorMapper):
    """
    Maps Azure OpenAI error bodies.

    Azure reports some failures with a numeric ``code`` (e.g. ``"429"``);
    those fall through to the status table.
    """

    provider = "azure"
    display_name = "Azure OpenAI"
    api_key_url = "https://portal.azure.com/"
    error_model = AzureErrorBody

    VENDOR_CODES = {
        "invalid_api_key": (ErrorKind.AUTHENTICATION, 401, None),
        "Unauthorized": (ErrorKind.AUTHENTICATION, 401, None),
        "insufficient_quota": (ErrorKind.AUTHENTICATION, 403, None),
        "quota_exceeded": (ErrorKind.AUTHENTICATION, 403, None),
        "DeploymentNotFound": (ErrorKind.INVALID_REQUEST, 404, None),
        "deployment_not_found": (ErrorKind.INVALID_REQUEST, 404, None),
        "model_not_found": (ErrorKind.INVALID_REQUEST, 404, None),
        "rate_limit_exceeded": (ErrorKind.RATE_LIMIT, 429, None),
        "requests_rate_limit_exceeded": (ErrorKind.RATE_LIMIT, 429, None),
        "tokens_rate_limit_exceeded": (ErrorKind.RATE_LIMIT, 429, None),
        "context_length_exceeded": (ErrorKind.INVALID_REQUEST, 400, None),
        "content_filter": (ErrorKind.INVALID_REQUEST, 400, None),
        "ResponsibleAIPolicyViolation": (ErrorKind.INVALID_REQUEST, 400, None),
        "invalid_request_error": (ErrorKind.INVALID_REQUEST, 400, None),
        "server_error": (ErrorKind.SERVER_ERROR, 500, 30.0),
        "service_unavailable": (ErrorKind.SERVER_ERROR, 503, 30.0),
        "timeout": (ErrorKind.TIMEOUT, 408, None),
    }

    def vendor_codes(self, body: AzureErrorBody) -> List[str]:
        detail = body.error
        codes = [str(detail.code) if detail.code is not None else None]
        if detail.innererror is not None:
            codes.append(detail.innererror.code)
        codes.append(detail.type)
        return codes

    def vendor_message(self, body: AzureErrorBody) -> str:
        return body.error.message

    def vendor_status(self, body: AzureErrorBody) -> Optional[int]:
        code = str(body.error.code or "")
        return int(code) if code.isdigit() else None
