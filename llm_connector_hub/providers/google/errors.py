import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ...errors import ErrorKind
from ..errors import ErrorMapper

_DURATION_RE = re.compile(r"^(\d+(?:\.\d+)?)s$")


class GoogleErrorDetail(BaseModel):
    code: int
    message: str
    status: Optional[str] = None
    details: Optional[List[Dict[str, Any]]] = None


class GoogleErrorBody(BaseModel):
    """``{"error": {"code", "message", "status", "details"}}`` (gRPC status names)."""
    error: GoogleErrorDetail


class GoogleErrorMapper(ErrorMapper):
    """Maps Gemini error bodies by their gRPC ``status``."""

    provider = "google"
    display_name = "Google Gemini"
    api_key_url = "https://aistudio.google.com/app/apikey"
    error_model = GoogleErrorBody

    VENDOR_CODES = {
        "UNAUTHENTICATED": (ErrorKind.AUTHENTICATION, 401, None),
        "PERMISSION_DENIED": (ErrorKind.AUTHENTICATION, 403, None),
        "RESOURCE_EXHAUSTED": (ErrorKind.RATE_LIMIT, 429, None),
        "INVALID_ARGUMENT": (ErrorKind.INVALID_REQUEST, 400, None),
        "FAILED_PRECONDITION": (ErrorKind.INVALID_REQUEST, 400, None),
        "OUT_OF_RANGE": (ErrorKind.INVALID_REQUEST, 400, None),
        "NOT_FOUND": (ErrorKind.INVALID_REQUEST, 404, None),
        "ALREADY_EXISTS": (ErrorKind.INVALID_REQUEST, 409, None),
        "ABORTED": (ErrorKind.INVALID_REQUEST, 409, None),
        "CANCELLED": (ErrorKind.INVALID_REQUEST, 499, None),
        "UNIMPLEMENTED": (ErrorKind.INVALID_REQUEST, 501, None),
        "DEADLINE_EXCEEDED": (ErrorKind.TIMEOUT, 504, None),
        "INTERNAL": (ErrorKind.SERVER_ERROR, 500, None),
        "UNKNOWN": (ErrorKind.SERVER_ERROR, 500, None),
        "DATA_LOSS": (ErrorKind.SERVER_ERROR, 500, None),
        "UNAVAILABLE": (ErrorKind.SERVER_ERROR, 503, None),
    }

    def vendor_codes(self, body: GoogleErrorBody) -> List[str]:
        return [body.error.status]

    def vendor_message(self, body: GoogleErrorBody) -> str:
        return body.error.message

    def vendor_status(self, body: GoogleErrorBody) -> Optional[int]:
        return body.error.code

    def vendor_retry_after(self, body: GoogleErrorBody) -> Optional[float]:
        """Read ``google.rpc.RetryInfo.retryDelay`` (e.g. ``"30s"``)."""
        for detail in body.error.details or []:
            if not str(detail.get("@type", "")).endswith("google.rpc.RetryInfo"):
                continue
            match = _DURATION_RE.match(str(detail.get("retryDelay", "")))
            if match and float(match.group(1)) > 0:
                return float(match.group(1))
        return None
