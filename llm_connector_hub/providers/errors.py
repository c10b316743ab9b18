"""
Error mapping utilities for provider adapters.

Each vendor ships an ``ErrorMapper`` subclass declaring the pydantic model
of its error body and a table of vendor codes. Classification order:

1. a body that validates against the vendor model is looked up in the
   vendor table (unknown codes fall through to the status table);
2. otherwise an HTTP status code is looked up in the status table;
3. otherwise a transport timeout or an expired deadline maps to
   ``timeout``;
4. anything else is ``unknown``.
"""

import asyncio
import json
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

import httpx
from pydantic import BaseModel, ValidationError

from ..errors import ErrorKind, MappedError, ProviderError

# vendor code -> (kind, default status, default retry_after seconds)
VendorCodeTable = Dict[str, Tuple[ErrorKind, Optional[int], Optional[float]]]


class ErrorMapper:
    """Maps raw vendor payloads and transport failures to MappedError."""

    provider: str = "unknown"
    display_name: str = "Provider"
    api_key_url: Optional[str] = None
    error_model: Optional[Type[BaseModel]] = None
    VENDOR_CODES: VendorCodeTable = {}

    STATUS_KINDS: Dict[int, ErrorKind] = {
        400: ErrorKind.INVALID_REQUEST,
        401: ErrorKind.AUTHENTICATION,
        403: ErrorKind.AUTHENTICATION,
        404: ErrorKind.INVALID_REQUEST,
        408: ErrorKind.TIMEOUT,
        429: ErrorKind.RATE_LIMIT,
    }

    RETRY_AFTER_PATTERNS = [
        re.compile(r"retry after (\d+(?:\.\d+)?)\s*seconds?", re.IGNORECASE),
        re.compile(r"wait (\d+(?:\.\d+)?)\s*s(?:ec(?:ond)?s?)?\b", re.IGNORECASE),
        re.compile(r"try again in (\d+(?:\.\d+)?)\s*s(?:ec(?:ond)?s?)?\b", re.IGNORECASE),
    ]

    def map(
        self,
        error: Any,
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> MappedError:
        """
        Classify a raw failure.

        Args:
            error: Decoded vendor body (dict), raw text, or an exception
            status_code: HTTP status if a response was received
            headers: Response headers, consulted for ``Retry-After``

        Returns:
            MappedError with normalized kind and metadata
        """
        if isinstance(error, MappedError):
            return error
        if isinstance(error, ProviderError):
            return MappedError(
                kind=error.kind,
                message=error.message,
                status_code=error.status_code,
                retry_after=error.retry_after,
                vendor_code=error.vendor_code,
            )

        if status_code is None:
            status_code = self._status_from(error)

        body = self.parse_vendor_error(error)
        if body is not None:
            mapped = self.map_vendor_error(body, status_code)
        elif status_code is not None:
            mapped = self.map_status(status_code, self.describe(error))
        elif isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
            mapped = self.map_timeout(error)
        else:
            mapped = MappedError(kind=ErrorKind.UNKNOWN, message=self.describe(error))

        if mapped.retry_after is None:
            header_value = self.retry_after_from_headers(headers)
            if header_value is not None:
                mapped = MappedError(
                    kind=mapped.kind,
                    message=mapped.message,
                    status_code=mapped.status_code,
                    retry_after=header_value,
                    vendor_code=mapped.vendor_code,
                )
        return mapped

    def to_exception(self, mapped: MappedError, original_error: Optional[object] = None) -> ProviderError:
        """Wrap a MappedError into the ProviderError raised to callers."""
        return ProviderError.from_mapped(
            mapped,
            provider=self.provider,
            message=self.format_message(mapped),
            original_error=original_error,
        )

    # Vendor-specific hooks

    def parse_vendor_error(self, error: Any) -> Optional[BaseModel]:
        """Strictly validate ``error`` against the vendor error model."""
        if self.error_model is None:
            return None
        if isinstance(error, (str, bytes)):
            try:
                error = json.loads(error)
            except ValueError:
                return None
        if not isinstance(error, dict):
            return None
        try:
            return self.error_model.model_validate(error)
        except ValidationError:
            return None

    def vendor_codes(self, body: BaseModel) -> List[str]:
        """Candidate vendor codes in lookup order."""
        return []

    def vendor_message(self, body: BaseModel) -> str:
        return str(body)

    def vendor_status(self, body: BaseModel) -> Optional[int]:
        """Status code carried inside the body, if the vendor sends one."""
        return None

    def vendor_retry_after(self, body: BaseModel) -> Optional[float]:
        """Retry delay carried in structured fields of the body."""
        return None

    # Shared mapping

    def map_vendor_error(self, body: BaseModel, status_code: Optional[int] = None) -> MappedError:
        message = self.vendor_message(body)
        if status_code is None:
            status_code = self.vendor_status(body)
        codes = [code for code in self.vendor_codes(body) if code]

        for code in codes:
            entry = self.VENDOR_CODES.get(code)
            if entry is None:
                continue
            kind, default_status, default_retry_after = entry
            retry_after = self.extract_retry_after(message)
            if retry_after is None:
                retry_after = self.vendor_retry_after(body)
            if retry_after is None:
                retry_after = default_retry_after
            return MappedError(
                kind=kind,
                message=message,
                status_code=status_code if status_code is not None else default_status,
                retry_after=retry_after,
                vendor_code=code,
            )

        vendor_code = codes[0] if codes else None
        if status_code is not None:
            mapped = self.map_status(status_code, message)
            return MappedError(
                kind=mapped.kind,
                message=mapped.message,
                status_code=mapped.status_code,
                retry_after=(
                    mapped.retry_after if mapped.retry_after is not None else self.vendor_retry_after(body)
                ),
                vendor_code=vendor_code,
            )
        return MappedError(kind=ErrorKind.UNKNOWN, message=message, vendor_code=vendor_code)

    def map_status(self, status_code: int, message: str) -> MappedError:
        kind = self.STATUS_KINDS.get(status_code)
        if kind is None:
            if status_code >= 500:
                kind = ErrorKind.SERVER_ERROR
            elif status_code >= 400:
                kind = ErrorKind.INVALID_REQUEST
            else:
                kind = ErrorKind.UNKNOWN
        return MappedError(
            kind=kind,
            message=message or f"HTTP {status_code}",
            status_code=status_code,
            retry_after=self.extract_retry_after(message),
        )

    def map_timeout(self, error: Any) -> MappedError:
        detail = self.describe(error)
        message = f"Request timed out: {detail}" if detail else "Request timed out"
        return MappedError(kind=ErrorKind.TIMEOUT, message=message)

    def extract_retry_after(self, message: Optional[str]) -> Optional[float]:
        """Best-effort parse of a retry delay (seconds) out of a message."""
        if not message:
            return None
        for pattern in self.RETRY_AFTER_PATTERNS:
            match = pattern.search(message)
            if match:
                value = float(match.group(1))
                if value > 0:
                    return value
        return None

    @staticmethod
    def retry_after_from_headers(headers: Optional[Mapping[str, str]]) -> Optional[float]:
        if not headers:
            return None
        value = headers.get("retry-after") or headers.get("Retry-After")
        if not value:
            return None
        try:
            seconds = float(value)
        except ValueError:
            return None
        return seconds if seconds > 0 else None

    def format_message(self, mapped: MappedError) -> str:
        """Render a user-facing message with remediation hints."""
        message = f"{self.display_name} API error: {mapped.message}"
        if mapped.kind == ErrorKind.RATE_LIMIT and mapped.retry_after:
            message += f" Please retry after {mapped.retry_after:g} seconds."
        elif mapped.kind == ErrorKind.AUTHENTICATION and self.api_key_url:
            message += f" Please check your API key at {self.api_key_url}"
        return message

    @staticmethod
    def describe(error: Any) -> str:
        if error is None:
            return ""
        if isinstance(error, bytes):
            return error.decode("utf-8", errors="replace")
        if isinstance(error, (dict, list)):
            try:
                return json.dumps(error)
            except (TypeError, ValueError):
                return str(error)
        return str(error)

    @staticmethod
    def _status_from(error: Any) -> Optional[int]:
        status = getattr(error, "status_code", None)
        if isinstance(status, int):
            return status
        response = getattr(error, "response", None)
        status = getattr(response, "status_code", None)
        return status if isinstance(status, int) else None
