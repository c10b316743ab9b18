"""
Error taxonomy shared by every provider.

Vendor failures are normalized into one of a handful of kinds. Whether an
error may be retried is a property of its kind alone, so callers never
need to inspect vendor payloads to decide.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Normalized error categories."""
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    INVALID_REQUEST = "invalid_request"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


RETRYABLE_KINDS = frozenset({ErrorKind.RATE_LIMIT, ErrorKind.SERVER_ERROR, ErrorKind.TIMEOUT})


@dataclass(frozen=True)
class MappedError:
    """Result of classifying a raw vendor or transport failure."""
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None
    retry_after: Optional[float] = None
    vendor_code: Optional[str] = None

    @property
    def is_retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS


class ProviderError(Exception):
    """
    Exception raised for every provider failure.

    Attributes:
        message: Human readable message (with remediation hints)
        provider: Provider name
        kind: Normalized ErrorKind
        status_code: HTTP status code if applicable
        retry_after: Seconds to wait before retry if the vendor said so
        is_retryable: Derived from kind
        vendor_code: Raw vendor error code or type
        original_error: The wrapped exception or payload, if any
    """

    def __init__(
        self,
        message: str,
        provider: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None,
        vendor_code: Optional[str] = None,
        original_error: Optional[object] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.kind = kind
        self.status_code = status_code
        self.retry_after = retry_after
        self.vendor_code = vendor_code
        self.original_error = original_error

    @property
    def is_retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    @classmethod
    def from_mapped(
        cls,
        mapped: MappedError,
        provider: str,
        message: Optional[str] = None,
        original_error: Optional[object] = None,
    ) -> "ProviderError":
        return cls(
            message or mapped.message,
            provider=provider,
            kind=mapped.kind,
            status_code=mapped.status_code,
            retry_after=mapped.retry_after,
            vendor_code=mapped.vendor_code,
            original_error=original_error,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(provider={self.provider!r}, kind={self.kind.value!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class RequestValidationError(ProviderError):
    """Raised locally when a request is rejected before being sent."""

    def __init__(self, message: str, provider: str):
        super().__init__(message, provider=provider, kind=ErrorKind.INVALID_REQUEST)


class ProviderConfigError(ValueError):
    """Raised when a provider cannot be configured (e.g. missing API key)."""
