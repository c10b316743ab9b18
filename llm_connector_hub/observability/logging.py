"""
Structured logging for provider adapters.

Every record is prefixed with ``[provider=.. model=.. request_id=..]`` plus
any extra fields, so a single request can be followed from payload through
retries to usage. Durations are logged in milliseconds.
"""

import asyncio
import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from ..errors import ProviderError
from ..models.generation import Usage


def elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class ProviderLogger:
    """Structured logger bound to one provider."""

    def __init__(self, provider_name: str):
        """
        Initialize logger for a specific provider.

        Args:
            provider_name: Registry name of the provider (e.g. "openai", "google")
        """
        self.provider = provider_name
        self.logger = logging.getLogger(f"llm_connector_hub.providers.{provider_name}")

    def log(self, level: int, message: str, **fields: Any) -> None:
        """Emit ``message`` at ``level``; ``None`` fields are left out."""
        if not self.logger.isEnabledFor(level):
            return
        prefix = [f"provider={self.provider}"]
        prefix.extend(f"{key}={value}" for key, value in fields.items() if value is not None)
        self.logger.log(level, "[%s] %s", " ".join(prefix), message)

    def debug(self, message: str, **fields: Any) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(logging.WARNING, message, **fields)

    @staticmethod
    def error_fields(error: BaseException) -> Dict[str, Any]:
        """Normalized fields describing a failure."""
        if isinstance(error, ProviderError):
            return {
                "kind": error.kind.value,
                "status_code": error.status_code,
                "vendor_code": error.vendor_code,
                "retryable": error.is_retryable,
                "retry_after": error.retry_after,
            }
        return {"error_type": type(error).__name__}

    def log_failure(self, message: str, error: BaseException, **fields: Any) -> None:
        """
        Log a failed operation.

        Retryable vendor failures (rate limits, timeouts, 5xx) are warnings;
        anything else is logged as an error.
        """
        level = logging.WARNING if isinstance(error, ProviderError) and error.is_retryable else logging.ERROR
        self.log(level, f"{message}: {error}", **fields, **self.error_fields(error))

    @contextmanager
    def track_request(self, method: str, model: str,
                      request_id: Optional[str] = None) -> Iterator[Dict[str, Any]]:
        """
        Time one ``complete`` or ``stream`` call and log how it ended.

        Args:
            method: Operation name (``complete`` or ``stream``)
            model: Requested model
            request_id: Correlation id (a short random one if omitted)

        Yields:
            Dict with ``request_id``, ``model``, ``method`` and ``start_time``
        """
        request_id = request_id or uuid.uuid4().hex[:8]
        started = time.monotonic()
        self.debug(f"Starting {method} request", model=model, request_id=request_id)

        try:
            yield {"request_id": request_id, "model": model, "method": method, "start_time": started}
        except (asyncio.CancelledError, GeneratorExit):
            # caller cancelled the task or closed the stream early
            self.info(f"Abandoned {method} request", model=model, request_id=request_id,
                      duration_ms=elapsed_ms(started))
            raise
        except Exception as e:
            self.log_failure(f"Failed {method} request", e, model=model, request_id=request_id,
                             duration_ms=elapsed_ms(started))
            raise

        self.info(f"Completed {method} request", model=model, request_id=request_id,
                  duration_ms=elapsed_ms(started))

    def log_usage(self, usage: Optional[Usage], model: str, request_id: Optional[str] = None) -> None:
        """Log token usage; a missing report is logged as such, never as zeros."""
        if usage is None:
            self.debug("Usage not reported", model=model, request_id=request_id)
            return
        self.info(
            "Token usage",
            model=model,
            request_id=request_id,
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
        )

    def log_streaming_metrics(self, chunks: int, total_chars: int, duration: float,
                              first_chunk_after: Optional[float], model: str,
                              request_id: Optional[str] = None, usage: Optional[Usage] = None) -> None:
        """
        Log throughput of a finished stream.

        Args:
            chunks: Chunks yielded to the consumer
            total_chars: Characters of content across all chunks
            duration: Seconds from the response head to the end of the stream
            first_chunk_after: Seconds from the response head to the first chunk
            usage: Usage from the terminal chunk, if the vendor reported one
        """
        self.info(
            "Streaming metrics",
            model=model,
            request_id=request_id,
            chunks=chunks,
            total_chars=total_chars,
            duration_ms=int(duration * 1000),
            first_chunk_ms=int(first_chunk_after * 1000) if first_chunk_after is not None else None,
            chars_per_second=int(total_chars / duration) if duration > 0 else 0,
            completion_tokens=usage.completion_tokens if usage is not None else None,
        )
