from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from ..errors import ProviderError

if TYPE_CHECKING:
    from ..providers.errors import ErrorMapper

logger = logging.getLogger(__name__)

JITTER_RATIO = 0.25


@dataclass
class RetryConfig:
    """Retry policy; delays are in seconds."""
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0


class RetryManager:
    """
    Manages retry logic for provider operations.

    This class handles:
    - Retry decisions driven by the normalized error kind
    - Exponential backoff with up to 25% jitter
    - Respect for vendor supplied retry-after values (used without jitter)
    - Maximum delay caps

    Attempts are numbered from 0; attempt ``max_retries`` is the last one.
    Cancellation of the awaiting task is never retried.
    """

    def __init__(
        self,
        error_mapper: Optional["ErrorMapper"] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.error_mapper = error_mapper
        self._sleep = sleep
        self._random = rng.random if rng is not None else random.random

    async def execute(self, func: Callable[[], Awaitable[Any]], config: RetryConfig):
        """
        Execute an async callable with retry logic.

        Args:
            func: Zero-argument coroutine factory, invoked once per attempt
            config: Retry configuration

        Returns:
            Result from the first successful attempt

        Raises:
            ProviderError: The mapped error of the last (or first
                non-retryable) failure
        """
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as e:  # noqa: BLE001
                error = self._as_provider_error(e)
                if error is None:
                    raise
                if not error.is_retryable or attempt >= config.max_retries:
                    if error is e:
                        raise
                    raise error from e

                delay = self.get_delay(attempt, config, error.retry_after)
                logger.warning(
                    "Retrying after %s error (attempt %d/%d, delay %.2fs): %s",
                    error.kind.value, attempt + 1, config.max_retries, delay, error.message,
                )
                await self._sleep(delay)
                attempt += 1

    def get_delay(self, attempt: int, config: RetryConfig, retry_after: Optional[float] = None) -> float:
        """Delay before the attempt following ``attempt``."""
        if retry_after:
            return min(config.max_delay, retry_after)
        backoff = config.base_delay * (2 ** attempt)
        jitter = backoff * JITTER_RATIO * self._random()
        return min(config.max_delay, backoff + jitter)

    def _as_provider_error(self, error: Exception) -> Optional[ProviderError]:
        """Normalize a failure; ``None`` when it cannot be classified (never retried)."""
        if isinstance(error, ProviderError):
            return error
        if self.error_mapper is None:
            return None
        mapped = self.error_mapper.map(error)
        return self.error_mapper.to_exception(mapped, original_error=error)
