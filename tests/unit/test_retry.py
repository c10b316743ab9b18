"""Tests for the retrying executor."""

import asyncio
import random

import httpx
import pytest

from llm_connector_hub.errors import ErrorKind, ProviderError
from llm_connector_hub.providers.openai import OpenAIErrorMapper
from llm_connector_hub.reliability import RetryConfig, RetryManager
from tests.helpers.http_mocks import FakeSleep


def provider_error(kind, retry_after=None):
    return ProviderError(f"{kind.value} failure", provider="test", kind=kind, retry_after=retry_after)


class FlakyCall:
    """Fails with the queued errors, then returns ``result``."""

    def __init__(self, errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


class TestRetryManager:
    """Retry decisions and delays."""

    @pytest.fixture
    def sleep(self):
        return FakeSleep()

    @pytest.fixture
    def manager(self, sleep):
        return RetryManager(sleep=sleep, rng=random.Random(7))

    @pytest.mark.asyncio
    async def test_success_without_retry(self, manager, sleep):
        call = FlakyCall([])
        assert await manager.execute(call, RetryConfig()) == "ok"
        assert call.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_retries_retryable_errors(self, manager, sleep):
        call = FlakyCall([provider_error(ErrorKind.SERVER_ERROR), provider_error(ErrorKind.TIMEOUT)])
        assert await manager.execute(call, RetryConfig(max_retries=3)) == "ok"
        assert call.calls == 3
        assert len(sleep.delays) == 2

    @pytest.mark.asyncio
    async def test_retry_after_used_exactly(self, manager, sleep):
        call = FlakyCall([provider_error(ErrorKind.RATE_LIMIT, retry_after=30.0)])
        await manager.execute(call, RetryConfig(max_retries=3, base_delay=1.0, max_delay=60.0))
        assert sleep.delays == [30.0]

    @pytest.mark.asyncio
    async def test_retry_after_capped_by_max_delay(self, manager, sleep):
        call = FlakyCall([provider_error(ErrorKind.RATE_LIMIT, retry_after=120.0)])
        await manager.execute(call, RetryConfig(max_delay=10.0))
        assert sleep.delays == [10.0]

    @pytest.mark.parametrize(
        "kind",
        [ErrorKind.AUTHENTICATION, ErrorKind.INVALID_REQUEST, ErrorKind.UNKNOWN],
    )
    @pytest.mark.asyncio
    async def test_non_retryable_raised_immediately(self, manager, sleep, kind):
        error = provider_error(kind)
        call = FlakyCall([error])
        with pytest.raises(ProviderError) as exc_info:
            await manager.execute(call, RetryConfig(max_retries=5))
        assert exc_info.value is error
        assert call.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_exhaustion_raises_last_error(self, manager, sleep):
        errors = [provider_error(ErrorKind.SERVER_ERROR) for _ in range(5)]
        call = FlakyCall(errors)
        with pytest.raises(ProviderError) as exc_info:
            await manager.execute(call, RetryConfig(max_retries=2))
        assert call.calls == 3
        assert len(sleep.delays) == 2
        assert exc_info.value.kind == ErrorKind.SERVER_ERROR

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt(self, manager):
        call = FlakyCall([provider_error(ErrorKind.RATE_LIMIT)])
        with pytest.raises(ProviderError):
            await manager.execute(call, RetryConfig(max_retries=0))
        assert call.calls == 1

    @pytest.mark.asyncio
    async def test_unmapped_exception_not_retried_without_mapper(self, manager):
        call = FlakyCall([KeyError("boom")])
        with pytest.raises(KeyError):
            await manager.execute(call, RetryConfig())
        assert call.calls == 1

    @pytest.mark.asyncio
    async def test_raw_errors_mapped_with_mapper(self, sleep):
        manager = RetryManager(OpenAIErrorMapper(), sleep=sleep)
        call = FlakyCall([httpx.ReadTimeout("timed out")])
        assert await manager.execute(call, RetryConfig()) == "ok"
        assert call.calls == 2

    @pytest.mark.asyncio
    async def test_mapped_error_chains_original(self, sleep):
        manager = RetryManager(OpenAIErrorMapper(), sleep=sleep)
        original = httpx.ConnectError("refused")
        call = FlakyCall([original])
        with pytest.raises(ProviderError) as exc_info:
            await manager.execute(call, RetryConfig())
        assert exc_info.value.kind == ErrorKind.UNKNOWN
        assert exc_info.value.__cause__ is original
        assert call.calls == 1

    @pytest.mark.asyncio
    async def test_cancellation_not_retried(self, manager, sleep):
        call = FlakyCall([asyncio.CancelledError()])
        with pytest.raises(asyncio.CancelledError):
            await manager.execute(call, RetryConfig())
        assert call.calls == 1
        assert sleep.delays == []


class TestBackoff:
    """Delay computation."""

    def test_exponential_growth_within_jitter(self):
        manager = RetryManager(rng=random.Random(1))
        config = RetryConfig(base_delay=1.0, max_delay=60.0)
        for attempt in range(4):
            delay = manager.get_delay(attempt, config)
            assert 2 ** attempt <= delay <= 2 ** attempt * 1.25

    def test_never_exceeds_max_delay(self):
        manager = RetryManager(rng=random.Random(3))
        config = RetryConfig(base_delay=1.0, max_delay=5.0)
        delays = [manager.get_delay(attempt, config) for attempt in range(10)]
        assert all(delay <= 5.0 for delay in delays)
        assert delays[-1] == 5.0

    def test_non_decreasing_without_retry_after(self):
        manager = RetryManager(rng=random.Random(11))
        config = RetryConfig(base_delay=0.5, max_delay=8.0)
        delays = [manager.get_delay(attempt, config) for attempt in range(8)]
        assert delays == sorted(delays)

    def test_retry_after_has_no_jitter(self):
        manager = RetryManager(rng=random.Random(5))
        assert manager.get_delay(0, RetryConfig(), retry_after=30.0) == 30.0
