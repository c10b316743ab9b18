"""Retry handling for provider calls."""

from .retry import RetryConfig, RetryManager

__all__ = ["RetryConfig", "RetryManager"]
