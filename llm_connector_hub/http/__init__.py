"""Outbound HTTP execution for provider adapters."""

from .executor import HttpExecutor

__all__ = ["HttpExecutor"]
