"""Observability helpers (structured logging)."""

from .logging import ProviderLogger

__all__ = ["ProviderLogger"]
