"""
Adapters layer - Busy-interval sources.
"""

from .json_provider import JsonBusyBlockProvider
from .memory_provider import InMemoryBusyBlockProvider

__all__ = ["JsonBusyBlockProvider", "InMemoryBusyBlockProvider"]
