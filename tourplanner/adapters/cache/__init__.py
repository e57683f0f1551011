"""Cache adapters - Implementations of the CachePort.

Available implementations:
- InMemoryCache: Thread-safe in-memory cache with optional TTL
"""

from .memory_cache import InMemoryCache

__all__ = ["InMemoryCache"]
