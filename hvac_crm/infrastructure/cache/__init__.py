"""
Cache Infrastructure Module

Exports:
    - MemoryCache: Thread-safe in-process TTL cache with LRU eviction
    - HvacCacheStrategy: Multi-tier (memory + Redis) cache-aside service
"""

from .cache_strategy import (
    CACHE_CONFIGS,
    INVALIDATION_PATTERNS,
    WORKFLOW_DATA_TYPES,
    CacheConfig,
    CacheTier,
    HvacCacheStrategy,
    InvalidationStrategy,
    build_key,
    decode_value,
    encode_value,
)
from .memory_cache import MemoryCache

__all__ = [
    "CACHE_CONFIGS",
    "INVALIDATION_PATTERNS",
    "WORKFLOW_DATA_TYPES",
    "CacheConfig",
    "CacheTier",
    "HvacCacheStrategy",
    "InvalidationStrategy",
    "MemoryCache",
    "build_key",
    "decode_value",
    "encode_value",
]
