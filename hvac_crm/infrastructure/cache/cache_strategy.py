"""
HVAC Multi-Tier Cache Strategy.

Cache-aside service over two tiers: in-process memory (MemoryCache) and Redis.
Each data type has its own TTL, tier, invalidation strategy and compression.

Responsibility:
    - Tier selection per data type (memory / redis / database)
    - JSON serialization with optional gzip+base64 compression
    - Promotion of hot Redis keys to memory
    - Event-driven invalidation (customer updated, ticket status changed...)
    - Workflow prefetching and peak-hour cache warming
    - Hit/miss/latency metrics

Architecture Notes:
    - Infrastructure Layer
    - "database" tier is a long-TTL Redis entry
    - Redis failures never propagate: they are logged and treated as a miss
    - Keys are namespaced "hvac:{data_type}:{key}"

Examples:
    >>> strategy = HvacCacheStrategy(redis_client=get_redis_client())
    >>> strategy.set("customer-data", "customer:42:profile", {"name": "Hotel Bałtyk"})
    >>> strategy.get("customer-data", "customer:42:profile")
    {'name': 'Hotel Bałtyk'}
    >>> strategy.invalidate_by_event("customer-updated", "42")
    1
"""

import base64
import gzip
import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from redis import Redis
from redis.exceptions import RedisError

from hvac_crm.infrastructure.cache.memory_cache import MemoryCache
from hvac_crm.infrastructure.persistence.redis import get_redis_client

logger = logging.getLogger(__name__)

KEY_PREFIX = "hvac"
COMPRESSION_THRESHOLD_BYTES = 1024
COMPRESSED_MARKER = "gz:"
PROMOTION_ACCESS_COUNT = 5
# Redis keys whose read counts are tracked for promotion (least recently read dropped)
MAX_TRACKED_KEYS = 10_000
FREQUENTLY_ACCESSED = frozenset({"equipment-status", "technician-locations"})


class CacheTier(str, Enum):
    MEMORY = "memory"
    REDIS = "redis"
    DATABASE = "database"


class InvalidationStrategy(str, Enum):
    TIME = "time"
    EVENT = "event"
    MANUAL = "manual"


@dataclass(frozen=True)
class CacheConfig:
    ttl: int
    tier: CacheTier
    invalidation: InvalidationStrategy
    compressed: bool


CACHE_CONFIGS: dict[str, CacheConfig] = {
    "customer-data": CacheConfig(1800, CacheTier.REDIS, InvalidationStrategy.EVENT, True),
    "equipment-status": CacheConfig(300, CacheTier.MEMORY, InvalidationStrategy.TIME, False),
    "service-tickets": CacheConfig(900, CacheTier.REDIS, InvalidationStrategy.EVENT, True),
    "technician-schedules": CacheConfig(600, CacheTier.REDIS, InvalidationStrategy.EVENT, False),
    "customer-insights": CacheConfig(3600, CacheTier.REDIS, InvalidationStrategy.MANUAL, True),
    "equipment-maintenance-history": CacheConfig(
        86400, CacheTier.DATABASE, InvalidationStrategy.EVENT, True
    ),
}

# Event type -> key patterns ("{id}" replaced by entity id)
INVALIDATION_PATTERNS: dict[str, tuple[str, ...]] = {
    "customer-updated": ("customer:{id}:*", "insights:{id}:*"),
    "ticket-status-changed": ("ticket:{id}:*", "schedule:*"),
    "equipment-maintenance": ("equipment:{id}:*", "maintenance:*"),
    "technician-location-updated": ("technician:{id}:*", "routes:*"),
}

WORKFLOW_DATA_TYPES: dict[str, tuple[str, ...]] = {
    "morning-dispatch": ("technician-schedules", "service-tickets", "equipment-status"),
    "equipment-maintenance": ("equipment-maintenance-history", "equipment-status"),
    "emergency-response": ("service-tickets", "technician-schedules", "customer-data"),
}

PEAK_HOUR_WORKFLOWS = ("morning-dispatch", "emergency-response")

# loader(data_type) -> {key: value}
PrefetchLoader = Callable[[str], Mapping[str, Any]]


def build_key(data_type: str, key: str) -> str:
    return f"{KEY_PREFIX}:{data_type}:{key}"


def encode_value(value: Any, compress: bool) -> str:
    """
    Serialize value to JSON; gzip+base64 when compress and payload > 1 KiB.
    """
    payload = json.dumps(value, default=str, ensure_ascii=False)
    raw = payload.encode("utf-8")
    if compress and len(raw) > COMPRESSION_THRESHOLD_BYTES:
        packed = base64.b64encode(gzip.compress(raw)).decode("ascii")
        return f"{COMPRESSED_MARKER}{packed}"
    return payload


def decode_value(payload: str) -> Any:
    if payload.startswith(COMPRESSED_MARKER):
        raw = gzip.decompress(base64.b64decode(payload[len(COMPRESSED_MARKER):]))
        return json.loads(raw.decode("utf-8"))
    return json.loads(payload)


class HvacCacheStrategy:
    """
    Multi-tier cache-aside service for HVAC data.

    Redis client is resolved lazily through get_redis_client() unless injected.
    """

    def __init__(
        self,
        redis_client: Optional[Redis] = None,
        memory_cache: Optional[MemoryCache] = None,
        default_ttl: int = 3600,
        configs: Optional[dict[str, CacheConfig]] = None,
    ) -> None:
        self._redis = redis_client
        self.memory = memory_cache or MemoryCache(default_ttl=default_ttl)
        self.default_ttl = default_ttl
        self.configs = dict(configs or CACHE_CONFIGS)
        self._access_counts: "OrderedDict[str, int]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._response_time_total_ms = 0.0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def redis(self) -> Redis:
        if self._redis is None:
            self._redis = get_redis_client()
        return self._redis

    def config_for(self, data_type: str) -> CacheConfig:
        config = self.configs.get(data_type)
        if config is None:
            return CacheConfig(
                self.default_ttl, CacheTier.REDIS, InvalidationStrategy.TIME, False
            )
        return config

    def _uses_memory_first(self, data_type: str, config: CacheConfig) -> bool:
        return config.tier == CacheTier.MEMORY or data_type in FREQUENTLY_ACCESSED

    def _record(self, hit: bool, started: float) -> None:
        with self._lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1
            self._response_time_total_ms += (time.perf_counter() - started) * 1000

    def _count_access(self, full_key: str) -> int:
        with self._lock:
            count = self._access_counts.pop(full_key, 0) + 1
            if count > PROMOTION_ACCESS_COUNT:
                return count
            self._access_counts[full_key] = count
            if len(self._access_counts) > MAX_TRACKED_KEYS:
                self._access_counts.popitem(last=False)
            return count

    # ------------------------------------------------------------------
    # Get / set
    # ------------------------------------------------------------------

    def get(self, data_type: str, key: str) -> Any:
        """
        Read value through the tiers.

        Returns:
            Cached value or None on miss (Redis errors count as miss)
        """
        started = time.perf_counter()
        config = self.config_for(data_type)
        full_key = build_key(data_type, key)

        # Promoted Redis keys live in memory too
        if self._uses_memory_first(data_type, config) or self.memory.contains(full_key):
            value = self.memory.get(full_key)
            if value is not None:
                self._record(True, started)
                return value

        if config.tier != CacheTier.MEMORY:
            try:
                payload = self.redis.get(full_key)
            except RedisError as e:
                logger.warning(f"Redis read failed for {full_key}, treating as miss: {e}")
                payload = None

            if payload is not None:
                value = decode_value(payload)
                if self._count_access(full_key) > PROMOTION_ACCESS_COUNT:
                    self.memory.set(full_key, value, ttl=config.ttl)
                self._record(True, started)
                return value

        self._record(False, started)
        return None

    def set(self, data_type: str, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """
        Store value in the tier configured for data_type.

        Args:
            data_type: Cache data type (see CACHE_CONFIGS)
            key: Key within data type, e.g. "customer:42:profile"
            value: JSON-serializable value
            ttl: Override configured TTL (seconds)
        """
        config = self.config_for(data_type)
        ttl = ttl or config.ttl
        full_key = build_key(data_type, key)

        if config.tier == CacheTier.MEMORY:
            self.memory.set(full_key, value, ttl=ttl)
            return

        try:
            self.redis.setex(full_key, ttl, encode_value(value, config.compressed))
        except RedisError as e:
            logger.warning(f"Redis write failed for {full_key}: {e}")

        if data_type in FREQUENTLY_ACCESSED:
            self.memory.set(full_key, value, ttl=ttl)

    def get_or_set(self, data_type: str, key: str, loader: Callable[[], Any]) -> Any:
        """Return cached value or call loader, store and return its result."""
        value = self.get(data_type, key)
        if value is not None:
            return value
        value = loader()
        if value is not None:
            self.set(data_type, key, value)
        return value

    def invalidate(self, data_type: str, key: str) -> None:
        full_key = build_key(data_type, key)
        self.memory.delete(full_key)
        with self._lock:
            self._access_counts.pop(full_key, None)
        if self.config_for(data_type).tier == CacheTier.MEMORY:
            return
        try:
            self.redis.delete(full_key)
        except RedisError as e:
            logger.warning(f"Redis delete failed for {full_key}: {e}")

    # ------------------------------------------------------------------
    # Event-driven invalidation
    # ------------------------------------------------------------------

    def _delete_redis_pattern(self, pattern: str) -> int:
        try:
            keys = list(self.redis.scan_iter(match=pattern, count=100))
            if not keys:
                return 0
            return int(self.redis.delete(*keys))
        except RedisError as e:
            logger.warning(f"Redis pattern invalidation failed for {pattern}: {e}")
            return 0

    def invalidate_by_event(self, event: str, entity_id: str) -> int:
        """
        Invalidate cache entries affected by a business event.

        Args:
            event: customer-updated, ticket-status-changed,
                equipment-maintenance or technician-location-updated
            entity_id: ID of changed entity

        Returns:
            Number of Redis keys removed (0 for unknown event)
        """
        templates = INVALIDATION_PATTERNS.get(event)
        if templates is None:
            logger.warning(f"Unknown cache invalidation event: {event}")
            return 0

        removed = 0
        patterns = [f"{KEY_PREFIX}:*:{template.format(id=entity_id)}" for template in templates]
        for pattern in patterns:
            self.memory.invalidate_pattern(pattern)
            removed += self._delete_redis_pattern(pattern)

        logger.info(f"Cache invalidated for event {event} ({entity_id}): {removed} redis keys, patterns={patterns}")
        return removed

    # ------------------------------------------------------------------
    # Prefetching
    # ------------------------------------------------------------------

    def prefetch_for_workflow(self, workflow: str, loader: PrefetchLoader) -> int:
        """
        Load and cache data types used by a workflow.

        Args:
            workflow: morning-dispatch, equipment-maintenance or emergency-response
            loader: Called once per data type, returns {key: value}

        Returns:
            Number of entries stored

        Raises:
            ValueError: If workflow is unknown
        """
        data_types = WORKFLOW_DATA_TYPES.get(workflow)
        if data_types is None:
            raise ValueError(
                f"Unknown workflow '{workflow}'. Available: {', '.join(WORKFLOW_DATA_TYPES)}"
            )

        stored = 0
        for data_type in data_types:
            for key, value in loader(data_type).items():
                self.set(data_type, key, value)
                stored += 1

        logger.info(f"Prefetched {stored} entries for workflow {workflow}")
        return stored

    def warm_cache_for_peak_hours(self, loader: PrefetchLoader) -> dict[str, int]:
        """Prefetch morning-dispatch and emergency-response workflows."""
        result = {workflow: self.prefetch_for_workflow(workflow, loader) for workflow in PEAK_HOUR_WORKFLOWS}
        logger.info(f"Cache warming completed for peak hours: {result}")
        return result

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def get_metrics(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            elapsed_ms = self._response_time_total_ms
            hits, misses = self._hits, self._misses

        memory_stats = self.memory.stats()
        return {
            "hit_rate": hits / total if total else 0.0,
            "miss_rate": misses / total if total else 0.0,
            "average_response_time": elapsed_ms / total if total else 0.0,
            "memory_entries": memory_stats["size"],
            "eviction_count": memory_stats["evictions"],
        }
