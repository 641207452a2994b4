import copy
import json
import threading
import time
from typing import Any

from cachetools import TLRUCache
from redis import Redis, RedisError

from settings_store.exceptions import InvalidCacheComponent

import logging

logger = logging.getLogger(__name__)

# TTL used by MemoryCache when a caller stores a value without one.
NO_EXPIRY = float("inf")


class CacheService:
    """
    Key/value cache with per-entry TTL.

    Implementations store whole category mappings under namespaced keys and
    hand back None for anything they cannot resolve.
    """

    def __init__(self):
        self.stats = {"hits": 0, "misses": 0, "writes": 0, "errors": 0}

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def put(self, key: str, value: Any, ttl: int | None = None) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def get_stats(self) -> dict:
        total = self.stats["hits"] + self.stats["misses"]
        return {
            **self.stats,
            "hit_rate": self.stats["hits"] / total if total > 0 else 0,
        }


class MemoryCache(CacheService):
    """
    Process-local cache service.

    Each entry expires after its own TTL. Values are deep-copied on the way in
    and out, so a cached category never shares state with a store instance.
    Safe to share between threads.
    """

    def __init__(self, maxsize: int = 2048, timer=time.monotonic):
        super().__init__()
        self._entries = TLRUCache(
            maxsize=maxsize, ttu=self._time_to_use, timer=timer
        )
        self._lock = threading.Lock()

    @staticmethod
    def _time_to_use(key, entry, now):
        _, ttl = entry
        return now + ttl

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            self.stats["misses" if entry is None else "hits"] += 1
        if entry is None:
            logger.debug(f"Memory cache miss: {key}")
            return None
        logger.debug(f"Memory cache hit: {key}")
        return copy.deepcopy(entry[0])

    def put(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if ttl is not None and ttl <= 0:
            return False
        entry = (copy.deepcopy(value), ttl or NO_EXPIRY)
        with self._lock:
            self._entries[key] = entry
            self.stats["writes"] += 1
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None


class RedisCache(CacheService):
    """
    Cache service backed by a synchronous Redis client.

    Values are stored as JSON. Redis failures are logged and reported as a
    miss (or an unsuccessful write) so a flaky cache never breaks a lookup.
    """

    def __init__(self, redis: Redis):
        super().__init__()
        self._redis = redis

    @classmethod
    def from_url(cls, dsn: str, pool_size: int = 5) -> "RedisCache":
        redis = Redis.from_url(
            dsn,
            encoding="utf-8",
            decode_responses=True,
            max_connections=pool_size,
            socket_connect_timeout=5,
            socket_keepalive=True,
            health_check_interval=30,
        )
        try:
            redis.ping()
        except RedisError as e:
            raise InvalidCacheComponent(
                f"Unable to reach the Redis cache at {dsn}: {e}"
            ) from e
        logger.info("Redis connection established")
        return cls(redis)

    def _serialize(self, value: Any) -> str:
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Serialization failed: {e}")
            raise

    def _deserialize(self, raw: str) -> Any:
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            # Not ours; treat as unresolvable
            return None

    def get(self, key: str) -> Any:
        try:
            raw = self._redis.get(key)
        except RedisError as e:
            logger.error(f"Redis GET error for {key}: {e}")
            self.stats["errors"] += 1
            return None
        if raw is None:
            self.stats["misses"] += 1
            logger.debug(f"Redis miss: {key}")
            return None
        self.stats["hits"] += 1
        logger.debug(f"Redis hit: {key}")
        return self._deserialize(raw)

    def put(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if ttl is not None and ttl <= 0:
            return False
        data = self._serialize(value)
        try:
            result = self._redis.set(key, data, ex=ttl)
        except RedisError as e:
            logger.error(f"Redis SET error for {key}: {e}")
            self.stats["errors"] += 1
            return False
        self.stats["writes"] += 1
        logger.debug(f"Stored {key} in Redis, ttl={ttl}")
        return bool(result)

    def delete(self, key: str) -> bool:
        try:
            return bool(self._redis.delete(key))
        except RedisError as e:
            logger.error(f"Redis DELETE error for {key}: {e}")
            self.stats["errors"] += 1
            return False

    def close(self):
        try:
            self._redis.close()
            logger.info("Redis connection closed")
        except RedisError as e:
            logger.error(f"Error closing Redis: {e}")


def ensure_cache_service(component) -> Any:
    """Reject anything that cannot serve as a cache component."""
    if component is None:
        return None
    methods = (getattr(component, "get", None), getattr(component, "put", None))
    if not all(callable(method) for method in methods):
        raise InvalidCacheComponent(
            f"The cache component provided in the configuration ({component!r}) "
            "is invalid."
        )
    return component
