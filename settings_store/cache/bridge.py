from typing import Any

from settings_store.cache.layer import ensure_cache_service
from settings_store.core.config import coerce_timeout, validate_cache_id
from settings_store.identifiers import DEFAULT_CATEGORY

import logging

logger = logging.getLogger(__name__)


class CacheBridge:
    """
    Reads and writes whole categories to an external cache service.

    Keys are namespaced as ``<cache_id>.<category>``. The bridge is disabled
    when there is no cache component or the timeout is 0, in which case every
    read is a miss and every write a no-op.
    """

    def __init__(self, component=None, cache_id: str = DEFAULT_CATEGORY, timeout=3600):
        self.component = ensure_cache_service(component)
        self.cache_id = validate_cache_id(cache_id)
        self.timeout = coerce_timeout(timeout)

    @property
    def enabled(self) -> bool:
        return self.component is not None and self.timeout > 0

    def key(self, category: str) -> str:
        return f"{self.cache_id}.{category}"

    def put(self, category: str, values: dict) -> bool:
        if not self.enabled:
            return False
        stored = self.component.put(self.key(category), values, self.timeout)
        logger.debug(f"Cached category {category}: {stored}")
        return bool(stored)

    def get(self, category: str) -> dict | None:
        if not self.enabled:
            return None
        values: Any = self.component.get(self.key(category))
        if not isinstance(values, dict):
            return None
        return values

    def invalidate(self, category: str) -> bool:
        if self.component is None or not hasattr(self.component, "delete"):
            return False
        return bool(self.component.delete(self.key(category)))
