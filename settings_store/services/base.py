from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any

from settings_store.cache.bridge import CacheBridge
from settings_store.exceptions import InvalidName
from settings_store.identifiers import (
    DEFAULT_CATEGORY,
    SettingIdentifier,
    is_category,
    split,
)

import logging

logger = logging.getLogger(__name__)


class Settings(ABC):
    """
    Key/value settings grouped into categories.

    A category is loaded as a whole on first access to any of its settings,
    kept in memory for the lifetime of the instance and written to the cache
    bridge so other instances can skip the backend. Subclasses provide the
    backend: ``load`` fetches a category, ``set``/``delete`` persist changes.

    Instances are meant to live for one request (or one process) and are not
    safe for concurrent mutation from several threads.
    """

    DEFAULT_CATEGORY = DEFAULT_CATEGORY

    def __init__(
        self,
        cache_component=None,
        cache_id: str = DEFAULT_CATEGORY,
        cache_timeout: int = 3600,
    ):
        self._settings: dict[str, dict[str, Any]] = {}
        self.cache = CacheBridge(cache_component, cache_id, cache_timeout)

    @property
    def categories(self):
        """Names of the categories currently held in memory."""
        return MappingProxyType(self._settings).keys()

    @staticmethod
    def split(identifier) -> SettingIdentifier | None:
        return split(identifier)

    def _require_identifier(self, identifier) -> SettingIdentifier:
        setting = split(identifier)
        if setting is None:
            raise InvalidName(identifier)
        return setting

    def _require_category(self, category) -> str:
        if not is_category(category):
            raise InvalidName(
                category, f"Invalid category name {category!r}."
            )
        return category

    def get(self, identifier: str, default: Any = None) -> Any:
        """
        Return the value of a setting, or ``default`` when it is not set.

        Missing categories and missing names are not errors; only a malformed
        identifier raises (InvalidName).
        """
        setting = self._require_identifier(identifier)
        if not self.load(setting.category):
            return default
        values = self._settings[setting.category]
        if setting.name not in values:
            return default
        return values[setting.name]

    @abstractmethod
    def set(self, identifier: str, value: Any) -> bool:
        ...

    @abstractmethod
    def delete(self, identifier: str) -> bool:
        ...

    @abstractmethod
    def load(self, category: str) -> bool:
        """Make ``category`` resident. Return False if it does not exist."""

    def refresh(self, category: str) -> None:
        """Forget the resident and cached copy so the next access reloads."""
        self._require_category(category)
        self._settings.pop(category, None)
        self.cache.invalidate(category)

    def _is_resident(self, category: str) -> bool:
        return category in self._settings or self._load_from_cache(category)

    def _load_from_cache(self, category: str) -> bool:
        if not self.cache.enabled:
            return False
        if category in self._settings:
            return True
        values = self.cache.get(category)
        if values is None:
            return False
        logger.debug(f"Category {category} loaded from cache")
        self._settings[category] = values
        return True

    def _store(self, category: str, values: dict[str, Any]) -> None:
        self._settings[category] = values
        self._cache(category)

    def _cache(self, category: str) -> bool:
        if category not in self._settings:
            return False
        return self.cache.put(category, self._settings[category])
