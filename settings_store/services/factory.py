from sqlalchemy import Engine

from settings_store.cache.layer import CacheService, MemoryCache, RedisCache
from settings_store.core.config import StoreConfig
from settings_store.database import create_db_engine
from settings_store.services.base import Settings
from settings_store.services.db_settings import DbSettings
from settings_store.services.file_settings import ConfigSettings


def build_cache(config: StoreConfig) -> CacheService | None:
    """Pick the cache service described by the configuration, if any."""
    if config.redis_dsn:
        return RedisCache.from_url(config.redis_dsn, config.redis_pool_size)
    if config.memory_cache_maxsize > 0:
        return MemoryCache(maxsize=config.memory_cache_maxsize)
    return None


def create_store(
    config: StoreConfig,
    *,
    engine: Engine | None = None,
    cache: CacheService | None = None,
) -> Settings:
    """
    Build the settings store selected by ``config.backend``.

    Engine and cache are long-lived and meant to be shared between the
    short-lived stores created from them.
    """
    options = {
        "cache_component": cache,
        "cache_id": config.cache_id,
        "cache_timeout": config.cache_timeout,
    }
    if config.backend == "db":
        if engine is None:
            engine = create_db_engine(config.database_url)
        return DbSettings(
            engine,
            table_name=config.table_name,
            create_table=config.create_table,
            **options,
        )
    return ConfigSettings(config.config_root, **options)
