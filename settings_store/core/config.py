from functools import lru_cache
from typing import Literal

from fastapi import Depends
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Annotated

from settings_store.exceptions import InvalidCacheId
from settings_store.identifiers import DEFAULT_CATEGORY, is_label


def coerce_timeout(timeout) -> int:
    """Positive integers are kept, everything else becomes 0 (no caching)."""
    if isinstance(timeout, int) and not isinstance(timeout, bool) and timeout > 0:
        return timeout
    return 0


def validate_cache_id(cache_id) -> str:
    if not is_label(cache_id):
        raise InvalidCacheId(
            f"The cache identifier string provided in the configuration "
            f"({cache_id!r}) is invalid."
        )
    return cache_id


class StoreConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SETTINGS_", env_file=".env", extra="ignore"
    )

    backend: Literal["file", "db"] = "file"
    config_root: str = "config"  # root directory of file-based categories

    redis_dsn: str | None = None
    redis_pool_size: int = 5
    memory_cache_maxsize: int = 0  # >0 enables the in-process cache service
    cache_id: str = DEFAULT_CATEGORY
    cache_timeout: int = 3600  # seconds; non-positive disables caching

    database_url: str | None = None
    table_name: str = "settings"
    create_table: bool = False

    @field_validator("cache_id")
    @classmethod
    def _check_cache_id(cls, value):
        return validate_cache_id(value)

    @field_validator("cache_timeout")
    @classmethod
    def _check_cache_timeout(cls, value):
        return coerce_timeout(value)


@lru_cache
def get_config() -> StoreConfig:
    return StoreConfig()


ConfigDep = Annotated[StoreConfig, Depends(get_config)]
