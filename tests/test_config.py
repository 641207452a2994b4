import pytest

from settings_store.core.config import StoreConfig, coerce_timeout, get_config
from settings_store.exceptions import InvalidCacheId


def test_defaults(monkeypatch):
    monkeypatch.delenv("SETTINGS_BACKEND", raising=False)
    config = StoreConfig(_env_file=None)
    assert config.backend == "file"
    assert config.cache_id == "settings"
    assert config.cache_timeout == 3600
    assert config.table_name == "settings"
    assert config.create_table is False
    assert config.redis_dsn is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SETTINGS_BACKEND", "db")
    monkeypatch.setenv("SETTINGS_TABLE_NAME", "app_settings")
    monkeypatch.setenv("SETTINGS_CREATE_TABLE", "true")
    monkeypatch.setenv("SETTINGS_CACHE_TIMEOUT", "-1")

    config = get_config()
    assert config.backend == "db"
    assert config.table_name == "app_settings"
    assert config.create_table is True
    assert config.cache_timeout == 0
    assert get_config() is config


def test_invalid_cache_id():
    with pytest.raises(InvalidCacheId):
        StoreConfig(_env_file=None, cache_id="not.a.label")


@pytest.mark.parametrize(
    "timeout, expected",
    [(60, 60), (1, 1), (0, 0), (-10, 0), (True, 0), (2.5, 0), ("60", 0)],
)
def test_coerce_timeout(timeout, expected):
    assert coerce_timeout(timeout) == expected
