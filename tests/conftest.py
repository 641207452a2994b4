"""Shared test fixtures for the settings store."""

import json
from unittest.mock import MagicMock

import pytest
from sqlalchemy import event

from settings_store.cache.layer import MemoryCache
from settings_store.core.config import get_config
from settings_store.database import create_db_engine
from settings_store.services.db_settings import DbSettings
from settings_store.services.file_settings import ConfigSettings


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database for each test."""
    engine = create_db_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def statements(engine):
    """SQL statements executed on ``engine`` from the moment it is requested."""
    executed = []

    def record(conn, cursor, statement, parameters, context, executemany):
        executed.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    yield executed
    event.remove(engine, "before_cursor_execute", record)


@pytest.fixture
def shared_cache():
    return MemoryCache(maxsize=128)


@pytest.fixture
def cache(shared_cache):
    """MemoryCache with call tracking."""
    return MagicMock(wraps=shared_cache)


@pytest.fixture
def db_store(engine, cache):
    return DbSettings(engine, create_table=True, cache_component=cache)


@pytest.fixture
def config_root(tmp_path):
    root = tmp_path / "config"
    root.mkdir()
    (root / "app.json").write_text(json.dumps({"title": "Demo", "debug": False}))
    (root / "settings.json").write_text(json.dumps({"locale": "en_GB"}))
    (root / "mail").mkdir()
    (root / "mail" / "smtp.json").write_text(
        json.dumps({"host": "localhost", "port": 25})
    )
    return root


@pytest.fixture
def file_store(config_root, cache):
    return ConfigSettings(config_root, cache_component=cache)


@pytest.fixture(autouse=True)
def clear_config_cache():
    get_config.cache_clear()
    yield
    get_config.cache_clear()
