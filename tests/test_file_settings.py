import json

import pytest

from settings_store.exceptions import InvalidName, NonExistentCategory, ReadOnly
from settings_store.services.file_settings import ConfigSettings


class TestGet:
    def test_reads_category_file(self, file_store):
        assert file_store.get("app.title") == "Demo"
        assert file_store.get("app.debug") is False

    def test_missing_name_returns_default(self, file_store):
        assert file_store.get("app.missing", "fallback") == "fallback"
        assert file_store.get("app.missing") is None

    def test_missing_category_returns_default(self, file_store):
        assert file_store.get("nowhere.title", "fallback") == "fallback"
        assert "nowhere" not in file_store.categories

    def test_default_category(self, file_store):
        assert file_store.get("locale") == "en_GB"

    def test_nested_category_maps_to_directories(self, file_store, config_root):
        assert file_store.category_path("mail.smtp") == config_root / "mail" / "smtp.json"
        assert file_store.get("mail.smtp.port") == 25

    @pytest.mark.parametrize("identifier", ["", ".title", "app.", "app..title", "app.ti-tle"])
    def test_invalid_identifier(self, file_store, cache, identifier):
        with pytest.raises(InvalidName):
            file_store.get(identifier)
        cache.get.assert_not_called()
        cache.put.assert_not_called()

    def test_values_are_not_coerced(self, config_root, cache):
        (config_root / "types.json").write_text(
            json.dumps({"count": 3, "ratio": 0.5, "tags": ["a"], "empty": None})
        )
        store = ConfigSettings(config_root, cache_component=cache)
        assert store.get("types.count") == 3
        assert store.get("types.ratio") == 0.5
        assert store.get("types.tags") == ["a"]
        assert store.get("types.empty", "default") is None


class TestLoad:
    def test_wrong_shape_raises(self, config_root, file_store):
        (config_root / "broken.json").write_text(json.dumps(["a", "b"]))
        with pytest.raises(NonExistentCategory):
            file_store.get("broken.value")

    def test_unparseable_file_raises(self, config_root, file_store):
        (config_root / "garbage.json").write_text("{not json")
        with pytest.raises(NonExistentCategory):
            file_store.load("garbage")

    def test_undecodable_file_raises(self, config_root, file_store):
        (config_root / "latin.json").write_bytes(b'{"title": "caf\xe9"}')
        with pytest.raises(NonExistentCategory):
            file_store.get("latin.title")

    def test_missing_file_is_not_an_error(self, file_store):
        assert file_store.load("absent") is False

    def test_directory_is_not_a_category(self, config_root, file_store):
        (config_root / "folder.json").mkdir()
        assert file_store.load("folder") is False

    def test_invalid_category(self, file_store):
        with pytest.raises(InvalidName):
            file_store.load("bad..category")

    def test_loaded_once(self, file_store, config_root, cache):
        assert file_store.load("app")
        (config_root / "app.json").write_text(json.dumps({"title": "Changed"}))

        cache.reset_mock()
        assert file_store.load("app")
        assert file_store.get("app.title") == "Demo"
        cache.get.assert_not_called()
        cache.put.assert_not_called()

    def test_writes_category_to_cache(self, file_store, shared_cache):
        file_store.get("app.title")
        assert shared_cache.get("settings.app") == {"title": "Demo", "debug": False}

    def test_cache_shared_between_instances(self, config_root, file_store, cache):
        file_store.get("app.title")
        (config_root / "app.json").unlink()

        fresh = ConfigSettings(config_root, cache_component=cache)
        assert fresh.get("app.title") == "Demo"

    def test_refresh_reloads_from_file(self, config_root, file_store):
        file_store.get("app.title")
        (config_root / "app.json").write_text(json.dumps({"title": "Changed"}))

        file_store.refresh("app")
        assert "app" not in file_store.categories
        assert file_store.get("app.title") == "Changed"


class TestReadOnly:
    def test_set_is_rejected(self, file_store):
        with pytest.raises(ReadOnly):
            file_store.set("app.title", "Other")
        assert file_store.get("app.title") == "Demo"

    def test_delete_is_rejected(self, file_store):
        with pytest.raises(ReadOnly):
            file_store.delete("app.title")

    @pytest.mark.parametrize("action", ["set", "delete"])
    def test_invalid_name_wins_over_read_only(self, file_store, action):
        args = ("app..title", "x") if action == "set" else ("app..title",)
        with pytest.raises(InvalidName):
            getattr(file_store, action)(*args)

    def test_error_codes(self, file_store):
        with pytest.raises(ReadOnly) as excinfo:
            file_store.set("app.title", "x")
        assert excinfo.value.code == 7
        assert "read-only" in str(excinfo.value)
