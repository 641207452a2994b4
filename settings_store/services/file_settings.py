import json
from pathlib import Path

from settings_store.exceptions import NonExistentCategory, ReadOnly
from settings_store.services.base import Settings

import logging

logger = logging.getLogger(__name__)

CATEGORY_FILE_SUFFIX = ".json"


class ConfigSettings(Settings):
    """
    Read-only settings loaded from JSON files.

    The category ``mail.smtp`` lives in ``<root>/mail/smtp.json``, a JSON
    object of name/value pairs.
    """

    def __init__(self, root, **kwargs):
        super().__init__(**kwargs)
        self.root = Path(root)

    def category_path(self, category: str) -> Path:
        return self.root.joinpath(*category.split(".")).with_suffix(
            CATEGORY_FILE_SUFFIX
        )

    def set(self, identifier, value):
        self._require_identifier(identifier)
        raise ReadOnly(identifier, "set a value to")

    def delete(self, identifier):
        self._require_identifier(identifier)
        raise ReadOnly(identifier, "delete")

    def load(self, category):
        self._require_category(category)
        if self._is_resident(category):
            return True

        path = self.category_path(category)
        try:
            raw = path.read_bytes()
        except OSError:
            logger.debug(f"No readable settings file for {category} at {path}")
            return False

        try:
            values = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise NonExistentCategory(category) from e
        if not isinstance(values, dict):
            raise NonExistentCategory(category)

        logger.debug(f"Category {category} loaded from {path}")
        self._store(category, values)
        return True
