import json
import re
from typing import Any

from sqlalchemy import Engine, MetaData, Table, bindparam, select, text
from sqlalchemy.exc import SQLAlchemyError

from settings_store.exceptions import InvalidDbComponent, InvalidDbTable
from settings_store.models import SettingRecord
from settings_store.services.base import Settings

import logging

logger = logging.getLogger(__name__)

VALID_TABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class DbSettings(Settings):
    """
    Read-write settings stored one row per setting in a database table.

    Rows are ``(id, name, category, value)`` with ``(name, category)`` unique;
    values are stored as JSON text. With ``create_table`` the table is created
    on construction if it does not exist yet, and a failure to do so is fatal.
    """

    def __init__(
        self,
        db_component: Engine | None,
        table_name: str = "settings",
        create_table: bool = False,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._engine: Engine | None = None
        self._table_name = table_name
        self._table: Table | None = None
        self._statements: dict[str, Any] = {}
        self._table_created: bool | None = None
        self.create_table = bool(create_table)
        self.db_component = db_component

        if self.create_table and not self._create_table():
            raise InvalidDbTable(
                f"Invalid table specified in the application configuration "
                f"({table_name!r})."
            )

    @property
    def db_component(self) -> Engine | None:
        return self._engine

    @db_component.setter
    def db_component(self, engine: Engine | None):
        self._engine = None
        if engine is None:
            return
        if not isinstance(engine, Engine):
            raise InvalidDbComponent(
                f"The database component provided in the configuration "
                f"({engine!r}) is invalid."
            )
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise InvalidDbComponent(
                f"The database component provided in the configuration "
                f"({engine!r}) is not connected: {e}"
            ) from e
        self._engine = engine

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def table(self) -> Table:
        if self._table is None:
            self._table = SettingRecord.__table__.to_metadata(
                MetaData(), name=self._table_name
            )
        return self._table

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise InvalidDbComponent(
                "No database component is configured for these settings."
            )
        return self._engine

    def _statement(self, kind: str):
        statement = self._statements.get(kind)
        if statement is None:
            statement = self._statements[kind] = self._build_statement(kind)
        return statement

    def _build_statement(self, kind: str):
        table = self.table
        matches_category = table.c.category == bindparam("b_category")
        matches_setting = (matches_category, table.c.name == bindparam("b_name"))
        if kind == "select":
            return select(table.c.name, table.c.value).where(matches_category)
        if kind == "insert":
            return table.insert()
        if kind == "update":
            return (
                table.update()
                .where(*matches_setting)
                .values(value=bindparam("b_value"))
            )
        if kind == "delete":
            # (name, category) is unique, so this removes one row at most
            return table.delete().where(*matches_setting)
        raise ValueError(f"Unknown statement {kind!r}")

    def _create_table(self) -> bool:
        if self._table_created is None:
            self._table_created = self._try_create_table()
        return self._table_created

    def _try_create_table(self) -> bool:
        if not isinstance(self._table_name, str) or not VALID_TABLE_NAME.fullmatch(
            self._table_name
        ):
            logger.error(f"Refusing to create settings table {self._table_name!r}")
            return False
        if self._engine is None:
            return False
        try:
            self.table.create(self._engine, checkfirst=True)
        except SQLAlchemyError as e:
            logger.error(f"Settings table {self._table_name} not created: {e}")
            return False
        logger.info(f"Settings table {self._table_name} ready")
        return True

    @staticmethod
    def _serialize(value: Any) -> str:
        return json.dumps(value, default=str)

    @staticmethod
    def _deserialize(raw: str | None) -> Any:
        if raw is None:
            return None
        return json.loads(raw)

    def _read_rows(self, category: str, rows) -> dict[str, Any]:
        values = {}
        for row in rows:
            try:
                values[row.name] = self._deserialize(row.value)
            except json.JSONDecodeError:
                logger.warning(
                    f"Skipping unreadable value of {category}.{row.name} "
                    f"in {self._table_name}"
                )
        return values

    def load(self, category):
        self._require_category(category)
        engine = self._require_engine()
        if self._is_resident(category):
            return True

        with engine.connect() as conn:
            rows = conn.execute(
                self._statement("select"), {"b_category": category}
            ).all()
        if not rows:
            logger.debug(f"Category {category} not found in {self._table_name}")
            return False

        values = self._read_rows(category, rows)
        logger.debug(f"Category {category} loaded from {self._table_name}")
        self._store(category, values)
        return True

    def set(self, identifier, value):
        setting = self._require_identifier(identifier)
        engine = self._require_engine()

        # Existence decides between UPDATE and INSERT
        self.load(setting.category)
        exists = setting.name in self._settings.get(setting.category, {})
        data = self._serialize(value)
        if exists:
            statement = self._statement("update")
            params = {
                "b_category": setting.category,
                "b_name": setting.name,
                "b_value": data,
            }
        else:
            statement = self._statement("insert")
            params = {
                "category": setting.category,
                "name": setting.name,
                "value": data,
            }

        with engine.begin() as conn:
            result = conn.execute(statement, params)
        stored = result.rowcount > 0
        if stored:
            # Keep what a fresh load would see, not the caller's object
            self._settings.setdefault(setting.category, {})[
                setting.name
            ] = self._deserialize(data)
            self._cache(setting.category)
        return stored

    def delete(self, identifier):
        setting = self._require_identifier(identifier)
        engine = self._require_engine()

        self.load(setting.category)
        with engine.begin() as conn:
            result = conn.execute(
                self._statement("delete"),
                {"b_category": setting.category, "b_name": setting.name},
            )
        deleted = result.rowcount > 0
        if deleted:
            self._settings.get(setting.category, {}).pop(setting.name, None)
            self._cache(setting.category)
        return deleted
