from typing import Any

from sqlalchemy import Text, UniqueConstraint
from sqlmodel import Column, Field, SQLModel


class SettingRecord(SQLModel, table=True):
    """Database row holding one serialized setting"""

    __tablename__ = "settings"
    __table_args__ = (UniqueConstraint("name", "category"),)

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=64)
    category: str = Field(max_length=255)
    value: str | None = Field(default=None, sa_column=Column(Text, nullable=True))


class SettingValue(SQLModel):
    """Schema for writing a setting"""

    value: Any = None


class SettingResponse(SQLModel):
    """Schema for setting responses"""

    identifier: str
    value: Any = None


class SettingStored(SQLModel):
    identifier: str
    stored: bool
