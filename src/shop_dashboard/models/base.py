"""
Declarative base shared by every Shop Dashboard table.

Each row carries an integer primary key, a UUID for references that leave
the database (exports, notifications shown in the UI), and UTC creation and
modification times.
"""

import uuid as uuid_lib
from datetime import date
from typing import Any, Dict

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, validates

from shop_dashboard.utils.datetime_utils import utc_now

Base = declarative_base()


class BaseModel(Base):
    """Abstract model providing id, uuid, created_at, updated_at and to_dict()."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Stored as string for SQLite compatibility
    uuid = Column(
        String(36), unique=True, nullable=False, default=lambda: str(uuid_lib.uuid4()), index=True
    )

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """
        Column values keyed by column name.

        Dates and datetimes become ISO strings; Numeric money columns stay
        Decimal so callers can keep doing exact arithmetic on them.
        """
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, date):
                value = value.isoformat()
            result[column.name] = value
        return result

    @validates("uuid")
    def _validate_uuid(self, _key: str, value: Any) -> str:
        if value is None:
            return value
        return str(value)

    def __repr__(self) -> str:
        attrs = []
        if getattr(self, "id", None) is not None:
            attrs.append(f"id={self.id}")
        if getattr(self, "name", None) is not None:
            attrs.append(f"name='{self.name}'")
        return f"{self.__class__.__name__}({', '.join(attrs)})"
