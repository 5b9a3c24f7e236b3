"""SQLAlchemy mixins for the timestamp column pairs used by the legacy tables.

Provides: IntegerIdMixin, TimestampMixin (created_at/updated_at, users) and
AuditDateMixin (created_date/updated_date, settings and shift logs).
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func


class IntegerIdMixin:
    """Mixin for autoincrement integer primary keys."""

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Mixin for created_at and updated_at (server default CURRENT_TIMESTAMP)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime, server_default=func.now())

    @declared_attr
    def updated_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime, server_default=func.now(), onupdate=func.now())


class AuditDateMixin:
    """Mixin for created_date and updated_date (server default CURRENT_TIMESTAMP)."""

    @declared_attr
    def created_date(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime, server_default=func.now())

    @declared_attr
    def updated_date(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime, server_default=func.now(), onupdate=func.now())
