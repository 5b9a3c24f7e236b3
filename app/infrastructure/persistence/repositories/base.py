"""Base repository: generic CRUD and lifecycle hooks (cache invalidation)."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base


def to_snapshot(obj: Base) -> dict[str, Any]:
    """Return a JSON-friendly dict of the row's mapped columns (datetimes as ISO strings)."""
    data: dict[str, Any] = {}
    for attr in sa_inspect(obj).mapper.column_attrs:
        value = getattr(obj, attr.key)
        data[attr.key] = value.isoformat() if isinstance(value, datetime) else value
    return data


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update and lifecycle hooks.

    Subclasses override _on_after_create and _on_after_update
    for cache invalidation.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """Return a single record by primary key, or None."""
        return await self.db.get(self.model, entity_id)

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes on an attached record and run _on_after_update hook."""
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches."""

    async def _on_after_update(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches."""