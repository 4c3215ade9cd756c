"""Base repository with the async CRUD helpers shared by all tables."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from webhook_client.db.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    def __init__(self, session: AsyncSession, model_class: type[T]):
        self.session = session
        self.model_class = model_class

    def _where(self, stmt, filters: dict[str, Any]):
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model_class, field) == value)
        return stmt

    async def get_by_id(self, pk_field: str, pk_value: str) -> T | None:
        result = await self.session.execute(self._where(select(self.model_class), {pk_field: pk_value}))
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> T:
        """Add a row and flush so database defaults are populated; the caller commits."""
        row = self.model_class(**kwargs)
        self.session.add(row)
        await self.session.flush()
        return row

    async def update(self, row: T, **kwargs: Any) -> T:
        for key, value in kwargs.items():
            setattr(row, key, value)
        await self.session.flush()
        return row

    async def list_by(self, **filters: Any) -> list[T]:
        result = await self.session.execute(self._where(select(self.model_class), filters))
        return list(result.scalars().all())
