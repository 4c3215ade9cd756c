"""Job repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from webhook_client.db.models.job import JobRow
from webhook_client.repositories.base import BaseRepository


class JobRepository(BaseRepository[JobRow]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, JobRow)

    async def get(self, job_id: str) -> JobRow | None:
        return await self.get_by_id("job_id", job_id)

    async def list_for_call(self, webhook_call_id: str) -> list[JobRow]:
        return await self.list_by(webhook_call_id=webhook_call_id)

    async def next_queued(self) -> JobRow | None:
        """Return the oldest queued job, if any."""
        stmt = (
            select(JobRow)
            .where(JobRow.status == "queued")
            .order_by(JobRow.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
