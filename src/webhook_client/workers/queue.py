"""Job queue management using Redis or in-process fallback."""

import json

from sqlalchemy.ext.asyncio import AsyncSession

from webhook_client.db.models.job import JobRow
from webhook_client.repositories.job_repo import JobRepository
from webhook_client.services.id_generator import generate_id

QUEUE_KEY_PREFIX = "webhook_client:jobs:"


def queue_key(job_type: str) -> str:
    return f"{QUEUE_KEY_PREFIX}{job_type}"


async def enqueue_job(
    session: AsyncSession,
    job_type: str,
    webhook_call_id: str,
    trace_id: str,
) -> JobRow:
    """Create a queued job row. The caller commits before announcing it with `push_job`."""
    repo = JobRepository(session)
    return await repo.create(
        job_id=generate_id("job_"),
        job_type=job_type,
        webhook_call_id=webhook_call_id,
        status="queued",
        attempts=0,
        trace_id=trace_id,
        errors=None,
    )


async def push_job(redis, job: JobRow) -> None:
    """Announce a committed job on its Redis list."""
    await redis.rpush(
        queue_key(job.job_type),
        json.dumps({"job_id": job.job_id, "webhook_call_id": job.webhook_call_id}),
    )


class DatabaseTaskQueue:
    """Task queue backed by the jobs table, with Redis as the wake-up channel."""

    def __init__(self, session_factory, redis=None) -> None:
        self.session_factory = session_factory
        self.redis = redis

    async def submit(self, task_ref: str, webhook_call_id: str, trace_id: str = "") -> str:
        async with self.session_factory() as session:
            job = await enqueue_job(
                session,
                job_type=task_ref,
                webhook_call_id=webhook_call_id,
                trace_id=trace_id or webhook_call_id,
            )
            await session.commit()

        # The row must be visible before a runner can pop its id;
        # without Redis the runner polls the table instead
        if self.redis:
            await push_job(self.redis, job)
        return job.job_id
