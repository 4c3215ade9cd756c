"""Base worker interface for processing stored webhook calls."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from webhook_client.db.models.webhook_call import WebhookCallRow
from webhook_client.repositories.job_repo import JobRepository
from webhook_client.repositories.webhook_call_repo import WebhookCallRepository

logger = logging.getLogger(__name__)


class ProcessWebhookWorker(ABC):
    """Abstract base class for webhook call workers."""

    max_retries: int = 3

    @abstractmethod
    async def handle(self, webhook_call: WebhookCallRow, session: AsyncSession) -> None:
        """Run business logic for one stored call. Raise to signal failure."""
        ...

    async def execute(self, job_id: str, session: AsyncSession) -> str | None:
        """Execute the full job lifecycle: running -> handle -> succeeded/queued/failed.

        Returns the job's resulting status, or None if the job does not exist.
        """
        repo = JobRepository(session)
        job = await repo.get(job_id)
        if not job:
            return None
        if job.status in ("succeeded", "failed"):
            return job.status

        calls = WebhookCallRepository(session)
        webhook_call = await calls.get(job.webhook_call_id)
        if webhook_call is None:
            job.status = "failed"
            job.errors = [self._error_detail(job.trace_id, "webhook call no longer exists", job.attempts)]
            await session.commit()
            logger.warning("Job %s failed: webhook call %s is gone", job_id, job.webhook_call_id)
            return job.status

        job.status = "running"
        job.attempts += 1
        job.updated_at = datetime.now(timezone.utc)
        await session.flush()

        try:
            await self.handle(webhook_call, session)
            job.status = "succeeded"
            job.errors = None
            if webhook_call.exception is not None:
                await calls.clear_exception(webhook_call)
            logger.info("Job %s succeeded (type=%s, call=%s)", job_id, job.job_type, webhook_call.id)
        except Exception as exc:
            logger.exception("Job %s failed (type=%s, attempt=%d)", job_id, job.job_type, job.attempts)
            await calls.save_exception(webhook_call, exc)
            job.errors = [self._error_detail(job.trace_id, str(exc), job.attempts)]
            # Re-queue until retries are exhausted
            job.status = "queued" if job.attempts <= self.max_retries else "failed"

        job.updated_at = datetime.now(timezone.utc)
        await session.commit()
        return job.status

    @staticmethod
    def _error_detail(trace_id: str, message: str, attempts: int) -> dict:
        return {
            "code": "WORKER_ERROR",
            "message": message,
            "trace_id": trace_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "attempts": attempts,
        }
