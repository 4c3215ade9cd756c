"""Background runner that executes queued webhook jobs."""

import asyncio
import json
import logging
from datetime import datetime, timezone

from webhook_client.config import settings
from webhook_client.repositories.job_repo import JobRepository
from webhook_client.workers.queue import push_job, queue_key
from webhook_client.workers.registry import get_worker, registered_task_refs

logger = logging.getLogger(__name__)


async def claim_next_job(session_factory) -> str | None:
    """Mark the oldest queued job as running and return its id (DB polling mode)."""
    async with session_factory() as session:
        job = await JobRepository(session).next_queued()
        if job is None:
            return None
        job.status = "running"
        await session.commit()
        return job.job_id


async def pop_next_job(redis, timeout: float = 1.0) -> str | None:
    """Block on the Redis job lists for up to `timeout` seconds."""
    keys = [queue_key(ref) for ref in registered_task_refs()]
    item = await redis.blpop(keys, timeout=timeout)
    if not item:
        return None
    _, raw = item
    return json.loads(raw)["job_id"]


async def run_job(session_factory, job_id: str, redis=None) -> str | None:
    """Run one job with the worker registered for its type."""
    async with session_factory() as session:
        job = await JobRepository(session).get(job_id)
        if job is None:
            logger.warning("Job %s not found, skipping", job_id)
            return None

        worker = get_worker(job.job_type)
        if worker is None:
            job.status = "failed"
            job.errors = [{
                "code": "UNKNOWN_TASK",
                "message": f"No worker registered for '{job.job_type}'",
                "trace_id": job.trace_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }]
            await session.commit()
            logger.error("No worker registered for job type %s (job=%s)", job.job_type, job_id)
            return job.status

        status = await worker.execute(job_id, session)

    if status == "queued" and redis:
        await push_job(redis, job)
    return status


async def run_next_job(session_factory, redis=None, timeout: float = 1.0) -> str | None:
    """Take the next job from Redis (or the jobs table) and run it. Returns its id."""
    if redis:
        job_id = await pop_next_job(redis, timeout)
    else:
        job_id = await claim_next_job(session_factory)
    if job_id is None:
        return None

    await run_job(session_factory, job_id, redis)
    return job_id


async def run_worker_loop(app) -> None:
    """Background task that executes queued jobs until cancelled."""
    logger.info("Job runner started (poll_interval=%.1fs)", settings.worker_poll_interval)

    while True:
        try:
            session_factory = getattr(app.state, "db_session_factory", None)
            redis = getattr(app.state, "redis", None)

            if not session_factory:
                await asyncio.sleep(settings.worker_poll_interval)
                continue

            job_id = await run_next_job(session_factory, redis, settings.worker_poll_interval)
            if job_id is None and not redis:
                await asyncio.sleep(settings.worker_poll_interval)

        except asyncio.CancelledError:
            logger.info("Job runner stopped")
            break
        except Exception as exc:
            logger.exception("Job runner error: %s", exc)
            await asyncio.sleep(settings.worker_poll_interval)
