"""Hands accepted webhook calls off to asynchronous processing."""

import logging
from typing import Protocol

from webhook_client.db.models.webhook_call import WebhookCallRow
from webhook_client.errors.exceptions import DispatchError

logger = logging.getLogger(__name__)


class TaskQueue(Protocol):
    async def submit(self, task_ref: str, webhook_call_id: str, trace_id: str = "") -> str:
        """Queue a task for a stored call and return the job id."""
        ...


class WebhookDispatcher:
    def __init__(self, queue: TaskQueue) -> None:
        self.queue = queue

    async def enqueue(self, task_ref: str, webhook_call: WebhookCallRow, trace_id: str = "") -> str:
        """Queue `task_ref` for a stored call. Only the call id travels with the task."""
        try:
            job_id = await self.queue.submit(task_ref, webhook_call.id, trace_id)
        except Exception as exc:
            logger.exception(
                "Failed to enqueue %s for webhook call %s; the call stays stored",
                task_ref,
                webhook_call.id,
            )
            raise DispatchError(webhook_call.id, f"Could not enqueue {task_ref}: {exc}") from exc

        logger.info("Enqueued job %s (%s) for webhook call %s", job_id, task_ref, webhook_call.id)
        return job_id
