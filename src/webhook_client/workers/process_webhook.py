"""Default worker for stored webhook calls."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from webhook_client.db.models.webhook_call import WebhookCallRow
from webhook_client.workers.base import ProcessWebhookWorker

logger = logging.getLogger(__name__)


class LogWebhookCallWorker(ProcessWebhookWorker):
    """Logs the call. Applications register their own worker per task ref."""

    async def handle(self, webhook_call: WebhookCallRow, session: AsyncSession) -> None:
        logger.info(
            "Processing webhook call %s (config=%s, headers=%d)",
            webhook_call.id,
            webhook_call.name,
            len(webhook_call.headers or {}),
        )
