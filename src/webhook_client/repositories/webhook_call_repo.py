"""Webhook call repository."""

import traceback
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from webhook_client.db.models.job import JobRow
from webhook_client.db.models.webhook_call import WebhookCallRow
from webhook_client.repositories.base import BaseRepository


class WebhookCallRepository(BaseRepository[WebhookCallRow]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, WebhookCallRow)

    async def get(self, webhook_call_id: str) -> WebhookCallRow | None:
        return await self.get_by_id("id", webhook_call_id)

    async def save_exception(self, row: WebhookCallRow, exc: BaseException) -> WebhookCallRow:
        """Annotate a stored call with a processing failure."""
        return await self.update(
            row,
            exception={
                "type": type(exc).__name__,
                "message": str(exc),
                "trace": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            },
        )

    async def clear_exception(self, row: WebhookCallRow) -> WebhookCallRow:
        return await self.update(row, exception=None)

    async def prune_older_than(self, days: int) -> int:
        """Delete calls (and their jobs) created more than `days` days ago."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        stale_ids = select(WebhookCallRow.id).where(WebhookCallRow.created_at < cutoff)

        await self.session.execute(
            delete(JobRow).where(JobRow.webhook_call_id.in_(stale_ids))
        )
        result = await self.session.execute(
            delete(WebhookCallRow).where(WebhookCallRow.created_at < cutoff)
        )
        return result.rowcount or 0
