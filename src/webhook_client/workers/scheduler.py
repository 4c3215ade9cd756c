"""Background scheduler that prunes old webhook calls."""

import asyncio
import logging

from webhook_client.config import settings
from webhook_client.repositories.webhook_call_repo import WebhookCallRepository

logger = logging.getLogger(__name__)


async def prune_webhook_calls(session_factory, days: int) -> int:
    """Delete calls older than `days` days. Returns the number deleted."""
    if days <= 0:
        return 0

    async with session_factory() as session:
        deleted = await WebhookCallRepository(session).prune_older_than(days)
        await session.commit()
    return deleted


async def run_scheduler(app) -> None:
    """Background task that periodically prunes stored calls."""
    logger.info(
        "Prune scheduler started (interval=%ds, delete_after_days=%d)",
        settings.prune_interval,
        settings.delete_after_days,
    )

    while True:
        try:
            await asyncio.sleep(settings.prune_interval)

            session_factory = getattr(app.state, "db_session_factory", None)
            if not session_factory:
                continue

            count = await prune_webhook_calls(session_factory, settings.delete_after_days)
            if count:
                logger.info("Pruned %d webhook calls", count)

        except asyncio.CancelledError:
            logger.info("Prune scheduler stopped")
            break
        except Exception as exc:
            logger.exception("Scheduler error: %s", exc)
            # Continue running despite errors
