"""Helpers shared by the webhook tests."""

import hashlib
import hmac

from sqlalchemy import func, select

from webhook_client.db.models.job import JobRow
from webhook_client.db.models.webhook_call import WebhookCallRow

SIGNING_SECRET = "abc123"
WEBHOOK_PATH = "/incoming-webhooks"

DEFAULT_OPTIONS = {
    "name": "default",
    "signing_secret": SIGNING_SECRET,
    "signature_header_name": "Signature",
    "process_task_ref": "process_webhook",
}


def sign(body: bytes, secret: str = SIGNING_SECRET) -> str:
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


async def stored_calls(session_factory) -> list[WebhookCallRow]:
    async with session_factory() as session:
        result = await session.execute(select(WebhookCallRow).order_by(WebhookCallRow.created_at))
        return list(result.scalars().all())


async def stored_jobs(session_factory) -> list[JobRow]:
    async with session_factory() as session:
        result = await session.execute(select(JobRow))
        return list(result.scalars().all())


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()
