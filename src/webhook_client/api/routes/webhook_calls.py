"""Read access to stored webhook calls."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from webhook_client.dependencies import get_db
from webhook_client.errors.exceptions import NotFoundError
from webhook_client.models.webhook_call import WebhookCallModel
from webhook_client.repositories.job_repo import JobRepository
from webhook_client.repositories.webhook_call_repo import WebhookCallRepository

router = APIRouter(tags=["Webhook Calls"])


@router.get("/webhook-calls/{webhook_call_id}")
async def get_webhook_call(
    webhook_call_id: str,
    db: AsyncSession = Depends(get_db),
) -> dict:
    row = await WebhookCallRepository(db).get(webhook_call_id)
    if not row:
        raise NotFoundError("WebhookCall", webhook_call_id)

    jobs = await JobRepository(db).list_for_call(webhook_call_id)
    body = WebhookCallModel.model_validate(row).model_dump(mode="json")
    body["jobs"] = [
        {"job_id": j.job_id, "job_type": j.job_type, "status": j.status, "attempts": j.attempts}
        for j in jobs
    ]
    return body
