"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from webhook_client.db.models.webhook_call import WebhookCallRow
from webhook_client.db.models.job import JobRow

__all__ = [
    "WebhookCallRow",
    "JobRow",
]
