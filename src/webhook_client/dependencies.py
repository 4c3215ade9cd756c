"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator

from fastapi import Request

from webhook_client.webhooks.call_recorder import WebhookCallRecorder
from webhook_client.webhooks.dispatch import WebhookDispatcher
from webhook_client.webhooks.processor import WebhookProcessor
from webhook_client.workers.queue import DatabaseTaskQueue


async def get_db(request: Request) -> AsyncGenerator:
    """Yield a database session from the app's session factory."""
    session_factory = request.app.state.db_session_factory
    async with session_factory() as session:
        yield session


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "unknown")


def get_webhook_processor(request: Request) -> WebhookProcessor:
    """Assemble the pipeline from the collaborators held on app state."""
    state = request.app.state
    task_queue = getattr(state, "task_queue", None) or DatabaseTaskQueue(
        state.db_session_factory, getattr(state, "redis", None)
    )
    return WebhookProcessor(
        registry=state.webhook_configs,
        recorder=WebhookCallRecorder(state.db_session_factory),
        dispatcher=WebhookDispatcher(task_queue),
        events=state.webhook_events,
    )
