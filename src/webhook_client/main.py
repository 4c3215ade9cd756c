"""FastAPI application factory and lifespan management."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from webhook_client.config import settings
from webhook_client.logging_config import configure_logging

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=not settings.local_mode)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    from webhook_client.db.engine import create_db_engine, create_session_factory

    db_url = settings.effective_database_url
    engine = create_db_engine(db_url)

    # Auto-create tables for SQLite (local dev)
    if "sqlite" in db_url:
        from webhook_client.db.base import Base
        import webhook_client.db.models  # noqa: F401 - register all ORM models

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("SQLite tables created (local mode)")

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)

    # Startup: Redis connection (skipped in local mode)
    app.state.redis = None
    if not settings.local_mode:
        try:
            import redis.asyncio as aioredis
            app.state.redis = aioredis.from_url(settings.redis_url, decode_responses=True)
        except Exception:
            logger.warning("Redis not available, jobs will be polled from the database")

    from webhook_client.workers.runner import run_worker_loop
    from webhook_client.workers.scheduler import run_scheduler

    background = [asyncio.create_task(run_scheduler(app))]
    if settings.worker_enabled:
        background.append(asyncio.create_task(run_worker_loop(app)))

    logger.info(
        "Webhook client started (db=%s, configs=%s)",
        "sqlite" if "sqlite" in db_url else "postgresql",
        ", ".join(app.state.webhook_configs.names()),
    )
    yield

    # Shutdown
    for task in background:
        task.cancel()
    for task in background:
        try:
            await task
        except asyncio.CancelledError:
            pass
    if app.state.redis:
        await app.state.redis.close()
    await engine.dispose()
    logger.info("Webhook client shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Webhook Client",
        version="1.0.0",
        description="Receives, verifies, stores and dispatches inbound webhooks.",
        lifespan=lifespan,
    )

    from webhook_client.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    # Register error handlers
    from webhook_client.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    # Webhook sources; a bad config fails startup
    from webhook_client.webhooks.events import create_event_dispatcher
    from webhook_client.webhooks.webhook_config import build_registry
    app.state.webhook_configs = build_registry(settings.effective_configs)
    app.state.webhook_events = create_event_dispatcher()
    app.state.task_queue = None

    from webhook_client.webhooks.routes import register_webhook_route
    for route in settings.routes:
        register_webhook_route(
            app,
            route["path"],
            route.get("config_name", "default"),
            add_unique_token=settings.add_unique_token_to_route_name,
        )

    from webhook_client.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
