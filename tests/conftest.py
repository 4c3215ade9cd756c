"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from helpers import DEFAULT_OPTIONS, WEBHOOK_PATH
from webhook_client.db.base import Base
# Import all models to register with Base.metadata
import webhook_client.db.models  # noqa: F401
from webhook_client.webhooks.events import InvalidWebhookSignatureEvent
from webhook_client.webhooks.webhook_config import build_config


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///", echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(db_engine, session_factory):
    """Create a test application instance with in-memory DB and one webhook route."""
    from webhook_client.main import create_app
    from webhook_client.webhooks.routes import register_webhook_route

    _app = create_app()
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = session_factory
    _app.state.redis = None
    _app.state.webhook_configs.register(build_config(DEFAULT_OPTIONS))
    register_webhook_route(_app, WEBHOOK_PATH)
    return _app


@pytest.fixture
def invalid_signature_events(app) -> list[InvalidWebhookSignatureEvent]:
    """Collects every invalid-signature event the app emits."""
    events: list[InvalidWebhookSignatureEvent] = []
    app.state.webhook_events.subscribe(InvalidWebhookSignatureEvent, events.append)
    return events


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
