"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from webhook_client.api.routes import health, webhook_calls

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(webhook_calls.router)
