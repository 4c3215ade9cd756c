"""Health check endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Return service health status and the webhook configs this instance accepts."""
    return {
        "status": "healthy",
        "service": "webhook-client",
        "version": "1.0.0",
        "webhook_configs": sorted(request.app.state.webhook_configs.names()),
    }


@router.get("/health/live")
async def liveness():
    """Always 200 while the process is running."""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness(request: Request):
    """Check DB and Redis connectivity and that at least one webhook config is registered."""
    checks: dict[str, str] = {}
    overall_ok = True

    try:
        session_factory = request.app.state.db_session_factory
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as exc:
        checks["database"] = f"error: {exc}"
        overall_ok = False

    # Redis is None in local mode
    redis = getattr(request.app.state, "redis", None)
    if redis is not None:
        try:
            await redis.ping()
            checks["redis"] = "ok"
        except Exception as exc:
            checks["redis"] = f"error: {exc}"
            overall_ok = False
    else:
        checks["redis"] = "disabled"

    # A process with no webhook sources cannot accept anything
    config_count = len(request.app.state.webhook_configs)
    checks["webhook_configs"] = str(config_count)
    if config_count == 0:
        overall_ok = False

    status_code = 200 if overall_ok else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if overall_ok else "not_ready",
            "checks": checks,
        },
    )
