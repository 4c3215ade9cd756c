"""FastAPI exception handlers producing ErrorResponse bodies."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from webhook_client.errors.exceptions import WebhookClientError
from webhook_client.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

# Server-side failures never expose which secret, validator or store failed
_GENERIC_CODE = "INTERNAL_ERROR"
_GENERIC_MESSAGE = "The request could not be processed."


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(WebhookClientError)
    async def webhook_client_error_handler(request: Request, exc: WebhookClientError):
        trace_id = getattr(request.state, "trace_id", "unknown")
        if exc.status_code >= 500:
            logger.error(
                "webhook_request_failed code=%s path=%s trace_id=%s: %s",
                exc.code,
                request.url.path,
                trace_id,
                exc.message,
            )
            detail = ErrorDetail(
                code=_GENERIC_CODE,
                message=_GENERIC_MESSAGE,
                trace_id=trace_id,
                timestamp=datetime.now(timezone.utc),
            )
        else:
            detail = ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
                trace_id=trace_id,
                timestamp=datetime.now(timezone.utc),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=detail).model_dump(mode="json", exclude_none=True),
        )
