"""Response strategies for accepted webhooks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from fastapi.responses import JSONResponse, Response

if TYPE_CHECKING:
    from webhook_client.db.models.webhook_call import WebhookCallRow
    from webhook_client.webhooks.webhook_config import WebhookConfig


class RespondsToWebhook(Protocol):
    def respond(self, webhook_call: WebhookCallRow | None, config: WebhookConfig) -> Response:
        """Build the success response. `webhook_call` is None when the profile skipped the call."""
        ...


class DefaultRespondsToWebhook:
    def respond(self, webhook_call: WebhookCallRow | None, config: WebhookConfig) -> Response:
        return Response(status_code=200)


class JsonOkRespondsToWebhook:
    def respond(self, webhook_call: WebhookCallRow | None, config: WebhookConfig) -> Response:
        return JSONResponse({"message": "ok"})


RESPONSE_STRATEGIES: dict[str, type] = {
    "default": DefaultRespondsToWebhook,
    "json_ok": JsonOkRespondsToWebhook,
}
