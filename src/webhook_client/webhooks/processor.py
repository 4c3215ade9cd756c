"""The webhook pipeline: validate, filter, store, dispatch, respond."""

import json
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from urllib.parse import parse_qs

from fastapi.responses import Response

from webhook_client.errors.exceptions import SignatureInvalidError
from webhook_client.webhooks.call_recorder import WebhookCallRecorder
from webhook_client.webhooks.dispatch import WebhookDispatcher
from webhook_client.webhooks.events import InvalidWebhookSignatureEvent, WebhookEventDispatcher
from webhook_client.webhooks.webhook_config import WebhookConfigRegistry

logger = logging.getLogger(__name__)


class PipelineState(StrEnum):
    RECEIVED = "received"
    VALIDATING = "validating"
    REJECTED_SIGNATURE = "rejected_signature"
    VALIDATED = "validated"
    SKIPPED_BY_PROFILE = "skipped_by_profile"
    ACCEPTED = "accepted"
    PERSISTED = "persisted"
    DISPATCHED = "dispatched"
    RESPONDED = "responded"
    FAILED = "failed"


@dataclass
class RequestContext:
    """Per-request state; owned by a single pipeline run."""

    config_name: str
    raw_body: bytes
    headers: dict[str, str]
    url: str = ""
    payload: Any = field(default_factory=dict)
    trace_id: str = ""
    state: PipelineState = PipelineState.RECEIVED
    webhook_call_id: str | None = None
    job_id: str | None = None


def parse_payload(raw_body: bytes, content_type: str = "") -> Any:
    """Best-effort structured view of the body; the raw bytes stay authoritative."""
    if not raw_body:
        return {}
    if "application/x-www-form-urlencoded" in content_type:
        parsed = parse_qs(raw_body.decode("utf-8", errors="replace"), keep_blank_values=True)
        return {k: v[0] if len(v) == 1 else v for k, v in parsed.items()}
    try:
        return json.loads(raw_body)
    except (ValueError, UnicodeDecodeError):
        return {}


class WebhookProcessor:
    def __init__(
        self,
        registry: WebhookConfigRegistry,
        recorder: WebhookCallRecorder,
        dispatcher: WebhookDispatcher,
        events: WebhookEventDispatcher,
    ) -> None:
        self.registry = registry
        self.recorder = recorder
        self.dispatcher = dispatcher
        self.events = events

    def _transition(self, ctx: RequestContext, state: PipelineState) -> None:
        logger.debug("webhook %s: %s -> %s", ctx.config_name, ctx.state, state)
        ctx.state = state

    async def process(self, ctx: RequestContext) -> Response:
        try:
            return await self._run(ctx)
        except Exception:
            if ctx.state != PipelineState.REJECTED_SIGNATURE:
                self._transition(ctx, PipelineState.FAILED)
            raise

    async def _run(self, ctx: RequestContext) -> Response:
        config = self.registry.resolve(ctx.config_name)
        self._transition(ctx, PipelineState.VALIDATING)

        if not config.signature_validator.is_valid(ctx.raw_body, ctx.headers, config):
            self._transition(ctx, PipelineState.REJECTED_SIGNATURE)
            await self.events.dispatch(
                InvalidWebhookSignatureEvent(config_name=config.name, headers=dict(ctx.headers), url=ctx.url)
            )
            raise SignatureInvalidError(config.name)
        self._transition(ctx, PipelineState.VALIDATED)

        if not config.webhook_profile.should_process(ctx.raw_body, ctx.headers, config):
            self._transition(ctx, PipelineState.SKIPPED_BY_PROFILE)
            logger.info("Webhook for config %s skipped by profile", config.name)
            return config.response_strategy.respond(None, config)
        self._transition(ctx, PipelineState.ACCEPTED)

        webhook_call = await self.recorder.record(
            config_name=config.name,
            payload=ctx.payload,
            headers=ctx.headers,
            store_headers=config.store_headers,
            record_model_ref=config.record_model_ref,
            url=ctx.url,
        )
        ctx.webhook_call_id = webhook_call.id
        self._transition(ctx, PipelineState.PERSISTED)

        ctx.job_id = await self.dispatcher.enqueue(config.process_task_ref, webhook_call, ctx.trace_id)
        self._transition(ctx, PipelineState.DISPATCHED)

        response = config.response_strategy.respond(webhook_call, config)
        self._transition(ctx, PipelineState.RESPONDED)
        return response
