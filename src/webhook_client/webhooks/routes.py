"""Registers webhook receiving routes."""

import asyncio
import logging
import uuid

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import Response

from webhook_client.dependencies import get_trace_id, get_webhook_processor
from webhook_client.logging_config import bind_request_context
from webhook_client.webhooks.processor import RequestContext, parse_payload

logger = logging.getLogger(__name__)

ROUTE_NAME_PREFIX = "webhook-client-"


def collect_pipeline_result(pipeline: asyncio.Future) -> None:
    """Retrieve the outcome of a shielded pipeline whose caller may have gone away."""
    if pipeline.cancelled():
        return
    exc = pipeline.exception()
    if exc is not None:
        logger.debug("Webhook pipeline finished with %s: %s", type(exc).__name__, exc)


def webhook_route_name(config_name: str, add_unique_token: bool = False) -> str:
    name = f"{ROUTE_NAME_PREFIX}{config_name}"
    if add_unique_token:
        name = f"{name}.{uuid.uuid4().hex[:13]}"
    return name


def register_webhook_route(
    router: APIRouter | FastAPI,
    path: str,
    config_name: str = "default",
    add_unique_token: bool = False,
) -> str:
    """Bind `POST path` to the named webhook config. Returns the route name."""
    route_name = webhook_route_name(config_name, add_unique_token)

    async def receive_webhook(request: Request) -> Response:
        raw_body = await request.body()
        ctx = RequestContext(
            config_name=config_name,
            raw_body=raw_body,
            headers=dict(request.headers),
            url=str(request.url),
            payload=parse_payload(raw_body, request.headers.get("content-type", "")),
            trace_id=get_trace_id(request),
        )
        bind_request_context(ctx.trace_id, config_name)

        processor = get_webhook_processor(request)
        # Once started, a client disconnect must not abort storing the call
        pipeline = asyncio.ensure_future(processor.process(ctx))
        pipeline.add_done_callback(collect_pipeline_result)
        return await asyncio.shield(pipeline)

    router.add_api_route(
        path,
        receive_webhook,
        methods=["POST"],
        name=route_name,
        tags=["Webhooks"],
    )
    return route_name
