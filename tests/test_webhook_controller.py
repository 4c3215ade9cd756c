"""End-to-end tests for receiving webhooks over HTTP."""

import json
from dataclasses import replace

import pytest
from fastapi.responses import JSONResponse
from sqlalchemy import text

from helpers import DEFAULT_OPTIONS, WEBHOOK_PATH, sign, stored_calls, stored_jobs
from webhook_client.webhooks.headers import HeaderStorage
from webhook_client.webhooks.routes import register_webhook_route
from webhook_client.webhooks.webhook_config import build_config

PAYLOAD = {"a": 1}
BODY = json.dumps(PAYLOAD).encode("utf-8")


def signed_headers(body: bytes = BODY) -> dict[str, str]:
    return {"Content-Type": "application/json", "Signature": sign(body)}


def reconfigure(app, **changes):
    """Replace the default config, like an operator refreshing settings at runtime."""
    config = app.state.webhook_configs.resolve("default")
    app.state.webhook_configs.register(replace(config, **changes))


class CustomRespondsToWebhook:
    def respond(self, webhook_call, config):
        return JSONResponse({"foo": "bar"})


class FailingTaskQueue:
    async def submit(self, task_ref, webhook_call_id, trace_id=""):
        raise ConnectionError("queue unavailable")


class RecordingTaskQueue:
    def __init__(self):
        self.submitted: list[tuple[str, str]] = []

    async def submit(self, task_ref, webhook_call_id, trace_id=""):
        self.submitted.append((task_ref, webhook_call_id))
        return f"job_{len(self.submitted)}"


@pytest.mark.asyncio
async def test_it_can_process_a_webhook_request(client, session_factory):
    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.status_code == 200
    assert response.content == b""

    calls = await stored_calls(session_factory)
    assert len(calls) == 1
    assert calls[0].name == "default"
    assert calls[0].payload == {"a": 1}
    assert calls[0].url.endswith(WEBHOOK_PATH)
    assert calls[0].exception is None

    jobs = await stored_jobs(session_factory)
    assert len(jobs) == 1
    assert jobs[0].webhook_call_id == calls[0].id
    assert jobs[0].job_type == "process_webhook"
    assert jobs[0].status == "queued"


@pytest.mark.asyncio
async def test_a_request_with_an_invalid_signature_will_not_get_processed(
    client, session_factory, invalid_signature_events
):
    headers = signed_headers()
    headers["Signature"] += "invalid"

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=headers)

    assert response.status_code == 500
    assert await stored_calls(session_factory) == []
    assert await stored_jobs(session_factory) == []
    assert len(invalid_signature_events) == 1
    assert invalid_signature_events[0].config_name == "default"
    assert invalid_signature_events[0].headers["signature"] == headers["Signature"]


@pytest.mark.asyncio
async def test_error_response_does_not_leak_validation_details(client, invalid_signature_events):
    response = await client.post(
        WEBHOOK_PATH, content=BODY, headers={"Signature": "nope", "X-Trace-Id": "trc_fixed"}
    )

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert error["trace_id"] == "trc_fixed"
    assert "signature" not in error["message"].lower()
    assert "abc123" not in response.text
    assert response.headers["X-Trace-Id"] == "trc_fixed"


@pytest.mark.asyncio
async def test_a_request_without_a_signature_header_is_rejected(client, session_factory, invalid_signature_events):
    response = await client.post(WEBHOOK_PATH, content=BODY, headers={"Content-Type": "application/json"})

    assert response.status_code == 500
    assert await stored_calls(session_factory) == []
    assert len(invalid_signature_events) == 1


@pytest.mark.asyncio
async def test_a_non_ascii_signature_header_is_an_ordinary_mismatch(client, session_factory, invalid_signature_events):
    response = await client.post(
        WEBHOOK_PATH,
        content=BODY,
        headers=[(b"content-type", b"application/json"), (b"signature", b"caf\xe9")],
    )

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"
    assert await stored_calls(session_factory) == []
    assert await stored_jobs(session_factory) == []
    assert len(invalid_signature_events) == 1


@pytest.mark.asyncio
async def test_signature_covers_the_exact_raw_body(client, session_factory):
    # Same JSON document, different bytes: the signature of one does not cover the other
    compact = b'{"a":1}'
    response = await client.post(
        WEBHOOK_PATH,
        content=compact,
        headers={"Content-Type": "application/json", "Signature": sign(BODY)},
    )

    assert response.status_code == 500
    assert await stored_calls(session_factory) == []


@pytest.mark.asyncio
async def test_it_can_work_with_an_alternative_signature_validator(app, client):
    app.state.webhook_configs.register(build_config({**DEFAULT_OPTIONS, "signature_validator": "everything_is_valid"}))

    response = await client.post(WEBHOOK_PATH, content=BODY)
    assert response.status_code == 200

    app.state.webhook_configs.register(build_config({**DEFAULT_OPTIONS, "signature_validator": "nothing_is_valid"}))

    response = await client.post(WEBHOOK_PATH, content=BODY)
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_it_can_work_with_an_alternative_profile(app, client, session_factory, invalid_signature_events):
    app.state.webhook_configs.register(build_config({**DEFAULT_OPTIONS, "webhook_profile": "process_nothing"}))

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.status_code == 200
    assert await stored_calls(session_factory) == []
    assert await stored_jobs(session_factory) == []
    assert invalid_signature_events == []


@pytest.mark.asyncio
async def test_it_can_work_with_an_alternative_config(app, client):
    register_webhook_route(app, "/incoming-webhooks-alternative-config", "alternative-config")

    response = await client.post("/incoming-webhooks-alternative-config", content=BODY, headers=signed_headers())
    assert response.status_code == 500

    app.state.webhook_configs.register(build_config({**DEFAULT_OPTIONS, "name": "alternative-config"}))

    response = await client.post("/incoming-webhooks-alternative-config", content=BODY, headers=signed_headers())
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_routes_with_distinct_configs_use_their_own_secrets(app, client, session_factory):
    app.state.webhook_configs.register(
        build_config({**DEFAULT_OPTIONS, "name": "billing", "signing_secret": "billing-secret"})
    )
    register_webhook_route(app, "/billing-webhooks", "billing")

    billing_headers = {"Content-Type": "application/json", "Signature": sign(BODY, "billing-secret")}

    assert (await client.post("/billing-webhooks", content=BODY, headers=billing_headers)).status_code == 200
    assert (await client.post("/billing-webhooks", content=BODY, headers=signed_headers())).status_code == 500
    assert (await client.post(WEBHOOK_PATH, content=BODY, headers=billing_headers)).status_code == 500
    assert (await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())).status_code == 200

    calls = await stored_calls(session_factory)
    assert sorted(c.name for c in calls) == ["billing", "default"]


@pytest.mark.asyncio
async def test_it_can_work_with_an_alternative_model(app, client, session_factory):
    app.state.webhook_configs.register(build_config({**DEFAULT_OPTIONS, "record_model_ref": "without_payload"}))

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.status_code == 200
    calls = await stored_calls(session_factory)
    assert len(calls) == 1
    assert calls[0].payload == {}


@pytest.mark.asyncio
async def test_it_can_respond_with_custom_response(app, client):
    reconfigure(app, response_strategy=CustomRespondsToWebhook())

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.status_code == 200
    assert response.json() == {"foo": "bar"}


@pytest.mark.asyncio
async def test_it_can_respond_with_the_json_ok_strategy(app, client):
    app.state.webhook_configs.register(build_config({**DEFAULT_OPTIONS, "response_strategy": "json_ok"}))

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.json() == {"message": "ok"}


@pytest.mark.asyncio
async def test_it_can_store_a_specific_header(app, client, session_factory):
    reconfigure(app, store_headers=HeaderStorage.parse(["Signature"]))
    headers = signed_headers()

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=headers)

    assert response.status_code == 200
    calls = await stored_calls(session_factory)
    assert len(calls) == 1
    assert len(calls[0].headers) == 1
    assert calls[0].header("Signature") == headers["Signature"]


@pytest.mark.asyncio
async def test_it_can_store_all_headers(app, client, session_factory):
    reconfigure(app, store_headers=HeaderStorage.parse("*"))

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.status_code == 200
    calls = await stored_calls(session_factory)
    assert len(calls[0].headers) > 1


@pytest.mark.asyncio
async def test_it_can_store_none_of_the_headers(app, client, session_factory):
    reconfigure(app, store_headers=HeaderStorage.parse([]))

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.status_code == 200
    calls = await stored_calls(session_factory)
    assert calls[0].headers == {}


@pytest.mark.asyncio
async def test_form_encoded_payloads_are_stored_as_fields(client, session_factory):
    body = b"event=charge.succeeded&amount=100"
    headers = {"Content-Type": "application/x-www-form-urlencoded", "Signature": sign(body)}

    response = await client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    calls = await stored_calls(session_factory)
    assert calls[0].payload == {"event": "charge.succeeded", "amount": "100"}


@pytest.mark.asyncio
async def test_dispatch_failure_keeps_the_stored_call(app, client, session_factory):
    app.state.task_queue = FailingTaskQueue()

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"
    calls = await stored_calls(session_factory)
    assert len(calls) == 1
    assert calls[0].payload == {"a": 1}


@pytest.mark.asyncio
async def test_persistence_failure_aborts_before_dispatch(app, client, db_engine):
    queue = RecordingTaskQueue()
    app.state.task_queue = queue
    async with db_engine.begin() as conn:
        await conn.execute(text("DROP TABLE jobs"))
        await conn.execute(text("DROP TABLE webhook_calls"))

    response = await client.post(WEBHOOK_PATH, content=BODY, headers=signed_headers())

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"
    assert queue.submitted == []


@pytest.mark.asyncio
async def test_each_accepted_request_enqueues_exactly_one_task(app, client, session_factory):
    queue = RecordingTaskQueue()
    app.state.task_queue = queue

    for n in range(3):
        body = json.dumps({"n": n}).encode("utf-8")
        response = await client.post(WEBHOOK_PATH, content=body, headers=signed_headers(body))
        assert response.status_code == 200

    calls = await stored_calls(session_factory)
    assert len(calls) == 3
    assert sorted(call_id for _, call_id in queue.submitted) == sorted(c.id for c in calls)
    assert {task_ref for task_ref, _ in queue.submitted} == {"process_webhook"}
