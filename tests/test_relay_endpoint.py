import asyncio
import logging

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from conftest import (
    TEST_API_KEY,
    EchoProvider,
    FailingProvider,
    SlowProvider,
    StaticProvider,
)
from prompt_relay.api.routers.openai import RELAY_PATH
from prompt_relay.domain.errors import UpstreamFailure


def test_generate_text_returns_json_string(make_app):
    provider = StaticProvider("Once upon a time")
    client = TestClient(make_app(provider))

    r = client.post("/openai/generate-text", json={"prompt": "Tell me a story"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    # Bare JSON string literal, not an object
    assert r.text == '"Once upon a time"'
    assert r.json() == "Once upon a time"


def test_generate_text_sends_single_user_message(make_app):
    provider = StaticProvider()
    client = TestClient(make_app(provider))

    client.post(RELAY_PATH, json={"prompt": "What is a relay?"})

    assert len(provider.calls) == 1
    (messages,) = provider.calls
    assert [(m.role, m.content) for m in messages] == [("user", "What is a relay?")]


@pytest.mark.parametrize(
    "exc",
    [
        RuntimeError("socket closed"),
        ValueError("bad json"),
        UpstreamFailure("Completion response contained no choices", component="openai"),
        openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")),
    ],
)
def test_upstream_failure_maps_to_generic_500(make_app, logged_events, exc):
    provider = FailingProvider(exc)
    client = TestClient(make_app(provider))

    r = client.post(RELAY_PATH, json={"prompt": "hi"})

    assert r.status_code == 500
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text == "Error generating text"
    # One upstream attempt, no retries
    assert provider.calls == 1
    assert len(logged_events) == 1
    assert logged_events[0]["event_type"] == "relay_upstream_failure"
    assert logged_events[0]["level"] == logging.ERROR


def test_upstream_timeout_maps_to_generic_500(make_app, logged_events):
    client = TestClient(make_app(SlowProvider(delay=2.0), upstream_timeout_seconds=0.05))

    r = client.post(RELAY_PATH, json={"prompt": "hi"})

    assert r.status_code == 500
    assert r.text == "Error generating text"
    assert len(logged_events) == 1
    assert logged_events[0]["extra_fields"]["component"] == "relay_orchestrator"


def test_failure_detail_is_not_forwarded(make_app, logged_events):
    exc = RuntimeError(f"401 invalid api key {TEST_API_KEY} for org-internal")
    client = TestClient(make_app(FailingProvider(exc)))

    r = client.post(RELAY_PATH, json={"prompt": "hi"})

    assert "invalid api key" not in r.text
    assert TEST_API_KEY not in r.text
    detail = logged_events[0]["extra_fields"]["error_detail"]
    assert TEST_API_KEY not in detail
    assert "[REDACTED]" in detail


def test_failure_log_does_not_contain_prompt(make_app, logged_events):
    client = TestClient(make_app(FailingProvider(RuntimeError("boom"))))

    client.post(RELAY_PATH, json={"prompt": "my very private prompt"})

    assert "my very private prompt" not in repr(logged_events)


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"prompt": ""},
        {"prompt": None},
        {"prompt": 42},
        {"text": "wrong field"},
    ],
)
def test_invalid_prompt_is_rejected_before_upstream(make_app, body):
    provider = StaticProvider()
    client = TestClient(make_app(provider))

    r = client.post(RELAY_PATH, json=body)

    assert r.status_code == 422
    assert provider.calls == []


def test_overlong_prompt_is_rejected(make_app):
    provider = StaticProvider()
    client = TestClient(make_app(provider, max_prompt_chars=10))

    r = client.post(RELAY_PATH, json={"prompt": "x" * 11})

    assert r.status_code == 422
    assert "10" in r.json()["detail"]
    assert provider.calls == []


def test_prompt_at_limit_is_accepted(make_app):
    client = TestClient(make_app(StaticProvider("ok"), max_prompt_chars=10))

    r = client.post(RELAY_PATH, json={"prompt": "x" * 10})

    assert r.status_code == 200


def test_get_is_not_allowed(make_app):
    client = TestClient(make_app(StaticProvider()))

    r = client.get(RELAY_PATH)

    assert r.status_code == 405


def test_repeated_prompts_are_structurally_valid(make_app):
    client = TestClient(make_app(EchoProvider()))

    for _ in range(3):
        r = client.post(RELAY_PATH, json={"prompt": "same prompt"})
        assert r.status_code == 200
        assert isinstance(r.json(), str) and r.json()


@pytest.mark.asyncio
async def test_concurrent_requests_do_not_cross_talk(make_app):
    app = make_app(EchoProvider())
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://relay.test") as client:
        prompts = [f"prompt-{i}" for i in range(25)]
        responses = await asyncio.gather(
            *(client.post(RELAY_PATH, json={"prompt": p}) for p in prompts)
        )

    for prompt, r in zip(prompts, responses):
        assert r.status_code == 200
        assert r.json() == f"echo:{prompt}"


def test_health_does_not_reveal_credential(make_app):
    client = TestClient(make_app(StaticProvider()))

    r = client.get("/health")

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["model"] == "stub-model"
    assert TEST_API_KEY not in r.text


def test_cors_preflight_allows_browser_callers(make_app):
    client = TestClient(make_app(StaticProvider()))

    r = client.options(
        RELAY_PATH,
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert r.status_code == 200
    assert "access-control-allow-origin" in r.headers


def test_provider_timeout_error_is_logged_as_is(make_app, logged_events):
    client = TestClient(make_app(FailingProvider(TimeoutError("read timed out on socket"))))

    r = client.post(RELAY_PATH, json={"prompt": "hi"})

    assert r.status_code == 500
    assert r.text == "Error generating text"
    (event,) = logged_events
    assert event["extra_fields"]["error_type"] == "TimeoutError"
    assert "read timed out on socket" in event["extra_fields"]["error_detail"]


def test_default_config_logs_no_llmobs_warnings(make_app, caplog):
    client = TestClient(make_app(StaticProvider("ok")))

    with caplog.at_level(logging.WARNING):
        for _ in range(3):
            assert client.post(RELAY_PATH, json={"prompt": "hi"}).status_code == 200

    assert [r for r in caplog.records if r.name.startswith("ddtrace.llmobs")] == []
