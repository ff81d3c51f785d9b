import asyncio
import os
import random
from typing import List, Sequence

# Keep ddtrace quiet before anything imports it
os.environ["DD_TRACE_ENABLED"] = "false"
os.environ["DD_INSTRUMENTATION_TELEMETRY_ENABLED"] = "false"
os.environ["DD_REMOTE_CONFIGURATION_ENABLED"] = "false"
os.environ["DD_LLMOBS_ENABLED"] = "false"

import pytest

from prompt_relay.domain.models import ChatMessage
from prompt_relay.infrastructure.config.settings import Settings, get_client_settings, get_settings


TEST_API_KEY = "sk-test-relay-secret-0123456789abcdef"


class StaticProvider:
    model_name = "stub-model"

    def __init__(self, text: str = "hello from upstream") -> None:
        self.text = text
        self.calls: List[Sequence[ChatMessage]] = []

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        return self.text


class FailingProvider:
    model_name = "stub-model"

    def __init__(self, exc: BaseException) -> None:
        self.exc = exc
        self.calls = 0

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        self.calls += 1
        raise self.exc


class EchoProvider:
    model_name = "stub-model"

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        # Shuffle completion order relative to arrival order
        await asyncio.sleep(random.uniform(0, 0.02))
        return f"echo:{messages[0].content}"


class SlowProvider:
    model_name = "stub-model"

    def __init__(self, delay: float = 5.0) -> None:
        self.delay = delay

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        await asyncio.sleep(self.delay)
        return "too late"


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    get_client_settings.cache_clear()
    yield
    get_settings.cache_clear()
    get_client_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(OPENAI_API_KEY=TEST_API_KEY, OPENAI_MODEL="stub-model")


@pytest.fixture
def make_app(settings):
    from prompt_relay.main import create_app

    def _make(provider, **overrides):
        cfg = settings.model_copy(update=overrides) if overrides else settings
        return create_app(settings=cfg, provider=provider)

    return _make


@pytest.fixture
def logged_events(monkeypatch):
    # Records structured events instead of writing them
    events = []

    def fake_log_event(event_type, message, level=None, extra_fields=None):
        events.append({
            "event_type": event_type,
            "message": message,
            "level": level,
            "extra_fields": extra_fields or {},
        })

    import prompt_relay.application.orchestrators.relay_orchestrator as orchestrator_module
    import prompt_relay.client.relay_client as client_module

    monkeypatch.setattr(orchestrator_module, "log_event", fake_log_event)
    monkeypatch.setattr(client_module, "log_event", fake_log_event)
    return events
