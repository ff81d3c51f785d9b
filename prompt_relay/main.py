# Load environment variables before anything else
from dotenv import load_dotenv  # # Import dotenv loader
load_dotenv()  # # Ensure OPENAI_API_KEY and DD_* values are present at import time

# Datadog auto-instrumentation (must be before any framework imports)
from ddtrace import patch_all  # # Auto-instrument all supported libraries
patch_all()  # # Honors DD_TRACE_ENABLED=false

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_relay.api.routers import openai as openai_router
from prompt_relay.domain.errors import ConfigurationMissing
from prompt_relay.domain.interfaces.icompletion_provider import ICompletionProvider
from prompt_relay.infrastructure.config.settings import Settings, get_settings
from prompt_relay.infrastructure.factories.relay_factory import (
    build_redaction_filter,
    build_relay_orchestrator,
)

# Datadog LLM Observability (agentless mode)
from ddtrace.llmobs import LLMObs

# Structured JSON logger integration
from prompt_relay.infrastructure.telemetry import (
    configure_observability_logger,
    install_log_redaction,
)


APP_VERSION = "0.1.0"


def _validate_llmobs_env(settings: Settings) -> None:
    # # Agentless LLMObs needs a Datadog key, checked only when switched on
    if not settings.llmobs_enabled:
        return
    if not os.getenv("DD_API_KEY"):
        raise ConfigurationMissing(
            "PROMPT_RELAY_LLMOBS_ENABLED is set but DD_API_KEY is missing. "
            "Check that .env is present and load_dotenv() executed."
        )


def _ensure_ml_app(settings: Settings) -> str:
    # # Ensure ML application name exists for Datadog correlation
    ml_app = os.getenv("DD_LLMOBS_ML_APP")
    if ml_app:
        return ml_app

    # # Fallback to safe normalized name
    fallback = settings.app_name.replace(" ", "_").lower()
    os.environ["DD_LLMOBS_ML_APP"] = fallback
    return fallback


def create_app(
    settings: Settings | None = None,
    provider: ICompletionProvider | None = None,
) -> FastAPI:
    # # Missing credential fails here, before the app can serve anything
    settings = settings or get_settings()
    _validate_llmobs_env(settings)

    app = FastAPI(
        title=settings.app_name,
        version=APP_VERSION,
    )

    # # Read-only process configuration plus the single wired orchestrator
    app.state.settings = settings
    redaction = build_redaction_filter(settings)
    app.state.relay_orchestrator = build_relay_orchestrator(
        settings,
        provider=provider,
        redaction=redaction,
    )
    install_log_redaction(redaction)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_observability() -> None:
        # # Configure JSON logging + Datadog trace correlation
        configure_observability_logger()

        if settings.llmobs_enabled:
            LLMObs.enable(ml_app=_ensure_ml_app(settings), agentless_enabled=True)

    # # Attach routers
    app.include_router(openai_router.router)

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {
            "status": "ok",
            "app": settings.app_name,
            "environment": settings.environment,
            "model": settings.openai_model,
        }

    return app
