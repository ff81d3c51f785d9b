# OpenAI relay router with a dependency-injected orchestrator
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from prompt_relay.api.schemas.relay import ErrorReport, PromptRequest
from prompt_relay.application.orchestrators.relay_orchestrator import RelayOrchestrator
from prompt_relay.domain.errors import UpstreamFailure
from prompt_relay.infrastructure.config.settings import Settings

# Datadog LLMObs workflow span, inert while LLMObs is disabled
from prompt_relay.infrastructure.telemetry import workflow_span


RELAY_PREFIX = "/openai"
GENERATE_TEXT_PATH = "/generate-text"
RELAY_PATH = RELAY_PREFIX + GENERATE_TEXT_PATH

router = APIRouter(prefix=RELAY_PREFIX, tags=["openai"])


def get_relay_orchestrator(request: Request) -> RelayOrchestrator:
    # Orchestrator is wired once per process in create_app
    return request.app.state.relay_orchestrator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post(
    GENERATE_TEXT_PATH,
    response_model=str,
    responses={500: {"description": "Upstream failure", "content": {"text/plain": {}}}},
)
@workflow_span  # Datadog workflow root span
async def generate_text(
    req: PromptRequest,
    orchestrator: RelayOrchestrator = Depends(get_relay_orchestrator),
    settings: Settings = Depends(get_app_settings),
):
    if len(req.prompt) > settings.max_prompt_chars:
        raise HTTPException(
            status_code=422,
            detail=f"prompt exceeds {settings.max_prompt_chars} characters",
        )

    try:
        text = await orchestrator.generate_text(req.prompt)
    except UpstreamFailure:
        report = ErrorReport()
        return PlainTextResponse(report.message, status_code=report.status_code)

    # Completion goes back as a bare JSON string, not an object
    return JSONResponse(content=text, status_code=200)
