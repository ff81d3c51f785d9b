# Builds a fully wired relay orchestrator with concrete implementations

# LLM backend
from prompt_relay.infrastructure.llm.openai.client import OpenAIChatProvider

# Enrichment: redaction
from prompt_relay.observability.enrichment import RedactionFilter

# Config
from prompt_relay.infrastructure.config.settings import Settings

# Interfaces
from prompt_relay.domain.interfaces.icompletion_provider import ICompletionProvider

# Orchestrator class
from prompt_relay.application.orchestrators.relay_orchestrator import RelayOrchestrator


def build_redaction_filter(settings: Settings) -> RedactionFilter:
    # The configured key is scrubbed literally on top of the generic patterns
    return RedactionFilter().with_secrets([settings.openai_api_key.get_secret_value()])


def build_relay_orchestrator(
    settings: Settings,
    provider: ICompletionProvider | None = None,
    redaction: RedactionFilter | None = None,
) -> RelayOrchestrator:
    return RelayOrchestrator(
        provider=provider or OpenAIChatProvider.from_settings(settings),
        redaction=redaction or build_redaction_filter(settings),
        timeout_seconds=settings.upstream_timeout_seconds,
    )
