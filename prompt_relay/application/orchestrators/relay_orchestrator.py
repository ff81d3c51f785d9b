# Interface-driven relay orchestrator: one prompt in, one completion out
import asyncio
import logging
import time

from prompt_relay.domain.errors import UpstreamFailure
from prompt_relay.domain.models import user_message

# Interfaces
from prompt_relay.domain.interfaces.icompletion_provider import ICompletionProvider
from prompt_relay.domain.interfaces.iredaction_filter import IRedactionFilter

# Observability helpers
from prompt_relay.infrastructure.telemetry import annotate, llm_span, log_event


class RelayOrchestrator:
    # Orchestrator depends purely on interfaces and holds no per-request state
    def __init__(
        self,
        provider: ICompletionProvider,
        redaction: IRedactionFilter,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._provider = provider
        self._redaction = redaction
        self._timeout_seconds = timeout_seconds

    @property
    def model_name(self) -> str:
        return self._provider.model_name

    def _log_failure(self, exc: BaseException, latency_ms: float, component: str) -> None:
        # # Error detail stays server side, redacted, without the prompt text
        log_event(
            event_type="relay_upstream_failure",
            message="Error generating text",
            level=logging.ERROR,
            extra_fields={
                "component": component,
                "model": self.model_name,
                "error_type": type(exc).__name__,
                "error_detail": self._redaction.redact_text(str(exc)),
                "latency_ms": latency_ms,
            },
        )

    async def _complete_within_deadline(self, messages) -> str:
        # # Only an expired deadline is reported as the relay's own timeout
        task = asyncio.ensure_future(self._provider.complete(messages))
        try:
            done, _ = await asyncio.wait({task}, timeout=self._timeout_seconds)
        finally:
            if not task.done():
                task.cancel()
        if task not in done:
            raise UpstreamFailure(
                f"Upstream call exceeded {self._timeout_seconds}s",
                component="relay_orchestrator",
            )
        return task.result()

    async def generate_text(self, prompt: str) -> str:
        # # Single upstream call bounded by a timeout, every failure becomes UpstreamFailure
        messages = [user_message(prompt)]
        start = time.perf_counter()

        with llm_span(model_name=self.model_name):
            annotate(input_data=self._redaction.redact_payload([m.to_payload() for m in messages]))
            try:
                text = await self._complete_within_deadline(messages)
            except UpstreamFailure as exc:
                latency_ms = (time.perf_counter() - start) * 1000.0
                self._log_failure(exc, latency_ms, exc.component)
                raise
            except Exception as exc:
                latency_ms = (time.perf_counter() - start) * 1000.0
                self._log_failure(exc, latency_ms, "upstream")
                raise UpstreamFailure(str(exc)) from exc

            annotate(
                output_data=self._redaction.redact_text(text),
                metadata={"latency_ms": (time.perf_counter() - start) * 1000.0},
            )

        return text
