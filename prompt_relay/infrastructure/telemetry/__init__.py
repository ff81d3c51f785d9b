# # TELEMETRY PUBLIC API
# # This file exposes the log and span helpers used by the orchestrator,
# # the router and the relay client.

# --- Tracing ---
from .tracing.llmobs_spans import (
    llmobs_active,
    llm_span,
    workflow_span,
    annotate,
)

# --- Logging ---
from .logging.log_collector import (
    JsonFormatter,
    log_event,
    configure_observability_logger,
    install_log_redaction,
    get_log_redaction,
)

__all__ = [
    # tracing
    "llmobs_active",
    "llm_span",
    "workflow_span",
    "annotate",

    # logging
    "JsonFormatter",
    "log_event",
    "configure_observability_logger",
    "install_log_redaction",
    "get_log_redaction",
]
