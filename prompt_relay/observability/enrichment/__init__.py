# # Public enrichment API for prompt relay observability

from .redaction_filter import (
    RedactionConfig,
    RedactionFilter,
)

__all__ = [
    "RedactionConfig",
    "RedactionFilter",
]
