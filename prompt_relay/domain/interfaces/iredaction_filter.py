# Scrubs secrets from anything headed for a log line or trace annotation
from typing import Protocol, Any


class IRedactionFilter(Protocol):
    # Redacts a plain string
    def redact_text(self, text: str) -> str:
        ...

    # Redacts a nested payload structure
    def redact_payload(self, payload: Any) -> Any:
        ...
