from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Tuple
import re


@dataclass
class RedactionConfig:
    # # Replacement token plus the literal secrets known to this process
    replacement: str = "[REDACTED]"
    secrets: Tuple[str, ...] = field(default_factory=tuple)
    redact_api_keys: bool = True
    redact_bearer_tokens: bool = True
    redact_email: bool = True


class RedactionFilter:
    # # Pattern based redaction for log payloads and trace annotations
    def __init__(self, config: RedactionConfig | None = None) -> None:
        self._config = config or RedactionConfig()
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        # # Literal secrets first so a key is never half-matched by a pattern
        patterns: List[re.Pattern[str]] = []

        literals = sorted({s for s in self._config.secrets if s}, key=len, reverse=True)
        for secret in literals:
            patterns.append(re.compile(re.escape(secret)))

        if self._config.redact_api_keys:
            patterns.append(
                re.compile(r"\bsk-[A-Za-z0-9_\-]{8,}")
            )
        if self._config.redact_bearer_tokens:
            patterns.append(
                re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._\-~+/]+=*")
            )
        if self._config.redact_email:
            patterns.append(
                re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
            )

        self._patterns = patterns

    @property
    def secrets(self) -> Tuple[str, ...]:
        return tuple(self._config.secrets)

    def with_secrets(self, secrets: Iterable[str]) -> "RedactionFilter":
        # # Copy of this filter that also scrubs the given literal values
        merged = tuple(self._config.secrets) + tuple(s for s in secrets if s)
        return RedactionFilter(
            RedactionConfig(
                replacement=self._config.replacement,
                secrets=merged,
                redact_api_keys=self._config.redact_api_keys,
                redact_bearer_tokens=self._config.redact_bearer_tokens,
                redact_email=self._config.redact_email,
            )
        )

    def redact_text(self, text: str) -> str:
        redacted = text
        for pattern in self._patterns:
            redacted = pattern.sub(self._config.replacement, redacted)
        return redacted

    def redact_payload(self, payload: Any) -> Any:
        # # Recursively redact string values in nested structures
        if isinstance(payload, str):
            return self.redact_text(payload)
        if isinstance(payload, dict):
            return {
                key: self.redact_payload(value)
                for key, value in payload.items()
            }
        if isinstance(payload, list):
            return [self.redact_payload(item) for item in payload]
        if isinstance(payload, tuple):
            return tuple(self.redact_payload(item) for item in payload)
        return payload
