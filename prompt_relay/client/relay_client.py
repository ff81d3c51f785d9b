from __future__ import annotations

import logging
from typing import Optional

import httpx

from prompt_relay.infrastructure.config.settings import RelayClientSettings, get_client_settings
from prompt_relay.infrastructure.telemetry import log_event


GENERATE_TEXT_PATH = "/openai/generate-text"


class RelayClient:
    # # Calls the relay endpoint; keeps only immutable configuration between calls
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: RelayClientSettings) -> "RelayClient":
        return cls(
            base_url=settings.relay_base_url,
            timeout_seconds=settings.relay_timeout_seconds,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}{GENERATE_TEXT_PATH}"

    def _log_failure(self, exc: Exception, status_code: Optional[int] = None) -> None:
        if isinstance(exc, httpx.HTTPStatusError):
            status_code = exc.response.status_code
        log_event(
            event_type="relay_client_failure",
            message="Error generating text with OpenAI",
            level=logging.ERROR,
            extra_fields={
                "url": self.url,
                "status_code": status_code,
                "error_type": type(exc).__name__,
            },
        )

    @staticmethod
    def _decode_body(response: httpx.Response) -> str:
        # # Endpoint answers with a JSON string literal; fall back to raw text
        content_type = response.headers.get("content-type", "")
        if "json" not in content_type:
            return response.text
        body = response.json()
        if not isinstance(body, str):
            raise ValueError(f"expected a JSON string body, got {type(body).__name__}")
        return body

    async def generate_text_with_openai(self, prompt: str) -> str:
        # # Fresh HTTP client per call, failures logged once and re-raised untouched
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(self.url, json={"prompt": prompt})
                response.raise_for_status()
            except httpx.HTTPError as exc:
                self._log_failure(exc)
                raise
            try:
                return self._decode_body(response)
            except ValueError as exc:
                self._log_failure(exc, status_code=response.status_code)
                raise


_default_client: Optional[RelayClient] = None


def get_default_client() -> RelayClient:
    # # Base URL resolved once; absence raises ConfigurationMissing
    global _default_client
    if _default_client is None:
        _default_client = RelayClient.from_settings(get_client_settings())
    return _default_client


async def generate_text_with_openai(prompt: str) -> str:
    return await get_default_client().generate_text_with_openai(prompt)
