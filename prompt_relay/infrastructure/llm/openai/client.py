from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI

from prompt_relay.domain.errors import UpstreamFailure
from prompt_relay.domain.models import ChatMessage
from prompt_relay.infrastructure.config.settings import Settings


class OpenAIChatProvider:
    # # Thin wrapper around the OpenAI chat-completions API
    def __init__(
        self,
        api_key: str,
        model_name: str,
        base_url: Optional[str] = None,
        timeout_seconds: float = 30.0,
        client: Any | None = None,
    ) -> None:
        self.model_name = model_name
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIChatProvider":
        return cls(
            api_key=settings.openai_api_key.get_secret_value(),
            model_name=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.upstream_timeout_seconds,
        )

    def _init_client(self) -> Any:
        # # Lazily build the SDK client, retries off so one request means one call
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout_seconds,
                max_retries=0,
            )
        return self._client

    def _convert_messages(self, messages: Sequence[ChatMessage]) -> List[Dict[str, str]]:
        return [msg.to_payload() for msg in messages]

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        # # One chat completion, generation parameters left at provider defaults
        client = self._init_client()
        response = await client.chat.completions.create(
            model=self.model_name,
            messages=self._convert_messages(messages),
        )
        return self._extract_text(response)

    def _extract_text(self, response: Any) -> str:
        # # First choice's message content, anything else is a malformed response
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise UpstreamFailure("Completion response contained no choices", component="openai")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content:
            raise UpstreamFailure("Completion response contained no message content", component="openai")
        return content
