# Defines the contract for an upstream chat-completion provider
from typing import Protocol, Sequence

from prompt_relay.domain.models import ChatMessage


class ICompletionProvider(Protocol):
    # Model identifier the provider completes against
    model_name: str

    # Returns the first completion for the given messages, raises on failure
    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        ...
