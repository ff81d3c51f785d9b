from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict


@dataclass(frozen=True)
class ChatMessage:
    # # Single role/content pair sent to the completion provider
    role: str  # "system" | "user" | "assistant"
    content: str

    def to_payload(self) -> Dict[str, str]:
        return asdict(self)


def user_message(prompt: str) -> ChatMessage:
    # # The relay always sends exactly one user turn
    return ChatMessage(role="user", content=prompt)
