# # Public relay client API

from .relay_client import (
    RelayClient,
    generate_text_with_openai,
    get_default_client,
)

__all__ = [
    "RelayClient",
    "generate_text_with_openai",
    "get_default_client",
]
