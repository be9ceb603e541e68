"""Provider clients.

- ProviderClient: the boundary the dispatcher depends on
- PydanticAIProviderClient: default client backed by Pydantic AI
"""

from .base import (
    ProviderClient,
    ProviderRequest,
    ProviderResponse,
    ProviderStream,
    StructuredProviderResponse,
    TextDelta,
    TokenUsage,
)
from .pydantic_ai import PydanticAIProviderClient

__all__ = [
    "ProviderClient",
    "ProviderRequest",
    "ProviderResponse",
    "ProviderStream",
    "PydanticAIProviderClient",
    "StructuredProviderResponse",
    "TextDelta",
    "TokenUsage",
]
