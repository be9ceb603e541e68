"""Provider client boundary.

The dispatcher talks to a generative AI provider only through the
``ProviderClient`` interface defined here. Concrete clients adapt a specific
framework (see :mod:`ai_action.providers.pydantic_ai`); tests substitute a
scripted client.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncContextManager, AsyncIterator, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenUsage(BaseModel):
    """Token accounting reported by the provider."""

    input_tokens: int = Field(default=0, ge=0, description="Prompt tokens consumed")
    output_tokens: int = Field(default=0, ge=0, description="Completion tokens generated")


class ProviderRequest(BaseModel):
    """Everything a provider call needs, assembled by the dispatcher.

    Attributes:
        instructions: System-level directive for the model
        prompt: User-facing request text
        provider: Provider key (e.g. 'anthropic', 'openai')
        model: Model identifier
        tools: Tool handles passed through to the framework unmodified
        max_tokens: Generation cap
        output_type: Translated output schema for structured calls
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    instructions: str = Field(default="", description="System-level directive")
    prompt: str = Field(..., description="User-facing request text")
    provider: str = Field(..., description="Provider key")
    model: str = Field(..., description="Model identifier")
    tools: List[Any] = Field(default_factory=list, description="Tool handles")
    max_tokens: Optional[int] = Field(default=None, ge=1, description="Generation cap")
    output_type: Optional[Any] = Field(default=None, description="Translated output schema")


class ProviderResponse(BaseModel):
    """Response of a plain text provider call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    text: str = Field(default="", description="Generated text")
    usage: TokenUsage = Field(default_factory=TokenUsage, description="Token accounting")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Provider metadata")


class StructuredProviderResponse(ProviderResponse):
    """Response of a structured provider call."""

    output: Dict[str, Any] = Field(default_factory=dict, description="Decoded structured output")

    def to_raw_map(self) -> Dict[str, Any]:
        """Return the decoded structured output as a plain mapping."""
        return dict(self.output)


class TextDelta(BaseModel):
    """A text fragment received from a streamed response."""

    delta: str


class ProviderStream(ABC):
    """An open streamed response.

    Iterating yields events in arrival order; ``TextDelta`` carries text and
    anything else is a non-text event. ``text`` and ``usage`` reflect what has
    been received so far and are final once iteration is exhausted.
    """

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[Any]: ...

    @property
    @abstractmethod
    def text(self) -> str: ...

    @property
    @abstractmethod
    def usage(self) -> Optional[TokenUsage]: ...


class ProviderClient(ABC):
    """Capability surface the dispatcher requires from a provider."""

    @abstractmethod
    async def text_invoke(self, request: ProviderRequest) -> ProviderResponse:
        """Run a plain text generation."""

    @abstractmethod
    async def structured_invoke(self, request: ProviderRequest) -> Any:
        """Run a generation constrained by ``request.output_type``.

        Well-behaved clients return a ``StructuredProviderResponse``; the
        dispatcher rejects anything else.
        """

    @abstractmethod
    def stream_invoke(self, request: ProviderRequest) -> AsyncContextManager[ProviderStream]:
        """Open a streamed text generation.

        Leaving the context abandons the stream whether or not it was drained.
        """
