"""Result value produced by a successful action execution."""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class OutputFormat(str, Enum):
    """Format of an action's output.

    - TEXT: plain unformatted text from the model.
    - STRUCTURED: schema-constrained structured data (requires ``HasStructuredOutput``).
    - MARKDOWN: Markdown-formatted text from the model.
    """

    TEXT = "text"
    STRUCTURED = "structured"
    MARKDOWN = "markdown"


class ActionMode(str, Enum):
    """How a caller intends to run an action.

    - SYNC: execute inline and wait for the result.
    - QUEUED: hand the action to a task queue for background execution.
    - STREAMING: execute with a streamed response, processing chunks incrementally.
    """

    SYNC = "sync"
    QUEUED = "queued"
    STREAMING = "streaming"


class ActionResult(BaseModel):
    """Normalized output of one successful action execution.

    Attributes:
        text: The raw text returned by the model
        format: The format of the output
        structured: The mapped structured value; present iff ``format`` is STRUCTURED
        input_tokens: Prompt tokens consumed
        output_tokens: Completion tokens generated
        provider: The provider key used for this invocation
        model: The model identifier used for this invocation
        metadata: Additional provider-specific metadata (read-only)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    text: str = Field(default="", description="Raw text returned by the model")
    format: OutputFormat = Field(default=OutputFormat.TEXT, description="Format of the output")
    structured: Any = Field(default=None, description="Mapped structured value")
    input_tokens: int = Field(default=0, ge=0, description="Prompt tokens consumed")
    output_tokens: int = Field(default=0, ge=0, description="Completion tokens generated")
    provider: str = Field(..., description="Provider key used for this invocation")
    model: str = Field(..., description="Model identifier used for this invocation")
    metadata: Mapping[str, Any] = Field(
        default_factory=dict, validate_default=True, description="Provider-specific metadata"
    )

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("metadata")
    def _serialize_metadata(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)

    @model_validator(mode="after")
    def _structured_matches_format(self) -> "ActionResult":
        if (self.structured is not None) != (self.format is OutputFormat.STRUCTURED):
            raise ValueError("structured must be set if and only if format is STRUCTURED")
        return self

    @property
    def is_structured(self) -> bool:
        """Whether this result carries structured output."""
        return self.format is OutputFormat.STRUCTURED

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a plain dictionary."""
        return {
            "text": self.text,
            "format": self.format.name,
            "structured": self.structured,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "provider": self.provider,
            "model": self.model,
            "metadata": dict(self.metadata),
        }
