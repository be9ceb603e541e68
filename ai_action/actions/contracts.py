"""Action contracts and capability classification.

An action is any object exposing ``instructions``, ``prompt``, ``provider``
and ``model``. It may additionally satisfy one or more capability protocols:

- ``HasStructuredOutput``: the response is constrained by a schema and mapped
  through ``map_output``.
- ``HasStreamingResponse``: the response is consumed chunk by chunk.
- ``HasTools``: tools are attached to the provider call.

The capability set of an action is fixed for its lifetime, so the dispatcher
classifies it once per execution with ``Capabilities.of``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Protocol, Sequence, Union, runtime_checkable

from ai_action.exceptions import InvalidContextError
from ai_action.schemas.context import AgentContext
from ai_action.schemas.result import ActionResult

from .schema import SchemaNode


@runtime_checkable
class AgentAction(Protocol):
    """Protocol every action satisfies."""

    def instructions(self, context: AgentContext) -> str: ...

    def prompt(self, context: AgentContext) -> str: ...

    def provider(self) -> str: ...

    def model(self) -> str: ...


@runtime_checkable
class HasStructuredOutput(Protocol):
    """Action whose response is structured data described by a schema."""

    def output_schema(self) -> Union[SchemaNode, Mapping[str, Any]]: ...

    def map_output(self, raw: Dict[str, Any]) -> Any: ...


@runtime_checkable
class HasStreamingResponse(Protocol):
    """Action that consumes its response as a stream.

    ``on_chunk`` returns False to halt the stream early. ``on_complete`` is
    called exactly once with the final result, also after an early halt.
    """

    def on_chunk(self, chunk: str) -> bool: ...

    def on_complete(self, result: ActionResult) -> None: ...


@runtime_checkable
class HasTools(Protocol):
    """Action that exposes tools to the model."""

    def tools(self) -> Sequence[Any]: ...


class ExecutionStrategy(str, Enum):
    """Execution branch selected for an action."""

    STRUCTURED = "structured"
    STREAMING = "streaming"
    TEXT = "text"


@dataclass(frozen=True)
class Capabilities:
    """Capability flags of an action, computed once per execution."""

    structured: bool = False
    streaming: bool = False
    tools: bool = False

    @classmethod
    def of(cls, action: Any) -> "Capabilities":
        return cls(
            structured=isinstance(action, HasStructuredOutput),
            streaming=isinstance(action, HasStreamingResponse),
            tools=isinstance(action, HasTools),
        )

    @property
    def strategy(self) -> ExecutionStrategy:
        """Branch to run; structured output wins over streaming, text is the default."""
        if self.structured:
            return ExecutionStrategy.STRUCTURED
        if self.streaming:
            return ExecutionStrategy.STREAMING
        return ExecutionStrategy.TEXT


class BaseAgentAction(ABC):
    """Convenience base class for actions.

    Supplies ``provider()`` and ``model()`` from the configured defaults and
    a ``handle()`` entry point that runs the action through the process
    dispatcher. Subclasses only need ``instructions()`` and ``prompt()``.
    """

    @abstractmethod
    def instructions(self, context: AgentContext) -> str:
        """Return the system-level instructions for the model."""

    @abstractmethod
    def prompt(self, context: AgentContext) -> str:
        """Return the user-facing prompt."""

    def provider(self) -> str:
        from ai_action.core.config import settings

        return settings.provider

    def model(self) -> str:
        from ai_action.core.config import settings

        return settings.model

    async def handle(self, context: AgentContext) -> ActionResult:
        """Execute this action with the process dispatcher."""
        from .dispatcher import get_dispatcher

        return await get_dispatcher().execute(self, context)


class ContextHelpersMixin:
    """Guard and lookup helpers for reading an ``AgentContext``.

    Errors raised here inside ``instructions()`` or ``prompt()`` surface from
    the dispatcher as ``AgentExecutionError``.
    """

    def require_record(self, context: AgentContext) -> Any:
        if context.record is None:
            raise InvalidContextError.missing_record(context)
        return context.record

    def require_meta(self, context: AgentContext, key: str) -> Any:
        if key not in context.meta:
            raise InvalidContextError.missing_meta(context, key)
        return context.meta[key]

    def meta(self, context: AgentContext, key: str, default: Any = None) -> Any:
        return context.meta.get(key, default)

    def has_record_of(self, context: AgentContext, record_type: type) -> bool:
        return isinstance(context.record, record_type)
