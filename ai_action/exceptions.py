"""Exception types raised by agent action execution.

``AgentExecutionError`` is the only error surfaced by
``ActionDispatcher.execute``; every other failure raised while running an
action is chained underneath it as ``__cause__``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ai_action.schemas.context import AgentContext


def action_identity(action: Any) -> str:
    """Return the stable type identity of an action.

    Accepts an action instance, an action class, or an already-computed
    identity string.
    """
    if isinstance(action, str):
        return action
    cls = action if isinstance(action, type) else type(action)
    return f"{cls.__module__}.{cls.__qualname__}"


class AgentExecutionError(RuntimeError):
    """Raised when an agent action fails during execution.

    Wraps provider-level errors, malformed provider responses and any other
    exception raised while running an action. The failing action's type
    identity is recorded to aid debugging.
    """

    def __init__(self, action: Any, message: str = "") -> None:
        self.action_name = action_identity(action)
        super().__init__(message or f"Agent [{self.action_name}] failed during execution.")

    @classmethod
    def from_exception(cls, action: Any, cause: BaseException) -> "AgentExecutionError":
        """Build an error describing ``cause``.

        Callers are expected to ``raise ... from cause`` so the original
        exception stays on the chain.
        """
        name = action_identity(action)
        detail = str(cause) or type(cause).__name__
        return cls(action, f"Agent [{name}] failed: {detail}")


class UnexpectedResponseShape(ValueError):
    """Raised when a structured provider call returns something other than a structured response."""

    def __init__(self, response: Any) -> None:
        self.response = response
        super().__init__(f"Expected StructuredProviderResponse, got {type(response).__name__}.")


class InvalidContextError(ValueError):
    """Raised when an ``AgentContext`` lacks data an action requires."""

    def __init__(self, context: "AgentContext", message: str = "") -> None:
        self.context = context
        super().__init__(message or "The provided AgentContext is invalid or missing required data.")

    @classmethod
    def missing_record(cls, context: "AgentContext") -> "InvalidContextError":
        return cls(context, "The AgentContext must contain a record, but none was provided.")

    @classmethod
    def missing_meta(cls, context: "AgentContext", key: str) -> "InvalidContextError":
        return cls(context, f'The AgentContext is missing required metadata key "{key}".')


__all__ = [
    "AgentExecutionError",
    "InvalidContextError",
    "UnexpectedResponseShape",
    "action_identity",
]
