"""ai_action.

Runs "agent actions": discrete units of work that assemble a prompt, invoke
a generative AI provider and normalize the response into an ``ActionResult``.

High-level architecture
-----------------------

- ``ai_action.actions``: the action contracts, capability classification,
  structured output schema translation, the ``ActionDispatcher`` execution
  entry point and background tasks.
- ``ai_action.schemas``: the immutable ``AgentContext`` and ``ActionResult``
  value types.
- ``ai_action.providers``: the provider client boundary and its Pydantic AI
  implementation.
- ``ai_action.adapters``: wrappers exposing native framework agents as actions.
- ``ai_action.testing``: ``FakeActionDispatcher`` and assertion helpers for
  tests that must never reach a real provider.

Typical workflow
----------------

1. Subclass ``BaseAgentAction`` and implement ``instructions()`` and ``prompt()``,
   optionally adding ``output_schema()``/``map_output()``, ``on_chunk()``/
   ``on_complete()`` or ``tools()``.
2. Build an ``AgentContext`` for the invocation.
3. ``await ActionDispatcher().execute(action, context)`` (or ``await action.handle(context)``).
"""

from ai_action.actions import (
    ActionDispatcher,
    AgentAction,
    BackgroundActionTask,
    BaseAgentAction,
    ContextHelpersMixin,
    HasStreamingResponse,
    HasStructuredOutput,
    HasTools,
    SchemaNode,
    SchemaTranslator,
    get_dispatcher,
    set_dispatcher,
)
from ai_action.exceptions import AgentExecutionError, InvalidContextError, UnexpectedResponseShape
from ai_action.schemas import ActionMode, ActionResult, AgentContext, OutputFormat

__all__ = [
    "ActionDispatcher",
    "ActionMode",
    "ActionResult",
    "AgentAction",
    "AgentContext",
    "AgentExecutionError",
    "BackgroundActionTask",
    "BaseAgentAction",
    "ContextHelpersMixin",
    "HasStreamingResponse",
    "HasStructuredOutput",
    "HasTools",
    "InvalidContextError",
    "OutputFormat",
    "SchemaNode",
    "SchemaTranslator",
    "UnexpectedResponseShape",
    "get_dispatcher",
    "set_dispatcher",
]
