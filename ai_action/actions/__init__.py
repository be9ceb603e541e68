"""Agent actions: contracts, schema translation, dispatch and background tasks.

Key Components:
- AgentAction / BaseAgentAction: the action contract and a convenience base
- HasStructuredOutput / HasStreamingResponse / HasTools: optional capabilities
- SchemaNode / SchemaTranslator: structured output schema description and translation
- ActionDispatcher: the execution entry point
- BackgroundActionTask / InProcessTaskQueue: deferred execution
"""

from .contracts import (
    AgentAction,
    BaseAgentAction,
    Capabilities,
    ContextHelpersMixin,
    ExecutionStrategy,
    HasStreamingResponse,
    HasStructuredOutput,
    HasTools,
)
from .dispatcher import ActionDispatcher, get_dispatcher, reset_dispatcher, set_dispatcher
from .schema import SchemaNode, SchemaTranslator, translate_schema
from .tasks import (
    BackgroundActionTask,
    InProcessTaskQueue,
    TaskQueue,
    context_fingerprint,
    dispatch_action,
    serialize_context,
)

__all__ = [
    "ActionDispatcher",
    "AgentAction",
    "BackgroundActionTask",
    "BaseAgentAction",
    "Capabilities",
    "ContextHelpersMixin",
    "ExecutionStrategy",
    "HasStreamingResponse",
    "HasStructuredOutput",
    "HasTools",
    "InProcessTaskQueue",
    "SchemaNode",
    "SchemaTranslator",
    "TaskQueue",
    "context_fingerprint",
    "dispatch_action",
    "get_dispatcher",
    "reset_dispatcher",
    "serialize_context",
    "set_dispatcher",
    "translate_schema",
]
