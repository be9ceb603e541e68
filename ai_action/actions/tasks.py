"""Background execution of actions.

A ``BackgroundActionTask`` wraps exactly one ``(action, context)`` pair and,
when handled, runs it through a dispatcher. Tasks are handed to a
``TaskQueue``; queues are expected to drop a task whose ``unique_id`` is
already pending. ``InProcessTaskQueue`` is an in-memory implementation used for
local runs and tests; production deployments adapt their own broker to the
``TaskQueue`` interface.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from ai_action.core.config import get_settings
from ai_action.core.logging_config import get_logger
from ai_action.exceptions import action_identity
from ai_action.schemas.context import AgentContext
from ai_action.schemas.result import ActionResult

logger = get_logger(__name__)


def _serializable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _serializable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(k): _serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serializable(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


def serialize_context(context: AgentContext) -> str:
    """Deterministic JSON serialization of a context."""
    return json.dumps(_serializable(context), sort_keys=True, separators=(",", ":"))


def context_fingerprint(action: Any, context: AgentContext) -> str:
    """Deduplication key of an ``(action, context)`` pair."""
    digest = hashlib.md5(serialize_context(context).encode("utf-8")).hexdigest()
    return f"{action_identity(action)}:{digest}"


class BackgroundActionTask:
    """A deferred execution of one action.

    Attributes:
        action: The action to run
        context: The context to run it with
        queue: Name of the queue the task is submitted to
    """

    def __init__(self, action: Any, context: AgentContext, queue: Optional[str] = None) -> None:
        self.action = action
        self.context = context
        self.queue = queue or get_settings().queue

    @property
    def unique_id(self) -> str:
        return context_fingerprint(self.action, self.context)

    async def handle(self, dispatcher: Optional[Any] = None) -> ActionResult:
        """Run the wrapped action, by default through the process dispatcher."""
        if dispatcher is None:
            from .dispatcher import get_dispatcher

            dispatcher = get_dispatcher()

        logger.debug(f"Running background task {self.unique_id} from queue '{self.queue}'")
        return await dispatcher.execute(self.action, self.context)

    def __repr__(self) -> str:
        return f"BackgroundActionTask(action={action_identity(self.action)}, queue={self.queue})"


class TaskQueue(ABC):
    """Broker interface for background action tasks."""

    @abstractmethod
    def submit(self, task: BackgroundActionTask) -> bool:
        """Enqueue ``task``.

        Returns:
            False when the task was dropped as a duplicate of a pending task
        """


class InProcessTaskQueue(TaskQueue):
    """In-memory queue that deduplicates pending tasks by ``unique_id``.

    Not safe for use from multiple threads.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, "OrderedDict[str, BackgroundActionTask]"] = {}

    def submit(self, task: BackgroundActionTask) -> bool:
        pending = self._pending.setdefault(task.queue, OrderedDict())
        key = task.unique_id
        if key in pending:
            logger.debug(f"Dropping duplicate task {key} on queue '{task.queue}'")
            return False
        pending[key] = task
        return True

    def pending(self, queue: Optional[str] = None) -> List[BackgroundActionTask]:
        """Pending tasks of ``queue``, or of every queue when None, in submission order."""
        if queue is not None:
            return list(self._pending.get(queue, {}).values())
        return [task for tasks in self._pending.values() for task in tasks.values()]

    async def run_pending(self, dispatcher: Optional[Any] = None, queue: Optional[str] = None) -> List[ActionResult]:
        """Drain pending tasks and execute them one at a time in submission order.

        A task is removed from the pending set before it runs, so an identical
        task may be submitted again while or after it executes. The first
        failing task stops the drain and its error propagates; tasks after it
        stay pending.
        """
        results: List[ActionResult] = []
        queues = [queue] if queue is not None else list(self._pending)
        for name in queues:
            pending = self._pending.get(name)
            while pending:
                _, task = pending.popitem(last=False)
                results.append(await task.handle(dispatcher))
        return results


def dispatch_action(
    action: Any,
    context: AgentContext,
    task_queue: TaskQueue,
    queue: Optional[str] = None,
) -> bool:
    """Wrap ``(action, context)`` in a task and submit it to ``task_queue``."""
    return task_queue.submit(BackgroundActionTask(action, context, queue=queue))
