"""Value types carried into and out of every action execution."""

from .context import AgentContext
from .result import ActionMode, ActionResult, OutputFormat

__all__ = ["ActionMode", "ActionResult", "AgentContext", "OutputFormat"]
