"""AI Framework Adapters.

Available Adapters:
- PydanticAgentAction: exposes a native Pydantic AI agent as an action
"""

from .pydantic_ai import PydanticAgentAction

__all__ = ["PydanticAgentAction"]
