"""Pydantic AI native agent adapter.

This module wraps an already-configured ``pydantic_ai.Agent`` so it can be
used wherever an action is expected. ``handle()`` runs the native agent
directly, bypassing the dispatcher's prompt assembly: the agent keeps its own
instructions, tools and output type.
"""

import json
from typing import Any

from pydantic import BaseModel

from ai_action.actions.contracts import BaseAgentAction
from ai_action.core.logging_config import get_logger
from ai_action.providers.pydantic_ai import run_output, usage_from_run
from ai_action.schemas.context import AgentContext
from ai_action.schemas.result import ActionResult, OutputFormat

logger = get_logger(__name__)


class PydanticAgentAction(BaseAgentAction):
    """Adapter exposing a native Pydantic AI agent as an action.

    Attributes:
        _agent: The underlying Pydantic AI agent instance
        _user_prompt: Prompt sent to the agent on every run
    """

    def __init__(self, agent: Any, user_prompt: str) -> None:
        self._agent = agent
        self._user_prompt = user_prompt

    @property
    def agent(self) -> Any:
        return self._agent

    def instructions(self, context: AgentContext) -> str:
        return ""

    def prompt(self, context: AgentContext) -> str:
        return self._user_prompt

    async def handle(self, context: AgentContext) -> ActionResult:
        """Run the native agent and normalize its output.

        A ``str`` output yields a TEXT result; any other output yields a
        STRUCTURED result whose text is the JSON encoding of the output.
        """
        logger.debug(f"Running native Pydantic AI agent with prompt length {len(self._user_prompt)}")

        result = await self._agent.run(self._user_prompt)
        output = run_output(result)
        usage = usage_from_run(getattr(result, "usage", None))

        if output is None or isinstance(output, str):
            text, output_format, structured = output or "", OutputFormat.TEXT, None
        else:
            if isinstance(output, BaseModel):
                text = output.model_dump_json()
            else:
                text = json.dumps(output, default=str)
            output_format, structured = OutputFormat.STRUCTURED, output

        return ActionResult(
            text=text,
            format=output_format,
            structured=structured,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            provider=self.provider(),
            model=self.model(),
            metadata={"framework": "pydantic_ai"},
        )
