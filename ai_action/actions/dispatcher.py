"""Execution dispatcher.

``ActionDispatcher.execute`` is the single entry point for running an action.
It classifies the action's capabilities once, runs one of three branches
against the provider client and normalizes the outcome into an
``ActionResult``:

1. ``HasStructuredOutput``  -> structured branch (schema-constrained output)
2. ``HasStreamingResponse`` -> streaming branch (chunk callbacks)
3. otherwise                -> text branch

Tools from ``HasTools`` are attached to whichever branch runs. Every failure
inside ``execute`` surfaces as ``AgentExecutionError`` with the original
exception chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Any, Optional

from ai_action.core.config import Settings, get_settings
from ai_action.core.logging_config import get_logger
from ai_action.core.monitoring import log_action_executed
from ai_action.exceptions import AgentExecutionError, UnexpectedResponseShape, action_identity
from ai_action.providers.base import (
    ProviderClient,
    ProviderRequest,
    StructuredProviderResponse,
    TextDelta,
    TokenUsage,
)
from ai_action.schemas.context import AgentContext
from ai_action.schemas.result import ActionResult, OutputFormat

from .contracts import Capabilities, ExecutionStrategy
from .schema import SchemaTranslator

logger = get_logger(__name__)

EXECUTED_EVENT = "ai-action.executed"


class ActionDispatcher:
    """Runs agent actions against a provider client.

    Attributes:
        _client: Provider client used for every call
        _settings: Explicit settings; the process settings are used when None
        _translator: Translator for structured output schemas
    """

    def __init__(
        self,
        client: Optional[ProviderClient] = None,
        config: Optional[Settings] = None,
        translator: Optional[SchemaTranslator] = None,
    ) -> None:
        if client is None:
            from ai_action.providers.pydantic_ai import PydanticAIProviderClient

            client = PydanticAIProviderClient()
        self._client = client
        self._settings = config
        self._translator = translator or SchemaTranslator()

    @property
    def client(self) -> ProviderClient:
        return self._client

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else get_settings()

    async def execute(self, action: Any, context: AgentContext) -> ActionResult:
        """Execute ``action`` with ``context`` and return its result.

        Args:
            action: The action to run
            context: Invocation context handed to the action's callbacks

        Returns:
            ActionResult produced by the selected branch

        Raises:
            AgentExecutionError: If anything fails while running the action
        """
        try:
            capabilities = Capabilities.of(action)
            strategy = capabilities.strategy
            logger.debug(f"Executing {action_identity(action)} with {strategy.value} strategy")

            if strategy is ExecutionStrategy.STRUCTURED:
                result = await self._execute_structured(action, context, capabilities)
            elif strategy is ExecutionStrategy.STREAMING:
                result = await self._execute_streaming(action, context, capabilities)
            else:
                result = await self._execute_text(action, context, capabilities)

        except AgentExecutionError:
            raise
        except Exception as e:
            logger.error(f"Agent action failed: {action_identity(action)}: {e}")
            raise AgentExecutionError.from_exception(action, e) from e

        if self.settings.logging:
            self._log_execution(action, result)

        return result

    def _build_request(
        self,
        action: Any,
        context: AgentContext,
        capabilities: Capabilities,
        output_type: Any = None,
    ) -> ProviderRequest:
        return ProviderRequest(
            instructions=action.instructions(context),
            prompt=action.prompt(context),
            provider=action.provider(),
            model=action.model(),
            tools=list(action.tools()) if capabilities.tools else [],
            max_tokens=self.settings.max_tokens,
            output_type=output_type,
        )

    async def _execute_text(self, action: Any, context: AgentContext, capabilities: Capabilities) -> ActionResult:
        request = self._build_request(action, context, capabilities)
        response = await self._client.text_invoke(request)

        return ActionResult(
            text=response.text,
            format=OutputFormat.TEXT,
            structured=None,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            provider=request.provider,
            model=request.model,
            metadata=dict(response.meta),
        )

    async def _execute_structured(
        self, action: Any, context: AgentContext, capabilities: Capabilities
    ) -> ActionResult:
        output_type = self._translator.translate(action.output_schema())
        request = self._build_request(action, context, capabilities, output_type=output_type)
        response = await self._client.structured_invoke(request)

        if not isinstance(response, StructuredProviderResponse):
            raise UnexpectedResponseShape(response)

        mapped = action.map_output(response.to_raw_map())

        return ActionResult(
            text=response.text,
            format=OutputFormat.STRUCTURED,
            structured=mapped,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            provider=request.provider,
            model=request.model,
            metadata=dict(response.meta),
        )

    async def _execute_streaming(
        self, action: Any, context: AgentContext, capabilities: Capabilities
    ) -> ActionResult:
        request = self._build_request(action, context, capabilities)

        async with self._client.stream_invoke(request) as stream:
            async for event in stream:
                if not isinstance(event, TextDelta):
                    continue
                if not action.on_chunk(event.delta):
                    logger.debug(f"Stream halted by {action_identity(action)}")
                    break

            text = stream.text or ""
            usage = stream.usage or TokenUsage()

        result = ActionResult(
            text=text,
            format=OutputFormat.TEXT,
            structured=None,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            provider=request.provider,
            model=request.model,
            metadata={},
        )

        action.on_complete(result)

        return result

    def _log_execution(self, action: Any, result: ActionResult) -> None:
        fields = {
            "agent": action_identity(action),
            "provider": result.provider,
            "model": result.model,
            "input_tokens": result.input_tokens,
            "output_tokens": result.output_tokens,
        }
        logger.info(EXECUTED_EVENT, extra=fields)
        log_action_executed(**fields)


# Global dispatcher instance
_global_dispatcher: Optional[Any] = None


def get_dispatcher() -> Any:
    """Get the process dispatcher, creating a default ``ActionDispatcher`` on first use."""
    global _global_dispatcher
    if _global_dispatcher is None:
        _global_dispatcher = ActionDispatcher()
    return _global_dispatcher


def set_dispatcher(dispatcher: Any) -> None:
    """Replace the process dispatcher (e.g. with a ``FakeActionDispatcher`` in tests)."""
    global _global_dispatcher
    _global_dispatcher = dispatcher


def reset_dispatcher() -> None:
    """Forget the process dispatcher so the next ``get_dispatcher()`` builds a fresh one."""
    global _global_dispatcher
    _global_dispatcher = None
