"""Pydantic AI implementation of the provider client boundary.

A fresh ``pydantic_ai.Agent`` is built for every call from the request's
instructions, tools and output type, and targets the model string
``"<provider>:<model>"``.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from pydantic import BaseModel
from pydantic_ai import Agent, ModelSettings

from ai_action.core.logging_config import get_logger

from .base import (
    ProviderClient,
    ProviderRequest,
    ProviderResponse,
    ProviderStream,
    StructuredProviderResponse,
    TextDelta,
    TokenUsage,
)

logger = get_logger(__name__)

FRAMEWORK = "pydantic_ai"


def usage_from_run(usage: Any) -> TokenUsage:
    """Map a Pydantic AI usage object onto ``TokenUsage``.

    Pydantic AI exposes ``usage()`` as a method on run results; older releases
    name the counters ``request_tokens`` / ``response_tokens``. Missing counters
    count as zero.
    """
    if callable(usage):
        usage = usage()
    if usage is None:
        return TokenUsage()

    input_tokens = getattr(usage, "input_tokens", None)
    if input_tokens is None:
        input_tokens = getattr(usage, "request_tokens", None)
    output_tokens = getattr(usage, "output_tokens", None)
    if output_tokens is None:
        output_tokens = getattr(usage, "response_tokens", None)

    return TokenUsage(input_tokens=input_tokens or 0, output_tokens=output_tokens or 0)


def run_output(result: Any) -> Any:
    """Return the output of a Pydantic AI run result."""
    if hasattr(result, "output"):
        return result.output
    return result.data


class PydanticAIStream(ProviderStream):
    """``ProviderStream`` over a Pydantic AI streamed run."""

    def __init__(self, run: Any) -> None:
        self._run = run
        self._deltas: Optional[AsyncIterator[str]] = None
        self._parts: List[str] = []

    def __aiter__(self) -> "PydanticAIStream":
        if self._deltas is None:
            self._deltas = self._run.stream_text(delta=True).__aiter__()
        return self

    async def __anext__(self) -> TextDelta:
        if self._deltas is None:
            self.__aiter__()
        delta = await self._deltas.__anext__()
        self._parts.append(delta)
        return TextDelta(delta=delta)

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def usage(self) -> Optional[TokenUsage]:
        try:
            return usage_from_run(self._run.usage)
        except Exception:
            logger.debug("Usage not available on abandoned stream", exc_info=True)
            return None

    async def aclose(self) -> None:
        aclose = getattr(self._deltas, "aclose", None)
        if aclose is not None:
            await aclose()


class PydanticAIProviderClient(ProviderClient):
    """Provider client backed by Pydantic AI agents.

    Attributes:
        _model_settings: Extra model settings merged into every call
    """

    def __init__(self, model_settings: Optional[Dict[str, Any]] = None) -> None:
        self._model_settings = dict(model_settings or {})

    def build_init_kwargs(self, request: ProviderRequest) -> Dict[str, Any]:
        """Build the ``Agent`` constructor kwargs for ``request``."""
        kwargs: Dict[str, Any] = {
            "model": f"{request.provider}:{request.model}",
        }

        if request.instructions:
            kwargs["system_prompt"] = request.instructions

        if request.tools:
            kwargs["tools"] = list(request.tools)

        if request.output_type is not None:
            kwargs["output_type"] = request.output_type

        model_settings: Dict[str, Any] = dict(self._model_settings)
        if request.max_tokens is not None:
            model_settings["max_tokens"] = request.max_tokens
        if model_settings:
            kwargs["model_settings"] = ModelSettings(**model_settings)

        logger.debug(f"Built agent kwargs for {kwargs['model']}: {list(kwargs.keys())}")
        return kwargs

    def build_agent(self, request: ProviderRequest) -> Agent:
        return Agent(**self.build_init_kwargs(request))

    async def text_invoke(self, request: ProviderRequest) -> ProviderResponse:
        agent = self.build_agent(request)
        result = await agent.run(request.prompt)
        output = run_output(result)

        return ProviderResponse(
            text=output if isinstance(output, str) else str(output),
            usage=usage_from_run(result.usage),
            meta={"framework": FRAMEWORK},
        )

    async def structured_invoke(self, request: ProviderRequest) -> Any:
        agent = self.build_agent(request)
        result = await agent.run(request.prompt)
        output = run_output(result)

        if isinstance(output, BaseModel):
            return StructuredProviderResponse(
                text=output.model_dump_json(by_alias=True),
                output=output.model_dump(by_alias=True),
                usage=usage_from_run(result.usage),
                meta={"framework": FRAMEWORK},
            )
        if isinstance(output, dict):
            return StructuredProviderResponse(
                text=json.dumps(output, default=str),
                output=output,
                usage=usage_from_run(result.usage),
                meta={"framework": FRAMEWORK},
            )

        logger.warning(f"Structured call returned {type(output).__name__}, not a mapping")
        return ProviderResponse(
            text=str(output),
            usage=usage_from_run(result.usage),
            meta={"framework": FRAMEWORK},
        )

    @asynccontextmanager
    async def stream_invoke(self, request: ProviderRequest) -> AsyncIterator[PydanticAIStream]:
        agent = self.build_agent(request)
        async with agent.run_stream(request.prompt) as run:
            stream = PydanticAIStream(run)
            try:
                yield stream
            finally:
                await stream.aclose()
