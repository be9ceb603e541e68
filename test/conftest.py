from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Sequence

import pytest

from ai_action.actions.dispatcher import ActionDispatcher, reset_dispatcher, set_dispatcher
from ai_action.core.config import Settings
from ai_action.providers.base import (
    ProviderClient,
    ProviderRequest,
    ProviderResponse,
    ProviderStream,
    TextDelta,
    TokenUsage,
)
from ai_action.testing import FakeActionDispatcher


class ScriptedStream(ProviderStream):
    """Stream replaying a fixed list of events."""

    def __init__(self, events: Sequence[Any], usage: Optional[TokenUsage]) -> None:
        self._events = list(events)
        self._usage = usage
        self._parts: List[str] = []
        self.consumed = 0
        self.closed = False

    def __aiter__(self) -> "ScriptedStream":
        return self

    async def __anext__(self) -> Any:
        if self.consumed >= len(self._events):
            raise StopAsyncIteration
        event = self._events[self.consumed]
        self.consumed += 1
        if isinstance(event, TextDelta):
            self._parts.append(event.delta)
        return event

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def usage(self) -> Optional[TokenUsage]:
        return self._usage


class ScriptedProviderClient(ProviderClient):
    """Provider client returning canned responses and recording requests.

    Set ``error`` to make every call raise it.
    """

    def __init__(self) -> None:
        self.text_response: ProviderResponse = ProviderResponse(text="")
        self.structured_response: Any = None
        self.stream_events: List[Any] = []
        self.stream_usage: Optional[TokenUsage] = None
        self.error: Optional[BaseException] = None
        self.requests: List[tuple] = []
        self.last_stream: Optional[ScriptedStream] = None

    def _record(self, kind: str, request: ProviderRequest) -> None:
        self.requests.append((kind, request))
        if self.error is not None:
            raise self.error

    async def text_invoke(self, request: ProviderRequest) -> ProviderResponse:
        self._record("text", request)
        return self.text_response

    async def structured_invoke(self, request: ProviderRequest) -> Any:
        self._record("structured", request)
        return self.structured_response

    @asynccontextmanager
    async def stream_invoke(self, request: ProviderRequest) -> AsyncIterator[ScriptedStream]:
        self._record("stream", request)
        stream = ScriptedStream(self.stream_events, self.stream_usage)
        self.last_stream = stream
        try:
            yield stream
        finally:
            stream.closed = True


@pytest.fixture
def config() -> Settings:
    """Explicit settings so tests do not depend on the environment."""
    return Settings(
        AI_ACTION_PROVIDER="anthropic",
        AI_ACTION_MODEL="claude-sonnet-4-20250514",
        AI_ACTION_QUEUE="default",
        AI_ACTION_MAX_TOKENS=2048,
        AI_ACTION_LOGGING=False,
    )


@pytest.fixture
def provider_client() -> ScriptedProviderClient:
    return ScriptedProviderClient()


@pytest.fixture
def dispatcher(provider_client: ScriptedProviderClient, config: Settings) -> ActionDispatcher:
    return ActionDispatcher(client=provider_client, config=config)


@pytest.fixture
def fake_dispatcher():
    """Install a ``FakeActionDispatcher`` as the process dispatcher for one test."""
    fake = FakeActionDispatcher()
    set_dispatcher(fake)
    yield fake
    fake.reset()
    reset_dispatcher()
