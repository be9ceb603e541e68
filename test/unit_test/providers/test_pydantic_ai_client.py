"""Unit tests for the Pydantic AI provider client."""

from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import BaseModel, Field

from ai_action.providers.base import (
    ProviderRequest,
    ProviderResponse,
    StructuredProviderResponse,
    TextDelta,
    TokenUsage,
)
from ai_action.providers.pydantic_ai import (
    FRAMEWORK,
    PydanticAIProviderClient,
    PydanticAIStream,
    run_output,
    usage_from_run,
)


def lookup(order_id: str) -> str:
    return order_id


class Summary(BaseModel):
    first_name: str = Field(alias="first-name")
    score: int = 0


class StreamedRun:
    """Stand-in for a Pydantic AI streamed run."""

    def __init__(self, deltas, usage=None):
        self._deltas = deltas
        self._usage = usage
        self.yielded = 0

    async def _stream(self):
        for delta in self._deltas:
            self.yielded += 1
            yield delta

    def stream_text(self, delta=False):
        assert delta is True
        return self._stream()

    def usage(self):
        if self._usage is None:
            raise RuntimeError("usage not available yet")
        return self._usage


def make_request(**overrides):
    fields = {
        "instructions": "Be concise.",
        "prompt": "Hello",
        "provider": "anthropic",
        "model": "claude-x",
        "max_tokens": 2048,
    }
    fields.update(overrides)
    return ProviderRequest(**fields)


def run_result(output, input_tokens=5, output_tokens=3):
    result = MagicMock()
    result.output = output
    result.usage = MagicMock(return_value=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens))
    return result


@pytest.fixture
def mock_agent_cls():
    with patch("ai_action.providers.pydantic_ai.Agent") as agent_cls:
        agent_cls.return_value.run = AsyncMock()
        yield agent_cls


class TestUsageFromRun:
    """Test usage normalization."""

    def test_callable_usage(self):
        usage = usage_from_run(lambda: SimpleNamespace(input_tokens=5, output_tokens=3))

        assert usage == TokenUsage(input_tokens=5, output_tokens=3)

    def test_legacy_counter_names(self):
        usage = usage_from_run(SimpleNamespace(request_tokens=7, response_tokens=2))

        assert usage == TokenUsage(input_tokens=7, output_tokens=2)

    def test_missing_usage_is_zero(self):
        assert usage_from_run(None) == TokenUsage()
        assert usage_from_run(SimpleNamespace(input_tokens=None, output_tokens=None)) == TokenUsage()


class TestRunOutput:
    def test_output_attribute(self):
        assert run_output(SimpleNamespace(output="x")) == "x"

    def test_legacy_data_attribute(self):
        assert run_output(SimpleNamespace(data="y")) == "y"


class TestBuildInitKwargs:
    """Test Agent construction arguments."""

    def test_full_request(self):
        request = make_request(tools=[lookup], output_type=Summary)

        kwargs = PydanticAIProviderClient().build_init_kwargs(request)

        assert kwargs["model"] == "anthropic:claude-x"
        assert kwargs["system_prompt"] == "Be concise."
        assert kwargs["tools"] == [lookup]
        assert kwargs["output_type"] is Summary
        assert kwargs["model_settings"] == {"max_tokens": 2048}

    def test_minimal_request(self):
        request = make_request(instructions="", max_tokens=None)

        kwargs = PydanticAIProviderClient().build_init_kwargs(request)

        assert kwargs == {"model": "anthropic:claude-x"}

    def test_extra_model_settings_are_merged(self):
        client = PydanticAIProviderClient(model_settings={"temperature": 0.2})

        kwargs = client.build_init_kwargs(make_request())

        assert kwargs["model_settings"] == {"temperature": 0.2, "max_tokens": 2048}


class TestTextInvoke:
    @pytest.mark.asyncio
    async def test_text_response(self, mock_agent_cls):
        mock_agent_cls.return_value.run.return_value = run_result("Hi there")

        response = await PydanticAIProviderClient().text_invoke(make_request())

        assert isinstance(response, ProviderResponse)
        assert response.text == "Hi there"
        assert response.usage == TokenUsage(input_tokens=5, output_tokens=3)
        assert response.meta == {"framework": FRAMEWORK}
        mock_agent_cls.assert_called_once()
        mock_agent_cls.return_value.run.assert_awaited_once_with("Hello")


class TestStructuredInvoke:
    @pytest.mark.asyncio
    async def test_model_output(self, mock_agent_cls):
        mock_agent_cls.return_value.run.return_value = run_result(Summary(**{"first-name": "Ada", "score": 3}))

        response = await PydanticAIProviderClient().structured_invoke(make_request(output_type=Summary))

        assert isinstance(response, StructuredProviderResponse)
        assert response.to_raw_map() == {"first-name": "Ada", "score": 3}
        assert '"first-name":"Ada"' in response.text

    @pytest.mark.asyncio
    async def test_dict_output(self, mock_agent_cls):
        mock_agent_cls.return_value.run.return_value = run_result({"title": "T"})

        response = await PydanticAIProviderClient().structured_invoke(make_request(output_type=Summary))

        assert isinstance(response, StructuredProviderResponse)
        assert response.output == {"title": "T"}
        assert response.text == '{"title": "T"}'

    @pytest.mark.asyncio
    async def test_unstructured_output(self, mock_agent_cls):
        mock_agent_cls.return_value.run.return_value = run_result("just text")

        response = await PydanticAIProviderClient().structured_invoke(make_request(output_type=Summary))

        assert type(response) is ProviderResponse
        assert response.text == "just text"


class TestStreamInvoke:
    @pytest.mark.asyncio
    async def test_stream_yields_deltas(self, mock_agent_cls):
        run = StreamedRun(["He", "llo"], usage=SimpleNamespace(input_tokens=4, output_tokens=2))

        @asynccontextmanager
        async def run_stream(prompt):
            assert prompt == "Hello"
            yield run

        mock_agent_cls.return_value.run_stream = run_stream

        async with PydanticAIProviderClient().stream_invoke(make_request()) as stream:
            events = [event async for event in stream]
            assert events == [TextDelta(delta="He"), TextDelta(delta="llo")]
            assert stream.text == "Hello"
            assert stream.usage == TokenUsage(input_tokens=4, output_tokens=2)


class TestPydanticAIStream:
    @pytest.mark.asyncio
    async def test_partial_consumption(self):
        run = StreamedRun(["a", "b", "c"])
        stream = PydanticAIStream(run)

        async for event in stream:
            assert event == TextDelta(delta="a")
            break

        assert stream.text == "a"
        assert run.yielded == 1

    @pytest.mark.asyncio
    async def test_usage_unavailable_is_none(self):
        stream = PydanticAIStream(StreamedRun([]))

        assert stream.usage is None

    @pytest.mark.asyncio
    async def test_aclose_without_iteration(self):
        await PydanticAIStream(StreamedRun([])).aclose()
