"""Assertion helpers for action tests.

Invocation assertions read the call log of a ``FakeActionDispatcher``;
result assertions are fluent::

    ActionAssertions.for_result(result).assert_text("Hello").assert_is_text()

Failures raise ``AssertionError`` so pytest reports them as test failures.
"""

from typing import Any

from ai_action.exceptions import action_identity
from ai_action.schemas.context import AgentContext
from ai_action.schemas.result import ActionResult

from .fake import FakeActionDispatcher


class ActionAssertions:
    """Fluent assertions over an ``ActionResult``."""

    def __init__(self, result: ActionResult) -> None:
        self._result = result

    # ------------------------------------------------------------------
    # Invocation-state assertions
    # ------------------------------------------------------------------

    @staticmethod
    def assert_action_called(fake: FakeActionDispatcher, action: Any, times: int = 1) -> None:
        fake.assert_called(action, times)

    @staticmethod
    def assert_action_not_called(fake: FakeActionDispatcher, action: Any) -> None:
        fake.assert_not_called(action)

    @staticmethod
    def assert_last_context_had_record(fake: FakeActionDispatcher, action: Any) -> None:
        context = ActionAssertions._last_context(fake, action)
        if context.record is None:
            raise AssertionError(
                f"Expected the last invocation of [{action_identity(action)}] to have a record, but record was None."
            )

    @staticmethod
    def assert_last_context_had_meta(fake: FakeActionDispatcher, action: Any, key: str, expected: Any) -> None:
        name = action_identity(action)
        context = ActionAssertions._last_context(fake, action)
        if key not in context.meta:
            raise AssertionError(f'Expected the last invocation of [{name}] to have meta key "{key}", but it was absent.')
        if context.meta[key] != expected:
            raise AssertionError(
                f'Expected meta["{key}"] of the last [{name}] invocation to equal {expected!r}, '
                f"got {context.meta[key]!r}."
            )

    @staticmethod
    def _last_context(fake: FakeActionDispatcher, action: Any) -> AgentContext:
        context = fake.last_context(action)
        if context is None:
            raise AssertionError(f"Agent [{action_identity(action)}] was never invoked.")
        return context

    # ------------------------------------------------------------------
    # Result assertions
    # ------------------------------------------------------------------

    @classmethod
    def for_result(cls, result: ActionResult) -> "ActionAssertions":
        return cls(result)

    @property
    def result(self) -> ActionResult:
        return self._result

    def assert_text(self, expected: str) -> "ActionAssertions":
        if self._result.text != expected:
            raise AssertionError(f"Expected text {expected!r}, got {self._result.text!r}.")
        return self

    def assert_text_contains(self, needle: str) -> "ActionAssertions":
        if needle not in self._result.text:
            raise AssertionError(f"Expected text to contain {needle!r}, got {self._result.text!r}.")
        return self

    def assert_is_structured(self) -> "ActionAssertions":
        if not self._result.is_structured:
            raise AssertionError(f"Expected a structured result, got format {self._result.format.name}.")
        return self

    def assert_is_text(self) -> "ActionAssertions":
        if self._result.is_structured:
            raise AssertionError("Expected a non-structured result, got a structured one.")
        return self

    def assert_structured(self, expected: Any) -> "ActionAssertions":
        if self._result.structured != expected:
            raise AssertionError(f"Expected structured output {expected!r}, got {self._result.structured!r}.")
        return self

    def assert_provider(self, expected: str) -> "ActionAssertions":
        if self._result.provider != expected:
            raise AssertionError(f"Expected provider {expected!r}, got {self._result.provider!r}.")
        return self

    def assert_model(self, expected: str) -> "ActionAssertions":
        if self._result.model != expected:
            raise AssertionError(f"Expected model {expected!r}, got {self._result.model!r}.")
        return self

    def assert_input_tokens(self, expected: int) -> "ActionAssertions":
        if self._result.input_tokens != expected:
            raise AssertionError(f"Expected {expected} input tokens, got {self._result.input_tokens}.")
        return self

    def assert_output_tokens(self, expected: int) -> "ActionAssertions":
        if self._result.output_tokens != expected:
            raise AssertionError(f"Expected {expected} output tokens, got {self._result.output_tokens}.")
        return self
