"""Test support: a recording fake dispatcher and assertion helpers."""

from .assertions import ActionAssertions
from .fake import FAKE_MODEL, FAKE_PROVIDER, FakeActionDispatcher

__all__ = ["ActionAssertions", "FAKE_MODEL", "FAKE_PROVIDER", "FakeActionDispatcher"]
