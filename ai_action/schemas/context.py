"""Immutable invocation context passed to every agent action."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class AgentContext:
    """Snapshot of the data an action builds its prompt from.

    Attributes
    ----------
    record:
        The primary domain record for this invocation. Borrowed from the
        caller; the context never copies or mutates it.
    records:
        Secondary records for batch operations.
    meta:
        Arbitrary key/value metadata for prompt building. The mapping is
        copied on construction and exposed read-only, so neither later
        changes to the caller's dict nor item assignment on the context can
        alter it.
    user_instruction:
        Optional free-text instruction from the end user.
    panel_id:
        Optional identifier of the UI panel that triggered the action.
    resource_class:
        Optional name of the resource type the action was triggered from.
    """

    record: Optional[Any] = None
    records: Tuple[Any, ...] = ()
    meta: Mapping[str, Any] = field(default_factory=dict)
    user_instruction: Optional[str] = None
    panel_id: Optional[str] = None
    resource_class: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    @classmethod
    def from_record(cls, record: Any, meta: Optional[Mapping[str, Any]] = None) -> "AgentContext":
        """Create a context for a single record."""
        return cls(record=record, meta=meta or {})

    @classmethod
    def from_records(cls, records: Iterable[Any], meta: Optional[Mapping[str, Any]] = None) -> "AgentContext":
        """Create a context for a batch of records."""
        return cls(records=tuple(records), meta=meta or {})

    def with_meta(self, key: str, value: Any) -> "AgentContext":
        """Return a new context with ``key`` set to ``value`` in its metadata.

        The original instance is left untouched; every other field of the new
        instance is the very same object as on the original.
        """
        meta: Dict[str, Any] = {**self.meta, key: value}
        return dataclasses.replace(self, meta=meta)
