"""Standardized record-change event payloads.

This module defines ``ContentEvent``, the immutable structure published by the
create/edit forms and the manage panel after a successful change and consumed
by list and manage views to invalidate their cached records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

EventKind = Literal["created", "updated", "deleted"]


@dataclass(frozen=True)
class ContentEvent:
    """Normalized record change emitted after a successful save.

    Parameters
    ----------
    kind : {"created", "updated", "deleted"}
        What happened to the record.
    type_id : str
        Content-type id of the record (``"category"``, ``"module"``,
        ``"video"``, ``"article"``).
    record_id : int
        Backend id of the record.
    record : Mapping[str, Any]
        The record as returned by the backend.

    Examples
    --------
    >>> ContentEvent(kind="created", type_id="category", record_id=1, record={"id": 1, "name": "SQL"})  # doctest: +SKIP
    """

    kind: EventKind
    type_id: str
    record_id: int
    record: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind not in ("created", "updated", "deleted"):
            raise ValueError(f"Unknown event kind {self.kind!r}; expected 'created', 'updated' or 'deleted'")
