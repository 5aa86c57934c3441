"""Explicit configuration for :class:`AdminPanel`."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

from .view_controller import ViewMode


def _default_mode_labels() -> Mapping[str, str]:
    return {ViewMode.CREATE.value: "Daten anlegen", ViewMode.MANAGE.value: "Daten verwalten"}


@dataclass(frozen=True)
class AdminConfig:
    """Options controlling the admin panel chrome and initial selection.

    Parameters
    ----------
    title : str
        Heading shown above the mode bar.
    intro : str
        Short explanation rendered under the heading. Empty hides it.
    mode_labels : mapping
        Button label per :class:`ViewMode` value.
    default_type_id : str or None
        Content type selected first; ``None`` picks the first registered type.
    default_mode : ViewMode or str
        Mode shown on construction.
    """

    title: str = "Lernplattform – Verwaltung"
    intro: str = "Lege Kategorien, Module, Lernvideos und Lernbeiträge an oder verwalte bestehende Inhalte."
    mode_labels: Mapping[str, str] = field(default_factory=_default_mode_labels)
    default_type_id: Optional[str] = None
    default_mode: ViewMode = ViewMode.CREATE

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_mode", ViewMode.coerce(self.default_mode))
        missing = [m.value for m in ViewMode if m.value not in self.mode_labels]
        if missing:
            raise ValueError(f"mode_labels is missing labels for: {', '.join(missing)}")

    def mode_label(self, mode: Any) -> str:
        return str(self.mode_labels[ViewMode.coerce(mode).value])

    def with_overrides(self, **kwargs: Any) -> "AdminConfig":
        """Return a copy with ``kwargs`` applied.

        Raises
        ------
        TypeError
            If a key does not name a config field.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise TypeError(f"Unknown AdminConfig option(s): {', '.join(unknown)}")
        return replace(self, **kwargs)


__all__ = ["AdminConfig"]
