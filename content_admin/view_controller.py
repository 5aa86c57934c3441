"""Mode and tab selection state for the admin surface.

This module centralizes navigation ownership so :class:`AdminPanel` can
remain an orchestrator. The controller owns:

- the top-level mode (create vs. manage),
- the active content-type tab, validated against a registry,
- selection-change hooks.

It holds no widgets and performs no I/O, so every transition can be tested
without a frontend.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Hashable, Optional, TypeVar, Union

from .content_registry import ContentTypeRegistry, UnknownTypeError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

T = TypeVar("T")


class ViewMode(str, Enum):
    CREATE = "create"
    MANAGE = "manage"

    @classmethod
    def coerce(cls, value: Union["ViewMode", str]) -> "ViewMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown view mode {value!r}; expected 'create' or 'manage'"
            ) from None


@dataclass(frozen=True)
class ViewSelection:
    """Current navigation state.

    Parameters
    ----------
    mode : ViewMode
        Active top-level surface.
    active_type_id : str or None
        Active create tab. Retained, but irrelevant, while in manage mode.
    """

    mode: ViewMode
    active_type_id: Optional[str]


SelectionHook = Callable[[ViewSelection, ViewSelection], object]


class ViewController:
    """Own mode/tab selection and resolve what to render."""

    def __init__(
        self,
        registry: ContentTypeRegistry,
        *,
        default_type_id: Optional[str] = None,
        default_mode: Union[ViewMode, str] = ViewMode.CREATE,
    ) -> None:
        self._registry = registry
        if default_type_id is None:
            ids = registry.ids()
            default_type_id = ids[0] if ids else None
        elif default_type_id not in registry:
            raise UnknownTypeError(f"Unknown content type: {default_type_id}")
        self._default = ViewSelection(ViewMode.coerce(default_mode), default_type_id)
        self._selection = self._default
        self._hooks: dict[Hashable, SelectionHook] = {}
        self._hook_counter = 0

    @property
    def registry(self) -> ContentTypeRegistry:
        return self._registry

    @property
    def selection(self) -> ViewSelection:
        return self._selection

    @property
    def mode(self) -> ViewMode:
        return self._selection.mode

    @property
    def active_type_id(self) -> Optional[str]:
        return self._selection.active_type_id

    def select_mode(self, mode: Union[ViewMode, str]) -> bool:
        """Switch the top-level surface; the active tab is kept for later.

        Returns
        -------
        bool
            ``True`` when the selection changed.
        """
        target = ViewMode.coerce(mode)
        return self._apply(ViewSelection(target, self._selection.active_type_id))

    def select_type(self, type_id: str) -> bool:
        """Switch the active create tab without changing the mode.

        Raises
        ------
        UnknownTypeError
            If ``type_id`` is not registered. The selection is unchanged.
        """
        if type_id not in self._registry:
            raise UnknownTypeError(f"Unknown content type: {type_id}")
        return self._apply(ViewSelection(self._selection.mode, type_id))

    def reset(self) -> bool:
        """Restore the initial selection."""
        return self._apply(self._default)

    def active_renderer(self, manage_renderer: T) -> Union[T, Callable[..., object]]:
        """Return the registry renderer in create mode, ``manage_renderer`` otherwise."""
        sel = self._selection
        if sel.mode is ViewMode.MANAGE:
            return manage_renderer
        if sel.active_type_id is None:
            raise UnknownTypeError("No content types registered")
        renderer = self._registry.resolve(sel.active_type_id)
        logger.debug("resolved renderer for %s", sel.active_type_id)
        return renderer

    def restore(self, selection: ViewSelection) -> None:
        """Put back ``selection`` without notifying hooks.

        Used by a hook that could not apply a change (for example, a renderer
        that raised) to return the controller to what is actually shown.
        """
        if selection.active_type_id is not None and selection.active_type_id not in self._registry:
            raise UnknownTypeError(f"Unknown content type: {selection.active_type_id}")
        self._selection = selection
        logger.debug(
            "restored mode=%s type=%s", selection.mode.value, selection.active_type_id
        )

    # --- Hooks ------------------------------------------------------------------

    def add_selection_hook(self, callback: SelectionHook, hook_id: Optional[Hashable] = None) -> Hashable:
        """Register ``callback(old, new)`` for selection changes."""
        if hook_id is None:
            self._hook_counter += 1
            hook_id = f"hook:{self._hook_counter}"
        self._hooks[hook_id] = callback
        return hook_id

    def remove_selection_hook(self, hook_id: Hashable) -> None:
        self._hooks.pop(hook_id, None)

    # --- Internals --------------------------------------------------------------

    def _apply(self, new: ViewSelection) -> bool:
        old = self._selection
        if new == old:
            return False
        self._selection = new
        logger.info(
            "selection mode=%s type=%s (was mode=%s type=%s)",
            new.mode.value, new.active_type_id, old.mode.value, old.active_type_id,
        )
        for h_id, callback in list(self._hooks.items()):
            try:
                callback(old, new)
            except Exception as e:
                warnings.warn(f"Hook {h_id} failed: {e}")
            if self._selection != new:
                # A hook rolled the change back (``restore``); skip the rest.
                return False
        return True


__all__ = ["SelectionHook", "ViewController", "ViewMode", "ViewSelection"]
