"""Expanded/collapsed state owned by a single container."""

from __future__ import annotations

import logging
import warnings
from typing import Callable, Hashable, Optional

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class CollapsibleState:
    """Two-state machine: ``Expanded`` and ``Collapsed``.

    The only transition is :meth:`toggle`. There is no setter, so no other
    object can force the state; observers are notified after each flip with
    the new ``collapsed`` value.

    Parameters
    ----------
    collapsed : bool, optional
        Initial state. Defaults to expanded.

    Examples
    --------
    >>> state = CollapsibleState(collapsed=True)
    >>> state.toggle()
    False
    >>> state.expanded
    True
    """

    __slots__ = ("_collapsed", "_observers", "_observer_counter")

    def __init__(self, collapsed: bool = False) -> None:
        self._collapsed = bool(collapsed)
        self._observers: dict[Hashable, Callable[[bool], None]] = {}
        self._observer_counter = 0

    @property
    def collapsed(self) -> bool:
        return self._collapsed

    @property
    def expanded(self) -> bool:
        return not self._collapsed

    def toggle(self) -> bool:
        """Flip the state and return the new ``collapsed`` value."""
        self._collapsed = not self._collapsed
        logger.debug("collapsible toggled collapsed=%s", self._collapsed)
        for obs_id, callback in list(self._observers.items()):
            try:
                callback(self._collapsed)
            except Exception as e:
                warnings.warn(f"Hook {obs_id} failed: {e}")
        return self._collapsed

    def observe(self, callback: Callable[[bool], None], observer_id: Optional[Hashable] = None) -> Hashable:
        """Register ``callback(collapsed)`` and return its identifier."""
        if observer_id is None:
            self._observer_counter += 1
            observer_id = f"collapse:{self._observer_counter}"
        self._observers[observer_id] = callback
        return observer_id

    def unobserve(self, observer_id: Hashable) -> None:
        self._observers.pop(observer_id, None)

    def __repr__(self) -> str:
        return f"CollapsibleState(collapsed={self._collapsed})"
