"""Publish/subscribe bus connecting forms to the views that cache records.

Forms never reach into list or manage views directly. After a successful save
they publish a :class:`ContentEvent`; every subscriber whose type filter
matches is called synchronously, in subscription order. Subscriber failures
are reported with ``warnings.warn`` and do not stop delivery.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Optional

from .ContentEvent import ContentEvent

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

ContentHook = Callable[[ContentEvent], object]


@dataclass
class _Subscription:
    callback: ContentHook
    type_ids: Optional[frozenset[str]]

    def matches(self, event: ContentEvent) -> bool:
        return self.type_ids is None or event.type_id in self.type_ids


class ContentEventBus:
    """Synchronous in-process event bus for record changes."""

    def __init__(self) -> None:
        self._subs: dict[Hashable, _Subscription] = {}
        self._counter = 0

    def subscribe(
        self,
        callback: ContentHook,
        *,
        type_ids: Optional[Iterable[str]] = None,
        hook_id: Optional[Hashable] = None,
    ) -> Hashable:
        """Register ``callback(event)``; ``type_ids=None`` receives every event.

        Returns
        -------
        hashable
            Identifier to pass to :meth:`unsubscribe`.
        """
        if hook_id is None:
            self._counter += 1
            hook_id = f"hook:{self._counter}"
        filt = frozenset(type_ids) if type_ids is not None else None
        self._subs[hook_id] = _Subscription(callback=callback, type_ids=filt)
        return hook_id

    def unsubscribe(self, hook_id: Hashable) -> None:
        self._subs.pop(hook_id, None)

    def publish(self, event: ContentEvent) -> int:
        """Deliver ``event`` and return the number of subscribers called."""
        delivered = 0
        for h_id, sub in list(self._subs.items()):
            if not sub.matches(event):
                continue
            delivered += 1
            try:
                sub.callback(event)
            except Exception as e:
                warnings.warn(f"Hook {h_id} failed: {e}")
        logger.debug(
            "published %s %s#%s to %d subscriber(s)",
            event.kind, event.type_id, event.record_id, delivered,
        )
        return delivered

    def __len__(self) -> int:
        return len(self._subs)


__all__ = ["ContentEventBus", "ContentHook"]
