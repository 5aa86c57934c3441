"""Content-type registry: which create tabs exist and what each one renders.

The registry is the single source of truth for the create surface. It maps a
stable content-type id to a :class:`ContentTypeDescriptor` (the tab label)
and a renderer, a zero-argument callable returning the widget for that tab.

Lifecycle
---------
Registration happens once at startup. :meth:`ContentTypeRegistry.seal`
ends the registration phase; afterwards the registry is read-only, which is
what allows the view controller to validate selections against a fixed set
of ids without any locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator

import ipywidgets as widgets

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Renderer = Callable[[], widgets.Widget]


class DuplicateIdError(ValueError):
    """Raised when a content-type id is registered twice."""


class UnknownTypeError(KeyError):
    """Raised when a content-type id is not registered."""

    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep it readable.
        return str(self.args[0]) if self.args else ""


class RegistrySealedError(RuntimeError):
    """Raised when registering into a sealed registry."""


@dataclass(frozen=True)
class ContentTypeDescriptor:
    """Immutable description of one content type.

    Parameters
    ----------
    id : str
        Unique, stable key (``"category"``, ``"module"``, ...).
    label : str
        Tab label shown to the operator.
    """

    id: str
    label: str

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Content type id must be a non-empty string, got {self.id!r}")


class ContentTypeRegistry:
    """Ordered, unique mapping of content-type ids to descriptors and renderers."""

    def __init__(self) -> None:
        self._descriptors: dict[str, ContentTypeDescriptor] = {}
        self._renderers: dict[str, Renderer] = {}
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, descriptor: ContentTypeDescriptor, renderer: Renderer) -> None:
        """Associate ``descriptor`` with ``renderer``.

        Raises
        ------
        RegistrySealedError
            If :meth:`seal` was already called.
        DuplicateIdError
            If ``descriptor.id`` is already registered.
        TypeError
            If ``renderer`` is not callable.
        """
        if self._sealed:
            raise RegistrySealedError(
                f"Cannot register content type '{descriptor.id}': registry is sealed"
            )
        if descriptor.id in self._descriptors:
            raise DuplicateIdError(f"Content type '{descriptor.id}' already exists")
        if not callable(renderer):
            raise TypeError(f"Renderer for '{descriptor.id}' must be callable")
        self._descriptors[descriptor.id] = descriptor
        self._renderers[descriptor.id] = renderer
        logger.debug("registered content type %s (%s)", descriptor.id, descriptor.label)

    def seal(self) -> None:
        """End the registration phase. Idempotent."""
        self._sealed = True

    def resolve(self, type_id: str) -> Renderer:
        """Return the renderer for ``type_id`` or raise :class:`UnknownTypeError`."""
        try:
            return self._renderers[type_id]
        except KeyError:
            raise UnknownTypeError(f"Unknown content type: {type_id}") from None

    def descriptor(self, type_id: str) -> ContentTypeDescriptor:
        try:
            return self._descriptors[type_id]
        except KeyError:
            raise UnknownTypeError(f"Unknown content type: {type_id}") from None

    def list_all(self) -> tuple[ContentTypeDescriptor, ...]:
        """Return all descriptors in registration order."""
        return tuple(self._descriptors.values())

    def ids(self) -> tuple[str, ...]:
        return tuple(self._descriptors)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[ContentTypeDescriptor]:
        return iter(self.list_all())


__all__ = [
    "ContentTypeDescriptor",
    "ContentTypeRegistry",
    "DuplicateIdError",
    "RegistrySealedError",
    "Renderer",
    "UnknownTypeError",
]
