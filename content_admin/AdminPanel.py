"""Admin panel orchestration for the learning-platform content surface.

Purpose
-------
This module provides :class:`AdminPanel`, the notebook object an operator
displays to create and manage learning content, and
:func:`build_learning_registry`, which registers the four default content
types (category, module, video, article).

Concepts and structure
----------------------
The implementation is composition-based:

- ``ContentTypeRegistry`` owns which create tabs exist and their renderers.
- ``ViewController`` owns the mode/tab selection.
- ``AdminLayout`` owns widget/layout construction.
- ``ContentEventBus`` carries record changes from forms to cached views.
- ``AdminPanel`` wires buttons to the controller and remounts the active
  view whenever the selection changes.

Important gotchas
-----------------
- Every selection change mounts a *fresh* widget from the renderer and
  closes the previous one, so forms never carry half-typed input across
  tabs and closed views drop their event subscriptions.
- A failed selection (unknown type id, unknown mode) raises before the
  controller changes state; the mounted view stays as it was. A renderer
  that raises is reported as a hook warning and the controller is restored
  to the selection that is still mounted.

Examples
--------
>>> from content_admin import AdminPanel
>>> panel = AdminPanel()  # doctest: +SKIP
>>> panel.select_type("video")  # doctest: +SKIP
>>> panel  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Union

import ipywidgets as widgets
from IPython.display import display

from .admin_buttons import PrimaryButton
from .admin_card import close_tree
from .admin_config import AdminConfig
from .admin_layout import AdminLayout
from .category_list import CategoryWorkspace
from .content_backend import ContentBackend, InMemoryContentBackend
from .content_events import ContentEventBus
from .content_forms import ArticleForm, ModuleForm, VideoForm
from .content_registry import ContentTypeDescriptor, ContentTypeRegistry, Renderer
from .manage_panel import ManageContentPanel
from .view_controller import ViewController, ViewMode, ViewSelection

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

LEARNING_TYPES = (
    ("category", "Kategorie anlegen"),
    ("module", "Modul anlegen"),
    ("video", "Lernvideo anlegen"),
    ("article", "Lernbeitrag anlegen"),
)


def build_learning_registry(
    backend: ContentBackend,
    events: Optional[ContentEventBus] = None,
    registry: Optional[ContentTypeRegistry] = None,
) -> ContentTypeRegistry:
    """Register the default learning content types.

    Parameters
    ----------
    backend : ContentBackend
        Backend every form saves through.
    events : ContentEventBus, optional
        Bus the forms publish to and the lists subscribe to.
    registry : ContentTypeRegistry, optional
        Registry to extend; a new one is created when omitted. It is
        returned unsealed so callers can add more types.

    Returns
    -------
    ContentTypeRegistry
    """
    registry = ContentTypeRegistry() if registry is None else registry
    renderers: Dict[str, Renderer] = {
        "category": lambda: CategoryWorkspace(backend, events),
        "module": lambda: ModuleForm(backend, events),
        "video": lambda: VideoForm(backend, events),
        "article": lambda: ArticleForm(backend, events),
    }
    for type_id, label in LEARNING_TYPES:
        registry.register(ContentTypeDescriptor(type_id, label), renderers[type_id])
    return registry


class AdminPanel:
    """
    Notebook admin surface with a create mode (one tab per content type)
    and a manage mode.

    Parameters
    ----------
    registry : ContentTypeRegistry, optional
        Content types offered on the create surface. Defaults to
        :func:`build_learning_registry`. The registry is sealed here.
    backend : ContentBackend, optional
        Defaults to a fresh :class:`InMemoryContentBackend`.
    events : ContentEventBus, optional
        Defaults to a fresh bus shared by every mounted view.
    config : AdminConfig, optional
        Title, intro, mode labels and initial selection.
    manage_renderer : callable, optional
        Zero-argument factory for the manage surface. Defaults to a
        :class:`ManageContentPanel` over ``backend``.
    display : bool
        Display the panel immediately.
    """

    __slots__ = [
        "_config", "_backend", "_events", "_registry", "_controller",
        "_manage_renderer", "_layout", "_mode_buttons", "_tab_buttons",
        "_mounted", "_has_been_displayed", "_hook_id",
    ]

    def __init__(
        self,
        *,
        registry: Optional[ContentTypeRegistry] = None,
        backend: Optional[ContentBackend] = None,
        events: Optional[ContentEventBus] = None,
        config: Optional[AdminConfig] = None,
        manage_renderer: Optional[Callable[[], widgets.Widget]] = None,
        display: bool = False,
    ) -> None:
        self._config = config if config is not None else AdminConfig()
        self._backend = backend if backend is not None else InMemoryContentBackend()
        self._events = events if events is not None else ContentEventBus()
        if registry is None:
            registry = build_learning_registry(self._backend, self._events)
        registry.seal()
        self._registry = registry
        self._controller = ViewController(
            registry,
            default_type_id=self._config.default_type_id,
            default_mode=self._config.default_mode,
        )
        self._manage_renderer = manage_renderer or self._default_manage_renderer
        self._has_been_displayed = False
        self._mounted: Optional[widgets.Widget] = None

        # 1. Layout (View)
        self._layout = AdminLayout(title=self._config.title, intro=self._config.intro)

        # 2. Navigation buttons
        self._mode_buttons: Dict[ViewMode, PrimaryButton] = {
            mode: PrimaryButton(self._config.mode_label(mode), lambda m=mode: self.select_mode(m))
            for mode in ViewMode
        }
        self._tab_buttons: Dict[str, PrimaryButton] = {
            d.id: PrimaryButton(d.label, lambda t=d.id: self.select_type(t), size="sm")
            for d in registry.list_all()
        }
        self._layout.set_mode_buttons(list(self._mode_buttons.values()))
        self._layout.set_tab_buttons(list(self._tab_buttons.values()))

        # 3. Initial view
        self._hook_id = self._controller.add_selection_hook(self._on_selection_change)
        self._mount()

        if display:
            self._ipython_display_()

    # --- Properties -------------------------------------------------------------

    @property
    def config(self) -> AdminConfig:
        return self._config

    @property
    def backend(self) -> ContentBackend:
        return self._backend

    @property
    def events(self) -> ContentEventBus:
        return self._events

    @property
    def registry(self) -> ContentTypeRegistry:
        return self._registry

    @property
    def controller(self) -> ViewController:
        return self._controller

    @property
    def layout(self) -> AdminLayout:
        return self._layout

    @property
    def selection(self) -> ViewSelection:
        return self._controller.selection

    @property
    def mode(self) -> ViewMode:
        return self._controller.mode

    @property
    def active_type_id(self) -> Optional[str]:
        return self._controller.active_type_id

    @property
    def mounted(self) -> Optional[widgets.Widget]:
        """Widget currently mounted for the active selection."""
        return self._mounted

    @property
    def mode_buttons(self) -> Dict[ViewMode, PrimaryButton]:
        return dict(self._mode_buttons)

    @property
    def tab_buttons(self) -> Dict[str, PrimaryButton]:
        return dict(self._tab_buttons)

    @property
    def widget(self) -> widgets.Widget:
        """Root widget of the panel (for embedding in other layouts)."""
        return self._layout.root_widget

    # --- Navigation -------------------------------------------------------------

    def select_mode(self, mode: Union[ViewMode, str]) -> bool:
        """Switch between the create and manage surfaces."""
        return self._controller.select_mode(mode)

    def select_type(self, type_id: str) -> bool:
        """Switch the active create tab.

        Raises
        ------
        UnknownTypeError
            If ``type_id`` is not registered; the current view stays mounted.
        """
        return self._controller.select_type(type_id)

    def reset(self) -> bool:
        return self._controller.reset()

    def refresh(self) -> None:
        """Remount the active view with a fresh widget."""
        self._mount()

    def close(self) -> None:
        self._controller.remove_selection_hook(self._hook_id)
        self._unmount()
        self._layout.root_widget.close()

    # --- Display ----------------------------------------------------------------

    def _ipython_display_(self, **kwargs: Any) -> None:
        """
        Special method called by IPython to display the object.
        Uses IPython.display.display() to render the underlying widget.
        """
        self._has_been_displayed = True
        display(self._layout.output_widget)

    # --- Internals --------------------------------------------------------------

    def _default_manage_renderer(self) -> widgets.Widget:
        return ManageContentPanel(self._backend, self._events)

    def _on_selection_change(self, old: ViewSelection, new: ViewSelection) -> None:
        try:
            self._mount()
        except Exception:
            # Keep the controller in step with the widget that is still mounted.
            self._controller.restore(old)
            self._sync_buttons()
            raise

    def _sync_buttons(self) -> None:
        sel = self._controller.selection
        for mode, button in self._mode_buttons.items():
            button.set_variant("solid" if mode is sel.mode else "outline")
        for type_id, button in self._tab_buttons.items():
            button.set_variant("solid" if type_id == sel.active_type_id else "outline")

    def _unmount(self) -> None:
        if self._mounted is not None:
            close_tree(self._mounted)
            self._mounted = None
        self._layout.set_content(None)
        self._layout.set_manage_content(None)

    def _mount(self) -> None:
        sel = self._controller.selection
        if sel.mode is ViewMode.CREATE and sel.active_type_id is None:
            self._sync_buttons()
            self._unmount()
            self._layout.show_create()
            return

        renderer = self._controller.active_renderer(self._manage_renderer)
        widget = renderer()
        self._sync_buttons()
        self._unmount()
        self._mounted = widget
        if sel.mode is ViewMode.MANAGE:
            self._layout.set_manage_content(widget)
            self._layout.show_manage()
        else:
            self._layout.set_content(widget)
            self._layout.show_create()
        logger.debug("mounted %s for mode=%s type=%s", type(widget).__name__, sel.mode.value, sel.active_type_id)


__all__ = ["AdminPanel", "LEARNING_TYPES", "build_learning_registry"]
