"""Top-level public API for the ``content_admin`` package.

This module re-exports the notebook-facing admin surface so users can import
from a single namespace, for example:

>>> from content_admin import AdminPanel  # doctest: +SKIP

It exposes the panel itself plus the building blocks it is composed of
(registry, view controller, event bus, backend protocol, forms and the
presentational buttons/cards) for callers that assemble their own surfaces.
"""

from .admin_buttons import ButtonRenderState, PrimaryButton, SecondaryButton
from .admin_card import Card
from .admin_config import AdminConfig
from .admin_layout import AdminLayout, OneShotOutput
from .admin_styles import (
    ButtonSize,
    CardPadding,
    CardVariant,
    IconPosition,
    PrimaryVariant,
    SecondaryVariant,
)
from .AdminPanel import AdminPanel, build_learning_registry
from .category_list import CategoryList, CategoryWorkspace
from .collapsible import CollapsibleState
from .content_backend import (
    BackendError,
    ContentBackend,
    InMemoryContentBackend,
    RecordNotFoundError,
    title_from_url,
)
from .content_events import ContentEventBus
from .content_forms import ArticleForm, CategoryForm, ContentForm, ModuleForm, VideoForm
from .content_registry import (
    ContentTypeDescriptor,
    ContentTypeRegistry,
    DuplicateIdError,
    RegistrySealedError,
    UnknownTypeError,
)
from .ContentEvent import ContentEvent
from .manage_panel import ManageContentPanel
from .view_controller import ViewController, ViewMode, ViewSelection
