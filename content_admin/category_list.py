"""Existing-category list shown next to the category create form."""

from __future__ import annotations

import html
import logging
from typing import Any, Hashable, List, Optional

import ipywidgets as widgets

from .admin_buttons import SecondaryButton
from .admin_card import close_tree
from .content_backend import BackendError, ContentBackend, Record
from .content_events import ContentEventBus
from .content_forms import CategoryForm

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class CategoryList(widgets.VBox):
    """Cached list of categories with inline rename.

    The fetched list is cached until :meth:`invalidate` runs, which happens
    automatically for every ``category`` event on the bus.
    """

    def __init__(
        self,
        backend: ContentBackend,
        events: Optional[ContentEventBus] = None,
        **kwargs: Any,
    ) -> None:
        self._backend = backend
        self._events = events
        self._cache: Optional[List[Record]] = None
        self._load_error: Optional[str] = None
        self._editing: Optional[Record] = None
        self._hook_id: Optional[Hashable] = None
        self.edit_form: Optional[CategoryForm] = None
        self.edit_buttons: dict[int, SecondaryButton] = {}

        self.header_html = widgets.HTML("<b>Bestehende Kategorien</b>")
        self.rows_box = widgets.VBox(layout=widgets.Layout(width="100%", gap="6px"))
        self.edit_area = widgets.VBox(layout=widgets.Layout(width="100%", display="none"))
        super().__init__(
            [self.header_html, self.rows_box, self.edit_area],
            layout=widgets.Layout(width="100%"),
            **kwargs,
        )
        if events is not None:
            self._hook_id = events.subscribe(lambda _event: self.invalidate(), type_ids=["category"])
        self.refresh()

    @property
    def categories(self) -> List[Record]:
        """Return the cached categories, fetching them on first access."""
        if self._cache is None:
            try:
                self._cache = self._backend.list_categories()
                self._load_error = None
            except BackendError as e:
                logger.warning("Could not load categories: %s", e)
                self._load_error = str(e)
                return []
        return list(self._cache)

    @property
    def editing(self) -> Optional[Record]:
        return self._editing

    def invalidate(self) -> None:
        """Drop the cached list and rebuild the rows."""
        logger.debug("category list invalidated")
        self._cache = None
        self.refresh()

    def refresh(self) -> None:
        for child in self.rows_box.children:
            close_tree(child)
        self.edit_buttons = {}
        categories = self.categories
        if self._load_error is not None:
            self.rows_box.children = (
                widgets.HTML('<span class="ca-error">Fehler beim Laden der Kategorien</span>'),
            )
            return
        if not categories:
            self.rows_box.children = (widgets.HTML("<small>Noch keine Kategorien.</small>"),)
            return
        self.rows_box.children = tuple(self._row(c) for c in categories)

    def start_edit(self, category: Record) -> CategoryForm:
        """Open the inline rename form for ``category``."""
        self.cancel_edit()
        self._editing = dict(category)
        self.edit_form = CategoryForm(
            self._backend,
            self._events,
            mode="edit",
            record_id=int(category["id"]),
            initial={"name": category["name"]},
            on_success=self.cancel_edit,
        )
        cancel = SecondaryButton("Abbrechen", self.cancel_edit, size="sm")
        self.edit_area.children = (
            widgets.HTML("<b>Kategorie bearbeiten</b>"),
            self.edit_form,
            cancel.widget,
        )
        self.edit_area.layout.display = "flex"
        return self.edit_form

    def cancel_edit(self) -> None:
        self._editing = None
        self.edit_form = None
        for child in self.edit_area.children:
            close_tree(child)
        self.edit_area.children = ()
        self.edit_area.layout.display = "none"

    def close(self) -> None:
        if self._events is not None and self._hook_id is not None:
            self._events.unsubscribe(self._hook_id)
            self._hook_id = None
        self.cancel_edit()
        super().close()

    def _row(self, category: Record) -> widgets.HBox:
        edit = SecondaryButton("Bearbeiten", lambda c=category: self.start_edit(c), size="sm")
        self.edit_buttons[int(category["id"])] = edit
        return widgets.HBox(
            [
                widgets.HTML(html.escape(str(category["name"])), layout=widgets.Layout(flex="1 1 auto")),
                edit.widget,
            ],
            layout=widgets.Layout(
                width="100%",
                align_items="center",
                justify_content="space-between",
                padding="4px 12px",
            ),
        )


class CategoryWorkspace(widgets.HBox):
    """Category tab: create form next to the existing-category list."""

    def __init__(
        self,
        backend: ContentBackend,
        events: Optional[ContentEventBus] = None,
        **kwargs: Any,
    ) -> None:
        self.form = CategoryForm(backend, events)
        self.category_list = CategoryList(backend, events)
        self.form.layout.flex = "1 1 320px"
        self.category_list.layout.flex = "1 1 320px"
        super().__init__(
            [self.form, self.category_list],
            layout=widgets.Layout(width="100%", gap="24px", flex_flow="row wrap", align_items="flex-start"),
            **kwargs,
        )

    def close(self) -> None:
        self.form.close()
        self.category_list.close()
        super().close()


__all__ = ["CategoryList", "CategoryWorkspace"]
