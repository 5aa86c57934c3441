"""Manage surface: browse, edit, delete and reorder existing records.

Purpose
-------
:class:`ManageContentPanel` lists every module as a collapsible
:class:`Card`. Expanding a card loads the module detail (videos and
articles) once and caches it. Every row carries an edit button that opens
the matching form in edit mode inside the panel's edit area, and a delete
button that asks for confirmation first. Videos and articles can be moved
up or down inside their module; the new positions are saved as
``order = index + 1``.

Cache policy
------------
- The module list and the per-module details are cached.
- Any ``module``, ``video``, ``article`` or ``category`` event on the bus
  drops both caches and rebuilds the cards; the set of expanded modules is
  kept, so a save does not collapse what the operator was looking at.
- Deletes and moves publish on the same bus, so the panel refreshes through
  its own subscription. Without a bus it invalidates directly.
- Rebuilt cards and rows are closed, not just detached.
"""

from __future__ import annotations

import html
import logging
from typing import Any, Dict, Hashable, List, Literal, Optional, Set, Tuple

import ipywidgets as widgets

from .admin_buttons import PrimaryButton, SecondaryButton
from .admin_card import Card, close_tree
from .content_backend import BackendError, ContentBackend, Record
from .content_events import ContentEventBus
from .ContentEvent import ContentEvent
from .content_forms import ArticleForm, ContentForm, ModuleForm, VideoForm

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

ModuleFilter = Literal["all", "public", "private"]

FILTERS: Tuple[Tuple[str, str], ...] = (
    ("all", "Alle"),
    ("public", "Öffentlich"),
    ("private", "Nicht öffentlich"),
)
EMPTY_MESSAGE = "Keine Module gefunden."
ERROR_MESSAGE = "Fehler beim Laden"

_EDIT_FORMS = {"module": ModuleForm, "video": VideoForm, "article": ArticleForm}
_DELETE_NOUNS = {"module": "das Modul", "video": "das Video", "article": "den Artikel"}
_DETAIL_KEYS = {"video": "videos", "article": "articles"}


class ManageContentPanel(widgets.VBox):
    """Filterable module browser with inline editing."""

    def __init__(
        self,
        backend: ContentBackend,
        events: Optional[ContentEventBus] = None,
        **kwargs: Any,
    ) -> None:
        self._backend = backend
        self._events = events
        self._filter: ModuleFilter = "all"
        self._modules: Optional[List[Record]] = None
        self._details: Dict[int, Record] = {}
        self._expanded: Set[int] = set()
        self._load_error: Optional[str] = None
        self._hook_id: Optional[Hashable] = None
        self._pending_delete: Optional[Tuple[str, Record]] = None

        self.cards: Dict[int, Card] = {}
        self.edit_buttons: Dict[Tuple[str, int], SecondaryButton] = {}
        self.delete_buttons: Dict[Tuple[str, int], SecondaryButton] = {}
        # Keyed (type_id, record_id, "up" | "down").
        self.move_buttons: Dict[Tuple[str, int, str], SecondaryButton] = {}
        self.editor: Optional[ContentForm] = None
        self.confirm_button: Optional[PrimaryButton] = None
        self.filter_buttons: Dict[str, PrimaryButton] = {
            key: PrimaryButton(label, lambda k=key: self.set_filter(k), size="sm", variant="outline")
            for key, label in FILTERS
        }
        self.filter_bar = widgets.HBox(
            [b.widget for b in self.filter_buttons.values()],
            layout=widgets.Layout(gap="12px", margin="0 0 12px 0"),
        )
        self.status_html = widgets.HTML("", layout=widgets.Layout(margin="0 0 8px 0"))
        self.confirm_area = widgets.VBox(
            layout=widgets.Layout(width="100%", display="none", margin="0 0 12px 0")
        )
        self.modules_box = widgets.VBox(layout=widgets.Layout(width="100%", gap="12px"))
        self.edit_area = widgets.VBox(layout=widgets.Layout(width="100%", display="none"))
        super().__init__(
            [self.filter_bar, self.status_html, self.confirm_area, self.modules_box, self.edit_area],
            layout=widgets.Layout(width="100%"),
            **kwargs,
        )
        if events is not None:
            self._hook_id = events.subscribe(
                lambda _event: self.invalidate(),
                type_ids=["category", "module", "video", "article"],
            )
        self.refresh()

    # --- Public API -------------------------------------------------------------

    @property
    def filter(self) -> ModuleFilter:
        return self._filter

    @property
    def modules(self) -> List[Record]:
        """Return the cached module list, fetching it on first access."""
        if self._modules is None:
            try:
                self._modules = self._backend.list_modules()
                self._load_error = None
            except BackendError as e:
                logger.warning("Could not load modules: %s", e)
                self._load_error = str(e)
                return []
        return list(self._modules)

    def visible_modules(self) -> List[Record]:
        if self._filter == "public":
            return [m for m in self.modules if m.get("is_public")]
        if self._filter == "private":
            return [m for m in self.modules if not m.get("is_public")]
        return self.modules

    def set_filter(self, value: str) -> None:
        if value not in dict(FILTERS):
            raise ValueError(f"Unknown module filter {value!r}; expected one of all, public, private")
        self._filter = value  # type: ignore[assignment]
        self.refresh()

    def module_detail(self, module_id: int) -> Optional[Record]:
        """Return the cached detail for ``module_id``, loading it if needed."""
        if module_id not in self._details:
            try:
                self._details[module_id] = self._backend.get_module(module_id)
            except BackendError as e:
                logger.warning("Could not load module %s: %s", module_id, e)
                return None
        return self._details[module_id]

    def invalidate(self) -> None:
        """Drop cached modules and details and rebuild the cards."""
        logger.debug("manage panel invalidated")
        self._modules = None
        self._details.clear()
        self.refresh()

    def refresh(self) -> None:
        for key, button in self.filter_buttons.items():
            button.set_variant("solid" if key == self._filter else "outline")

        for child in self.modules_box.children:
            close_tree(child)
        self.cards = {}
        self.edit_buttons = {}
        self.delete_buttons = {}
        self.move_buttons = {}
        modules = self.visible_modules()
        if self._load_error is not None:
            self.modules_box.children = (
                widgets.HTML(f'<span class="ca-error">{ERROR_MESSAGE}</span>'),
            )
            return
        if not modules:
            self.modules_box.children = (widgets.HTML(EMPTY_MESSAGE),)
            return
        self.modules_box.children = tuple(self._module_card(m) for m in modules)

    def open_editor(self, type_id: str, record: Record) -> ContentForm:
        """Show the edit form for ``record`` of content type ``type_id``."""
        try:
            form_cls = _EDIT_FORMS[type_id]
        except KeyError:
            raise ValueError(f"No edit form for content type {type_id!r}") from None
        self.close_editor(invalidate=False)
        self.editor = form_cls(
            self._backend,
            self._events,
            mode="edit",
            record_id=int(record["id"]),
            initial=record,
            on_success=self.close_editor,
        )
        cancel = SecondaryButton("Schließen", self.close_editor, size="sm")
        self.edit_area.children = (
            widgets.HTML(f"<b>{html.escape(str(record.get('title', '')))} bearbeiten</b>"),
            self.editor,
            cancel.widget,
        )
        self.edit_area.layout.display = "flex"
        return self.editor

    def close_editor(self, invalidate: bool = True) -> None:
        """Hide the edit area; by default also refetch cached records."""
        self.editor = None
        for child in self.edit_area.children:
            close_tree(child)
        self.edit_area.children = ()
        self.edit_area.layout.display = "none"
        if invalidate:
            self.invalidate()

    @property
    def pending_delete(self) -> Optional[Tuple[str, Record]]:
        """``(type_id, record)`` awaiting confirmation, if any."""
        return self._pending_delete

    def request_delete(self, type_id: str, record: Record) -> None:
        """Ask the operator to confirm deleting ``record``."""
        if type_id not in _DELETE_NOUNS:
            raise ValueError(f"Cannot delete content type {type_id!r}")
        self.cancel_delete()
        self._pending_delete = (type_id, record)
        title = html.escape(str(record.get("title", "")))
        self.confirm_button = PrimaryButton("Löschen", self.confirm_delete, size="sm")
        cancel = SecondaryButton("Abbrechen", self.cancel_delete, size="sm", variant="outline")
        self.confirm_area.children = (
            widgets.HTML(f"Möchtest du {_DELETE_NOUNS[type_id]} &quot;{title}&quot; wirklich löschen?"),
            widgets.HBox([self.confirm_button.widget, cancel.widget], layout=widgets.Layout(gap="8px")),
        )
        self.confirm_area.layout.display = "flex"

    def cancel_delete(self) -> None:
        self._pending_delete = None
        self.confirm_button = None
        for child in self.confirm_area.children:
            close_tree(child)
        self.confirm_area.children = ()
        self.confirm_area.layout.display = "none"

    def confirm_delete(self) -> bool:
        """Delete the pending record.

        Returns
        -------
        bool
            ``True`` when the backend deleted the record. A backend failure
            is shown in the status line and logged.
        """
        if self._pending_delete is None:
            return False
        type_id, record = self._pending_delete
        self.cancel_delete()
        delete = {
            "module": self._backend.delete_module,
            "video": self._backend.delete_video,
            "article": self._backend.delete_article,
        }[type_id]
        try:
            deleted = delete(int(record["id"]))
        except BackendError as e:
            logger.warning("Could not delete %s#%s: %s", type_id, record.get("id"), e)
            self._set_status(f"Löschen fehlgeschlagen: {e}", error=True)
            return False
        logger.info("deleted %s#%s", type_id, deleted["id"])
        self._set_status("")
        if type_id == "module":
            self._expanded.discard(int(deleted["id"]))
        if self.editor is not None and (
            type_id == "module" or (self.editor.type_id, self.editor.record_id) == (type_id, int(deleted["id"]))
        ):
            # A module delete may have taken the edited record with it.
            self.close_editor(invalidate=False)
        self._notify("deleted", type_id, deleted)
        return True

    def move(self, type_id: str, record: Record, delta: int) -> bool:
        """Move a video or article ``delta`` places inside its module.

        Every record whose position changed is saved with
        ``order = index + 1``. Returns ``False`` when the move would leave
        the list or the backend refuses it.
        """
        if type_id not in _DETAIL_KEYS:
            raise ValueError(f"Cannot reorder content type {type_id!r}")
        detail = self.module_detail(int(record["module_id"]))
        if detail is None:
            return False
        items = list(detail.get(_DETAIL_KEYS[type_id], []))
        index = [int(r["id"]) for r in items].index(int(record["id"]))
        target = index + delta
        if not 0 <= target < len(items):
            return False
        items.insert(target, items.pop(index))
        update = self._backend.update_video if type_id == "video" else self._backend.update_article
        moved: Optional[Record] = None
        try:
            for position, item in enumerate(items, start=1):
                if item["order"] == position:
                    continue
                saved = update(int(item["id"]), order=position)
                if int(saved["id"]) == int(record["id"]):
                    moved = saved
        except BackendError as e:
            logger.warning("Could not reorder %s in module %s: %s", type_id, record["module_id"], e)
            self._set_status(f"Reihenfolge konnte nicht gespeichert werden: {e}", error=True)
            self.invalidate()
            return False
        self._set_status("")
        # One event per move; subscribers refetch the whole module.
        self._notify("updated", type_id, moved if moved is not None else record)
        return True

    def close(self) -> None:
        if self._events is not None and self._hook_id is not None:
            self._events.unsubscribe(self._hook_id)
            self._hook_id = None
        self.close_editor(invalidate=False)
        self.cancel_delete()
        super().close()

    # --- Internals --------------------------------------------------------------

    def _set_status(self, message: str, *, error: bool = False) -> None:
        text = html.escape(message)
        self.status_html.value = f'<span class="ca-error">{text}</span>' if error else text

    def _notify(self, kind: str, type_id: str, record: Record) -> None:
        if self._events is None:
            self.invalidate()
            return
        self._events.publish(
            ContentEvent(kind=kind, type_id=type_id, record_id=int(record["id"]), record=record)  # type: ignore[arg-type]
        )

    def _edit_button(self, type_id: str, record: Record) -> SecondaryButton:
        button = SecondaryButton(
            "",
            lambda: self.open_editor(type_id, record),
            icon="pencil",
            size="sm",
            aria_label="Bearbeiten",
        )
        self.edit_buttons[(type_id, int(record["id"]))] = button
        return button

    def _delete_button(self, type_id: str, record: Record) -> SecondaryButton:
        button = SecondaryButton(
            "",
            lambda: self.request_delete(type_id, record),
            icon="trash",
            size="sm",
            aria_label="Löschen",
        )
        self.delete_buttons[(type_id, int(record["id"]))] = button
        return button

    def _move_button(self, type_id: str, record: Record, direction: str, *, disabled: bool) -> SecondaryButton:
        delta = -1 if direction == "up" else 1
        button = SecondaryButton(
            "",
            lambda: self.move(type_id, record, delta),
            icon=f"arrow-{direction}",
            size="sm",
            aria_label="Nach oben" if direction == "up" else "Nach unten",
            disabled=disabled,
        )
        self.move_buttons[(type_id, int(record["id"]), direction)] = button
        return button

    def _module_card(self, module: Record) -> Card:
        module_id = int(module["id"])
        card = Card(
            str(module["title"]),
            subtitle=self._module_subtitle(module),
            actions=[self._edit_button("module", module), self._delete_button("module", module)],
            collapsible=True,
            default_collapsed=module_id not in self._expanded,
            variant="outlined",
        )
        card.observe_toggle(lambda collapsed, mid=module_id, c=card: self._on_card_toggle(mid, c, collapsed))
        if card.content_visible:
            card.set_content(self._detail_rows(module_id))
        self.cards[module_id] = card
        return card

    def _module_subtitle(self, module: Record) -> str:
        category = next(
            (c for c in self._categories() if int(c["id"]) == int(module.get("category_id", -1))),
            None,
        )
        visibility = "Öffentlich" if module.get("is_public") else "Nicht öffentlich"
        if category is None:
            return visibility
        return f"{category['name']} · {visibility}"

    def _categories(self) -> List[Record]:
        try:
            return self._backend.list_categories()
        except BackendError as e:
            logger.warning("Could not load categories: %s", e)
            return []

    def _on_card_toggle(self, module_id: int, card: Card, collapsed: bool) -> None:
        if collapsed:
            self._expanded.discard(module_id)
            return
        self._expanded.add(module_id)
        for child in card.content_box.children:
            close_tree(child)
        card.set_content(self._detail_rows(module_id))

    def _detail_rows(self, module_id: int) -> List[widgets.Widget]:
        detail = self.module_detail(module_id)
        if detail is None:
            return [widgets.HTML(f'<span class="ca-error">{ERROR_MESSAGE}</span>')]
        rows: List[widgets.Widget] = [widgets.HTML("<b>Videos</b>")]
        videos = detail.get("videos", [])
        if not videos:
            rows.append(widgets.HTML("<small>Keine Videos.</small>"))
        for index, video in enumerate(videos):
            label = f"{video['order']}. {video['title']}"
            rows.append(self._record_row("video", video, label, index, len(videos)))
        rows.append(widgets.HTML("<b>Artikel</b>"))
        articles = detail.get("articles", [])
        if not articles:
            rows.append(widgets.HTML("<small>Keine Artikel.</small>"))
        for index, article in enumerate(articles):
            rows.append(self._record_row("article", article, str(article["title"]), index, len(articles)))
        return rows

    def _record_row(self, type_id: str, record: Record, label: str, index: int, count: int) -> widgets.HBox:
        return widgets.HBox(
            [
                widgets.HTML(html.escape(label), layout=widgets.Layout(flex="1 1 auto")),
                self._move_button(type_id, record, "up", disabled=index == 0).widget,
                self._move_button(type_id, record, "down", disabled=index == count - 1).widget,
                self._edit_button(type_id, record).widget,
                self._delete_button(type_id, record).widget,
            ],
            layout=widgets.Layout(width="100%", align_items="center", gap="4px"),
        )


__all__ = ["EMPTY_MESSAGE", "FILTERS", "ManageContentPanel"]
