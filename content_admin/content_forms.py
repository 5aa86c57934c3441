"""Create/edit forms for the four learning content types.

Each form is an ``ipywidgets.VBox`` that owns its field widgets, validates
them, saves through a :class:`ContentBackend`, and then announces the change
on a :class:`ContentEventBus`. Nothing is reported back to the caller
synchronously except through the optional ``on_success`` callback.

Submission flow
---------------
1. ``values()`` reads the raw field values.
2. ``validate(values)`` returns ``{field: message}``; messages are shown
   under the fields and the submission stops if any exist.
3. ``_save(values)`` calls the backend while the save button is busy.
4. On success the form publishes a ``ContentEvent``, resets itself in create
   mode, and calls ``on_success``. Backend failures are shown in the status
   line and logged.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Literal, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlparse

import ipywidgets as widgets

from .admin_buttons import PrimaryButton, SecondaryButton
from .admin_card import close_tree
from .content_backend import BackendError, ContentBackend, Record, title_from_url
from .content_events import ContentEventBus
from .ContentEvent import ContentEvent

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

FormMode = Literal["create", "edit"]
SuccessCallback = Callable[[], object]
Option = Tuple[str, Any]


# SECTION: Field plumbing [id: FormField]
# =============================================================================


@dataclass
class FormField:
    """One labelled input with an error line underneath."""

    name: str
    input: widgets.ValueWidget
    error_html: widgets.HTML
    container: widgets.VBox

    @property
    def value(self) -> Any:
        return self.input.value

    @value.setter
    def value(self, new: Any) -> None:
        self.input.value = new

    @property
    def error(self) -> str:
        return self.error_html.value

    def set_error(self, message: Optional[str]) -> None:
        self.error_html.value = (
            f'<span class="ca-error">{html.escape(message)}</span>' if message else ""
        )
        self.error_html.layout.display = "block" if message else "none"


def _field(name: str, label: str, input_widget: widgets.ValueWidget) -> FormField:
    error_html = widgets.HTML("", layout=widgets.Layout(display="none", margin="0"))
    container = widgets.VBox(
        [widgets.HTML(f"<b>{html.escape(label)}</b>"), input_widget, error_html],
        layout=widgets.Layout(width="100%", margin="0 0 12px 0"),
    )
    return FormField(name=name, input=input_widget, error_html=error_html, container=container)


def text_field(name: str, label: str, placeholder: str = "", value: str = "") -> FormField:
    return _field(
        name,
        label,
        widgets.Text(value=value, placeholder=placeholder, layout=widgets.Layout(width="100%")),
    )


def textarea_field(name: str, label: str, placeholder: str = "", value: str = "") -> FormField:
    return _field(
        name,
        label,
        widgets.Textarea(
            value=value, placeholder=placeholder, rows=4, layout=widgets.Layout(width="100%")
        ),
    )


def select_field(name: str, label: str, placeholder: str, options: Sequence[Option] = ()) -> FormField:
    """Dropdown whose first option is a ``None``-valued placeholder."""
    return _field(
        name,
        label,
        widgets.Dropdown(
            options=[(placeholder, None), *options],
            value=None,
            layout=widgets.Layout(width="100%"),
        ),
    )


def checkbox_field(name: str, label: str, value: bool = False) -> FormField:
    return _field(name, "", widgets.Checkbox(value=value, description=label, indent=False))


def set_select_options(field: FormField, placeholder: str, options: Sequence[Option]) -> None:
    """Replace dropdown options, keeping the current value when it survives."""
    current = field.value
    field.input.options = [(placeholder, None), *options]
    values = [v for _, v in options]
    field.input.value = current if current in values else None


def is_http_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


# SECTION: ContentForm base [id: ContentForm]
# =============================================================================


class ContentForm(widgets.VBox):
    """Shared submission machinery for content forms.

    Parameters
    ----------
    backend : ContentBackend
        Where records are saved.
    events : ContentEventBus, optional
        Bus receiving a :class:`ContentEvent` after each successful save.
    mode : {"create", "edit"}
        Create a new record or update ``record_id``.
    record_id : int, optional
        Record updated in edit mode.
    initial : mapping, optional
        Initial field values (record-shaped keys).
    on_success : callable, optional
        Zero-argument callback run after a successful save.
    """

    type_id: str = ""
    save_label = "Speichern"

    def __init__(
        self,
        backend: ContentBackend,
        events: Optional[ContentEventBus] = None,
        *,
        mode: FormMode = "create",
        record_id: Optional[int] = None,
        initial: Optional[Mapping[str, Any]] = None,
        on_success: Optional[SuccessCallback] = None,
        **kwargs: Any,
    ) -> None:
        if mode not in ("create", "edit"):
            raise ValueError(f"Unknown form mode {mode!r}; expected 'create' or 'edit'")
        if mode == "edit" and record_id is None:
            raise ValueError(f"{type(self).__name__} in edit mode requires record_id")
        self._backend = backend
        self._events = events
        self._mode: FormMode = mode
        self._record_id = record_id
        self._initial = dict(initial or {})
        self._on_success = on_success
        self._subscriptions: List[Hashable] = []

        self.fields: Dict[str, FormField] = {}
        self.status_html = widgets.HTML("", layout=widgets.Layout(margin="4px 0"))
        self.save_button = PrimaryButton(self.save_label, self.submit)

        self._build_fields()
        self._apply_initial()
        super().__init__(
            children=self._compose_children(),
            layout=widgets.Layout(width="100%", gap="4px"),
            **kwargs,
        )

    # --- Public API -------------------------------------------------------------

    @property
    def mode(self) -> FormMode:
        return self._mode

    @property
    def record_id(self) -> Optional[int]:
        return self._record_id

    @property
    def status(self) -> str:
        return self.status_html.value

    def values(self) -> Dict[str, Any]:
        """Return the raw field values keyed by field name."""
        return {name: f.value for name, f in self.fields.items()}

    def errors(self) -> Dict[str, str]:
        """Return the error messages currently shown, keyed by field name."""
        return {name: f.error for name, f in self.fields.items() if f.error}

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        raise NotImplementedError

    def submit(self) -> bool:
        """Validate, save and announce; return ``True`` on success."""
        values = self.values()
        errors = self.validate(values)
        for name, f in self.fields.items():
            f.set_error(errors.get(name))
        if errors:
            return False

        self.save_button.loading = True
        try:
            record = self._save(values)
        except (BackendError, ValueError) as e:
            logger.warning("%s save failed: %s", type(self).__name__, e)
            self._set_status(f"Fehler: {e}", error=True)
            return False
        finally:
            self.save_button.loading = False

        self._finish(record)
        return True

    def reset(self) -> None:
        """Restore initial values and clear errors."""
        self._apply_initial()
        for f in self.fields.values():
            f.set_error(None)

    def close(self) -> None:
        for hook_id in self._subscriptions:
            if self._events is not None:
                self._events.unsubscribe(hook_id)
        self._subscriptions.clear()
        super().close()

    # --- Hooks for subclasses ---------------------------------------------------

    def _build_fields(self) -> None:
        raise NotImplementedError

    def _initial_values(self) -> Dict[str, Any]:
        """Map ``self._initial`` (record-shaped) to field values."""
        return {}

    def _save(self, values: Mapping[str, Any]) -> Record:
        raise NotImplementedError

    def _compose_children(self) -> list[widgets.Widget]:
        return [
            *(f.container for f in self.fields.values()),
            self.save_button.widget,
            self.status_html,
        ]

    # --- Internals --------------------------------------------------------------

    def _add(self, f: FormField) -> FormField:
        self.fields[f.name] = f
        return f

    def _subscribe(self, callback: Callable[[ContentEvent], object], type_ids: Sequence[str]) -> None:
        if self._events is None:
            return
        self._subscriptions.append(self._events.subscribe(callback, type_ids=type_ids))

    def _apply_initial(self) -> None:
        for name, value in self._initial_values().items():
            if name in self.fields:
                self.fields[name].value = value

    def _set_status(self, message: str, *, error: bool = False) -> None:
        text = html.escape(message)
        self.status_html.value = f'<span class="ca-error">{text}</span>' if error else text

    def _publish(self, kind: str, record: Record) -> None:
        if self._events is None:
            return
        self._events.publish(
            ContentEvent(kind=kind, type_id=self.type_id, record_id=int(record["id"]), record=record)  # type: ignore[arg-type]
        )

    def _finish(self, record: Record) -> None:
        if self._mode == "edit":
            kind = "updated"
            self._set_status("Aktualisiert")
        else:
            kind = "created"
            self.reset()
            self._set_status("Gespeichert")
        logger.info("%s %s#%s", kind, self.type_id, record.get("id"))
        self._publish(kind, record)
        if self._on_success is not None:
            self._on_success()


def _module_options(modules: Sequence[Record], *, grouped: bool = False) -> list[Option]:
    if not grouped:
        return [(str(m["title"]), int(m["id"])) for m in modules]
    public = [m for m in modules if m.get("is_public")]
    private = [m for m in modules if not m.get("is_public")]
    return [
        *((f"Öffentlich · {m['title']}", int(m["id"])) for m in public),
        *((f"Nicht öffentlich · {m['title']}", int(m["id"])) for m in private),
    ]


# SECTION: Forms [id: Forms]
# =============================================================================


class CategoryForm(ContentForm):
    """Create or rename a category."""

    type_id = "category"

    def _build_fields(self) -> None:
        self.name_field = self._add(text_field("name", "Kategorie-Name", placeholder="Data Engineering"))

    def _initial_values(self) -> Dict[str, Any]:
        return {"name": str(self._initial.get("name", ""))}

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if not str(values.get("name") or "").strip():
            errors["name"] = "Name erforderlich"
        return errors

    def _save(self, values: Mapping[str, Any]) -> Record:
        name = str(values["name"]).strip()
        if self._mode == "edit":
            return self._backend.update_category(int(self._record_id), name)  # type: ignore[arg-type]
        return self._backend.create_category(name)


class ModuleForm(ContentForm):
    """Create or edit a module; category options follow category events."""

    type_id = "module"
    _CATEGORY_PLACEHOLDER = "-- Kategorie wählen --"

    def _build_fields(self) -> None:
        self.title_field = self._add(text_field("title", "Titel", placeholder="Python Basics"))
        self.category_field = self._add(select_field("category", "Kategorie", self._CATEGORY_PLACEHOLDER))
        self.is_public_field = self._add(checkbox_field("is_public", "Öffentlich sichtbar"))
        self.refresh_categories()
        self._subscribe(lambda _event: self.refresh_categories(), ["category"])

    def refresh_categories(self) -> None:
        options = [(str(c["name"]), int(c["id"])) for c in self._backend.list_categories()]
        set_select_options(self.category_field, self._CATEGORY_PLACEHOLDER, options)

    def _initial_values(self) -> Dict[str, Any]:
        return {
            "title": str(self._initial.get("title", "")),
            "category": self._initial.get("category_id"),
            "is_public": bool(self._initial.get("is_public", False)),
        }

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if not str(values.get("title") or "").strip():
            errors["title"] = "Titel erforderlich"
        if values.get("category") is None:
            errors["category"] = "Kategorie wählen"
        return errors

    def _save(self, values: Mapping[str, Any]) -> Record:
        payload = {
            "title": str(values["title"]).strip(),
            "category_id": int(values["category"]),
            "is_public": bool(values.get("is_public")),
        }
        logger.debug("ModuleForm payload %s", payload)
        if self._mode == "edit":
            return self._backend.update_module(int(self._record_id), **payload)  # type: ignore[arg-type]
        return self._backend.create_module(**payload)


class VideoForm(ContentForm):
    """Create or edit a learning video.

    Module options list public modules first. Selecting a module shows the
    position the new video will take in that module.
    """

    type_id = "video"
    _MODULE_PLACEHOLDER = "-- Modul wählen --"

    def _build_fields(self) -> None:
        self.module_field = self._add(select_field("module", "Modul-Auswahl", self._MODULE_PLACEHOLDER))
        self.title_field = self._add(text_field("title", "Video-Titel", placeholder="Einführung"))
        self.description_field = self._add(
            textarea_field("description", "Beschreibung", placeholder="Kurze Beschreibung...")
        )
        self.video_url_field = self._add(text_field("video_url", "Video-URL", placeholder="https://..."))
        self.order_html = widgets.HTML("", layout=widgets.Layout(margin="0 0 8px 0"))
        # Module is fixed once a video exists.
        self.module_field.input.disabled = self._mode == "edit"
        self.refresh_modules()
        self.module_field.input.observe(lambda _change: self._sync_order_hint(), names="value")
        self._subscribe(lambda _event: self.refresh_modules(), ["module", "video"])

    def _compose_children(self) -> list[widgets.Widget]:
        children = super()._compose_children()
        children.insert(len(self.fields), self.order_html)
        return children

    def refresh_modules(self) -> None:
        options = _module_options(self._backend.list_modules(), grouped=True)
        set_select_options(self.module_field, self._MODULE_PLACEHOLDER, options)
        self._sync_order_hint()

    def next_order(self) -> Optional[int]:
        """Position a new video would take in the selected module."""
        module_id = self.module_field.value
        if module_id is None:
            return None
        try:
            detail = self._backend.get_module(int(module_id))
        except BackendError as e:
            logger.warning("Could not load module %s: %s", module_id, e)
            return None
        return len(detail.get("videos", ())) + 1

    def _sync_order_hint(self) -> None:
        order = self.next_order() if self._mode == "create" else None
        self.order_html.value = "" if order is None else f"<small>Reihenfolge: {order}</small>"

    def _initial_values(self) -> Dict[str, Any]:
        return {
            "module": self._initial.get("module_id"),
            "title": str(self._initial.get("title", "")),
            "description": str(self._initial.get("description", "") or ""),
            "video_url": str(self._initial.get("video_url", "")),
        }

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if values.get("module") is None and self._mode == "create":
            errors["module"] = "Modul wählen"
        if not str(values.get("title") or "").strip():
            errors["title"] = "Titel erforderlich"
        if not is_http_url(str(values.get("video_url") or "")):
            errors["video_url"] = "Ungültige URL"
        return errors

    def _save(self, values: Mapping[str, Any]) -> Record:
        title = str(values["title"]).strip()
        description = str(values.get("description") or "")
        video_url = str(values["video_url"]).strip()
        if self._mode == "edit":
            return self._backend.update_video(
                int(self._record_id),  # type: ignore[arg-type]
                title=title,
                description=description,
                video_url=video_url,
            )
        return self._backend.create_video(
            int(values["module"]), title, video_url, description=description
        )


class ArticleForm(ContentForm):
    """Queue article documents per module and save them in one go.

    In create mode :meth:`submit` only validates and queues the entry (the
    module stays selected, the URL is cleared); :meth:`save_all` persists the
    queue in order. In edit mode :meth:`submit` updates the article directly.
    """

    type_id = "article"
    _MODULE_PLACEHOLDER = "Modul auswählen"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._pending: List[Dict[str, Any]] = []
        self.pending_box = widgets.VBox(layout=widgets.Layout(width="100%"))
        self.save_all_button = PrimaryButton("", lambda: self.save_all())
        self.clear_button = SecondaryButton("Liste leeren", self.clear_pending, variant="subtle")
        self.pending_area = widgets.VBox(
            [
                self.pending_box,
                widgets.HBox(
                    [self.save_all_button.widget, self.clear_button.widget],
                    layout=widgets.Layout(gap="8px"),
                ),
            ],
            layout=widgets.Layout(display="none", padding="12px", margin="12px 0 0 0"),
        )
        super().__init__(*args, **kwargs)
        if self._mode == "create":
            self.save_button.text = "Artikel hinzufügen"
        else:
            self.save_button.text = "Aktualisieren"
        self._sync_pending()

    def _build_fields(self) -> None:
        self.module_field = self._add(select_field("module", "Modul", self._MODULE_PLACEHOLDER))
        self.cloud_url_field = self._add(
            text_field(
                "cloud_url",
                "Cloud-URL des Word-Dokuments",
                placeholder="https://s3.eu-central-2.wasabisys.com/.../1.1 Installation.docx",
            )
        )
        self.module_field.input.disabled = self._mode == "edit"
        self.refresh_modules()
        self._subscribe(lambda _event: self.refresh_modules(), ["module"])

    def _compose_children(self) -> list[widgets.Widget]:
        return [*super()._compose_children(), self.pending_area]

    @property
    def pending(self) -> Tuple[Dict[str, Any], ...]:
        return tuple(dict(p) for p in self._pending)

    def refresh_modules(self) -> None:
        self._module_titles = {int(m["id"]): str(m["title"]) for m in self._backend.list_modules()}
        options = [(title, module_id) for module_id, title in self._module_titles.items()]
        set_select_options(self.module_field, self._MODULE_PLACEHOLDER, options)

    def submit(self) -> bool:
        if self._mode == "edit":
            return super().submit()
        values = self.values()
        errors = self.validate(values)
        for name, f in self.fields.items():
            f.set_error(errors.get(name))
        if errors:
            return False
        self._pending.append({"module_id": int(values["module"]), "url": str(values["cloud_url"]).strip()})
        self.cloud_url_field.value = ""
        self._sync_pending()
        return True

    def remove_pending(self, index: int) -> None:
        del self._pending[index]
        self._sync_pending()

    def clear_pending(self) -> None:
        self._pending.clear()
        self._sync_pending()

    def save_all(self) -> int:
        """Persist the queued articles in order; return how many were saved.

        Articles saved before a failure are removed from the queue; the failed
        one and everything after it stay queued.
        """
        if not self._pending:
            return 0
        saved = 0
        self.save_all_button.loading = True
        try:
            while self._pending:
                item = self._pending[0]
                try:
                    record = self._backend.create_article(item["module_id"], item["url"])
                except (BackendError, ValueError) as e:
                    logger.warning("ArticleForm save failed: %s", e)
                    self._set_status(f"Fehler: {e}", error=True)
                    break
                self._pending.pop(0)
                saved += 1
                self._publish("created", record)
        finally:
            self.save_all_button.loading = False
            self._sync_pending()

        if saved and not self._pending:
            logger.info("saved %d article(s)", saved)
            self._set_status(f"{saved} Artikel gespeichert")
            if self._on_success is not None:
                self._on_success()
        return saved

    def _sync_pending(self) -> None:
        rows = []
        for index, item in enumerate(self._pending):
            title = self._module_titles.get(item["module_id"], str(item["module_id"]))
            remove = SecondaryButton(
                "", lambda i=index: self.remove_pending(i), icon="times", size="sm", aria_label="Entfernen"
            )
            rows.append(
                widgets.HBox(
                    [
                        widgets.HTML(
                            f"<b>Modul: {html.escape(title)}</b><br><small>{html.escape(item['url'])}</small>",
                            layout=widgets.Layout(flex="1 1 auto"),
                        ),
                        remove.widget,
                    ],
                    layout=widgets.Layout(width="100%", align_items="center"),
                )
            )
        count = len(self._pending)
        for child in self.pending_box.children:
            close_tree(child)
        self.pending_box.children = (
            widgets.HTML(f"<b>Artikel zum Speichern ({count})</b>"),
            *rows,
        )
        self.save_all_button.text = f"Alle {count} Artikel speichern"
        self.pending_area.layout.display = "flex" if count and self._mode == "create" else "none"

    def _initial_values(self) -> Dict[str, Any]:
        return {
            "module": self._initial.get("module_id"),
            "cloud_url": str(self._initial.get("url", "")),
        }

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if values.get("module") is None and self._mode == "create":
            errors["module"] = "Modul wählen"
        if not is_http_url(str(values.get("cloud_url") or "")):
            errors["cloud_url"] = "Ungültige Cloud-URL"
        return errors

    def _save(self, values: Mapping[str, Any]) -> Record:
        url = str(values["cloud_url"]).strip()
        # Article titles are the document name at the end of the URL.
        return self._backend.update_article(
            int(self._record_id), url=url, title=title_from_url(url)  # type: ignore[arg-type]
        )


__all__ = [
    "ArticleForm",
    "CategoryForm",
    "ContentForm",
    "FormField",
    "ModuleForm",
    "VideoForm",
    "is_http_url",
]
