from __future__ import annotations

from unittest.mock import patch

import pytest

from content_admin.category_list import CategoryList, CategoryWorkspace
from content_admin.content_backend import BackendError, InMemoryContentBackend
from content_admin.content_events import ContentEventBus


@pytest.fixture
def backend() -> InMemoryContentBackend:
    b = InMemoryContentBackend()
    b.create_category("Data Engineering")
    return b


def test_empty_backend_shows_placeholder() -> None:
    view = CategoryList(InMemoryContentBackend())
    assert "Noch keine Kategorien." in view.rows_box.children[0].value
    assert view.edit_buttons == {}


def test_list_is_cached_until_invalidated(backend) -> None:
    view = CategoryList(backend)
    with patch.object(backend, "list_categories", wraps=backend.list_categories) as spy:
        view.refresh()
        view.refresh()
        spy.assert_not_called()
        view.invalidate()
        spy.assert_called_once()


def test_category_event_invalidates_list(backend) -> None:
    events = ContentEventBus()
    workspace = CategoryWorkspace(backend, events)
    workspace.form.name_field.value = "SQL"
    workspace.form.submit()
    assert [c["name"] for c in workspace.category_list.categories] == ["Data Engineering", "SQL"]
    assert set(workspace.category_list.edit_buttons) == {1, 2}


def test_inline_edit_renames_and_closes(backend) -> None:
    events = ContentEventBus()
    view = CategoryList(backend, events)
    view.edit_buttons[1].click()
    assert view.editing == {"id": 1, "name": "Data Engineering"}
    assert view.edit_area.layout.display == "flex"

    view.edit_form.name_field.value = "Data Science"
    assert view.edit_form.submit() is True
    assert view.editing is None
    assert view.edit_form is None
    assert view.edit_area.layout.display == "none"
    assert view.categories[0]["name"] == "Data Science"


def test_cancel_edit_discards_form(backend) -> None:
    view = CategoryList(backend)
    form = view.start_edit(view.categories[0])
    form.name_field.value = "Changed"
    view.cancel_edit()
    assert view.edit_area.children == ()
    assert backend.list_categories()[0]["name"] == "Data Engineering"


def test_backend_error_is_shown_inline(backend) -> None:
    with patch.object(backend, "list_categories", side_effect=BackendError("offline")):
        view = CategoryList(backend)
    assert "Fehler beim Laden" in view.rows_box.children[0].value
    assert view.edit_buttons == {}


def test_close_unsubscribes_everything(backend) -> None:
    events = ContentEventBus()
    workspace = CategoryWorkspace(backend, events)
    assert len(events) == 1
    workspace.close()
    assert len(events) == 0


def test_replaced_rows_and_edit_form_are_closed(backend) -> None:
    view = CategoryList(backend)
    old_row = view.rows_box.children[0]
    old_button = view.edit_buttons[1].widget
    view.invalidate()
    assert old_row.comm is None
    assert old_button.comm is None

    form = view.start_edit(view.categories[0])
    view.cancel_edit()
    assert form.comm is None
    assert form.save_button.widget.comm is None
