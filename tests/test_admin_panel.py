from __future__ import annotations

import sys
from unittest.mock import patch

import ipywidgets as widgets
import pytest

from content_admin import AdminConfig, AdminPanel, build_learning_registry
from content_admin.admin_layout import AdminLayout, OneShotOutput
from content_admin.category_list import CategoryWorkspace
from content_admin.content_backend import InMemoryContentBackend
from content_admin.content_events import ContentEventBus
from content_admin.content_forms import ArticleForm, ModuleForm, VideoForm
from content_admin.content_registry import (
    ContentTypeDescriptor,
    ContentTypeRegistry,
    RegistrySealedError,
    UnknownTypeError,
)
from content_admin.manage_panel import ManageContentPanel
from content_admin.view_controller import ViewMode, ViewSelection


def test_panel_constructor_is_display_side_effect_free() -> None:
    module = sys.modules[AdminPanel.__module__]
    with patch.object(module, "display") as mocked_display:
        panel = AdminPanel()

    assert panel._has_been_displayed is False
    mocked_display.assert_not_called()


def test_ipython_display_shows_one_shot_output() -> None:
    panel = AdminPanel()
    module = sys.modules[AdminPanel.__module__]
    with patch.object(module, "display") as mocked_display:
        panel._ipython_display_()

    assert panel._has_been_displayed is True
    mocked_display.assert_called_once()
    assert isinstance(mocked_display.call_args.args[0], OneShotOutput)


def test_display_true_displays_immediately() -> None:
    module = sys.modules[AdminPanel.__module__]
    with patch.object(module, "display") as mocked_display:
        panel = AdminPanel(display=True)

    assert panel._has_been_displayed is True
    mocked_display.assert_called_once()


def test_default_registry_has_learning_types_and_is_sealed() -> None:
    panel = AdminPanel()
    assert panel.registry.ids() == ("category", "module", "video", "article")
    assert [d.label for d in panel.registry.list_all()] == [
        "Kategorie anlegen",
        "Modul anlegen",
        "Lernvideo anlegen",
        "Lernbeitrag anlegen",
    ]
    assert panel.registry.sealed is True
    with pytest.raises(RegistrySealedError):
        panel.registry.register(ContentTypeDescriptor("quiz", "Quiz"), lambda: widgets.HTML(""))


def test_initial_view_is_category_workspace() -> None:
    panel = AdminPanel()
    assert panel.selection == ViewSelection(ViewMode.CREATE, "category")
    assert isinstance(panel.mounted, CategoryWorkspace)
    assert panel.layout.content is panel.mounted
    assert panel.layout.create_visible is True
    assert panel.layout.manage_visible is False


def test_tab_buttons_switch_views_and_highlight_selection() -> None:
    panel = AdminPanel()
    panel.tab_buttons["video"].click()
    assert panel.active_type_id == "video"
    assert isinstance(panel.mounted, VideoForm)
    assert panel.tab_buttons["video"].variant.value == "solid"
    assert panel.tab_buttons["category"].variant.value == "outline"

    with pytest.raises(UnknownTypeError):
        panel.select_type("unknown")
    assert panel.active_type_id == "video"
    assert isinstance(panel.mounted, VideoForm)


def test_every_selection_mounts_a_fresh_widget() -> None:
    panel = AdminPanel()
    panel.select_type("module")
    first = panel.mounted
    panel.select_type("article")
    assert isinstance(panel.mounted, ArticleForm)
    panel.select_type("module")
    assert isinstance(panel.mounted, ModuleForm)
    assert panel.mounted is not first
    assert len(panel.events) == 1  # only the mounted module form listens


def test_mode_buttons_switch_surfaces_and_keep_tab() -> None:
    panel = AdminPanel()
    panel.select_type("article")
    panel.mode_buttons[ViewMode.MANAGE].click()

    assert panel.mode is ViewMode.MANAGE
    assert isinstance(panel.mounted, ManageContentPanel)
    assert panel.layout.manage_content is panel.mounted
    assert panel.layout.content is None
    assert panel.layout.manage_visible is True
    assert panel.layout.create_visible is False
    assert panel.mode_buttons[ViewMode.MANAGE].variant.value == "solid"
    assert panel.mode_buttons[ViewMode.CREATE].variant.value == "outline"

    panel.mode_buttons[ViewMode.CREATE].click()
    assert panel.selection == ViewSelection(ViewMode.CREATE, "article")
    assert isinstance(panel.mounted, ArticleForm)


def test_records_created_on_create_surface_show_up_in_manage() -> None:
    backend = InMemoryContentBackend()
    panel = AdminPanel(backend=backend)
    workspace = panel.mounted
    workspace.form.name_field.value = "Data Engineering"
    workspace.form.submit()

    panel.select_type("module")
    panel.mounted.title_field.value = "Python Basics"
    panel.mounted.category_field.value = 1
    panel.mounted.submit()

    panel.select_mode("manage")
    assert set(panel.mounted.cards) == {1}


def test_custom_registry_and_manage_renderer() -> None:
    registry = ContentTypeRegistry()
    registry.register(ContentTypeDescriptor("note", "Notiz"), lambda: widgets.HTML("note"))
    manage = widgets.HTML("manage")
    panel = AdminPanel(
        registry=registry,
        manage_renderer=lambda: manage,
        config=AdminConfig(default_mode="manage"),
    )
    assert registry.sealed is True
    assert panel.mounted is manage
    panel.select_mode("create")
    assert panel.mounted.value == "note"


def test_empty_registry_mounts_nothing() -> None:
    panel = AdminPanel(registry=ContentTypeRegistry())
    assert panel.active_type_id is None
    assert panel.mounted is None
    assert panel.layout.content is None
    assert panel.tab_buttons == {}


def test_build_learning_registry_can_be_extended() -> None:
    backend = InMemoryContentBackend()
    registry = build_learning_registry(backend, ContentEventBus())
    registry.register(ContentTypeDescriptor("quiz", "Quiz anlegen"), lambda: widgets.HTML("quiz"))
    panel = AdminPanel(registry=registry, backend=backend)
    panel.select_type("quiz")
    assert panel.mounted.value == "quiz"


def test_config_labels_and_defaults() -> None:
    config = AdminConfig().with_overrides(
        title="Admin",
        mode_labels={"create": "Neu", "manage": "Verwalten"},
        default_type_id="video",
    )
    panel = AdminPanel(config=config)
    assert panel.mode_buttons[ViewMode.CREATE].text == "Neu"
    assert "Admin" in panel.layout.title_html.value
    assert panel.active_type_id == "video"

    with pytest.raises(TypeError, match="Unknown AdminConfig option"):
        config.with_overrides(colour="red")
    with pytest.raises(ValueError, match="missing labels"):
        AdminConfig(mode_labels={"create": "Neu"})
    with pytest.raises(ValueError, match="Unknown view mode"):
        AdminConfig(default_mode="edit")


def test_failing_renderer_keeps_current_view() -> None:
    registry = ContentTypeRegistry()
    registry.register(ContentTypeDescriptor("ok", "OK"), lambda: widgets.HTML("ok"))

    def broken() -> widgets.Widget:
        raise RuntimeError("renderer exploded")

    registry.register(ContentTypeDescriptor("broken", "Broken"), broken)
    panel = AdminPanel(registry=registry)
    before = panel.mounted
    with pytest.warns(UserWarning, match="renderer exploded"):
        changed = panel.select_type("broken")
    assert changed is False
    assert panel.mounted is before
    assert panel.layout.content is before
    assert panel.active_type_id == "ok"
    assert panel.tab_buttons["ok"].variant.value == "solid"
    assert panel.tab_buttons["broken"].variant.value == "outline"


def test_selection_retry_after_transient_renderer_failure() -> None:
    calls = []

    def flaky() -> widgets.Widget:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("backend not ready")
        return widgets.HTML("flaky")

    registry = ContentTypeRegistry()
    registry.register(ContentTypeDescriptor("ok", "OK"), lambda: widgets.HTML("ok"))
    registry.register(ContentTypeDescriptor("flaky", "Flaky"), flaky)
    panel = AdminPanel(registry=registry)

    with pytest.warns(UserWarning, match="backend not ready"):
        panel.select_type("flaky")
    assert panel.active_type_id == "ok"

    assert panel.select_type("flaky") is True
    assert panel.active_type_id == "flaky"
    assert panel.mounted.value == "flaky"
    assert panel.tab_buttons["flaky"].variant.value == "solid"


def test_switching_views_closes_the_old_widget_tree() -> None:
    panel = AdminPanel()
    panel.select_type("video")
    form = panel.mounted
    save = form.save_button.widget

    panel.select_type("article")
    assert form.comm is None
    assert save.comm is None


def test_layout_one_shot_output_refuses_second_display() -> None:
    out = OneShotOutput()
    out._repr_mimebundle_()
    assert out.has_been_displayed is True
    with pytest.raises(RuntimeError, match="already been displayed"):
        out._repr_mimebundle_()
    out.reset_display_state()
    assert out.has_been_displayed is False


def test_layout_surfaces_are_exclusive() -> None:
    layout = AdminLayout(title="Admin", intro="")
    assert layout.intro_html.layout.display == "none"
    layout.set_content(widgets.HTML("form"))
    layout.show_manage()
    assert (layout.create_visible, layout.manage_visible) == (False, True)
    layout.show_create()
    assert (layout.create_visible, layout.manage_visible) == (True, False)
    layout.set_content(None)
    assert layout.content is None
