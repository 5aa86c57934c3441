from __future__ import annotations

import ipywidgets as widgets
import pytest

from content_admin.content_registry import (
    ContentTypeDescriptor,
    ContentTypeRegistry,
    UnknownTypeError,
)
from content_admin.view_controller import ViewController, ViewMode, ViewSelection

TYPE_IDS = ("category", "module", "video", "article")


def _registry(ids=TYPE_IDS) -> ContentTypeRegistry:
    reg = ContentTypeRegistry()
    for type_id in ids:
        reg.register(
            ContentTypeDescriptor(type_id, type_id.title()),
            lambda t=type_id: widgets.HTML(t),
        )
    reg.seal()
    return reg


def test_defaults_to_first_registered_type_in_create_mode() -> None:
    ctl = ViewController(_registry())
    assert ctl.selection == ViewSelection(ViewMode.CREATE, "category")


def test_select_type_then_unknown_keeps_selection() -> None:
    ctl = ViewController(_registry())
    assert ctl.select_type("video") is True
    assert ctl.selection == ViewSelection(ViewMode.CREATE, "video")
    with pytest.raises(UnknownTypeError):
        ctl.select_type("unknown")
    assert ctl.selection == ViewSelection(ViewMode.CREATE, "video")


def test_manage_round_trip_restores_active_type() -> None:
    ctl = ViewController(_registry())
    ctl.select_type("article")
    ctl.select_mode("manage")
    assert ctl.mode is ViewMode.MANAGE
    assert ctl.active_type_id == "article"
    ctl.select_mode(ViewMode.CREATE)
    assert ctl.selection == ViewSelection(ViewMode.CREATE, "article")


def test_select_mode_is_idempotent() -> None:
    ctl = ViewController(_registry())
    assert ctl.select_mode("manage") is True
    first = ctl.selection
    assert ctl.select_mode("manage") is False
    assert ctl.selection == first


def test_select_type_in_manage_mode_keeps_mode() -> None:
    ctl = ViewController(_registry())
    ctl.select_mode("manage")
    ctl.select_type("module")
    assert ctl.selection == ViewSelection(ViewMode.MANAGE, "module")


def test_unknown_mode_is_rejected() -> None:
    ctl = ViewController(_registry())
    with pytest.raises(ValueError, match="Unknown view mode 'edit'"):
        ctl.select_mode("edit")
    assert ctl.mode is ViewMode.CREATE


def test_active_renderer_follows_mode() -> None:
    reg = _registry()
    manage = object()
    ctl = ViewController(reg)
    ctl.select_type("video")
    assert ctl.active_renderer(manage) is reg.resolve("video")
    ctl.select_mode("manage")
    assert ctl.active_renderer(manage) is manage


def test_empty_registry_has_no_active_type() -> None:
    ctl = ViewController(_registry(ids=()))
    assert ctl.active_type_id is None
    with pytest.raises(UnknownTypeError):
        ctl.active_renderer(object())
    ctl.select_mode("manage")
    assert ctl.active_type_id is None


def test_explicit_default_must_be_registered() -> None:
    ctl = ViewController(_registry(), default_type_id="video", default_mode="manage")
    assert ctl.selection == ViewSelection(ViewMode.MANAGE, "video")
    with pytest.raises(UnknownTypeError):
        ViewController(_registry(), default_type_id="podcast")


def test_reset_restores_initial_selection() -> None:
    ctl = ViewController(_registry())
    ctl.select_type("article")
    ctl.select_mode("manage")
    assert ctl.reset() is True
    assert ctl.selection == ViewSelection(ViewMode.CREATE, "category")


def test_selection_hooks_receive_old_and_new_and_are_isolated() -> None:
    ctl = ViewController(_registry())
    seen = []

    def boom(old: ViewSelection, new: ViewSelection) -> None:
        raise RuntimeError("hook exploded")

    ctl.add_selection_hook(boom)
    hook_id = ctl.add_selection_hook(lambda old, new: seen.append((old.active_type_id, new.active_type_id)))

    with pytest.warns(UserWarning, match="hook exploded"):
        ctl.select_type("module")
    assert seen == [("category", "module")]
    assert ctl.active_type_id == "module"

    with pytest.warns(UserWarning):
        ctl.select_mode("manage")
    ctl.remove_selection_hook(hook_id)
    with pytest.warns(UserWarning):
        ctl.select_type("video")
    assert len(seen) == 2


def test_unchanged_selection_does_not_fire_hooks() -> None:
    ctl = ViewController(_registry())
    seen = []
    ctl.add_selection_hook(lambda old, new: seen.append(new))
    ctl.select_type("category")
    ctl.select_mode("create")
    assert seen == []


def test_hook_can_roll_back_a_change_with_restore() -> None:
    ctl = ViewController(_registry())
    seen = []

    def reject(old: ViewSelection, new: ViewSelection) -> None:
        ctl.restore(old)

    ctl.add_selection_hook(reject)
    ctl.add_selection_hook(lambda old, new: seen.append(new.active_type_id))

    assert ctl.select_type("video") is False
    assert ctl.active_type_id == "category"
    assert seen == []


def test_restore_does_not_notify_and_validates_type() -> None:
    ctl = ViewController(_registry())
    seen = []
    ctl.add_selection_hook(lambda old, new: seen.append(new))
    ctl.restore(ViewSelection(ViewMode.MANAGE, "article"))
    assert ctl.selection == ViewSelection(ViewMode.MANAGE, "article")
    assert seen == []
    with pytest.raises(UnknownTypeError):
        ctl.restore(ViewSelection(ViewMode.CREATE, "quiz"))
    assert ctl.active_type_id == "article"
