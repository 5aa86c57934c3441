"""Property-based checks for view selection sequences."""

from __future__ import annotations

import ipywidgets as widgets
import pytest

from content_admin.content_registry import (
    ContentTypeDescriptor,
    ContentTypeRegistry,
    UnknownTypeError,
)
from content_admin.admin_card import Card
from content_admin.view_controller import ViewController, ViewMode

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - environment-specific fallback
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)


REGISTERED = ("category", "module", "video", "article")

MODE_STEPS = st.tuples(st.just("mode"), st.sampled_from(["create", "manage"]))
TYPE_STEPS = st.tuples(
    st.just("type"),
    st.one_of(st.sampled_from(REGISTERED), st.text(max_size=8)),
)
STEPS = st.lists(st.one_of(MODE_STEPS, TYPE_STEPS), max_size=40)


def _controller() -> ViewController:
    reg = ContentTypeRegistry()
    for type_id in REGISTERED:
        reg.register(ContentTypeDescriptor(type_id, type_id), lambda: widgets.HTML(""))
    reg.seal()
    return ViewController(reg)


def _run(ctl: ViewController, step) -> None:
    kind, value = step
    if kind == "mode":
        ctl.select_mode(value)
        return
    try:
        ctl.select_type(value)
    except UnknownTypeError:
        assert value not in REGISTERED


@given(steps=STEPS)
def test_active_type_is_always_registered(steps) -> None:
    ctl = _controller()
    for step in steps:
        before = ctl.selection
        _run(ctl, step)
        assert ctl.active_type_id in REGISTERED
        if step[0] == "type" and step[1] not in REGISTERED:
            assert ctl.selection == before


@given(steps=STEPS, mode=st.sampled_from(["create", "manage"]))
def test_select_mode_twice_equals_once(steps, mode: str) -> None:
    ctl = _controller()
    for step in steps:
        _run(ctl, step)
    ctl.select_mode(mode)
    once = ctl.selection
    ctl.select_mode(mode)
    assert ctl.selection == once


@given(steps=STEPS)
def test_manage_then_create_restores_type(steps) -> None:
    ctl = _controller()
    for step in steps:
        _run(ctl, step)
    ctl.select_mode("create")
    active = ctl.active_type_id
    ctl.select_mode("manage")
    ctl.select_mode("create")
    assert ctl.mode is ViewMode.CREATE
    assert ctl.active_type_id == active


@settings(deadline=None, max_examples=30)
@given(default_collapsed=st.booleans(), toggles=st.integers(min_value=0, max_value=6))
def test_even_toggle_count_restores_card_visibility(default_collapsed: bool, toggles: int) -> None:
    card = Card("Modul", [widgets.HTML("x")], collapsible=True, default_collapsed=default_collapsed)
    initial = card.content_visible
    for _ in range(toggles):
        card.toggle()
    assert card.content_visible == (initial if toggles % 2 == 0 else not initial)
