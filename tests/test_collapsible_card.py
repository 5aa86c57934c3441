from __future__ import annotations

import ipywidgets as widgets
import pytest

from content_admin.admin_buttons import SecondaryButton
from content_admin.admin_card import COLLAPSE_LABEL, EXPAND_LABEL, Card
from content_admin.collapsible import CollapsibleState


def test_collapsible_state_toggle_round_trip() -> None:
    state = CollapsibleState()
    assert state.expanded is True
    assert state.toggle() is True
    assert state.toggle() is False
    assert state.expanded is True


def test_collapsible_state_observer_failure_is_isolated() -> None:
    state = CollapsibleState(collapsed=True)
    seen = []

    def boom(_collapsed: bool) -> None:
        raise RuntimeError("boom")

    state.observe(boom)
    state.observe(seen.append)
    with pytest.warns(UserWarning, match="boom"):
        state.toggle()
    assert seen == [False]
    assert state.collapsed is False


def test_collapsed_card_renders_header_only_and_toggles() -> None:
    body = widgets.HTML("body")
    card = Card("Modul", [body], collapsible=True, default_collapsed=True)
    assert card.children == (card.header,)
    assert card.content_visible is False
    assert card.chevron is not None
    assert card.chevron.widget.tooltip == EXPAND_LABEL

    card.toggle()
    assert card.children == (card.header, card.content_box)
    assert card.content_box.children == (body,)
    assert card.chevron.widget.tooltip == COLLAPSE_LABEL
    assert "ca-chevron-open" in card.chevron.widget._dom_classes

    card.toggle()
    assert card.children == (card.header,)
    assert "ca-chevron-open" not in card.chevron.widget._dom_classes


def test_chevron_click_toggles_card() -> None:
    card = Card("Modul", [widgets.HTML("body")], collapsible=True, default_collapsed=True)
    # The chevron is the header's only toggle control; the header is not styled as one.
    assert "ca-card-header-clickable" not in card.header._dom_classes
    assert card.chevron.widget in card.header.children[-1].children
    card.chevron.click()
    assert card.content_visible is True


def test_closing_a_collapsed_card_closes_its_detached_content() -> None:
    body = widgets.HTML("body")
    card = Card("Modul", [body], collapsible=True, default_collapsed=True)
    assert body not in card.children
    card.close()
    assert body.comm is None
    assert card.content_box.comm is None


def test_non_collapsible_card_ignores_toggle_and_default_collapsed() -> None:
    card = Card("Info", [widgets.HTML("x")], default_collapsed=True)
    assert card.chevron is None
    assert card.content_visible is True
    card.toggle()
    assert card.content_visible is True
    assert "ca-card-header-clickable" not in card.header._dom_classes


def test_card_accepts_buttons_as_actions_and_content() -> None:
    edit = SecondaryButton(icon="pencil")
    card = Card("Modul", [SecondaryButton("Mehr")], actions=[edit], subtitle="SQL · Öffentlich")
    assert card.actions_box.children == (edit.widget,)
    assert card.subtitle_html.layout.display == "block"
    assert "SQL" in card.subtitle_html.value


def test_card_variant_classes_and_validation() -> None:
    card = Card("Modul", variant="elevated")
    assert "ca-card-elevated" in card._dom_classes
    with pytest.raises(ValueError, match="non-empty"):
        Card("")
    with pytest.raises(ValueError, match="Unknown CardVariant"):
        Card("Modul", variant="flat")


def test_observe_toggle_reports_new_state() -> None:
    card = Card("Modul", collapsible=True, default_collapsed=True)
    seen = []
    card.observe_toggle(seen.append)
    card.toggle()
    card.toggle()
    assert seen == [False, True]


def test_unobserve_stops_notifications() -> None:
    state = CollapsibleState()
    seen = []
    obs_id = state.observe(seen.append)
    assert obs_id == "collapse:1"
    state.toggle()
    state.unobserve(obs_id)
    state.toggle()
    assert seen == [True]
    assert repr(state) == "CollapsibleState(collapsed=False)"
