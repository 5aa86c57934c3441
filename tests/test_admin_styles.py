from __future__ import annotations

import pytest

from content_admin.admin_styles import (
    ADMIN_CSS,
    ButtonSize,
    CardPadding,
    CardVariant,
    PrimaryVariant,
    SecondaryVariant,
    button_size_treatment,
    card_content_padding,
    card_header_padding,
    card_variant_treatment,
    coerce,
    icon_only_treatment,
    primary_variant_treatment,
    secondary_variant_treatment,
)


def test_every_member_has_a_treatment() -> None:
    for size in ButtonSize:
        assert button_size_treatment(size).layout
        assert icon_only_treatment(size).layout["width"] == icon_only_treatment(size).layout["height"]
    for variant in PrimaryVariant:
        assert "ca-btn" in primary_variant_treatment(variant).classes
    for variant in SecondaryVariant:
        assert "ca-btn" in secondary_variant_treatment(variant).classes
    for variant in CardVariant:
        assert "ca-card" in card_variant_treatment(variant).classes
    for padding in CardPadding:
        assert "padding" in card_header_padding(padding).layout
        assert "padding" in card_content_padding(padding).layout


def test_string_values_resolve_like_members() -> None:
    assert button_size_treatment("sm") is button_size_treatment(ButtonSize.SMALL)
    assert button_size_treatment("sm").layout["padding"] == "4px 12px"
    assert primary_variant_treatment("solid").button_style == "warning"
    assert primary_variant_treatment("outline").button_style == ""


def test_unknown_option_is_rejected_with_allowed_values() -> None:
    with pytest.raises(ValueError, match="Unknown ButtonSize 'xl'"):
        button_size_treatment("xl")
    with pytest.raises(ValueError, match="'ghost', 'outline', 'subtle'"):
        coerce(SecondaryVariant, "loud")


def test_content_padding_drops_top_for_medium_and_large() -> None:
    assert card_content_padding("md").layout["padding"].startswith("0px ")
    assert card_content_padding("lg").layout["padding"].startswith("0px ")
    assert card_header_padding("lg").layout["padding"] == "24px"


def test_stylesheet_defines_the_state_classes() -> None:
    for cls in ("ca-busy", "ca-not-allowed", "ca-chevron-open", "ca-card-elevated", "ca-error"):
        assert f".{cls}" in ADMIN_CSS
