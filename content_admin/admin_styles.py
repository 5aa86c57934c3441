"""Closed style enumerations and their rendering treatments.

Purpose
-------
Every visual option a primitive accepts (button size/variant, card
variant/padding, icon placement) is a member of a closed ``Enum``. Each axis
owns exactly one treatment table mapping members to a frozen
:class:`Treatment`: layout keyword arguments for ``ipywidgets.Layout`` plus
CSS classes defined in :data:`ADMIN_CSS`.

Architecture notes
------------------
- Callers may pass either a member or its string value; :func:`coerce`
  normalizes both and rejects anything else with ``ValueError``.
- :func:`_check_exhaustive` runs at import time for every table, so a new
  enum member without a treatment fails loudly instead of rendering with an
  undefined style.

Examples
--------
>>> from content_admin.admin_styles import ButtonSize, button_size_treatment
>>> button_size_treatment("sm").layout["padding"]
'4px 12px'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Type, TypeVar, Union

E = TypeVar("E", bound=Enum)


class ButtonSize(str, Enum):
    SMALL = "sm"
    MEDIUM = "md"
    LARGE = "lg"


class IconPosition(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class PrimaryVariant(str, Enum):
    SOLID = "solid"
    OUTLINE = "outline"


class SecondaryVariant(str, Enum):
    GHOST = "ghost"
    OUTLINE = "outline"
    SUBTLE = "subtle"


class CardVariant(str, Enum):
    DEFAULT = "default"
    ELEVATED = "elevated"
    OUTLINED = "outlined"


class CardPadding(str, Enum):
    NONE = "none"
    SMALL = "sm"
    MEDIUM = "md"
    LARGE = "lg"


@dataclass(frozen=True)
class Treatment:
    """Rendering treatment for one style member.

    Parameters
    ----------
    layout : Mapping[str, str]
        Keyword arguments applied to the widget's ``ipywidgets.Layout``.
    classes : tuple[str, ...]
        CSS classes added to the widget (see :data:`ADMIN_CSS`).
    button_style : str
        Native ``ipywidgets.Button.button_style`` value (buttons only).
    """

    layout: Mapping[str, str] = field(default_factory=dict)
    classes: tuple[str, ...] = ()
    button_style: str = ""


def coerce(enum_cls: Type[E], value: Union[E, str]) -> E:
    """Return ``value`` as a member of ``enum_cls``.

    Raises
    ------
    ValueError
        If ``value`` is neither a member nor the value of one.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)
        raise ValueError(
            f"Unknown {enum_cls.__name__} {value!r}; expected one of {allowed}"
        ) from None


def _check_exhaustive(enum_cls: Type[Enum], table: Mapping[Any, Any]) -> None:
    missing = [m for m in enum_cls if m not in table]
    if missing:
        names = ", ".join(m.name for m in missing)
        raise RuntimeError(f"{enum_cls.__name__} members without a treatment: {names}")


# --- Buttons ------------------------------------------------------------------

_BUTTON_SIZES: dict[ButtonSize, Treatment] = {
    ButtonSize.SMALL: Treatment(layout={"padding": "4px 12px", "height": "30px"}, classes=("ca-text-sm",)),
    ButtonSize.MEDIUM: Treatment(layout={"padding": "6px 16px", "height": "36px"}, classes=("ca-text-md",)),
    ButtonSize.LARGE: Treatment(layout={"padding": "10px 24px", "height": "46px"}, classes=("ca-text-lg",)),
}

# Icon-only buttons are square; padding shrinks with the size.
_ICON_ONLY_SIZES: dict[ButtonSize, Treatment] = {
    ButtonSize.SMALL: Treatment(layout={"padding": "4px", "width": "30px", "height": "30px"}),
    ButtonSize.MEDIUM: Treatment(layout={"padding": "6px", "width": "36px", "height": "36px"}),
    ButtonSize.LARGE: Treatment(layout={"padding": "10px", "width": "46px", "height": "46px"}),
}

_PRIMARY_VARIANTS: dict[PrimaryVariant, Treatment] = {
    PrimaryVariant.SOLID: Treatment(classes=("ca-btn", "ca-primary-solid"), button_style="warning"),
    PrimaryVariant.OUTLINE: Treatment(classes=("ca-btn", "ca-primary-outline")),
}

_SECONDARY_VARIANTS: dict[SecondaryVariant, Treatment] = {
    SecondaryVariant.GHOST: Treatment(classes=("ca-btn", "ca-secondary-ghost")),
    SecondaryVariant.OUTLINE: Treatment(classes=("ca-btn", "ca-secondary-outline")),
    SecondaryVariant.SUBTLE: Treatment(classes=("ca-btn", "ca-secondary-subtle")),
}


def button_size_treatment(size: Union[ButtonSize, str]) -> Treatment:
    return _BUTTON_SIZES[coerce(ButtonSize, size)]


def icon_only_treatment(size: Union[ButtonSize, str]) -> Treatment:
    return _ICON_ONLY_SIZES[coerce(ButtonSize, size)]


def primary_variant_treatment(variant: Union[PrimaryVariant, str]) -> Treatment:
    return _PRIMARY_VARIANTS[coerce(PrimaryVariant, variant)]


def secondary_variant_treatment(variant: Union[SecondaryVariant, str]) -> Treatment:
    return _SECONDARY_VARIANTS[coerce(SecondaryVariant, variant)]


# --- Cards --------------------------------------------------------------------

_CARD_VARIANTS: dict[CardVariant, Treatment] = {
    CardVariant.DEFAULT: Treatment(
        layout={"border": "1px solid #e5e7eb"}, classes=("ca-card",)
    ),
    CardVariant.ELEVATED: Treatment(
        layout={"border": "1px solid #f3f4f6"}, classes=("ca-card", "ca-card-elevated")
    ),
    CardVariant.OUTLINED: Treatment(
        layout={"border": "2px solid #e5e7eb"}, classes=("ca-card",)
    ),
}

_CARD_HEADER_PADDING: dict[CardPadding, Treatment] = {
    CardPadding.NONE: Treatment(layout={"padding": "0px"}),
    CardPadding.SMALL: Treatment(layout={"padding": "12px"}),
    CardPadding.MEDIUM: Treatment(layout={"padding": "16px"}),
    CardPadding.LARGE: Treatment(layout={"padding": "24px"}),
}

# Content sits directly below the header, so medium/large drop the top padding.
_CARD_CONTENT_PADDING: dict[CardPadding, Treatment] = {
    CardPadding.NONE: Treatment(layout={"padding": "0px"}),
    CardPadding.SMALL: Treatment(layout={"padding": "12px"}),
    CardPadding.MEDIUM: Treatment(layout={"padding": "0px 16px 16px 16px"}),
    CardPadding.LARGE: Treatment(layout={"padding": "0px 24px 24px 24px"}),
}


def card_variant_treatment(variant: Union[CardVariant, str]) -> Treatment:
    return _CARD_VARIANTS[coerce(CardVariant, variant)]


def card_header_padding(padding: Union[CardPadding, str]) -> Treatment:
    return _CARD_HEADER_PADDING[coerce(CardPadding, padding)]


def card_content_padding(padding: Union[CardPadding, str]) -> Treatment:
    return _CARD_CONTENT_PADDING[coerce(CardPadding, padding)]


for _enum_cls, _table in (
    (ButtonSize, _BUTTON_SIZES),
    (ButtonSize, _ICON_ONLY_SIZES),
    (PrimaryVariant, _PRIMARY_VARIANTS),
    (SecondaryVariant, _SECONDARY_VARIANTS),
    (CardVariant, _CARD_VARIANTS),
    (CardPadding, _CARD_HEADER_PADDING),
    (CardPadding, _CARD_CONTENT_PADDING),
):
    _check_exhaustive(_enum_cls, _table)
del _enum_cls, _table


ADMIN_CSS = r"""
<style>
/* Brand accent for selected tabs and primary actions. */
.ca-btn { border-radius: 8px !important; font-weight: 500 !important; }
.ca-text-sm { font-size: 12px !important; }
.ca-text-md { font-size: 14px !important; }
.ca-text-lg { font-size: 17px !important; }

.ca-primary-solid { background: #ff863d !important; color: #fff !important; }
.ca-primary-solid:hover:enabled { background: #ed7c34 !important; }
.ca-primary-outline {
  background: transparent !important;
  border: 2px solid #ff863d !important;
  color: #ff863d !important;
}

.ca-secondary-ghost { background: transparent !important; color: #374151 !important; }
.ca-secondary-outline { border: 1px solid #d1d5db !important; color: #374151 !important; }
.ca-secondary-subtle { background: #f3f4f6 !important; color: #374151 !important; }

.ca-not-allowed, .ca-not-allowed * { cursor: not-allowed !important; opacity: 0.5; }
.ca-icon-right { display: inline-flex !important; flex-direction: row-reverse !important; }
.ca-icon-right i { margin-left: 8px; margin-right: 0 !important; }

.ca-busy i { animation: ca-spin 1s linear infinite; }
@keyframes ca-spin { from { transform: rotate(0deg); } to { transform: rotate(360deg); } }

.ca-card { background: #fff; border-radius: 8px; }
.ca-card-elevated { box-shadow: 0 10px 15px -3px rgba(0,0,0,0.1); }

.ca-chevron i { transition: transform 0.2s; }
.ca-chevron-open i { transform: rotate(180deg); }
.ca-error { color: #dc2626; font-size: 12px; }
</style>
"""


__all__ = [
    "ADMIN_CSS",
    "ButtonSize",
    "CardPadding",
    "CardVariant",
    "IconPosition",
    "PrimaryVariant",
    "SecondaryVariant",
    "Treatment",
    "button_size_treatment",
    "card_content_padding",
    "card_header_padding",
    "card_variant_treatment",
    "coerce",
    "icon_only_treatment",
    "primary_variant_treatment",
    "secondary_variant_treatment",
]
