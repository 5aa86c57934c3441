"""Card container with an optional collapsible content region.

A :class:`Card` always renders its header (title, optional subtitle, icon and
action widgets). The content region is part of the widget tree unless the
card is collapsible and currently collapsed; collapsing removes the content
box from ``children`` instead of hiding it with CSS, so tests and frontends
see the same tree.
"""

from __future__ import annotations

import html
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence, Union

import ipywidgets as widgets

from .admin_buttons import SecondaryButton
from .admin_styles import (
    CardPadding,
    CardVariant,
    card_content_padding,
    card_header_padding,
    card_variant_treatment,
    coerce,
)
from .collapsible import CollapsibleState

CHEVRON_ICON = "chevron-down"
EXPAND_LABEL = "Expand"
COLLAPSE_LABEL = "Collapse"


def as_widget(item: Any) -> widgets.Widget:
    """Return the ipywidget behind ``item`` (buttons expose ``.widget``)."""
    if isinstance(item, widgets.Widget):
        return item
    inner = getattr(item, "widget", None)
    if isinstance(inner, widgets.Widget):
        return inner
    raise TypeError(f"Expected an ipywidget or an object with a .widget, got {type(item).__name__}")


def as_widgets(items: Optional[Iterable[Any]]) -> tuple[widgets.Widget, ...]:
    if items is None:
        return ()
    return tuple(as_widget(item) for item in items)


def close_tree(widget: widgets.Widget) -> None:
    """Close ``widget`` and every widget below it in ``children``."""
    for child in getattr(widget, "children", ()):
        close_tree(child)
    widget.close()


class Card(widgets.VBox):
    """Titled container; optionally collapsible.

    Parameters
    ----------
    title : str
        Required header title.
    content : sequence, optional
        Widgets (or buttons) rendered in the content region.
    subtitle : str, optional
        Secondary header line.
    icon : str, optional
        FontAwesome icon name shown before the title.
    actions : sequence, optional
        Trailing header widgets.
    variant : {"default", "elevated", "outlined"}
        Border/shadow treatment.
    padding : {"none", "sm", "md", "lg"}
        Padding applied to the header and, without its top part, to the
        content region.
    collapsible : bool
        Whether the header toggles the content region.
    default_collapsed : bool
        Initial state for collapsible cards.

    Examples
    --------
    >>> card = Card("Module", [widgets.HTML("body")], collapsible=True, default_collapsed=True)  # doctest: +SKIP
    >>> card.content_visible  # doctest: +SKIP
    False
    >>> card.toggle(); card.content_visible  # doctest: +SKIP
    True
    """

    def __init__(
        self,
        title: str,
        content: Optional[Sequence[Any]] = None,
        *,
        subtitle: Optional[str] = None,
        icon: Optional[str] = None,
        actions: Optional[Sequence[Any]] = None,
        variant: Union[CardVariant, str] = CardVariant.DEFAULT,
        padding: Union[CardPadding, str] = CardPadding.MEDIUM,
        collapsible: bool = False,
        default_collapsed: bool = False,
        **kwargs: Any,
    ) -> None:
        if not title:
            raise ValueError("Card title must be a non-empty string")
        self._variant = coerce(CardVariant, variant)
        self._padding = coerce(CardPadding, padding)
        self._collapsible = bool(collapsible)
        self._collapse_state = CollapsibleState(collapsed=self._collapsible and bool(default_collapsed))

        self.title_html = widgets.HTML(
            value=f"<b>{html.escape(title)}</b>",
            layout=widgets.Layout(margin="0"),
        )
        self.subtitle_html = widgets.HTML(
            value=html.escape(subtitle) if subtitle else "",
            layout=widgets.Layout(margin="0", display="block" if subtitle else "none"),
        )
        self.icon_html = widgets.HTML(
            value=f'<i class="fa fa-{html.escape(icon)}"></i>' if icon else "",
            layout=widgets.Layout(width="20px", display="block" if icon else "none"),
        )
        self.actions_box = widgets.HBox(
            as_widgets(actions),
            layout=widgets.Layout(align_items="center", gap="8px"),
        )

        self.chevron: Optional[SecondaryButton] = None
        trailing: list[widgets.Widget] = [self.actions_box]
        if self._collapsible:
            self.chevron = SecondaryButton(
                "",
                self.toggle,
                icon=CHEVRON_ICON,
                size="sm",
                aria_label=self._chevron_label(),
            )
            self.chevron.widget.add_class("ca-chevron")
            trailing.append(self.chevron.widget)

        self.header = widgets.HBox(
            [
                self.icon_html,
                widgets.VBox(
                    [self.title_html, self.subtitle_html],
                    layout=widgets.Layout(flex="1 1 auto", min_width="0"),
                ),
                widgets.HBox(trailing, layout=widgets.Layout(align_items="center", gap="8px")),
            ],
            layout=widgets.Layout(
                width="100%",
                align_items="center",
                justify_content="space-between",
                gap="12px",
                **card_header_padding(self._padding).layout,
            ),
        )

        self.content_box = widgets.VBox(
            as_widgets(content),
            layout=widgets.Layout(width="100%", **card_content_padding(self._padding).layout),
        )

        variant_treatment = card_variant_treatment(self._variant)
        super().__init__(
            children=self._desired_children(),
            layout=widgets.Layout(width="100%", **variant_treatment.layout),
            **kwargs,
        )
        for cls in variant_treatment.classes:
            self.add_class(cls)
        self._sync_chevron()

    # --- Public API -------------------------------------------------------------

    @property
    def collapsible(self) -> bool:
        return self._collapsible

    @property
    def collapsed(self) -> bool:
        return self._collapse_state.collapsed

    @property
    def content_visible(self) -> bool:
        return not self._collapsible or self._collapse_state.expanded

    @property
    def variant(self) -> CardVariant:
        return self._variant

    @property
    def padding(self) -> CardPadding:
        return self._padding

    def toggle(self) -> None:
        """Flip the collapsed state; a no-op for non-collapsible cards."""
        if not self._collapsible:
            return
        self._collapse_state.toggle()
        self.children = self._desired_children()
        self._sync_chevron()

    def observe_toggle(self, callback: Callable[[bool], None]) -> Hashable:
        """Call ``callback(collapsed)`` after each toggle; return the observer id."""
        return self._collapse_state.observe(callback)

    def set_content(self, content: Sequence[Any]) -> None:
        """Replace the widgets shown in the content region."""
        self.content_box.children = as_widgets(content)

    def set_subtitle(self, subtitle: Optional[str]) -> None:
        self.subtitle_html.value = html.escape(subtitle) if subtitle else ""
        self.subtitle_html.layout.display = "block" if subtitle else "none"

    def close(self) -> None:
        # A collapsed card's content box is detached from ``children``.
        content_box = getattr(self, "content_box", None)
        if content_box is not None:
            close_tree(content_box)
        super().close()

    # --- Internals --------------------------------------------------------------

    def _desired_children(self) -> tuple[widgets.Widget, ...]:
        if self.content_visible:
            return (self.header, self.content_box)
        return (self.header,)

    def _chevron_label(self) -> str:
        return EXPAND_LABEL if self._collapse_state.collapsed else COLLAPSE_LABEL

    def _sync_chevron(self) -> None:
        if self.chevron is None:
            return
        self.chevron.set_aria_label(self._chevron_label())
        if self._collapse_state.collapsed:
            self.chevron.widget.remove_class("ca-chevron-open")
        else:
            self.chevron.widget.add_class("ca-chevron-open")


__all__ = ["COLLAPSE_LABEL", "Card", "EXPAND_LABEL", "as_widget", "as_widgets", "close_tree"]
