"""Primary and secondary action buttons.

Both button families wrap a native ``ipywidgets.Button`` and add two
behaviors the native widget lacks:

- a ``loading`` state that shows a spinner in place of the icon and blocks
  clicks even when ``disabled`` was not set by the caller,
- closed size/variant options resolved through :mod:`admin_styles`.

Click handlers are zero-argument callables. They are gated in Python, so a
click that reaches the kernel while the button is busy or disabled is
dropped rather than forwarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

import ipywidgets as widgets
import traitlets

from .admin_styles import (
    ButtonSize,
    IconPosition,
    PrimaryVariant,
    SecondaryVariant,
    Treatment,
    button_size_treatment,
    coerce,
    icon_only_treatment,
    primary_variant_treatment,
    secondary_variant_treatment,
)

SPINNER_ICON = "spinner"
ICON_ONLY_FALLBACK_LABEL = "Button"

ClickHandler = Callable[[], object]


@dataclass(frozen=True)
class ButtonRenderState:
    """What a button currently renders, independent of any frontend.

    Parameters
    ----------
    label : str
        Visible text.
    icon : str
        Icon name shown in the icon slot (``""`` for none).
    busy : bool
        Whether the busy spinner replaces the icon.
    icon_position : IconPosition or None
        Side the icon renders on, ``None`` when no icon renders.
    aria_label : str or None
        Accessible label exposed through the tooltip.
    interactive : bool
        ``False`` when clicks are dropped (busy or disabled).
    classes : tuple[str, ...]
        CSS classes applied to the native widget.
    """

    label: str
    icon: str
    busy: bool
    icon_position: Optional[IconPosition]
    aria_label: Optional[str]
    interactive: bool
    classes: tuple[str, ...]


class _ActionButton(traitlets.HasTraits):
    """Shared state handling for both button families."""

    text = traitlets.Unicode("")
    icon = traitlets.Unicode("")
    loading = traitlets.Bool(False)
    disabled = traitlets.Bool(False)

    def __init__(
        self,
        text: str = "",
        on_click: Optional[ClickHandler] = None,
        *,
        disabled: bool = False,
        loading: bool = False,
        icon: str = "",
        icon_position: Union[IconPosition, str] = IconPosition.LEFT,
        size: Union[ButtonSize, str] = ButtonSize.MEDIUM,
        aria_label: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._handler = on_click
        self._icon_position = coerce(IconPosition, icon_position)
        self._size = coerce(ButtonSize, size)
        self._aria_label = aria_label
        self._applied_classes: tuple[str, ...] = ()

        self.widget = widgets.Button(description="")
        self.widget.on_click(self._on_widget_click)

        # Assign traits before wiring observers so the first sync sees them all.
        self.set_trait("text", text or "")
        self.set_trait("icon", icon or "")
        self.set_trait("loading", bool(loading))
        self.set_trait("disabled", bool(disabled))
        self.observe(self._sync_widget, names=["text", "icon", "loading", "disabled"])
        self._sync_widget()

    # --- Public API -------------------------------------------------------------

    @property
    def size(self) -> ButtonSize:
        return self._size

    @property
    def icon_position(self) -> IconPosition:
        return self._icon_position

    @property
    def interactive(self) -> bool:
        """Return ``True`` when a click would reach the handler."""
        return not (self.loading or self.disabled)

    def on_click(self, handler: Optional[ClickHandler]) -> None:
        """Replace the click handler (``None`` removes it)."""
        self._handler = handler

    def click(self) -> None:
        """Simulate a user click through the native widget."""
        self.widget.click()

    def set_aria_label(self, label: Optional[str]) -> None:
        self._aria_label = label
        self._sync_widget()

    def state(self) -> ButtonRenderState:
        """Return the current :class:`ButtonRenderState`."""
        busy = bool(self.loading)
        if busy:
            icon = SPINNER_ICON
            position: Optional[IconPosition] = IconPosition.LEFT
        elif self.icon:
            icon = self.icon
            position = self._icon_position
        else:
            icon = ""
            position = None
        return ButtonRenderState(
            label=self.text,
            icon=icon,
            busy=busy,
            icon_position=position,
            aria_label=self._resolved_aria_label(),
            interactive=self.interactive,
            classes=self._classes(busy=busy, position=position),
        )

    # --- Hooks for subclasses ---------------------------------------------------

    def _variant_treatment(self) -> Treatment:
        raise NotImplementedError

    def _size_treatment(self) -> Treatment:
        return button_size_treatment(self._size)

    def _resolved_aria_label(self) -> Optional[str]:
        return self._aria_label

    # --- Internals --------------------------------------------------------------

    def _classes(self, *, busy: bool, position: Optional[IconPosition]) -> tuple[str, ...]:
        classes = list(self._variant_treatment().classes)
        classes.extend(self._size_treatment().classes)
        if busy:
            classes.append("ca-busy")
        if position is IconPosition.RIGHT:
            classes.append("ca-icon-right")
        if self.disabled:
            classes.append("ca-not-allowed")
        return tuple(classes)

    def _sync_widget(self, change: object = None) -> None:
        state = self.state()
        variant = self._variant_treatment()
        btn = self.widget
        btn.description = state.label
        btn.icon = state.icon
        btn.tooltip = state.aria_label or ""
        btn.button_style = variant.button_style
        btn.disabled = not state.interactive
        btn.layout = widgets.Layout(**self._size_treatment().layout)

        for cls in self._applied_classes:
            if cls not in state.classes:
                btn.remove_class(cls)
        for cls in state.classes:
            if cls not in self._applied_classes:
                btn.add_class(cls)
        self._applied_classes = state.classes

    def _on_widget_click(self, _button: widgets.Button) -> None:
        if not self.interactive:
            return
        if self._handler is not None:
            self._handler()


class PrimaryButton(_ActionButton):
    """Main call-to-action button (save, create, submit).

    Parameters
    ----------
    text : str
        Button content.
    on_click : callable, optional
        Zero-argument handler invoked on an interactive click.
    variant : {"solid", "outline"}
        Visual variant.
    size : {"sm", "md", "lg"}
        Size option.
    disabled, loading : bool
        Interaction gates; either one drops clicks.
    icon : str
        FontAwesome icon name rendered next to the text.
    icon_position : {"left", "right"}
        Side of the icon.
    aria_label : str, optional
        Accessible label.

    Examples
    --------
    >>> saved = []
    >>> btn = PrimaryButton("Speichern", lambda: saved.append(1))
    >>> btn.click(); saved
    [1]
    >>> btn.loading = True
    >>> btn.click(); saved
    [1]
    """

    def __init__(
        self,
        text: str = "",
        on_click: Optional[ClickHandler] = None,
        *,
        variant: Union[PrimaryVariant, str] = PrimaryVariant.SOLID,
        **kwargs: object,
    ) -> None:
        self._variant = coerce(PrimaryVariant, variant)
        super().__init__(text, on_click, **kwargs)  # type: ignore[arg-type]

    @property
    def variant(self) -> PrimaryVariant:
        return self._variant

    def set_variant(self, variant: Union[PrimaryVariant, str]) -> None:
        """Switch the visual variant (used for selected/unselected tabs)."""
        self._variant = coerce(PrimaryVariant, variant)
        self._sync_widget()

    def _variant_treatment(self) -> Treatment:
        return primary_variant_treatment(self._variant)


class SecondaryButton(_ActionButton):
    """Low-emphasis button (edit, cancel, remove).

    A secondary button without text is *icon-only*: it renders square and,
    since it carries no visible text, always exposes an accessible label
    (the explicit ``aria_label`` or ``"Button"``).
    """

    def __init__(
        self,
        text: str = "",
        on_click: Optional[ClickHandler] = None,
        *,
        variant: Union[SecondaryVariant, str] = SecondaryVariant.GHOST,
        **kwargs: object,
    ) -> None:
        self._variant = coerce(SecondaryVariant, variant)
        super().__init__(text, on_click, **kwargs)  # type: ignore[arg-type]

    @property
    def variant(self) -> SecondaryVariant:
        return self._variant

    @property
    def icon_only(self) -> bool:
        return not self.text

    def _variant_treatment(self) -> Treatment:
        return secondary_variant_treatment(self._variant)

    def _size_treatment(self) -> Treatment:
        if self.icon_only:
            return icon_only_treatment(self._size)
        return button_size_treatment(self._size)

    def _resolved_aria_label(self) -> Optional[str]:
        if self._aria_label:
            return self._aria_label
        return ICON_ONLY_FALLBACK_LABEL if self.icon_only else None


__all__ = [
    "ButtonRenderState",
    "ICON_ONLY_FALLBACK_LABEL",
    "PrimaryButton",
    "SPINNER_ICON",
    "SecondaryButton",
]
