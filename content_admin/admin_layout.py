"""Admin layout primitives.

This module builds the notebook widget tree used by :class:`AdminPanel`:

- a header (injected stylesheet, title, intro text),
- a mode bar switching between the create and manage surfaces,
- the create surface (tab bar plus a content host for the active form),
- the manage surface.

Only one of the two surfaces is visible at a time. The layout holds no
navigation state; :class:`AdminPanel` decides what is shown.
"""

from __future__ import annotations

import html
from typing import Any, Optional, Sequence

import ipywidgets as widgets
from IPython.display import display

from .admin_card import as_widget, as_widgets
from .admin_styles import ADMIN_CSS

# SECTION: OneShotOutput [id: OneShotOutput]
# =============================================================================


class OneShotOutput(widgets.Output):
    """
    An Output widget that can only be displayed once.

    Widgets are live objects bound to the frontend through a comm channel.
    Showing the same instance in two places leaves two views fighting over
    one model, so a second display attempt raises instead.

    Examples
    --------
    >>> out = OneShotOutput()  # doctest: +SKIP
    >>> display(out)  # doctest: +SKIP
    >>> display(out)  # doctest: +SKIP
    RuntimeError: OneShotOutput has already been displayed...
    """

    __slots__ = ("_displayed",)

    def __init__(self) -> None:
        super().__init__()
        self._displayed = False

    def _repr_mimebundle_(
        self, include: Any = None, exclude: Any = None, **kwargs: Any
    ) -> Any:
        if self._displayed:
            raise RuntimeError(
                "OneShotOutput has already been displayed. "
                "This widget supports only one-time display."
            )
        self._displayed = True
        return super()._repr_mimebundle_(include=include, exclude=exclude, **kwargs)

    @property
    def has_been_displayed(self) -> bool:
        return self._displayed

    def reset_display_state(self) -> None:
        """Allow one more display. Use with care; see the class docstring."""
        self._displayed = False


# =============================================================================
# SECTION: AdminLayout (The View) [id: AdminLayout]
# =============================================================================


class AdminLayout:
    """
    Visual structure and widget hierarchy of the admin panel.

    Responsibilities:
    - Building the VBox/HBox structure and injecting :data:`ADMIN_CSS`.
    - Hosting mode and tab buttons supplied by the panel.
    - Swapping the mounted create-surface content and the manage content.
    - Showing exactly one surface at a time.

    Parameters
    ----------
    title : str
        Heading text.
    intro : str, optional
        Explanation shown under the heading; empty hides it.
    """

    def __init__(self, title: str = "", intro: str = "") -> None:
        self.style_html = widgets.HTML(ADMIN_CSS, layout=widgets.Layout(display="none"))

        # 1. Header
        self.title_html = widgets.HTML(layout=widgets.Layout(margin="0"))
        self.intro_html = widgets.HTML(layout=widgets.Layout(margin="0 0 8px 0"))
        self.set_title(title)
        self.set_intro(intro)
        self._header = widgets.VBox(
            [self.title_html, self.intro_html],
            layout=widgets.Layout(width="100%", margin="0 0 12px 0"),
        )

        # 2. Mode bar
        self.mode_bar = widgets.HBox(
            layout=widgets.Layout(width="100%", gap="12px", margin="0 0 16px 0")
        )

        # 3. Create surface: tab bar + content host
        self.tab_bar = widgets.HBox(
            layout=widgets.Layout(width="100%", gap="8px", flex_flow="row wrap")
        )
        self.content_host = widgets.VBox(
            layout=widgets.Layout(width="100%", margin="16px 0 0 0")
        )
        self.create_surface = widgets.VBox(
            [self.tab_bar, self.content_host],
            layout=widgets.Layout(width="100%"),
        )

        # 4. Manage surface
        self.manage_host = widgets.VBox(layout=widgets.Layout(width="100%"))
        self.manage_surface = widgets.VBox(
            [self.manage_host],
            layout=widgets.Layout(width="100%", display="none"),
        )

        # 5. Root widget
        self.root_widget = widgets.VBox(
            [self.style_html, self._header, self.mode_bar, self.create_surface, self.manage_surface],
            layout=widgets.Layout(width="100%", max_width="1200px", padding="16px"),
        )

    @property
    def output_widget(self) -> OneShotOutput:
        """Return a :class:`OneShotOutput` wrapping the layout, ready for display."""
        out = OneShotOutput()
        with out:
            display(self.root_widget)
        return out

    @property
    def create_visible(self) -> bool:
        return self.create_surface.layout.display != "none"

    @property
    def manage_visible(self) -> bool:
        return self.manage_surface.layout.display != "none"

    @property
    def content(self) -> Optional[widgets.Widget]:
        """Widget currently mounted on the create surface, if any."""
        children = self.content_host.children
        return children[0] if children else None

    @property
    def manage_content(self) -> Optional[widgets.Widget]:
        children = self.manage_host.children
        return children[0] if children else None

    def set_title(self, text: str) -> None:
        self.title_html.value = f"<h2 style='margin:0'>{html.escape(text)}</h2>" if text else ""
        self.title_html.layout.display = "block" if text else "none"

    def set_intro(self, text: str) -> None:
        self.intro_html.value = f"<p style='margin:0'>{html.escape(text)}</p>" if text else ""
        self.intro_html.layout.display = "block" if text else "none"

    def set_mode_buttons(self, buttons: Sequence[Any]) -> None:
        """Replace the mode bar contents (widgets or button controllers)."""
        self.mode_bar.children = as_widgets(buttons)

    def set_tab_buttons(self, buttons: Sequence[Any]) -> None:
        """Replace the content-type tab bar contents."""
        self.tab_bar.children = as_widgets(buttons)

    def show_create(self) -> None:
        self.create_surface.layout.display = "flex"
        self.manage_surface.layout.display = "none"

    def show_manage(self) -> None:
        self.create_surface.layout.display = "none"
        self.manage_surface.layout.display = "flex"

    def set_content(self, widget: Optional[Any]) -> None:
        """Mount ``widget`` on the create surface; ``None`` clears it."""
        self.content_host.children = () if widget is None else (as_widget(widget),)

    def set_manage_content(self, widget: Optional[Any]) -> None:
        """Mount ``widget`` on the manage surface; ``None`` clears it."""
        self.manage_host.children = () if widget is None else (as_widget(widget),)


__all__ = ["AdminLayout", "OneShotOutput"]
