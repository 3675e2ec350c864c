"""Breadcrumb rendering.

Breadcrumbs are Rich markup strings. The segment for the current level
uses the current-level style and every ancestor segment is re-rendered in
the dimmer previous-level style.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.markup import escape
from rich.text import Text

NEUTRAL_COLOR = "#9a9ca7"


@dataclass(frozen=True)
class BreadcrumbStyle:
    """Rich styles for the current level and the levels above it."""

    previous_level: str = NEUTRAL_COLOR
    current_level: str = ""

    def dimmed(self) -> BreadcrumbStyle:
        """Style used to render a node's ancestors."""
        return BreadcrumbStyle(previous_level=self.previous_level, current_level=self.previous_level)

    def current(self, segment: str) -> str:
        return render(self.current_level, segment)


DEFAULT_BREADCRUMB_STYLE = BreadcrumbStyle()


def render(style: str, segment: str) -> str:
    """Render a literal segment as markup in ``style``."""
    escaped = escape(segment)
    if not style:
        return escaped
    return f"[{style}]{escaped}[/]"


def plain(markup: str) -> str:
    """Strip markup, e.g. ``'[#9a9ca7]acme/[/]prod/'`` -> ``'acme/prod/'``."""
    return Text.from_markup(markup).plain
