"""Menu items and the actions selecting them triggers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spaces_navigator.services.navigation.nodes import Accepting, NavigationNode

BACK_TEXT = ".."


@dataclass(frozen=True)
class Descend:
    """Make ``node`` the current navigation state."""

    node: NavigationNode


@dataclass(frozen=True)
class Accept:
    """Switch the kubeconfig context to ``node`` and quit."""

    node: Accepting


@dataclass(frozen=True)
class Terminate:
    """End the session, reporting ``message``."""

    message: str


ItemAction = Descend | Accept
Transition = Descend | Terminate


@dataclass(frozen=True)
class Item:
    """One entry of a navigation menu.

    Items without an action (placeholders and warnings) are shown but
    cannot be selected.
    """

    text: str
    kind: str = ""
    matching_terms: tuple[str, ...] = ()
    action: ItemAction | None = None
    back: bool = False
    padding_top: int = 0

    @property
    def selectable(self) -> bool:
        return self.action is not None

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over the text and matching terms."""
        needle = query.strip().lower()
        if not needle:
            return True
        return any(needle in term.lower() for term in (self.text, *self.matching_terms))

    @classmethod
    def placeholder(cls, text: str, kind: str = "") -> Item:
        """An unselectable informational item."""
        return cls(text=text, kind=kind)


def sort_items(items: Iterable[Item]) -> list[Item]:
    """Sort items by display text."""
    return sorted(items, key=lambda item: item.text)
