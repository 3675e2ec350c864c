"""Unit tests for navigation items."""

from __future__ import annotations

import pytest

from spaces_navigator.services.navigation.items import Descend, Item, sort_items
from spaces_navigator.services.navigation.nodes import Root


@pytest.mark.unit
class TestItem:
    """Tests for Item."""

    def test_selectable_requires_action(self) -> None:
        """Only items with an action can be selected."""
        assert Item(text="acme", action=Descend(Root())).selectable
        assert not Item(text="acme").selectable

    def test_placeholder_is_unselectable(self) -> None:
        """Placeholders never carry an action."""
        item = Item.placeholder("No groups found", kind="group")
        assert not item.selectable
        assert item.kind == "group"

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("", True),
            ("ACME", True),
            ("corp", True),
            ("acme-prod", True),
            ("initech", False),
        ],
    )
    def test_matches_text_and_terms(self, query: str, expected: bool) -> None:
        """Matching is a case-insensitive substring search over text and terms."""
        item = Item(text="Acme Corp", matching_terms=("acme-prod",))
        assert item.matches(query) is expected


@pytest.mark.unit
class TestSortItems:
    """Tests for sort_items."""

    def test_ordinal_case_sensitive(self) -> None:
        """Upper-case letters sort before lower-case ones."""
        items = [Item(text=t) for t in ("Zeta", "alpha", "Beta")]
        assert [i.text for i in sort_items(items)] == ["Beta", "Zeta", "alpha"]

    def test_stable_for_equal_text(self) -> None:
        """Items with equal text keep their relative order."""
        first = Item(text="same", kind="a")
        second = Item(text="same", kind="b")
        assert sort_items([first, second]) == [first, second]
