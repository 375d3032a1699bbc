"""Selection set - the items currently selected within one view."""

from __future__ import annotations
from typing import Iterator, Set

from .events import Element
from .logging import log


class SelectionSet:
    """Identity set of selected item elements. Order is not tracked."""

    def __init__(self):
        self.selected_items: Set[Element] = set()

    def select_item(self, item: Element) -> None:
        """Add item to the selection. Selecting twice is a no-op."""
        if item in self.selected_items:
            return
        self.selected_items.add(item)
        log(f"[SELECT] +{item.id or item.text!r} ({len(self.selected_items)} selected)")

    def has(self, item: Element) -> bool:
        return item in self.selected_items

    def deselect_item(self, item: Element) -> None:
        self.selected_items.discard(item)

    def clear(self) -> None:
        self.selected_items.clear()

    def has_selected_items(self) -> bool:
        return bool(self.selected_items)

    def __contains__(self, item: object) -> bool:
        return item in self.selected_items

    def __iter__(self) -> Iterator[Element]:
        return iter(self.selected_items)

    def __len__(self) -> int:
        return len(self.selected_items)
