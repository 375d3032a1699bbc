"""Right-click context menus for the file area.

A menu is configured from the selection it is opened for, positioned at the
click, and hidden by the next click anywhere in the document.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

if TYPE_CHECKING:
    from .file_area import FileArea

from .commands import AddFile, AddFolder, Command, DeleteItems, RenameItems
from .config import FILE_KINDS, MENU_ITEM_HEIGHT, MENU_ITEM_WIDTH, MENU_PADDING
from .events import CLICK, Document, Element, PointerEvent, Subscription
from .logging import log
from .types import Rect


@dataclass
class MenuOption:
    """A single labelled entry bound to a command."""
    label: str
    command: Command


class ContextMenu(ABC):
    """Base class for context menus."""

    def __init__(self, file_area: "FileArea"):
        self.file_area = file_area
        self.options: List[MenuOption] = []
        self.items: Tuple[Element, ...] = ()
        self.visible = False
        self.x = 0
        self.y = 0
        self.hover_index = -1
        self._dismissal: Optional[Subscription] = None

    @abstractmethod
    def configure(self, *args) -> None:
        """Rebuild the option list for the items the menu is opened on."""

    def clear_options(self) -> None:
        self.options.clear()

    def add_option(self, label: str, command: Command) -> None:
        self.options.append(MenuOption(label, command))

    @property
    def labels(self) -> List[str]:
        return [opt.label for opt in self.options]

    def show(self, event: PointerEvent) -> None:
        """Show the menu at the event's screen position."""
        self.visible = True
        self.x = int(event.x)
        self.y = int(event.y)
        self.hover_index = -1
        log(f"[MENU] {type(self).__name__} at ({self.x}, {self.y}) "
            f"for {len(self.items)} item(s)")

    def hide(self) -> None:
        """Hide the menu and drop any pending dismissal listener."""
        if self._dismissal is not None:
            self._dismissal.dispose()
            self._dismissal = None
        if self.visible:
            log(f"[MENU] {type(self).__name__} hidden")
        self.visible = False
        self.hover_index = -1

    def dismiss_on_next_click(self, document: Document) -> Subscription:
        """Hide this menu on the next document click. Replaces a pending listener."""
        if self._dismissal is not None:
            self._dismissal.dispose()
        self._dismissal = document.add_listener(CLICK, self._on_document_click, once=True)
        return self._dismissal

    def _on_document_click(self, event: PointerEvent) -> None:
        self._dismissal = None
        self.hide()

    @property
    def dismissal(self) -> Optional[Subscription]:
        return self._dismissal

    def click_option(self, index: int) -> bool:
        """Run the option at index, then hide. Returns the command's result."""
        if not (self.visible and 0 <= index < len(self.options)):
            return False
        option = self.options[index]
        log(f"[MENU] Click: {option.label}")
        try:
            return self.file_area.commands.execute(option.command, self.file_area)
        finally:
            self.hide()

    def menu_rect(self, screen_w: int, screen_h: int) -> Rect:
        """On-screen rectangle, clamped so the whole menu stays visible."""
        menu_w = MENU_ITEM_WIDTH
        menu_h = len(self.options) * MENU_ITEM_HEIGHT + MENU_PADDING * 2
        x = max(5, min(self.x, screen_w - menu_w - 5))
        y = max(5, min(self.y, screen_h - menu_h - 5))
        return Rect(x, y, menu_w, menu_h)

    def option_at(self, px: float, py: float, screen_w: int, screen_h: int) -> int:
        """Index of the option under the point, or -1."""
        if not self.visible:
            return -1
        r = self.menu_rect(screen_w, screen_h)
        if not (r.x <= px <= r.right):
            return -1
        top = r.y + MENU_PADDING
        for i in range(len(self.options)):
            item_y = top + i * MENU_ITEM_HEIGHT
            if item_y <= py < item_y + MENU_ITEM_HEIGHT:
                return i
        return -1


class FileAreaContextMenu(ContextMenu):
    """Menu for empty space: create new items."""

    def configure(self) -> None:
        self.items = ()
        self.clear_options()
        self.add_option("Add Folder", AddFolder())
        for kind in FILE_KINDS:
            self.add_option(f"Add {kind.upper()} File", AddFile(kind))


class ItemContextMenu(ContextMenu):
    """Menu for a single selected item."""

    def configure(self, target: Element) -> None:
        self.items = (target,)
        self.clear_options()
        self.add_option("Rename", RenameItems())
        self.add_option("Delete", DeleteItems())


class MultipleItemsContextMenu(ContextMenu):
    """Menu for several selected items."""

    def configure(self, targets: Iterable[Element]) -> None:
        self.items = tuple(targets)
        self.clear_options()
        self.add_option(f"Delete {len(self.items)} Items", DeleteItems())


class ContextMenuFactory:
    """Picks and configures the menu matching a selection."""

    def __init__(self, file_area: "FileArea"):
        self.file_area = file_area
        self.file_area_context_menu = FileAreaContextMenu(file_area)
        self.item_context_menu = ItemContextMenu(file_area)
        self.multiple_items_context_menu = MultipleItemsContextMenu(file_area)

    @property
    def menus(self) -> Tuple[ContextMenu, ...]:
        return (self.file_area_context_menu, self.item_context_menu,
                self.multiple_items_context_menu)

    @property
    def visible_menu(self) -> Optional[ContextMenu]:
        for menu in self.menus:
            if menu.visible:
                return menu
        return None

    def get_context_menu(self, selected_items: Iterable[Element]) -> ContextMenu:
        """Menu configured for the given selection, read at call time."""
        items = list(selected_items)
        if len(items) > 1:
            self.multiple_items_context_menu.configure(items)
            return self.multiple_items_context_menu
        if len(items) == 1:
            self.item_context_menu.configure(items[0])
            return self.item_context_menu
        self.file_area_context_menu.configure()
        return self.file_area_context_menu
