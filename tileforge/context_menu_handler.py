"""Right-click dispatch for the file area.

A right-click resolves the item under the pointer, adds it to the selection
if it is not already selected, and opens the menu matching the (possibly
updated) selection. The menu closes on the next click anywhere.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .file_area import FileAreaView

from .context_menu import ContextMenu
from .events import Document, Element, PointerEvent, Subscription

ITEM_CLASS = "item"


class FileContextMenuHandler:
    """Binds context-menu events to selection updates and menu display."""

    def __init__(self, file_area_view: "FileAreaView", document: Document):
        self.file_area_view = file_area_view
        self.context_menu_factory = file_area_view.context_menu_factory
        self.document = document
        self.active_menu: Optional[ContextMenu] = None

    def handle_context_menu(self, event: PointerEvent) -> Subscription:
        """Open the context menu for event. Returns the dismissal subscription."""
        event.prevent_default()

        target = self.get_target_item(event)
        if target is not None and not self.is_item_selected(target):
            self.select_target_item(target)

        context_menu = self.create_context_menu()
        if self.active_menu is not None and self.active_menu is not context_menu:
            self.active_menu.hide()
        self.active_menu = context_menu

        context_menu.show(event)
        return self.add_hide_context_menu_listener(context_menu)

    def get_target_item(self, event: PointerEvent) -> Optional[Element]:
        if event.target is None:
            return None
        return event.target.closest(ITEM_CLASS)

    def is_item_selected(self, target: Element) -> bool:
        return self.file_area_view.selection_handler.has(target)

    def select_target_item(self, target: Element) -> None:
        self.file_area_view.selection_handler.select_item(target)

    def create_context_menu(self) -> ContextMenu:
        return self.context_menu_factory.get_context_menu(
            self.file_area_view.selection_handler.selected_items
        )

    def add_hide_context_menu_listener(self, context_menu: ContextMenu) -> Subscription:
        return context_menu.dismiss_on_next_click(self.document)

    @property
    def is_menu_open(self) -> bool:
        return self.active_menu is not None and self.active_menu.visible
