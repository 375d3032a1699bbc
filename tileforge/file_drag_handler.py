"""Drag-and-drop moves in the file area.

Dragging an item adds it to the selection if it is not already selected;
dropping onto a folder (or the ``..`` entry) moves every selected item there.
The selection is cleared after every drop, whether or not anything moved.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .file_area import FileAreaView

from .config import FOLDER_KIND, PARENT_FOLDER_NAME
from .context_menu_handler import ITEM_CLASS
from .events import Element, PointerEvent
from .logging import log
from .project import Folder


class FileDragHandler:
    """Binds drag-start and drop events to selection updates and item moves."""

    def __init__(self, file_area_view: "FileAreaView"):
        self.file_area_view = file_area_view

    def handle_drag_start(self, event: PointerEvent) -> Optional[Element]:
        """Begin dragging the item under the event. Returns the dragged element."""
        target = self.get_drag_target(event)
        if target is None or target.data is None:
            return None
        if not self.file_area_view.selection_handler.has(target):
            self.file_area_view.selection_handler.select_item(target)
        log(f"[DRAG] Start on {target.text!r} "
            f"({len(self.file_area_view.selection_handler)} selected)")
        return target

    def handle_drop(self, event: PointerEvent) -> int:
        """Move the selection into the folder under the event. Returns items moved."""
        event.prevent_default()
        moved = 0
        target = self.get_drag_target(event)
        if self.is_valid_drop_target(target):
            folder = self.get_target_folder(target)
            if self.is_valid_move(folder):
                moved = self.file_area_view.file_area.move_selected_items(folder)
        self.file_area_view.selection_handler.clear()
        return moved

    def get_drag_target(self, event: PointerEvent) -> Optional[Element]:
        if event.target is None:
            return None
        return event.target.closest(ITEM_CLASS)

    def is_valid_drop_target(self, target: Optional[Element]) -> bool:
        return target is not None and target.has_class(FOLDER_KIND)

    def get_target_folder(self, target: Element) -> Optional[Folder]:
        """Folder a drop onto target lands in; '..' resolves to the parent."""
        if target.text == PARENT_FOLDER_NAME and target.data is None:
            return self.file_area_view.file_area.parent_folder
        return target.data if isinstance(target.data, Folder) else None

    def is_valid_move(self, folder: Optional[Folder]) -> bool:
        return self.file_area_view.file_area.can_move_selected_items(folder)
