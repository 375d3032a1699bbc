"""File area - browse, create, rename, move and delete project items.

``FileArea`` holds the navigation state over a ``Project`` tree and performs
item operations. ``FileAreaView`` lays the active folder out as a grid of
item elements and owns the selection, the context-menu factory and the
pointer handlers.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from .commands import CommandQueue
from .config import (
    FILE_AREA_PADDING, FILE_KINDS, FOLDER_KIND, ITEM_HEIGHT, ITEM_LABEL_HEIGHT,
    ITEM_SPACING, ITEM_WIDTH, NEW_ITEM_NAMES, PARENT_FOLDER_NAME,
)
from .context_menu import ContextMenuFactory
from .context_menu_handler import ITEM_CLASS, FileContextMenuHandler
from .errors import ItemNameError, UnknownItemKindError
from .events import (
    CLICK, CONTEXT_MENU, DOUBLE_CLICK, DRAG_START, DROP, Document, Element, PointerEvent,
)
from .file_drag_handler import FileDragHandler
from .logging import log
from .math_utils import grid_position
from .project import File, Folder, Item, Project
from .selection import SelectionSet
from .types import Rect


@dataclass
class RenameState:
    """An inline rename in progress."""
    item: Item
    buffer: str

    @property
    def original_name(self) -> str:
        return self.item.name


class FileArea:
    """Navigation and item operations over a project tree."""

    def __init__(self, project: Project, document: Optional[Document] = None):
        self.project = project
        self.active_folder: Folder = project.root_folder
        self.folder_history: List[Folder] = [self.active_folder]
        self.commands = CommandQueue()
        self.rename: Optional[RenameState] = None
        self.view = FileAreaView(self, document)
        self.view.rebuild_view()

    @property
    def entries(self) -> List[Item]:
        return list(self.active_folder.children)

    @property
    def at_root(self) -> bool:
        return len(self.folder_history) <= 1

    @property
    def parent_folder(self) -> Optional[Folder]:
        """Folder above the active one, or None at the root."""
        if self.at_root:
            return None
        return self.project.parent_of(self.active_folder)

    # ═══════════════════════════════════════════════════════════════════════
    # Item operations
    # ═══════════════════════════════════════════════════════════════════════

    def create_new_item(self, kind: str) -> Item:
        """Create a folder or file of kind in the active folder with a unique name."""
        if kind != FOLDER_KIND and kind not in FILE_KINDS:
            raise UnknownItemKindError(f"Unknown item kind: {kind!r}")
        name = Project.unique_name(self.active_folder, NEW_ITEM_NAMES[kind])
        if kind == FOLDER_KIND:
            item: Item = Folder(self.project.next_id(), name)
        else:
            item = File(self.project.next_id(), name, file_type=kind)
        self.active_folder.add(item)
        log(f"[FILES] Created {kind} {name!r} in {self.active_folder.name!r}")
        self.view.rebuild_view()
        return item

    def selected_entries(self) -> List[Item]:
        """Project items behind the selected elements, in display order."""
        selection = self.view.selection_handler
        return [el.data for el in self.view.items
                if el in selection and isinstance(el.data, Item)]

    def delete_selected_items(self) -> int:
        """Delete all selected items. Returns how many were removed."""
        removed = 0
        for item in self.selected_entries():
            if self.active_folder.remove(item):
                removed += 1
        if removed:
            log(f"[FILES] Deleted {removed} item(s)")
        self.view.rebuild_view()
        return removed

    def rename_item(self, item: Item, new_name: str) -> bool:
        """Rename item. Blank or unchanged names are ignored; clashes raise ItemNameError."""
        new_name = new_name.strip()
        if not new_name or new_name == item.name:
            return False
        sibling = self.active_folder.child_named(new_name)
        if sibling is not None and sibling is not item:
            raise ItemNameError(f"{new_name!r} already exists in {self.active_folder.name!r}")
        log(f"[FILES] Renamed {item.name!r} -> {new_name!r}")
        item.name = new_name
        self.view.rebuild_view()
        element = self.view.element_for(item)
        if element is not None:
            self.view.selection_handler.select_item(element)
        return True

    def can_move_selected_items(self, folder: Optional[Folder]) -> bool:
        """A move needs a destination that is neither selected nor inside a selected folder."""
        if folder is None or folder is self.active_folder:
            return False
        entries = self.selected_entries()
        if not entries:
            return False
        for item in entries:
            if item is folder:
                return False
            if isinstance(item, Folder) and any(child is folder for child in item.walk()):
                return False
        return True

    def move_selected_items(self, folder: Optional[Folder]) -> int:
        """Move all selected items into folder. Returns how many were moved."""
        if not self.can_move_selected_items(folder):
            log("[FILES][ERR] Refused move: invalid destination")
            return 0
        entries = self.selected_entries()
        for item in entries:
            self.active_folder.remove(item)
            item.name = Project.unique_name(folder, item.name)
            folder.add(item)
        log(f"[FILES] Moved {len(entries)} item(s) to {folder.name!r}")
        self.view.rebuild_view()
        return len(entries)

    def rename_selected_items(self, new_name: str) -> bool:
        """Rename the single selected item."""
        entries = self.selected_entries()
        if len(entries) != 1:
            return False
        return self.rename_item(entries[0], new_name)

    # ═══════════════════════════════════════════════════════════════════════
    # Inline rename
    # ═══════════════════════════════════════════════════════════════════════

    def start_rename(self) -> bool:
        if self.rename is not None:
            return False
        entries = self.selected_entries()
        if len(entries) != 1:
            return False
        self.rename = RenameState(entries[0], entries[0].name)
        return True

    def rename_type(self, text: str) -> None:
        if self.rename is not None:
            self.rename.buffer += text

    def rename_backspace(self) -> None:
        if self.rename is not None:
            self.rename.buffer = self.rename.buffer[:-1]

    def finalize_rename(self) -> bool:
        """Apply the typed name. A clashing name keeps the original."""
        state = self.rename
        if state is None:
            return False
        self.rename = None
        try:
            return self.rename_item(state.item, state.buffer)
        except ItemNameError as e:
            log(f"[FILES][ERR] Failed to rename {state.original_name!r}: {e}")
            return False

    def cancel_rename(self) -> None:
        self.rename = None

    # ═══════════════════════════════════════════════════════════════════════
    # Navigation
    # ═══════════════════════════════════════════════════════════════════════

    def change_directory(self, name: str) -> bool:
        """Enter child folder name, or go up for '..'."""
        if name == PARENT_FOLDER_NAME:
            if self.at_root:
                return False
            self.folder_history.pop()
        else:
            child = self.active_folder.child_named(name)
            if not isinstance(child, Folder):
                return False
            self.folder_history.append(child)
        self.active_folder = self.folder_history[-1]
        log(f"[FILES] cd {self.active_folder.name!r}")
        self.view.rebuild_view()
        return True


class ClickSelectionHandler:
    """Left-click selection: plain click replaces, ctrl-click toggles, empty space clears."""

    def __init__(self, file_area_view: FileAreaView):
        self.file_area_view = file_area_view

    @property
    def selection(self) -> SelectionSet:
        return self.file_area_view.selection_handler

    def handle_click(self, event: PointerEvent) -> None:
        target = event.target.closest(ITEM_CLASS) if event.target is not None else None
        if target is None:
            self.selection.clear()
            return
        if event.ctrl:
            self.toggle_item_selection(target)
        else:
            self.selection.clear()
            self.selection.select_item(target)

    def toggle_item_selection(self, target: Element) -> None:
        if self.selection.has(target):
            self.selection.deselect_item(target)
        else:
            self.selection.select_item(target)


class FileAreaView:
    """Grid of item elements for the active folder."""

    def __init__(self, file_area: FileArea, document: Optional[Document] = None):
        self.file_area = file_area
        self.element = Element(id="file-area-view", classes={"file-area-view"},
                               rect=Rect(0, 0, 640, 240))
        if document is None:
            document = Document(self.element)
        else:
            document.root.append(self.element)
        self.document = document
        self.items: List[Element] = []

        self.selection_handler = SelectionSet()
        self.context_menu_factory = ContextMenuFactory(file_area)
        self.context_menu_handler = FileContextMenuHandler(self, document)
        self.click_handler = ClickSelectionHandler(self)
        self.drag_handler = FileDragHandler(self)

        document.add_listener(CLICK, self._on_click)
        document.add_listener(CONTEXT_MENU, self._on_context_menu)
        document.add_listener(DOUBLE_CLICK, self._on_double_click)
        document.add_listener(DRAG_START, self._on_drag_start)
        document.add_listener(DROP, self._on_drop)

    def _owns(self, event: PointerEvent) -> bool:
        return self.element.contains(event.target)

    def _on_click(self, event: PointerEvent) -> None:
        if self._owns(event):
            self.click_handler.handle_click(event)

    def _on_context_menu(self, event: PointerEvent) -> None:
        if self._owns(event):
            self.context_menu_handler.handle_context_menu(event)

    def _on_double_click(self, event: PointerEvent) -> None:
        if not self._owns(event):
            return
        target = event.target.closest(ITEM_CLASS)
        if target is not None and target.has_class(FOLDER_KIND):
            self.file_area.change_directory(target.text)

    def _on_drag_start(self, event: PointerEvent) -> None:
        if self._owns(event):
            self.drag_handler.handle_drag_start(event)

    def _on_drop(self, event: PointerEvent) -> None:
        if self._owns(event):
            self.drag_handler.handle_drop(event)

    def set_bounds(self, rect: Rect) -> None:
        self.element.rect = rect
        self.rebuild_view()

    @property
    def columns(self) -> int:
        usable = self.element.rect.w - 2 * FILE_AREA_PADDING + ITEM_SPACING
        return max(1, int(usable // (ITEM_WIDTH + ITEM_SPACING)))

    def rebuild_view(self) -> None:
        """Recreate item elements for the active folder. Clears the selection."""
        self.selection_handler.clear()
        self.element.remove_children()
        self.items = []

        if not self.file_area.at_root:
            self._add_item(PARENT_FOLDER_NAME, FOLDER_KIND, None)
        for entry in self.file_area.entries:
            kind = FOLDER_KIND if isinstance(entry, Folder) else "file"
            self._add_item(entry.name, kind, entry)

    def _add_item(self, name: str, kind: str, entry: Optional[Item]) -> Element:
        ox, oy = grid_position(len(self.items), self.columns,
                               ITEM_WIDTH, ITEM_HEIGHT, ITEM_SPACING)
        rect = Rect(self.element.rect.x + FILE_AREA_PADDING + ox,
                    self.element.rect.y + FILE_AREA_PADDING + oy,
                    ITEM_WIDTH, ITEM_HEIGHT)
        item_id = f"item-{entry.id}" if entry is not None else "item-parent"
        element = Element(id=item_id, classes={ITEM_CLASS, kind}, rect=rect,
                          text=name, data=entry)
        element.append(Element(classes={"label"}, text=name,
                               rect=Rect(rect.x, rect.bottom - ITEM_LABEL_HEIGHT,
                                         rect.w, ITEM_LABEL_HEIGHT)))
        self.element.append(element)
        self.items.append(element)
        return element

    def element_for(self, entry: Item) -> Optional[Element]:
        for element in self.items:
            if element.data is entry:
                return element
        return None
