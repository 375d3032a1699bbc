"""Command Pattern for editor actions.

Commands encapsulate actions triggered from context menus, keyboard shortcuts
and the layer panel. Each command has an execute() method and optional
can_execute() for guards. File-area commands run against a ``FileArea``,
map commands against a ``MapEditor``.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from .file_area import FileArea
    from .map_editor import MapEditor
    from .events import PointerEvent
    from .workspace import Workspace

from .config import FOLDER_KIND
from .logging import log


class Command(ABC):
    """Base class for all commands."""

    @abstractmethod
    def execute(self, target: Any) -> bool:
        """Execute the command. Returns True if action was taken."""
        pass

    def can_execute(self, target: Any) -> bool:
        """Check if command can be executed. Override for guards."""
        return True


# ═══════════════════════════════════════════════════════════════════════════
# File Area Commands
# ═══════════════════════════════════════════════════════════════════════════

class FileAreaCommand(Command):
    """Command executed against the file area."""


class AddFolder(FileAreaCommand):
    """Create a new folder in the active folder."""

    def execute(self, target: "FileArea") -> bool:
        item = target.create_new_item(FOLDER_KIND)
        log(f"[CMD] AddFolder: {item.name!r}")
        return True


@dataclass
class AddFile(FileAreaCommand):
    """Create a new file of the given type in the active folder."""
    file_type: str

    def execute(self, target: "FileArea") -> bool:
        item = target.create_new_item(self.file_type)
        log(f"[CMD] AddFile: {item.name!r}")
        return True


@dataclass
class RenameItems(FileAreaCommand):
    """Rename the selected item, or start inline renaming when no name is given."""
    new_name: Optional[str] = None

    def can_execute(self, target: "FileArea") -> bool:
        return target.view.selection_handler.has_selected_items()

    def execute(self, target: "FileArea") -> bool:
        if not self.can_execute(target):
            return False
        if self.new_name is None:
            log("[CMD] RenameItems: start inline rename")
            return target.start_rename()
        log(f"[CMD] RenameItems: -> {self.new_name!r}")
        return target.rename_selected_items(self.new_name)


class DeleteItems(FileAreaCommand):
    """Delete every selected item."""

    def can_execute(self, target: "FileArea") -> bool:
        return target.view.selection_handler.has_selected_items()

    def execute(self, target: "FileArea") -> bool:
        if not self.can_execute(target):
            return False
        removed = target.delete_selected_items()
        log(f"[CMD] DeleteItems: {removed} removed")
        return removed > 0


@dataclass
class RenameType(FileAreaCommand):
    """Append typed text to the inline rename buffer."""
    text: str

    def can_execute(self, target: "FileArea") -> bool:
        return target.rename is not None

    def execute(self, target: "FileArea") -> bool:
        if not self.can_execute(target):
            return False
        target.rename_type(self.text)
        return True


class RenameBackspace(FileAreaCommand):

    def can_execute(self, target: "FileArea") -> bool:
        return target.rename is not None

    def execute(self, target: "FileArea") -> bool:
        if not self.can_execute(target):
            return False
        target.rename_backspace()
        return True


@dataclass
class FinishRename(FileAreaCommand):
    """Apply the inline rename, or discard it when cancel is set."""
    cancel: bool = False

    def can_execute(self, target: "FileArea") -> bool:
        return target.rename is not None

    def execute(self, target: "FileArea") -> bool:
        if not self.can_execute(target):
            return False
        if self.cancel:
            target.cancel_rename()
            return True
        return target.finalize_rename()


# ═══════════════════════════════════════════════════════════════════════════
# Map Editor Commands
# ═══════════════════════════════════════════════════════════════════════════

class MapCommand(Command):
    """Command executed against the map editor."""


@dataclass
class ToggleLayerVisibility(MapCommand):
    index: int

    def can_execute(self, target: "MapEditor") -> bool:
        return 0 <= self.index < len(target.layers)

    def execute(self, target: "MapEditor") -> bool:
        if not self.can_execute(target):
            return False
        target.layers.toggle_layer_visibility(self.index)
        log(f"[CMD] ToggleLayerVisibility: {self.index} -> "
            f"{target.layers.is_layer_visible(self.index)}")
        return True


@dataclass
class SwitchLayer(MapCommand):
    index: int

    def execute(self, target: "MapEditor") -> bool:
        return target.layers.switch_layer(self.index)


@dataclass
class MoveLayer(MapCommand):
    """Move a layer up (+1) or down (-1) in the stack."""
    index: int
    delta: int

    def execute(self, target: "MapEditor") -> bool:
        new_index = target.layers.move_layer(self.index, self.delta)
        log(f"[CMD] MoveLayer: {self.index} -> {new_index}")
        return new_index != self.index


class AddTileLayer(MapCommand):

    def execute(self, target: "MapEditor") -> bool:
        layer = target.add_tile_layer()
        log(f"[CMD] AddTileLayer: {layer.name!r}")
        return True


@dataclass
class RemoveLayer(MapCommand):
    index: int

    def execute(self, target: "MapEditor") -> bool:
        return target.layers.remove_layer(self.index) is not None


class ZoomIn(MapCommand):

    def execute(self, target: "MapEditor") -> bool:
        return target.zoom_in()


class ZoomOut(MapCommand):

    def execute(self, target: "MapEditor") -> bool:
        return target.zoom_out()


@dataclass
class SelectTool(MapCommand):
    tool: str

    def execute(self, target: "MapEditor") -> bool:
        target.set_tool(self.tool)
        log(f"[CMD] SelectTool: {self.tool}")
        return True


@dataclass
class SelectAsset(MapCommand):
    asset: str

    def can_execute(self, target: "MapEditor") -> bool:
        return self.asset in target.tileset

    def execute(self, target: "MapEditor") -> bool:
        if not self.can_execute(target):
            return False
        target.asset = self.asset
        return True


@dataclass
class PaintCell(MapCommand):
    """Apply the current tool to a map cell."""
    x: int
    y: int

    def execute(self, target: "MapEditor") -> bool:
        return target.apply_tool((self.x, self.y))


class EndStroke(MapCommand):
    """Mouse released over the canvas: finish any selection drag."""

    def execute(self, target: "MapEditor") -> bool:
        return target.end_stroke()


class ClearMapSelection(MapCommand):

    def execute(self, target: "MapEditor") -> bool:
        return target.clear_selection()


class EraseSelection(MapCommand):
    """Empty every selected cell on the active layer."""

    def can_execute(self, target: "MapEditor") -> bool:
        return bool(target.selected_cells)

    def execute(self, target: "MapEditor") -> bool:
        if not self.can_execute(target):
            return False
        erased = target.erase_selection()
        log(f"[CMD] EraseSelection: {erased} cell(s)")
        return erased > 0


# ═══════════════════════════════════════════════════════════════════════════
# Workspace Commands
# ═══════════════════════════════════════════════════════════════════════════

class WorkspaceCommand(Command):
    """Command executed against the whole workspace."""


@dataclass
class DispatchPointer(WorkspaceCommand):
    """Deliver a pointer event to the workspace document."""
    event: "PointerEvent"

    def execute(self, target: "Workspace") -> bool:
        return target.document.dispatch(self.event) > 0


@dataclass
class ContextMenuClick(WorkspaceCommand):
    """Click on an option of the open context menu."""
    item_index: int

    def can_execute(self, target: "Workspace") -> bool:
        menu = target.open_context_menu
        return menu is not None and 0 <= self.item_index < len(menu.options)

    def execute(self, target: "Workspace") -> bool:
        if not self.can_execute(target):
            return False
        return target.open_context_menu.click_option(self.item_index)


class HideContextMenu(WorkspaceCommand):

    def execute(self, target: "Workspace") -> bool:
        menu = target.open_context_menu
        if menu is None:
            return False
        menu.hide()
        log("[CMD] HideContextMenu")
        return True


class CloseApp(WorkspaceCommand):
    """Close the application."""

    def execute(self, target: Any) -> bool:
        log("[CMD] CloseApp")
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Command Queue
# ═══════════════════════════════════════════════════════════════════════════

class CommandQueue:
    """Executes commands and keeps a bounded history of the ones that acted."""

    def __init__(self, max_history: int = 100):
        self._history: List[Command] = []
        self._max_history = max_history

    def execute(self, command: Command, target: Any) -> bool:
        if not command.can_execute(target):
            return False

        result = command.execute(target)
        if result and self._max_history > 0:
            self._history.append(command)
            if len(self._history) > self._max_history:
                self._history.pop(0)

        return result

    @property
    def history(self) -> list:
        return self._history.copy()

    def clear_history(self) -> None:
        self._history.clear()
