"""Input Handler - maps raylib input events to commands.

Polls raylib once per frame. Pointer input over the window becomes
``DispatchPointer`` commands carrying DOM-style events for the workspace
document; keyboard shortcuts and canvas drags become editor commands.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from .workspace import Workspace

from .rl_compat import rl
from .commands import (
    Command,
    AddTileLayer, ClearMapSelection, CloseApp, ContextMenuClick, DeleteItems,
    DispatchPointer, EndStroke, EraseSelection, FinishRename, HideContextMenu,
    MoveLayer, PaintCell, RenameBackspace, RenameItems, RenameType, SelectAsset,
    SelectTool, SwitchLayer, ToggleLayerVisibility, ZoomIn, ZoomOut,
)
from .config import DOUBLE_CLICK_TIME_MS
from .context_menu_handler import ITEM_CLASS
from .events import (
    CLICK, CONTEXT_MENU, DOUBLE_CLICK, DRAG_START, DROP, LEFT_BUTTON, RIGHT_BUTTON,
    PointerEvent,
)
from .logging import now
from .map_editor import ERASER, PEN, SELECT

VISIBILITY_TOGGLE_W = 34  # Width of the "[x]" column in the layer panel
DRAG_THRESHOLD = 6  # Pixels the pointer must travel before a press becomes a drag


@dataclass
class MouseState:
    """Current mouse state snapshot."""
    x: float = 0.0
    y: float = 0.0
    left_pressed: bool = False
    left_down: bool = False
    left_released: bool = False
    right_pressed: bool = False
    wheel: float = 0.0
    ctrl: bool = False


@dataclass
class InputHandler:
    """Handles input polling and command generation."""

    key_close: int = rl.KEY_ESCAPE
    key_pen: int = rl.KEY_P
    key_eraser: int = rl.KEY_E
    key_select: int = rl.KEY_S
    key_deselect: int = rl.KEY_D  # with Ctrl
    key_erase_selection: int = rl.KEY_BACKSPACE
    key_new_layer: int = rl.KEY_N
    key_rename: int = rl.KEY_F2
    key_delete: int = rl.KEY_DELETE

    # Double-click tracking
    _last_click_time: float = 0.0
    _last_click_pos: Tuple[int, int] = (0, 0)
    _double_click_distance: int = 6

    # File drag tracking
    _press_pos: Optional[Tuple[float, float]] = None
    _dragging: bool = False

    def poll_mouse(self) -> MouseState:
        pos = rl.GetMousePosition()
        return MouseState(
            x=pos.x,
            y=pos.y,
            left_pressed=rl.IsMouseButtonPressed(rl.MOUSE_BUTTON_LEFT),
            left_down=rl.IsMouseButtonDown(rl.MOUSE_BUTTON_LEFT),
            left_released=rl.IsMouseButtonReleased(rl.MOUSE_BUTTON_LEFT),
            right_pressed=rl.IsMouseButtonPressed(rl.MOUSE_BUTTON_RIGHT),
            wheel=rl.GetMouseWheelMove(),
            ctrl=rl.IsKeyDown(rl.KEY_LEFT_CONTROL) or rl.IsKeyDown(rl.KEY_RIGHT_CONTROL),
        )

    def check_double_click(self, mouse: MouseState) -> bool:
        """Check for double-click. Updates internal state."""
        t = now()
        if (t - self._last_click_time) < (DOUBLE_CLICK_TIME_MS / 1000.0):
            dx = abs(int(mouse.x) - self._last_click_pos[0])
            dy = abs(int(mouse.y) - self._last_click_pos[1])
            if dx < self._double_click_distance and dy < self._double_click_distance:
                self._last_click_time = 0.0
                return True

        self._last_click_time = t
        self._last_click_pos = (int(mouse.x), int(mouse.y))
        return False

    def pointer_event(self, ws: "Workspace", event_type: str, mouse: MouseState,
                      button: int = LEFT_BUTTON) -> PointerEvent:
        """Build a document event targeting the element under the mouse."""
        return PointerEvent(
            type=event_type,
            target=ws.document.target_at(mouse.x, mouse.y),
            x=mouse.x,
            y=mouse.y,
            button=button,
            ctrl=mouse.ctrl,
        )

    def _poll_rename(self) -> List[Command]:
        commands: List[Command] = []
        ch = rl.GetCharPressed()
        while ch > 0:
            commands.append(RenameType(chr(ch)))
            ch = rl.GetCharPressed()
        if rl.IsKeyPressed(rl.KEY_BACKSPACE):
            commands.append(RenameBackspace())
        if rl.IsKeyPressed(rl.KEY_ENTER):
            commands.append(FinishRename())
        elif rl.IsKeyPressed(rl.KEY_ESCAPE):
            commands.append(FinishRename(cancel=True))
        return commands

    def _poll_layer_panel(self, ws: "Workspace", mouse: MouseState) -> Optional[Command]:
        index = ws.layer_index_at(mouse.x, mouse.y)
        if index < 0:
            return None
        if mouse.x < ws.layer_panel_rect.x + VISIBILITY_TOGGLE_W:
            return ToggleLayerVisibility(index)
        return SwitchLayer(index)

    def _poll_drag(self, ws: "Workspace", mouse: MouseState) -> List[Command]:
        """Turn a press-move-release over a file item into drag-start and drop events."""
        commands: List[Command] = []
        if mouse.left_pressed:
            target = ws.document.target_at(mouse.x, mouse.y)
            on_item = ws.file_area.view.element.contains(target) and \
                target.closest(ITEM_CLASS) is not None
            self._press_pos = (mouse.x, mouse.y) if on_item else None
            self._dragging = False
        elif mouse.left_down and self._press_pos is not None and not self._dragging:
            px, py = self._press_pos
            if abs(mouse.x - px) > DRAG_THRESHOLD or abs(mouse.y - py) > DRAG_THRESHOLD:
                self._dragging = True
                commands.append(DispatchPointer(PointerEvent(
                    type=DRAG_START, target=ws.document.target_at(px, py),
                    x=px, y=py, ctrl=mouse.ctrl)))
        if mouse.left_released:
            if self._dragging:
                commands.append(DispatchPointer(self.pointer_event(ws, DROP, mouse)))
            self._press_pos = None
            self._dragging = False
        return commands

    def poll(self, ws: "Workspace") -> List[Command]:
        """Poll all inputs and return list of commands to execute."""
        mouse = self.poll_mouse()

        # ─── Inline rename grabs the keyboard ────────────────────────────────
        if ws.file_area.rename is not None:
            rename_cmds = self._poll_rename()
            if mouse.left_pressed:
                rename_cmds.append(FinishRename())
            return rename_cmds

        commands: List[Command] = []

        # ─── Context Menu Handling ───────────────────────────────────────────
        menu = ws.open_context_menu
        if menu is not None:
            menu.hover_index = menu.option_at(mouse.x, mouse.y, ws.screen_w, ws.screen_h)
            if mouse.left_pressed and menu.hover_index >= 0:
                commands.append(ContextMenuClick(item_index=menu.hover_index))
                return commands
            if rl.IsKeyPressed(rl.KEY_ESCAPE):
                commands.append(HideContextMenu())
                return commands

        # ─── Pointer events for the document ─────────────────────────────────
        if mouse.right_pressed:
            commands.append(DispatchPointer(
                self.pointer_event(ws, CONTEXT_MENU, mouse, RIGHT_BUTTON)))
            return commands

        if mouse.left_pressed:
            commands.append(DispatchPointer(self.pointer_event(ws, CLICK, mouse)))
            if self.check_double_click(mouse):
                commands.append(DispatchPointer(self.pointer_event(ws, DOUBLE_CLICK, mouse)))
            if menu is not None:
                # Document listeners still see the click (dismissal, file selection);
                # the layer panel and canvas do not.
                return commands
            panel_cmd = self._poll_layer_panel(ws, mouse)
            if panel_cmd is not None:
                commands.append(panel_cmd)

        commands.extend(self._poll_drag(ws, mouse))
        if mouse.left_released:
            commands.append(EndStroke())

        # ─── Canvas ──────────────────────────────────────────────────────────
        if mouse.left_down and menu is None and not self._dragging:
            cell = ws.cell_at(mouse.x, mouse.y)
            if cell is not None:
                commands.append(PaintCell(*cell))

        if mouse.wheel != 0.0 and ws.map_rect.contains(mouse.x, mouse.y):
            commands.append(ZoomIn() if mouse.wheel > 0 else ZoomOut())

        # ─── Keyboard ────────────────────────────────────────────────────────
        if rl.IsKeyPressed(self.key_close) and menu is None:
            commands.append(CloseApp())
            return commands

        if rl.IsKeyPressed(self.key_pen):
            commands.append(SelectTool(PEN))
        if rl.IsKeyPressed(self.key_eraser):
            commands.append(SelectTool(ERASER))
        if rl.IsKeyPressed(self.key_select) and not mouse.ctrl:
            commands.append(SelectTool(SELECT))
        if rl.IsKeyPressed(self.key_erase_selection):
            commands.append(EraseSelection())
        if rl.IsKeyPressed(self.key_new_layer):
            commands.append(AddTileLayer())
        if rl.IsKeyPressed(self.key_rename):
            commands.append(RenameItems())
        if rl.IsKeyPressed(self.key_delete):
            commands.append(DeleteItems())

        keys = ws.map_editor.tileset.keys()
        for i, asset in enumerate(keys[:9]):
            if rl.IsKeyPressed(rl.KEY_ONE + i):
                commands.append(SelectAsset(asset))

        if mouse.ctrl:
            active = ws.map_editor.layers.active_layer_index
            if rl.IsKeyPressed(self.key_deselect):
                commands.append(ClearMapSelection())
            if rl.IsKeyPressed(rl.KEY_UP):
                commands.append(MoveLayer(active, +1))
            if rl.IsKeyPressed(rl.KEY_DOWN):
                commands.append(MoveLayer(active, -1))

        return commands


_default_handler: Optional[InputHandler] = None


def get_input_handler() -> InputHandler:
    """Get the default input handler instance."""
    global _default_handler
    if _default_handler is None:
        _default_handler = InputHandler()
    return _default_handler
