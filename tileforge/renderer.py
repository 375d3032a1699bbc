"""Renderer - handles all drawing operations.

The Renderer only reads the workspace and draws to screen. The map frame is
composed with Pillow by the map editor and uploaded as a texture whenever
the workspace's map revision changes.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .workspace import Workspace

from .rl_compat import (
    rl, color, draw_text, make_rect, make_vec2, texture_from_image, unload_texture,
)
from .config import (
    C_BG, C_CHECKER_A, C_CHECKER_B, C_FILE, C_FOLDER, C_FRAME, C_PANEL,
    C_SELECTED, C_TEXT, C_TEXT_DIM, ITEM_LABEL_HEIGHT, LAYER_PANEL_HEADER, LAYER_ROW_HEIGHT,
    MENU_BG_ALPHA, MENU_HOVER_ALPHA, MENU_ITEM_HEIGHT, MENU_PADDING,
)
from .layers import TileLayer
from .types import Rect

CHECKER = 16


@dataclass
class Renderer:
    """
    Handles all drawing operations.

    Usage:
        renderer = Renderer()
        renderer.draw_frame(workspace)
        ...
        renderer.unload()
    """
    _map_texture: Any = None
    _map_revision: int = -1

    def begin_frame(self) -> None:
        rl.BeginDrawing()
        rl.ClearBackground(color(C_BG))

    def end_frame(self) -> None:
        rl.EndDrawing()

    def unload(self) -> None:
        """Release GPU resources."""
        unload_texture(self._map_texture)
        self._map_texture = None
        self._map_revision = -1

    # ═══════════════════════════════════════════════════════════════════════
    # Map canvas
    # ═══════════════════════════════════════════════════════════════════════

    def _sync_map_texture(self, ws: "Workspace") -> None:
        if self._map_texture is not None and self._map_revision == ws.map_revision:
            return
        unload_texture(self._map_texture)
        self._map_texture = texture_from_image(ws.map_editor.render_frame())
        self._map_revision = ws.map_revision

    def draw_map(self, ws: "Workspace") -> None:
        r = ws.map_rect
        rl.BeginScissorMode(int(r.x), int(r.y), int(r.w), int(r.h))
        ox, oy = ws.map_origin
        w, h = ws.map_editor.pixel_size
        w, h = int(w * ws.map_editor.scale), int(h * ws.map_editor.scale)

        # Checkerboard behind transparent cells
        for cy in range(0, h, CHECKER):
            for cx in range(0, w, CHECKER):
                c = C_CHECKER_A if ((cx // CHECKER) + (cy // CHECKER)) % 2 == 0 else C_CHECKER_B
                rl.DrawRectangle(int(ox + cx), int(oy + cy),
                                 min(CHECKER, w - cx), min(CHECKER, h - cy), color(c))

        self._sync_map_texture(ws)
        rl.DrawTextureV(self._map_texture, make_vec2(ox, oy), color((255, 255, 255)))
        rl.EndScissorMode()

    # ═══════════════════════════════════════════════════════════════════════
    # Layer panel
    # ═══════════════════════════════════════════════════════════════════════

    def draw_layer_panel(self, ws: "Workspace") -> None:
        r = ws.layer_panel_rect
        rl.DrawRectangle(int(r.x), int(r.y), int(r.w), int(r.h), color(C_PANEL))
        draw_text("Layers", int(r.x) + 10, int(r.y) + 8, 18, color(C_TEXT))

        layers = ws.map_editor.layers
        # Top layer listed first
        for row, index in enumerate(reversed(range(len(layers)))):
            layer = layers.layers[index]
            y = int(r.y) + LAYER_PANEL_HEADER + row * LAYER_ROW_HEIGHT
            if index == layers.active_layer_index:
                rl.DrawRectangle(int(r.x) + 4, y, int(r.w) - 8, LAYER_ROW_HEIGHT - 2,
                                 color(C_SELECTED))
            eye = "[x]" if layer.visible else "[ ]"
            tag = "" if isinstance(layer, TileLayer) else " *"
            text_col = C_TEXT if layer.visible else C_TEXT_DIM
            draw_text(f"{eye} {layer.name}{tag}", int(r.x) + 10, y + 6, 16, color(text_col))

        ed = ws.map_editor
        info = f"{ed.tool}  {ed.asset or '-'}  x{ed.scale:.2f}"
        draw_text(info, int(r.x) + 10, int(r.bottom) - 24, 14, color(C_TEXT_DIM))

    # ═══════════════════════════════════════════════════════════════════════
    # File area
    # ═══════════════════════════════════════════════════════════════════════

    def draw_file_area(self, ws: "Workspace") -> None:
        view = ws.file_area.view
        r = view.element.rect
        rl.DrawRectangle(int(r.x), int(r.y), int(r.w), int(r.h), color(C_PANEL))
        rl.DrawLine(int(r.x), int(r.y), int(r.right), int(r.y), color(C_FRAME))

        rename = ws.file_area.rename
        for element in view.items:
            er = element.rect
            if element in view.selection_handler:
                rl.DrawRectangle(int(er.x), int(er.y), int(er.w), int(er.h),
                                 color(C_SELECTED, 0.6))
            icon_col = C_FOLDER if element.has_class("folder") else C_FILE
            icon = Rect(er.x + er.w * 0.25, er.y + 6, er.w * 0.5, er.h - ITEM_LABEL_HEIGHT - 12)
            rl.DrawRectangleRec(make_rect(icon.x, icon.y, icon.w, icon.h), color(icon_col))

            label = element.text
            if rename is not None and element.data is rename.item:
                label = rename.buffer + "_"
            draw_text(_fit(label, 14), int(er.x) + 4,
                      int(er.bottom) - ITEM_LABEL_HEIGHT + 3, 14, color(C_TEXT))

    # ═══════════════════════════════════════════════════════════════════════
    # Context Menu
    # ═══════════════════════════════════════════════════════════════════════

    def draw_context_menu(self, ws: "Workspace") -> None:
        """Draw the open context menu, if any."""
        menu = ws.open_context_menu
        if menu is None or not menu.options:
            return

        r = menu.menu_rect(ws.screen_w, ws.screen_h)
        x, y, w, h = int(r.x), int(r.y), int(r.w), int(r.h)

        shadow_off = 4
        rl.DrawRectangle(x + shadow_off, y + shadow_off, w, h, color((0, 0, 0), 0.4))
        rl.DrawRectangle(x, y, w, h, color((40, 40, 40), MENU_BG_ALPHA))
        rl.DrawRectangleLines(x, y, w, h, color(C_FRAME))

        item_y = y + MENU_PADDING
        for i, option in enumerate(menu.options):
            is_hover = (i == menu.hover_index)
            if is_hover:
                rl.DrawRectangle(x + 2, item_y, w - 4, MENU_ITEM_HEIGHT,
                                 color((255, 255, 255), MENU_HOVER_ALPHA))
            text_col = (255, 255, 255) if is_hover else (200, 200, 200)
            draw_text(option.label, x + MENU_PADDING + 8,
                      item_y + (MENU_ITEM_HEIGHT - 16) // 2, 16, color(text_col))
            item_y += MENU_ITEM_HEIGHT

    # ═══════════════════════════════════════════════════════════════════════
    # Convenience methods
    # ═══════════════════════════════════════════════════════════════════════

    def draw_all(self, ws: "Workspace") -> None:
        self.draw_map(ws)
        self.draw_layer_panel(ws)
        self.draw_file_area(ws)
        # Context menu always on top
        self.draw_context_menu(ws)

    def draw_frame(self, ws: "Workspace") -> None:
        """Complete frame: begin, draw all, end."""
        self.begin_frame()
        self.draw_all(ws)
        self.end_frame()


def _fit(text: str, max_chars: int) -> str:
    return text if len(text) <= max_chars else text[:max_chars - 3] + "..."


_default_renderer: Optional[Renderer] = None


def get_renderer() -> Renderer:
    """Get the default renderer instance."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = Renderer()
    return _default_renderer
