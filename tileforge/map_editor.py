"""Map editor - a layered tile canvas with pen, eraser and rectangle selection tools."""

from __future__ import annotations
from typing import FrozenSet, Optional, Tuple

from PIL import Image

from .config import (
    C_GRID, C_MAP_SELECTION, C_MAP_SELECTION_EDGE, MAP_COLUMNS, MAP_ROWS, MAX_ZOOM,
    MIN_ZOOM, ZOOM_STEP,
)
from .layer_manager import LayerManager
from .layers import GridLayer, SelectionLayer, TileLayer
from .logging import channel
from .math_utils import clamp, floor_div
from .tileset import Tileset
from .types import Cell

PEN = "pen"
ERASER = "eraser"
SELECT = "select"
TOOLS = (PEN, ERASER, SELECT)

_log = channel("MAP")


class MapEditor:
    """Owns the layer stack of one map and applies drawing tools to it."""

    def __init__(self, columns: int = MAP_COLUMNS, rows: int = MAP_ROWS,
                 tileset: Optional[Tileset] = None):
        self.columns = columns
        self.rows = rows
        self.tileset = tileset if tileset is not None else Tileset.from_colors()
        self.layers = LayerManager()
        self.scale: float = 1.0
        self.tool: str = PEN
        keys = self.tileset.keys()
        self.asset: Optional[str] = keys[0] if keys else None
        self._tile_layer_count = 0
        self.grid: Optional[GridLayer] = None
        self.selection = SelectionLayer("Selection", self.tile_size,
                                        C_MAP_SELECTION, C_MAP_SELECTION_EDGE)
        self._selection_anchor: Optional[Cell] = None

        self.add_tile_layer()
        self.grid = GridLayer("Grid", columns, rows, self.tile_size, C_GRID)
        self.layers.add_layer(self.grid)

    @property
    def tile_size(self) -> int:
        return self.tileset.tile_size

    @property
    def pixel_size(self) -> Tuple[int, int]:
        """Unscaled map size in pixels."""
        return (self.columns * self.tile_size, self.rows * self.tile_size)

    def add_tile_layer(self) -> TileLayer:
        """Add a new tile layer below the grid overlay and make it active."""
        self._tile_layer_count += 1
        layer = TileLayer(f"Layer {self._tile_layer_count}", self.columns, self.rows,
                          self.tileset)
        index = self.layers.add_layer(layer)
        if self.grid is not None and self.layers.layers[index - 1] is self.grid:
            index = self.layers.move_layer(index, -1)
        self.layers.switch_layer(index)
        return layer

    # ═══════════════════════════════════════════════════════════════════════
    # Zoom
    # ═══════════════════════════════════════════════════════════════════════

    def zoom_in(self) -> bool:
        return self._set_scale(self.scale + ZOOM_STEP)

    def zoom_out(self) -> bool:
        return self._set_scale(self.scale - ZOOM_STEP)

    def _set_scale(self, scale: float) -> bool:
        new_scale = clamp(scale, MIN_ZOOM, MAX_ZOOM)
        if new_scale == self.scale:
            return False
        self.scale = new_scale
        _log(f"Zoom {self.scale:.2f}")
        return True

    # ═══════════════════════════════════════════════════════════════════════
    # Tools
    # ═══════════════════════════════════════════════════════════════════════

    def set_tool(self, tool: str) -> None:
        if tool not in TOOLS:
            raise ValueError(f"Unknown tool: {tool!r}")
        if self.tool == SELECT and tool != SELECT:
            self.clear_selection()
        self.tool = tool
        _log(f"Tool {tool}")

    def screen_to_cell(self, x: float, y: float,
                       origin: Tuple[float, float] = (0.0, 0.0)) -> Optional[Cell]:
        """Map cell under a screen point, or None when outside the map."""
        step = self.tile_size * self.scale
        cx = floor_div(x - origin[0], step)
        cy = floor_div(y - origin[1], step)
        if 0 <= cx < self.columns and 0 <= cy < self.rows:
            return (cx, cy)
        return None

    def apply_tool(self, cell: Cell) -> bool:
        """Paint or erase cell on the active layer, or grow the selection rectangle.

        Only visible tile layers are editable. With the selection tool the first
        call of a stroke anchors the rectangle and later calls drag its corner.
        """
        if self.tool == SELECT:
            if self._selection_anchor is None:
                return self.begin_selection(cell)
            return self.select_rect(self._selection_anchor, cell)
        layer = self.layers.active_layer
        if not isinstance(layer, TileLayer) or not layer.visible:
            return False
        x, y = cell
        if self.tool == ERASER:
            return layer.erase(x, y)
        if self.asset is None:
            return False
        if layer.asset_at(x, y) == self.asset:
            return False
        return layer.paint(x, y, self.asset)

    def end_stroke(self) -> bool:
        """Finish the current drag. Returns True if a selection was being drawn."""
        if self._selection_anchor is None:
            return False
        self._selection_anchor = None
        _log(f"Selected {len(self.selection.cells)} cell(s)")
        return True

    # ═══════════════════════════════════════════════════════════════════════
    # Selection
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def selected_cells(self) -> FrozenSet[Cell]:
        return frozenset(self.selection.cells)

    def begin_selection(self, cell: Cell) -> bool:
        """Anchor a new selection rectangle at cell, replacing the old selection."""
        self._selection_anchor = cell
        return self.select_rect(cell, cell)

    def select_rect(self, a: Cell, b: Cell) -> bool:
        """Select every cell of the rectangle spanned by a and b, clipped to the map."""
        x0, x1 = sorted((a[0], b[0]))
        y0, y1 = sorted((a[1], b[1]))
        x0, y0 = max(0, x0), max(0, y0)
        x1, y1 = min(self.columns - 1, x1), min(self.rows - 1, y1)
        cells = {(x, y) for y in range(y0, y1 + 1) for x in range(x0, x1 + 1)}
        if cells == self.selection.cells:
            return False
        self.selection.cells = cells
        return True

    def clear_selection(self) -> bool:
        self._selection_anchor = None
        if not self.selection.cells:
            return False
        self.selection.cells = set()
        return True

    def erase_selection(self) -> int:
        """Empty the selected cells on the active tile layer. Returns cells erased."""
        layer = self.layers.active_layer
        if not isinstance(layer, TileLayer) or not layer.visible:
            return 0
        erased = sum(1 for x, y in sorted(self.selection.cells) if layer.erase(x, y))
        if erased:
            _log(f"Erased {erased} selected cell(s) on {layer.name!r}")
        return erased

    # ═══════════════════════════════════════════════════════════════════════
    # Rendering
    # ═══════════════════════════════════════════════════════════════════════

    def render_frame(self) -> Image.Image:
        """Compose all visible layers plus the selection overlay, scaled to the zoom."""
        frame = self.layers.compose(self.pixel_size)
        self.selection.render(frame)
        if self.scale != 1.0:
            w, h = self.pixel_size
            frame = frame.resize((max(1, int(w * self.scale)), max(1, int(h * self.scale))),
                                 Image.Resampling.NEAREST)
        return frame
