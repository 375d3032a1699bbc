"""Renderable map layers.

Every layer has a name and a visibility flag and draws itself onto a shared
RGBA Pillow surface. ``Layer`` itself cannot be constructed; concrete layers
must implement ``render``. Skipping invisible layers is left to whoever walks
the layer list (see ``LayerManager.render``).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional, Set, Tuple

from PIL import Image, ImageDraw

from .errors import AbstractInstantiationError
from .tileset import Tileset
from .types import Cell


class Layer(ABC):
    """Base class for all layers."""

    def __new__(cls, *args, **kwargs):
        if cls is Layer:
            raise AbstractInstantiationError(cls.__name__)
        return super().__new__(cls)

    def __init__(self, name: str):
        self.name = name
        self.visible = True

    @abstractmethod
    def render(self, surface: Image.Image) -> None:
        """Draw the layer's content onto surface."""
        raise NotImplementedError("render must be implemented by a concrete layer")

    def toggle_visibility(self) -> None:
        self.visible = not self.visible

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, visible={self.visible})"


def composite_at(surface: Image.Image, image: Image.Image, x: int, y: int) -> None:
    """Alpha-composite image onto surface with its top-left at (x, y); clips negatives."""
    sx, sy = max(0, -x), max(0, -y)
    if sx >= image.width or sy >= image.height:
        return
    if sx or sy:
        image = image.crop((sx, sy, image.width, image.height))
    surface.alpha_composite(image, dest=(max(0, x), max(0, y)))


class ImageLayer(Layer):
    """A single bitmap, e.g. a background or reference image."""

    def __init__(self, name: str, image: Image.Image, offset: Tuple[int, int] = (0, 0)):
        super().__init__(name)
        self.image = image.convert("RGBA")
        self.offset = offset

    def render(self, surface: Image.Image) -> None:
        composite_at(surface, self.image, int(self.offset[0]), int(self.offset[1]))


class TileLayer(Layer):
    """A grid of tile asset keys drawn from a tileset."""

    def __init__(self, name: str, columns: int, rows: int, tileset: Tileset):
        super().__init__(name)
        self.columns = columns
        self.rows = rows
        self.tileset = tileset
        self._cells: Dict[Cell, str] = {}

    @property
    def tile_size(self) -> int:
        return self.tileset.tile_size

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.columns and 0 <= y < self.rows

    def paint(self, x: int, y: int, asset: str) -> bool:
        """Place asset at cell (x, y). Returns False if the cell is outside the map."""
        if not self.in_bounds(x, y):
            return False
        self._cells[(x, y)] = asset
        return True

    def erase(self, x: int, y: int) -> bool:
        """Empty cell (x, y). Returns True if something was removed."""
        return self._cells.pop((x, y), None) is not None

    def asset_at(self, x: int, y: int) -> Optional[str]:
        return self._cells.get((x, y))

    def clear(self) -> None:
        self._cells.clear()

    def cells(self) -> Iterator[Tuple[Cell, str]]:
        """Painted cells in row-major order."""
        for cell in sorted(self._cells, key=lambda c: (c[1], c[0])):
            yield cell, self._cells[cell]

    def __len__(self) -> int:
        return len(self._cells)

    def render(self, surface: Image.Image) -> None:
        ts = self.tile_size
        for (x, y), asset in self.cells():
            tile = self.tileset.get(asset)
            if tile is None:
                continue
            composite_at(surface, tile, x * ts, y * ts)


class GridLayer(Layer):
    """Vector overlay of tile grid lines."""

    def __init__(self, name: str, columns: int, rows: int, tile_size: int,
                 color: Tuple[int, int, int, int] = (255, 255, 255, 48)):
        super().__init__(name)
        self.columns = columns
        self.rows = rows
        self.tile_size = tile_size
        self.color = tuple(color)

    def render(self, surface: Image.Image) -> None:
        overlay = Image.new("RGBA", surface.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        w = self.columns * self.tile_size
        h = self.rows * self.tile_size
        for col in range(self.columns + 1):
            x = col * self.tile_size
            draw.line([(x, 0), (x, h)], fill=self.color, width=1)
        for row in range(self.rows + 1):
            y = row * self.tile_size
            draw.line([(0, y), (w, y)], fill=self.color, width=1)
        surface.alpha_composite(overlay)


class SelectionLayer(Layer):
    """Overlay tinting the selected cells and outlining their bounding box."""

    def __init__(self, name: str, tile_size: int,
                 fill: Tuple[int, int, int, int] = (90, 160, 255, 72),
                 edge: Tuple[int, int, int, int] = (120, 190, 255, 220)):
        super().__init__(name)
        self.tile_size = tile_size
        self.fill = tuple(fill)
        self.edge = tuple(edge)
        self.cells: Set[Cell] = set()

    def bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """(min_x, min_y, max_x, max_y) of the selected cells, or None."""
        if not self.cells:
            return None
        xs = [x for x, _ in self.cells]
        ys = [y for _, y in self.cells]
        return (min(xs), min(ys), max(xs), max(ys))

    def render(self, surface: Image.Image) -> None:
        box = self.bounds()
        if box is None:
            return
        ts = self.tile_size
        overlay = Image.new("RGBA", surface.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        for x, y in self.cells:
            draw.rectangle([x * ts, y * ts, (x + 1) * ts - 1, (y + 1) * ts - 1], fill=self.fill)
        x0, y0, x1, y1 = box
        draw.rectangle([x0 * ts, y0 * ts, (x1 + 1) * ts - 1, (y1 + 1) * ts - 1],
                       outline=self.edge, width=1)
        surface.alpha_composite(overlay)
