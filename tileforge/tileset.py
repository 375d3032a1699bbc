"""Tile assets - keyed Pillow images used by tile layers."""

from __future__ import annotations
from typing import Dict, Iterator, Mapping, Optional, Tuple

from PIL import Image

from .config import DEFAULT_PALETTE, TILE_SIZE

RGBA = Tuple[int, int, int, int]


class Tileset:
    """Mapping of asset key to a square RGBA tile image."""

    def __init__(self, tile_size: int = TILE_SIZE):
        self.tile_size = tile_size
        self._tiles: Dict[str, Image.Image] = {}

    @classmethod
    def from_colors(cls, colors: Mapping[str, RGBA] = DEFAULT_PALETTE,
                    tile_size: int = TILE_SIZE) -> Tileset:
        """Build a tileset of solid color swatches."""
        ts = cls(tile_size)
        for key, rgba in colors.items():
            ts.add(key, Image.new("RGBA", (tile_size, tile_size), tuple(rgba)))
        return ts

    def add(self, key: str, image: Image.Image) -> None:
        """Register a tile, resizing it to the tileset's tile size if needed."""
        img = image.convert("RGBA")
        if img.size != (self.tile_size, self.tile_size):
            img = img.resize((self.tile_size, self.tile_size), Image.Resampling.NEAREST)
        self._tiles[key] = img

    def get(self, key: str) -> Optional[Image.Image]:
        return self._tiles.get(key)

    def keys(self) -> list:
        return list(self._tiles.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._tiles

    def __iter__(self) -> Iterator[str]:
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)
