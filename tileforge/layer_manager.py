"""Ordered layer collection for the map editor."""

from __future__ import annotations
from typing import Iterator, List, Optional, Tuple

from PIL import Image

from .layers import Layer
from .logging import log


class LayerManager:
    """Owns the map's layers (bottom first) and tracks the active one."""

    def __init__(self):
        self.layers: List[Layer] = []
        self.active_layer_index: int = 0

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    def _valid(self, index: int) -> bool:
        return 0 <= index < len(self.layers)

    def add_layer(self, layer: Layer) -> int:
        """Append a layer on top. Returns its index."""
        self.layers.append(layer)
        if len(self.layers) == 1:
            self.active_layer_index = 0
        log(f"[LAYERS] Added {layer.name!r} at {len(self.layers) - 1}")
        return len(self.layers) - 1

    def remove_layer(self, index: int) -> Optional[Layer]:
        """Remove the layer at index. The last remaining layer is never removed."""
        if len(self.layers) <= 1 or not self._valid(index):
            return None
        layer = self.layers.pop(index)
        self.active_layer_index = max(0, self.active_layer_index - 1)
        log(f"[LAYERS] Removed {layer.name!r}")
        return layer

    def toggle_layer_visibility(self, index: int) -> None:
        if self._valid(index):
            self.layers[index].toggle_visibility()

    def switch_layer(self, index: int) -> bool:
        """Make the layer at index active. Returns False for an invalid index."""
        if not self._valid(index):
            log(f"[LAYERS][ERR] Invalid layer index: {index}")
            return False
        self.active_layer_index = index
        return True

    @property
    def active_layer(self) -> Optional[Layer]:
        if not self._valid(self.active_layer_index):
            return None
        return self.layers[self.active_layer_index]

    def is_layer_visible(self, index: int) -> bool:
        return self.layers[index].visible

    def move_layer(self, index: int, delta: int) -> int:
        """Move a layer delta steps up (+) or down (-). Returns its new index."""
        if not self._valid(index):
            return index
        new_index = max(0, min(len(self.layers) - 1, index + delta))
        if new_index == index:
            return index
        active = self.active_layer
        layer = self.layers.pop(index)
        self.layers.insert(new_index, layer)
        if active is not None:
            self.active_layer_index = self.layers.index(active)
        return new_index

    def visible_layers(self) -> List[Layer]:
        return [layer for layer in self.layers if layer.visible]

    def render(self, surface: Image.Image) -> int:
        """Render every visible layer bottom to top. Returns the number drawn."""
        drawn = self.visible_layers()
        for layer in drawn:
            layer.render(surface)
        return len(drawn)

    def compose(self, size: Tuple[int, int],
                background: Tuple[int, int, int, int] = (0, 0, 0, 0)) -> Image.Image:
        """Fresh RGBA surface of size with all visible layers drawn on it."""
        surface = Image.new("RGBA", size, background)
        self.render(surface)
        return surface
