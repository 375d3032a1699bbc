"""Workspace - composite editor state and screen layout."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .config import (
    FILE_AREA_HEIGHT_FRAC, LAYER_PANEL_HEADER, LAYER_PANEL_W, LAYER_ROW_HEIGHT,
    MAP_MARGIN, WINDOW_H, WINDOW_W,
)
from .context_menu import ContextMenu
from .events import Document, Element
from .file_area import FileArea
from .map_editor import MapEditor
from .project import Project
from .types import Cell, Rect


@dataclass
class Workspace:
    """
    Everything one editor window works on.

    The document's root element spans the window; the file area view is
    mounted under it so pointer events resolve to file items.
    """
    project: Project
    document: Document
    file_area: FileArea
    map_editor: MapEditor
    screen_w: int = WINDOW_W
    screen_h: int = WINDOW_H
    running: bool = False
    map_revision: int = field(default=0)

    @classmethod
    def create(cls, project_name: str = "Untitled",
               map_editor: Optional[MapEditor] = None,
               screen_w: int = WINDOW_W, screen_h: int = WINDOW_H) -> Workspace:
        project = Project(project_name)
        document = Document(Element(id="window", rect=Rect(0, 0, screen_w, screen_h)))
        ws = cls(project=project, document=document,
                 file_area=FileArea(project, document),
                 map_editor=map_editor or MapEditor(),
                 screen_w=screen_w, screen_h=screen_h)
        ws.resize(screen_w, screen_h)
        return ws

    # ═══════════════════════════════════════════════════════════════════════
    # Layout
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def file_area_rect(self) -> Rect:
        h = int(self.screen_h * FILE_AREA_HEIGHT_FRAC)
        return Rect(0, self.screen_h - h, self.screen_w, h)

    @property
    def map_rect(self) -> Rect:
        return Rect(0, 0, self.screen_w - LAYER_PANEL_W, self.file_area_rect.y)

    @property
    def layer_panel_rect(self) -> Rect:
        return Rect(self.screen_w - LAYER_PANEL_W, 0, LAYER_PANEL_W, self.file_area_rect.y)

    @property
    def map_origin(self) -> Tuple[float, float]:
        """Screen position of the map's top-left corner."""
        r = self.map_rect
        return (r.x + MAP_MARGIN, r.y + MAP_MARGIN)

    def cell_at(self, px: float, py: float) -> Optional[Cell]:
        """Map cell under a screen point, or None outside the map area."""
        if not self.map_rect.contains(px, py):
            return None
        return self.map_editor.screen_to_cell(px, py, self.map_origin)

    def layer_index_at(self, px: float, py: float) -> int:
        """Layer index for the layer-panel row under a point (top layer first), or -1."""
        r = self.layer_panel_rect
        if not r.contains(px, py) or py < r.y + LAYER_PANEL_HEADER:
            return -1
        row = int((py - r.y - LAYER_PANEL_HEADER) // LAYER_ROW_HEIGHT)
        n = len(self.map_editor.layers)
        if row >= n:
            return -1
        return n - 1 - row

    def resize(self, screen_w: int, screen_h: int) -> None:
        self.screen_w = screen_w
        self.screen_h = screen_h
        self.document.root.rect = Rect(0, 0, screen_w, screen_h)
        self.file_area.view.set_bounds(self.file_area_rect)

    # ═══════════════════════════════════════════════════════════════════════
    # Convenience accessors
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def open_context_menu(self) -> Optional[ContextMenu]:
        return self.file_area.view.context_menu_factory.visible_menu

    def touch_map(self) -> None:
        """Mark the map frame as changed so the renderer re-uploads it."""
        self.map_revision += 1
