"""Core data types for Tileforge."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

Cell = Tuple[int, int]


@dataclass
class Rect:
    """Axis-aligned rectangle in screen pixels."""
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    def contains(self, px: float, py: float) -> bool:
        """Check if point lies inside (edges inclusive)."""
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h
