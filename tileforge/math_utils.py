"""Pure math utilities - no external dependencies."""

from __future__ import annotations


def clamp(v: float, a: float, b: float) -> float:
    """Clamp value v to range [a, b]."""
    return a if v < a else b if v > b else v


def floor_div(v: float, step: float) -> int:
    """Integer cell index of v on a grid with the given step (floors negatives)."""
    return int(v // step)


def grid_position(index: int, columns: int, cell_w: float, cell_h: float,
                  spacing: float = 0.0) -> tuple[float, float]:
    """Top-left corner of the index-th cell in a row-major grid."""
    col = index % columns
    row = index // columns
    return (col * (cell_w + spacing), row * (cell_h + spacing))
