"""Exception types raised by the editor core."""

from __future__ import annotations


class TileforgeError(Exception):
    """Base class for editor errors."""


class AbstractInstantiationError(TileforgeError, TypeError):
    """Raised when an abstract base is constructed directly."""

    def __init__(self, cls_name: str):
        super().__init__(f"Cannot construct {cls_name} instances directly")
        self.cls_name = cls_name


class ItemNameError(TileforgeError, ValueError):
    """Raised when a rename would clash with a sibling."""


class UnknownItemKindError(TileforgeError, ValueError):
    """Raised for an item kind the file area cannot create."""
