"""In-memory project tree: folders and files."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass(eq=False)
class Item:
    """A named entry inside a folder."""
    id: int
    name: str
    folder_id: Optional[int] = None


@dataclass(eq=False)
class File(Item):
    file_type: str = "png"


@dataclass(eq=False)
class Folder(Item):
    children: List[Item] = field(default_factory=list)

    def add(self, item: Item) -> Item:
        item.folder_id = self.id
        self.children.append(item)
        return item

    def remove(self, item: Item) -> bool:
        if item in self.children:
            self.children.remove(item)
            return True
        return False

    def child_named(self, name: str) -> Optional[Item]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def walk(self) -> Iterator[Item]:
        """Depth-first iteration over all descendants."""
        for child in self.children:
            yield child
            if isinstance(child, Folder):
                yield from child.walk()


class Project:
    """A named project with a root folder and an id counter."""

    def __init__(self, name: str):
        self.name = name
        self._last_id = 0
        self.root_folder = Folder(self.next_id(), name)

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def find(self, item_id: int) -> Optional[Item]:
        if self.root_folder.id == item_id:
            return self.root_folder
        for item in self.root_folder.walk():
            if item.id == item_id:
                return item
        return None

    def parent_of(self, item: Item) -> Optional[Folder]:
        if item.folder_id is None:
            return None
        parent = self.find(item.folder_id)
        return parent if isinstance(parent, Folder) else None

    @staticmethod
    def unique_name(folder: Folder, base: str) -> str:
        """base, or 'stem (n).ext' with the lowest n not taken in folder."""
        if folder.child_named(base) is None:
            return base
        stem, dot, ext = base.rpartition(".")
        if not dot:
            stem, ext = base, ""
        n = 2
        while True:
            candidate = f"{stem} ({n}){dot}{ext}"
            if folder.child_named(candidate) is None:
                return candidate
            n += 1
