"""Element tree and document-wide event dispatch.

Views build a tree of ``Element`` nodes (one per visible item) and route raw
mouse input through a ``Document``. Listeners are registered per event type
and return a ``Subscription`` handle; one-shot listeners dispose themselves
before their callback runs, so they can never fire twice.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from .types import Rect
from .logging import log

CONTEXT_MENU = "contextmenu"
CLICK = "click"
DOUBLE_CLICK = "dblclick"
DRAG_START = "dragstart"
DROP = "drop"

LEFT_BUTTON = 0
RIGHT_BUTTON = 2


@dataclass(eq=False)
class Element:
    """A node in a view's element tree. Compared and hashed by identity."""
    id: str = ""
    classes: Set[str] = field(default_factory=set)
    rect: Rect = field(default_factory=Rect)
    text: str = ""
    data: Any = None
    parent: Optional[Element] = field(default=None, repr=False)
    children: List[Element] = field(default_factory=list, repr=False)

    def append(self, child: Element) -> Element:
        """Attach child as the last child of this element."""
        child.parent = self
        self.children.append(child)
        return child

    def remove_children(self) -> None:
        for child in self.children:
            child.parent = None
        self.children.clear()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def closest(self, class_name: str) -> Optional[Element]:
        """Nearest element (self included) up the parent chain carrying class_name."""
        node: Optional[Element] = self
        while node is not None:
            if class_name in node.classes:
                return node
            node = node.parent
        return None

    def contains(self, other: Optional[Element]) -> bool:
        """Check if other is this element or one of its descendants."""
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def hit_test(self, x: float, y: float) -> Optional[Element]:
        """Deepest element whose rect contains the point, or None."""
        if not self.rect.contains(x, y):
            return None
        # Later children are drawn on top
        for child in reversed(self.children):
            hit = child.hit_test(x, y)
            if hit is not None:
                return hit
        return self


@dataclass
class PointerEvent:
    """A mouse event delivered to a document."""
    type: str
    target: Optional[Element]
    x: float = 0.0
    y: float = 0.0
    button: int = LEFT_BUTTON
    ctrl: bool = False
    default_prevented: bool = False

    def prevent_default(self) -> None:
        """Suppress the platform's built-in handling of this event."""
        self.default_prevented = True


class Subscription:
    """Handle for a registered listener. Disposing is idempotent."""

    def __init__(self, document: Document, event_type: str,
                 callback: Callable[[PointerEvent], None], once: bool):
        self._document = document
        self.event_type = event_type
        self.callback = callback
        self.once = once
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        """Unregister the listener. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._document._remove(self)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()


class Document:
    """Routes pointer events to the listeners registered for their type."""

    def __init__(self, root: Optional[Element] = None):
        self.root = root if root is not None else Element(id="document")
        self._listeners: Dict[str, List[Subscription]] = {}

    def add_listener(self, event_type: str, callback: Callable[[PointerEvent], None],
                     once: bool = False) -> Subscription:
        """Register callback for event_type. Returns a disposable subscription."""
        sub = Subscription(self, event_type, callback, once)
        self._listeners.setdefault(event_type, []).append(sub)
        return sub

    def listener_count(self, event_type: str) -> int:
        """Number of live listeners for event_type."""
        return len(self._listeners.get(event_type, ()))

    def _remove(self, sub: Subscription) -> None:
        subs = self._listeners.get(sub.event_type)
        if subs and sub in subs:
            subs.remove(sub)

    def target_at(self, x: float, y: float) -> Optional[Element]:
        """Resolve the element under a point, falling back to the root."""
        return self.root.hit_test(x, y) or self.root

    def dispatch(self, event: PointerEvent) -> int:
        """Deliver event to every listener of its type. Returns callbacks run."""
        called = 0
        for sub in list(self._listeners.get(event.type, ())):
            if not sub.active:
                continue
            if sub.once:
                sub.dispose()
            try:
                sub.callback(event)
            except Exception as e:
                log(f"[EVENTS][ERR] {event.type} listener failed: {e!r}")
                raise
            called += 1
        return called
