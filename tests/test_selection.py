from __future__ import annotations

from tileforge.events import Element
from tileforge.selection import SelectionSet


def test_starts_empty():
    selection = SelectionSet()
    assert not selection.has_selected_items()
    assert len(selection) == 0


def test_select_is_idempotent():
    selection = SelectionSet()
    item = Element(id="a")
    selection.select_item(item)
    selection.select_item(item)
    assert len(selection) == 1
    assert selection.has(item)
    assert item in selection


def test_membership_is_by_identity():
    selection = SelectionSet()
    a = Element(id="same", text="x")
    b = Element(id="same", text="x")
    selection.select_item(a)
    assert selection.has(a)
    assert not selection.has(b)


def test_deselect_and_clear():
    selection = SelectionSet()
    a, b = Element(id="a"), Element(id="b")
    selection.select_item(a)
    selection.select_item(b)
    selection.deselect_item(a)
    assert set(selection) == {b}
    selection.deselect_item(a)
    selection.clear()
    assert not selection.has_selected_items()


def test_selection_order_and_repeats_do_not_affect_membership():
    a, b, c = Element(id="a"), Element(id="b"), Element(id="c")
    first, second = SelectionSet(), SelectionSet()
    for item in (a, b, a, c, b):
        first.select_item(item)
    for item in (c, c, b, a):
        second.select_item(item)
    assert first.selected_items == second.selected_items == {a, b, c}
    assert len(first) == len(second) == 3
