from __future__ import annotations

import pytest

from tileforge.config import MENU_ITEM_HEIGHT, MENU_ITEM_WIDTH, MENU_PADDING
from tileforge.context_menu import (
    ContextMenu, FileAreaContextMenu, ItemContextMenu, MultipleItemsContextMenu,
)
from tileforge.events import CLICK, CONTEXT_MENU, PointerEvent


def open_event(x=100, y=100):
    return PointerEvent(CONTEXT_MENU, None, x=x, y=y)


def test_base_menu_is_abstract(file_area):
    with pytest.raises(TypeError):
        ContextMenu(file_area)


def test_factory_picks_menu_by_selection_size(populated):
    file_area, (a, b, c) = populated
    factory = file_area.view.context_menu_factory

    menu = factory.get_context_menu([])
    assert isinstance(menu, FileAreaContextMenu)
    assert menu.labels == ["Add Folder", "Add PNG File", "Add TMX File"]

    menu = factory.get_context_menu([b])
    assert isinstance(menu, ItemContextMenu)
    assert menu.items == (b,)
    assert menu.labels == ["Rename", "Delete"]

    menu = factory.get_context_menu({a, b, c})
    assert isinstance(menu, MultipleItemsContextMenu)
    assert set(menu.items) == {a, b, c}
    assert menu.labels == ["Delete 3 Items"]


def test_factory_reuses_menu_instances(populated):
    file_area, (a, b, _) = populated
    factory = file_area.view.context_menu_factory
    assert factory.get_context_menu([a]) is factory.get_context_menu([b])
    assert factory.get_context_menu([b]).items == (b,)


def test_show_and_hide(file_area):
    menu = file_area.view.context_menu_factory.get_context_menu([])
    menu.show(open_event(40, 50))
    assert menu.visible
    assert (menu.x, menu.y) == (40, 50)
    assert file_area.view.context_menu_factory.visible_menu is menu
    menu.hide()
    assert not menu.visible
    assert file_area.view.context_menu_factory.visible_menu is None


def test_dismiss_on_next_click_replaces_pending_listener(file_area):
    doc = file_area.view.document
    menu = file_area.view.context_menu_factory.get_context_menu([])
    base = doc.listener_count(CLICK)
    first = menu.dismiss_on_next_click(doc)
    second = menu.dismiss_on_next_click(doc)
    assert not first.active
    assert second.active
    assert doc.listener_count(CLICK) == base + 1


def test_hide_disposes_dismissal(file_area):
    doc = file_area.view.document
    menu = file_area.view.context_menu_factory.get_context_menu([])
    base = doc.listener_count(CLICK)
    menu.show(open_event())
    sub = menu.dismiss_on_next_click(doc)
    menu.hide()
    assert not sub.active
    assert menu.dismissal is None
    assert doc.listener_count(CLICK) == base


def test_click_option_runs_command_and_hides(file_area):
    menu = file_area.view.context_menu_factory.get_context_menu([])
    menu.show(open_event())
    assert menu.click_option(0) is True
    assert [item.name for item in file_area.entries] == ["New Folder"]
    assert not menu.visible
    assert len(file_area.commands.history) == 1


def test_click_option_ignored_when_hidden_or_out_of_range(file_area):
    menu = file_area.view.context_menu_factory.get_context_menu([])
    assert menu.click_option(0) is False
    menu.show(open_event())
    assert menu.click_option(9) is False
    assert file_area.entries == []


def test_delete_option_removes_selected_items(populated):
    file_area, (a, b, _) = populated
    selection = file_area.view.selection_handler
    selection.select_item(a)
    selection.select_item(b)
    menu = file_area.view.context_menu_factory.get_context_menu(selection.selected_items)
    menu.show(open_event())
    assert menu.click_option(0) is True
    assert [item.name for item in file_area.entries] == ["New Map.tmx"]


def test_menu_rect_is_clamped_to_screen(file_area):
    menu = file_area.view.context_menu_factory.get_context_menu([])
    menu.show(open_event(790, 590))
    r = menu.menu_rect(800, 600)
    assert r.w == MENU_ITEM_WIDTH
    assert r.h == 3 * MENU_ITEM_HEIGHT + 2 * MENU_PADDING
    assert r.right <= 795
    assert r.bottom <= 595


def test_option_at(file_area):
    menu = file_area.view.context_menu_factory.get_context_menu([])
    menu.show(open_event(100, 100))
    top = 100 + MENU_PADDING
    assert menu.option_at(110, top + 1, 800, 600) == 0
    assert menu.option_at(110, top + MENU_ITEM_HEIGHT + 1, 800, 600) == 1
    assert menu.option_at(110, 90, 800, 600) == -1
    assert menu.option_at(100 + MENU_ITEM_WIDTH + 10, top + 1, 800, 600) == -1
    menu.hide()
    assert menu.option_at(110, top + 1, 800, 600) == -1
