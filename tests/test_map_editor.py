from __future__ import annotations

import pytest
from PIL import Image

from tileforge.commands import (
    AddTileLayer, ClearMapSelection, CommandQueue, EndStroke, EraseSelection, MoveLayer,
    PaintCell, RemoveLayer, SelectAsset, SelectTool, SwitchLayer, ToggleLayerVisibility,
    ZoomIn, ZoomOut,
)
from tileforge.config import MAX_ZOOM, MIN_ZOOM
from tileforge.layers import GridLayer, TileLayer
from tileforge.map_editor import ERASER, PEN, SELECT, MapEditor
from tileforge.tileset import Tileset

RED = (255, 0, 0, 255)


@pytest.fixture
def editor(tileset):
    return MapEditor(4, 4, tileset)


# ─── Tileset ─────────────────────────────────────────────────────────────────

def test_tileset_from_colors(tileset):
    assert len(tileset) == 2
    assert "red" in tileset
    assert tileset.keys() == ["red", "blue"]
    assert tileset.get("red").getpixel((0, 0)) == RED
    assert tileset.get("missing") is None


def test_tileset_resizes_added_tiles():
    ts = Tileset(tile_size=4)
    ts.add("big", Image.new("RGB", (16, 16), (1, 2, 3)))
    tile = ts.get("big")
    assert tile.size == (4, 4)
    assert tile.mode == "RGBA"


# ─── Layers ──────────────────────────────────────────────────────────────────

def test_new_editor_has_tile_layer_under_grid(editor):
    layers = editor.layers.layers
    assert [layer.name for layer in layers] == ["Layer 1", "Grid"]
    assert isinstance(layers[0], TileLayer)
    assert isinstance(layers[1], GridLayer)
    assert editor.layers.active_layer is layers[0]


def test_add_tile_layer_goes_below_grid_and_becomes_active(editor):
    layer = editor.add_tile_layer()
    names = [l.name for l in editor.layers]
    assert names == ["Layer 1", "Layer 2", "Grid"]
    assert editor.layers.active_layer is layer


def test_pen_and_eraser(editor):
    assert editor.asset == "red"
    assert editor.apply_tool((1, 1)) is True
    assert editor.apply_tool((1, 1)) is False
    editor.set_tool(ERASER)
    assert editor.apply_tool((1, 1)) is True
    assert editor.apply_tool((1, 1)) is False


def test_tools_only_edit_visible_tile_layers(editor):
    editor.layers.switch_layer(1)
    assert editor.apply_tool((0, 0)) is False
    editor.layers.switch_layer(0)
    editor.layers.toggle_layer_visibility(0)
    assert editor.apply_tool((0, 0)) is False


def test_unknown_tool_raises(editor):
    with pytest.raises(ValueError):
        editor.set_tool("bucket")
    assert editor.tool == PEN


def test_zoom_is_clamped(editor):
    while editor.zoom_in():
        pass
    assert editor.scale == MAX_ZOOM
    while editor.zoom_out():
        pass
    assert editor.scale == MIN_ZOOM


def test_screen_to_cell(editor):
    origin = (10, 10)
    assert editor.screen_to_cell(10, 10, origin) == (0, 0)
    assert editor.screen_to_cell(25, 13, origin) == (3, 0)
    assert editor.screen_to_cell(9, 10, origin) is None
    assert editor.screen_to_cell(26, 10, origin) is None
    editor.zoom_in()
    editor.zoom_in()
    editor.zoom_in()
    editor.zoom_in()
    assert editor.scale == 2.0
    assert editor.screen_to_cell(17, 10, origin) == (0, 0)
    assert editor.screen_to_cell(18, 10, origin) == (1, 0)


def test_render_frame(editor):
    editor.apply_tool((0, 0))
    frame = editor.render_frame()
    assert frame.size == (16, 16)
    assert frame.getpixel((2, 2)) == RED
    assert frame.getpixel((6, 6)) == (0, 0, 0, 0)
    editor.zoom_in()
    assert editor.render_frame().size == (20, 20)


def test_render_frame_skips_hidden_layers(editor):
    editor.apply_tool((0, 0))
    editor.layers.toggle_layer_visibility(0)
    assert editor.render_frame().getpixel((2, 2)) == (0, 0, 0, 0)


# ─── Map commands ────────────────────────────────────────────────────────────

def test_map_commands_through_queue(editor):
    queue = CommandQueue()
    assert queue.execute(PaintCell(2, 3), editor)
    assert editor.layers.layers[0].asset_at(2, 3) == "red"
    assert queue.execute(SelectAsset("blue"), editor)
    assert queue.execute(SelectAsset("lava"), editor) is False
    assert queue.execute(SelectTool(ERASER), editor)
    assert queue.execute(PaintCell(2, 3), editor)
    assert queue.execute(AddTileLayer(), editor)
    assert queue.execute(SwitchLayer(0), editor)
    assert queue.execute(SwitchLayer(9), editor) is False
    assert queue.execute(MoveLayer(0, +1), editor)
    assert queue.execute(MoveLayer(0, -1), editor) is False
    assert queue.execute(ToggleLayerVisibility(2), editor)
    assert queue.execute(ToggleLayerVisibility(5), editor) is False
    assert not editor.layers.is_layer_visible(2)
    assert queue.execute(ZoomIn(), editor)
    assert queue.execute(ZoomOut(), editor)
    assert queue.execute(RemoveLayer(0), editor)
    assert len(queue.history) == 11


def test_command_history_is_bounded(editor):
    queue = CommandQueue(max_history=2)
    queue.execute(ZoomIn(), editor)
    queue.execute(ZoomIn(), editor)
    last = ZoomOut()
    queue.execute(last, editor)
    assert len(queue.history) == 2
    assert queue.history[-1] is last
    queue.clear_history()
    assert queue.history == []


def test_zoom_is_logged_on_map_channel(editor, captured_log):
    editor.zoom_in()
    assert "[MAP] Zoom 1.25" in captured_log.getvalue()


# ─── Rectangle selection ─────────────────────────────────────────────────────

def drag_select(editor, start, end):
    editor.apply_tool(start)
    editor.apply_tool(end)
    editor.end_stroke()


def test_select_tool_records_rectangle(editor):
    editor.set_tool(SELECT)
    drag_select(editor, (2, 2), (1, 0))
    assert editor.selected_cells == {(1, 0), (2, 0), (1, 1), (2, 1), (1, 2), (2, 2)}
    assert editor.selection.bounds() == (1, 0, 2, 2)


def test_new_stroke_replaces_selection(editor):
    editor.set_tool(SELECT)
    drag_select(editor, (0, 0), (1, 1))
    drag_select(editor, (3, 3), (3, 3))
    assert editor.selected_cells == {(3, 3)}


def test_selection_is_clipped_to_map(editor):
    assert editor.select_rect((2, 2), (9, -3)) is True
    assert editor.selection.bounds() == (2, 0, 3, 2)


def test_select_tool_leaves_tiles_untouched(editor):
    editor.set_tool(SELECT)
    editor.apply_tool((0, 0))
    assert len(editor.layers.layers[0]) == 0


def test_end_stroke_only_reports_active_drag(editor):
    assert editor.end_stroke() is False
    editor.set_tool(SELECT)
    editor.apply_tool((0, 0))
    assert editor.end_stroke() is True


def test_leaving_select_tool_clears_selection(editor):
    editor.set_tool(SELECT)
    drag_select(editor, (0, 0), (1, 1))
    editor.set_tool(PEN)
    assert editor.selected_cells == frozenset()


def test_selection_overlay_is_drawn(editor):
    before = editor.render_frame().getpixel((6, 6))
    editor.select_rect((1, 1), (1, 1))
    frame = editor.render_frame()
    assert frame.getpixel((6, 6)) != before
    assert frame.getpixel((10, 10)) == (0, 0, 0, 0)


def test_erase_selection(editor):
    for cell in [(0, 0), (1, 0), (3, 3)]:
        editor.apply_tool(cell)
    editor.select_rect((0, 0), (1, 1))
    assert editor.erase_selection() == 2
    assert [cell for cell, _ in editor.layers.layers[0].cells()] == [(3, 3)]


def test_selection_commands(editor):
    queue = CommandQueue()
    assert queue.execute(EraseSelection(), editor) is False
    assert queue.execute(SelectTool(SELECT), editor)
    assert queue.execute(PaintCell(0, 0), editor)
    assert queue.execute(PaintCell(1, 1), editor)
    assert queue.execute(EndStroke(), editor)
    assert queue.execute(EndStroke(), editor) is False
    assert len(editor.selected_cells) == 4
    assert queue.execute(ClearMapSelection(), editor)
    assert queue.execute(ClearMapSelection(), editor) is False
