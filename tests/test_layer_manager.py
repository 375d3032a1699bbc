from __future__ import annotations

from PIL import Image

from conftest import RecordingLayer
from tileforge.layer_manager import LayerManager
from tileforge.layers import ImageLayer


def make_manager(*names):
    calls = []
    manager = LayerManager()
    for name in names:
        manager.add_layer(RecordingLayer(name, calls))
    return manager, calls


def test_first_added_layer_is_active():
    manager, _ = make_manager("a", "b")
    assert manager.active_layer.name == "a"
    assert len(manager) == 2


def test_render_walks_bottom_to_top_and_skips_invisible(surface):
    manager, calls = make_manager("a", "b", "c")
    manager.toggle_layer_visibility(1)
    drawn = manager.render(surface)
    assert calls == ["a", "c"]
    assert drawn == 2


def test_render_with_all_hidden_draws_nothing(surface):
    manager, calls = make_manager("a", "b")
    for i in range(len(manager)):
        manager.toggle_layer_visibility(i)
    assert manager.render(surface) == 0
    assert calls == []


def test_toggle_out_of_range_is_ignored():
    manager, _ = make_manager("a")
    manager.toggle_layer_visibility(3)
    assert manager.is_layer_visible(0)


def test_remove_layer_keeps_last_layer():
    manager, _ = make_manager("a", "b")
    manager.switch_layer(1)
    removed = manager.remove_layer(1)
    assert removed.name == "b"
    assert manager.active_layer_index == 0
    assert manager.remove_layer(0) is None
    assert [layer.name for layer in manager] == ["a"]


def test_switch_layer_rejects_invalid_index():
    manager, _ = make_manager("a", "b")
    assert manager.switch_layer(1) is True
    assert manager.switch_layer(7) is False
    assert manager.active_layer_index == 1


def test_move_layer_keeps_active_layer_identity():
    manager, _ = make_manager("a", "b", "c")
    manager.switch_layer(0)
    assert manager.move_layer(0, +1) == 1
    assert [layer.name for layer in manager] == ["b", "a", "c"]
    assert manager.active_layer.name == "a"
    assert manager.move_layer(2, +1) == 2
    assert manager.move_layer(0, -5) == 0


def test_visible_layers():
    manager, _ = make_manager("a", "b")
    manager.toggle_layer_visibility(0)
    assert [layer.name for layer in manager.visible_layers()] == ["b"]


def test_compose_returns_fresh_surface():
    manager = LayerManager()
    manager.add_layer(ImageLayer("bg", Image.new("RGBA", (2, 2), (0, 255, 0, 255))))
    frame = manager.compose((4, 4))
    assert frame.size == (4, 4)
    assert frame.mode == "RGBA"
    assert frame.getpixel((1, 1)) == (0, 255, 0, 255)
    assert frame.getpixel((3, 3)) == (0, 0, 0, 0)
