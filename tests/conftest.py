from __future__ import annotations

import io

import pytest
from PIL import Image

from tileforge.file_area import FileArea
from tileforge.layers import Layer
from tileforge.logging import Logger, set_logger
from tileforge.project import Project
from tileforge.tileset import Tileset


class RecordingLayer(Layer):
    """Concrete layer that records render calls."""

    def __init__(self, name, calls=None):
        super().__init__(name)
        self.calls = calls if calls is not None else []

    def render(self, surface):
        self.calls.append(self.name)


@pytest.fixture(autouse=True)
def captured_log():
    """Route editor logging into a buffer for the duration of a test."""
    buf = io.StringIO()
    set_logger(Logger(stream=buf))
    yield buf
    set_logger(None)


@pytest.fixture
def surface():
    return Image.new("RGBA", (8, 8), (0, 0, 0, 0))


@pytest.fixture
def tileset():
    return Tileset.from_colors({"red": (255, 0, 0, 255), "blue": (0, 0, 255, 255)},
                               tile_size=4)


@pytest.fixture
def file_area():
    return FileArea(Project("demo"))


@pytest.fixture
def populated(file_area):
    """File area with a folder and two files; returns (file_area, [a, b, c])."""
    file_area.create_new_item("folder")
    file_area.create_new_item("png")
    file_area.create_new_item("tmx")
    return file_area, list(file_area.view.items)
