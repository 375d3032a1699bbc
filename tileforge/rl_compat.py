"""Raylib compatibility layer - abstracts differences between raylibpy and python-raylib."""

from __future__ import annotations
import io
from typing import Any, Tuple

from PIL import Image

try:
    import raylibpy as rl
    RL_VERSION = "raylibpy"
except ImportError:
    import raylib as rl
    RL_VERSION = "python-raylib"


def _encode(text: str) -> Any:
    return text.encode("utf-8")


def make_rect(x: float, y: float, w: float, h: float) -> Any:
    """Create a raylib Rectangle compatible with the current binding."""
    if hasattr(rl, "Rectangle"):
        return rl.Rectangle(x, y, w, h)
    r = rl.ffi.new("Rectangle *")
    r[0].x = float(x)
    r[0].y = float(y)
    r[0].width = float(w)
    r[0].height = float(h)
    return r[0]


def make_vec2(x: float, y: float) -> Any:
    """Create a raylib Vector2 compatible with the current binding."""
    if hasattr(rl, "Vector2"):
        return rl.Vector2(x, y)
    v = rl.ffi.new("Vector2 *")
    v[0].x = float(x)
    v[0].y = float(y)
    return v[0]


def make_color(r: int, g: int, b: int, a: int = 255) -> Any:
    """Create a raylib Color compatible with the current binding."""
    ctor = getattr(rl, "Color", None)
    if ctor:
        return ctor(int(r), int(g), int(b), int(a))
    c = rl.ffi.new("Color *")
    c[0].r, c[0].g, c[0].b, c[0].a = int(r), int(g), int(b), int(a)
    return c[0]


def color(rgb: Tuple[int, ...], alpha: float = 1.0) -> Any:
    """Color from an (r, g, b[, a]) tuple scaled by alpha."""
    a = rgb[3] if len(rgb) > 3 else 255
    return make_color(rgb[0], rgb[1], rgb[2], int(a * alpha))


def draw_text(text: str, x: int, y: int, size: int, col: Any) -> None:
    """Draw text with encoding fallback."""
    try:
        rl.DrawText(text, int(x), int(y), size, col)
    except TypeError:
        rl.DrawText(_encode(text), int(x), int(y), size, col)


def texture_from_image(image: Image.Image) -> Any:
    """Upload a Pillow image as a raylib texture (via an in-memory PNG)."""
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    data = buf.getvalue()
    try:
        rl_img = rl.LoadImageFromMemory(".png", data, len(data))
    except TypeError:
        rl_img = rl.LoadImageFromMemory(b".png", data, len(data))
    tex = rl.LoadTextureFromImage(rl_img)
    rl.UnloadImage(rl_img)
    return tex


def unload_texture(tex: Any) -> None:
    if tex is not None and getattr(tex, "id", 0):
        rl.UnloadTexture(tex)


__all__ = [
    "rl",
    "RL_VERSION",
    "make_rect",
    "make_vec2",
    "make_color",
    "color",
    "draw_text",
    "texture_from_image",
    "unload_texture",
]
