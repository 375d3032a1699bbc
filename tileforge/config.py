"""Application configuration constants."""

from __future__ import annotations

# Performance
TARGET_FPS = 60

# Window
WINDOW_TITLE = "Tileforge"
WINDOW_W = 1280
WINDOW_H = 800
FILE_AREA_HEIGHT_FRAC = 0.30  # Bottom 30% hosts the file area
LAYER_PANEL_W = 200

# Map defaults
MAP_COLUMNS = 20
MAP_ROWS = 20
TILE_SIZE = 32

# Zoom
MIN_ZOOM = 0.25
MAX_ZOOM = 4.0
ZOOM_STEP = 0.25

# File area grid
ITEM_WIDTH = 96
ITEM_HEIGHT = 80
ITEM_SPACING = 12
ITEM_LABEL_HEIGHT = 20
FILE_AREA_PADDING = 16

# Context menu
MENU_ITEM_HEIGHT = 32
MENU_ITEM_WIDTH = 180
MENU_PADDING = 6
MENU_BG_ALPHA = 0.95
MENU_HOVER_ALPHA = 0.3

# Layer panel
LAYER_ROW_HEIGHT = 28
LAYER_PANEL_HEADER = 36
MAP_MARGIN = 16

# Input
DOUBLE_CLICK_TIME_MS = 300

# Colors (r, g, b)
C_BG = (30, 30, 34)
C_PANEL = (44, 44, 50)
C_FRAME = (80, 80, 90)
C_TEXT = (220, 220, 220)
C_TEXT_DIM = (140, 140, 150)
C_SELECTED = (70, 110, 180)
C_FOLDER = (200, 170, 90)
C_FILE = (150, 170, 200)
C_GRID = (255, 255, 255, 48)
C_MAP_SELECTION = (90, 160, 255, 72)
C_MAP_SELECTION_EDGE = (120, 190, 255, 220)
C_CHECKER_A = (60, 60, 66)
C_CHECKER_B = (72, 72, 78)

# Default tile palette (asset key -> rgba)
DEFAULT_PALETTE = {
    "grass": (86, 160, 72, 255),
    "water": (64, 120, 200, 255),
    "sand": (220, 200, 130, 255),
    "stone": (128, 128, 136, 255),
    "wall": (90, 60, 40, 255),
}

# Item kinds creatable from the file area menu
FOLDER_KIND = "folder"
FILE_KINDS = ("png", "tmx")
NEW_ITEM_NAMES = {
    "folder": "New Folder",
    "png": "New Sprite.png",
    "tmx": "New Map.tmx",
}
PARENT_FOLDER_NAME = ".."
