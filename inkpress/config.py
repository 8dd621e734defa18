"""Configuration management for Inkpress."""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Logging Configuration
LOG_LEVEL = os.getenv("INKPRESS_LOG_LEVEL", "INFO")

# Rendering Configuration
EXPORT_SCALE = float(os.getenv("INKPRESS_EXPORT_SCALE", "2.0"))
DEFAULT_ZOOM = float(os.getenv("INKPRESS_DEFAULT_ZOOM", "1.2"))
MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
ZOOM_STEP = 0.2

# Annotation Configuration
HIGHLIGHT_OPACITY = 0.35
PAGE_BACKGROUND = (255, 255, 255)
TEXT_HIT_RADIUS = 50.0  # page units
DEFAULT_FONT = "Arial"
DEFAULT_FONT_SIZE = 24.0
DEFAULT_BRUSH_SIZE = 5.0
TEXT_SIZE_PER_BRUSH = 3.5
FONTS = ["Arial", "Times New Roman", "Courier New", "Georgia", "Verdana", "Impact"]
PALETTE = [
    (0, 0, 0),
    (239, 68, 68),
    (59, 130, 246),
    (16, 185, 129),
    (234, 179, 8),
    (139, 92, 246),
]

# Page Configuration
BLANK_PAGE_SIZE = (595.0, 842.0)  # A4 in points

# History Configuration
HISTORY_LIMIT = int(os.getenv("INKPRESS_HISTORY_LIMIT", "0"))  # 0 keeps everything

# Session / Output Configuration
SESSION_NAME = os.getenv("INKPRESS_SESSION_NAME", "edit-session")
OUTPUT_FILENAME = "edited-document.pdf"
