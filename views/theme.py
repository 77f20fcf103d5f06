"""
Color themes.

Each theme has a primary gradient (header and main buttons) and a soft
background gradient. Dark mode replaces both with grays.
"""

from dataclasses import dataclass
from typing import Dict

from PyQt6.QtGui import QPalette, QColor


@dataclass(frozen=True)
class Theme:
    name: str
    primary_start: str
    primary_end: str
    background_start: str
    background_mid: str
    background_end: str


THEMES: Dict[str, Theme] = {
    "default": Theme("default", "#A855F7", "#EC4899", "#FAF5FF", "#FDF2F8", "#EFF6FF"),
    "ocean": Theme("ocean", "#3B82F6", "#06B6D4", "#EFF6FF", "#ECFEFF", "#F0FDFA"),
    "forest": Theme("forest", "#22C55E", "#10B981", "#F0FDF4", "#ECFDF5", "#F0FDFA"),
    "sunset": Theme("sunset", "#F97316", "#EF4444", "#FFF7ED", "#FEF2F2", "#FDF2F8"),
}

DARK = Theme("dark", "#374151", "#4B5563", "#111827", "#111827", "#111827")

# Colors for task status and deadline labels
COMPLETED_COLOR = "#059669"
PENDING_COLOR = "#6B7280"
SOON_COLOR = "#D97706"
OVERDUE_COLOR = "#DC2626"

# Sticker edit handles
HANDLE_FILL = "#FFFFFF"
HANDLE_BORDER = "#3B82F6"
DELETE_FILL = "#EF4444"


def get_theme(name: str, dark_mode: bool = False) -> Theme:
    if dark_mode:
        return DARK
    return THEMES.get(name, THEMES["default"])


def build_palette(dark_mode: bool) -> QPalette:
    """Application palette for light or dark mode."""
    palette = QPalette()
    if dark_mode:
        palette.setColor(QPalette.ColorRole.Window, QColor("#111827"))
        palette.setColor(QPalette.ColorRole.WindowText, QColor("#F9FAFB"))
        palette.setColor(QPalette.ColorRole.Base, QColor("#1F2937"))
        palette.setColor(QPalette.ColorRole.AlternateBase, QColor("#374151"))
        palette.setColor(QPalette.ColorRole.Text, QColor("#F3F4F6"))
        palette.setColor(QPalette.ColorRole.Button, QColor("#374151"))
        palette.setColor(QPalette.ColorRole.ButtonText, QColor("#F9FAFB"))
    else:
        palette.setColor(QPalette.ColorRole.Window, QColor("#F3F4F6"))
        palette.setColor(QPalette.ColorRole.WindowText, QColor("#111827"))
        palette.setColor(QPalette.ColorRole.Base, QColor("#FFFFFF"))
        palette.setColor(QPalette.ColorRole.AlternateBase, QColor("#F9FAFB"))
        palette.setColor(QPalette.ColorRole.Text, QColor("#374151"))
        palette.setColor(QPalette.ColorRole.Button, QColor("#FFFFFF"))
        palette.setColor(QPalette.ColorRole.ButtonText, QColor("#374151"))
    palette.setColor(QPalette.ColorRole.Highlight, QColor("#3B82F6"))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#FFFFFF"))
    return palette


def window_stylesheet(theme: Theme) -> str:
    """Stylesheet for the main window in the given theme."""
    return f"""
        QMainWindow, #centralArea {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {theme.background_start},
                stop:0.5 {theme.background_mid},
                stop:1 {theme.background_end});
        }}
        #headerFrame {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:0,
                stop:0 {theme.primary_start}, stop:1 {theme.primary_end});
            border-radius: 12px;
        }}
        #headerFrame QLabel {{
            color: white;
        }}
        QPushButton#primaryButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:0,
                stop:0 {theme.primary_start}, stop:1 {theme.primary_end});
            color: white;
            border: none;
            border-radius: 8px;
            padding: 8px 16px;
            font-weight: 600;
        }}
        QPushButton#primaryButton:disabled {{
            background: #9CA3AF;
        }}
        #hintLabel {{
            color: #6B7280;
            font-size: 11px;
        }}
    """
