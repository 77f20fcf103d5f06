"""Views package."""

from .sticker_canvas import StickerCanvas, ImageFetchWorker
from .task_panel import TaskPanel, TaskRow, TaskEditDialog, DeadlineEdit, PhotoDialog
from .sticker_dialog import StickerDialog
from .auth_dialog import AuthDialog
from .settings_dialog import SettingsDialog
from .main_window import MainWindow, OCRWorker, StatsHeader, request_sign_in

__all__ = [
    "StickerCanvas",
    "ImageFetchWorker",
    "TaskPanel",
    "TaskRow",
    "TaskEditDialog",
    "DeadlineEdit",
    "PhotoDialog",
    "StickerDialog",
    "AuthDialog",
    "SettingsDialog",
    "MainWindow",
    "OCRWorker",
    "StatsHeader",
    "request_sign_in",
]
