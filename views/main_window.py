"""
Main application window.

Assembles all UI components and manages the application layout.
"""

import logging
from typing import List, Optional

from PyQt6.QtCore import Qt, QThread, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence, QActionGroup
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout,
    QLabel, QSplitter, QMessageBox, QFrame, QApplication,
    QFileDialog, QProgressBar, QDialog
)

from services import (
    Backend, StickerBoard, TaskService, CommitMode, OCRRelay, OCRError,
    StoreError, TaskStats, create_ocr_relay, get_settings
)
from services.settings_manager import THEMES
from .sticker_canvas import StickerCanvas
from .task_panel import TaskPanel, IMAGE_FILTER
from .sticker_dialog import StickerDialog
from .auth_dialog import AuthDialog
from .settings_dialog import SettingsDialog
from .theme import get_theme, build_palette, window_stylesheet

logger = logging.getLogger(__name__)


class OCRWorker(QThread):
    """Runs one recognition request off the UI thread."""

    recognized = pyqtSignal(list)  # task descriptions
    failed = pyqtSignal(str)

    def __init__(self, relay: OCRRelay, image_path: str, parent=None):
        super().__init__(parent)
        self._relay = relay
        self._image_path = image_path

    def run(self):
        try:
            lines = self._relay.recognize_tasks(self._image_path)
        except OCRError as e:
            self.failed.emit(str(e))
            return
        self.recognized.emit(lines)


class StatsHeader(QFrame):
    """Title bar with the task summary."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("headerFrame")

        layout = QHBoxLayout(self)
        layout.setContentsMargins(20, 14, 20, 14)

        title_layout = QVBoxLayout()
        title = QLabel("Sticky Tasks")
        title.setStyleSheet("font-size: 22px; font-weight: 700;")
        title_layout.addWidget(title)
        self.user_label = QLabel()
        self.user_label.setStyleSheet("font-size: 11px;")
        title_layout.addWidget(self.user_label)
        layout.addLayout(title_layout)

        layout.addStretch()

        self.counts_label = QLabel()
        self.counts_label.setStyleSheet("font-size: 13px; font-weight: 500;")
        layout.addWidget(self.counts_label)

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setFixedWidth(160)
        self.progress.setFormat("%p% done")
        layout.addWidget(self.progress)

    def set_stats(self, stats: TaskStats):
        self.counts_label.setText(
            f"{stats.total} total · {stats.completed} completed · {stats.remaining} remaining"
        )
        self.progress.setValue(stats.completion_percentage)


class MainWindow(QMainWindow):
    """
    Main application window.

    Layout:
    ┌─────────────────────────────────────────────────────┐
    │  Menu Bar                                           │
    ├─────────────────────────────────────────────────────┤
    │  Header (title, user, task stats)                   │
    ├──────────────────────────┬──────────────────────────┤
    │                          │                          │
    │   Task Panel             │   Sticker Canvas         │
    │                          │                          │
    ├──────────────────────────┴──────────────────────────┤
    │  Status Bar                                         │
    └─────────────────────────────────────────────────────┘
    """

    def __init__(self, backend: Backend):
        super().__init__()

        # Settings manager (JSON file based)
        self.settings_manager = get_settings()
        self.backend = backend

        # Services
        self.task_service = TaskService(backend.task_store)
        self.board = StickerBoard(backend.sticker_store, self._commit_mode_from_settings())
        self._ocr_worker: Optional[OCRWorker] = None

        # Setup
        self._setup_window()
        self._setup_menu()
        self._setup_central_widget()
        self._setup_status_bar()
        self._connect_signals()
        self._apply_theme()

        # Restore window geometry
        self._load_window_settings()

        self.backend.auth.add_listener(self._on_session_changed)
        self.reload_data()

    def _commit_mode_from_settings(self) -> CommitMode:
        try:
            return CommitMode(self.settings_manager.commit_mode)
        except ValueError:
            logger.warning(f"Unknown commit mode {self.settings_manager.commit_mode!r}")
            return CommitMode.EVERY_UPDATE

    def _load_window_settings(self):
        """Restore window geometry and state."""
        geometry, state = self.settings_manager.get_window_geometry()
        if geometry:
            self.restoreGeometry(geometry)
        if state:
            self.restoreState(state)

    def _save_window_settings(self):
        """Save window geometry and state."""
        self.settings_manager.save_window_geometry(
            self.saveGeometry(),
            self.saveState()
        )

    def closeEvent(self, event):
        """Handle window close - save settings."""
        self._save_window_settings()
        if self._ocr_worker is not None and self._ocr_worker.isRunning():
            self._ocr_worker.wait(2000)
        self.canvas.wait_for_fetches(2000)
        super().closeEvent(event)

    def _setup_window(self):
        """Configure window properties."""
        self.setWindowTitle("Sticky Tasks")
        self.setMinimumSize(1000, 680)
        self.resize(1280, 820)

    def _setup_menu(self):
        """Create menu bar."""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("&File")

        reload_action = QAction("&Reload", self)
        reload_action.setShortcut(QKeySequence.StandardKey.Refresh)
        reload_action.triggered.connect(self.reload_data)
        file_menu.addAction(reload_action)

        self.recognize_action = QAction("Recognize &List from Image...", self)
        self.recognize_action.setShortcut("Ctrl+R")
        self.recognize_action.triggered.connect(self._on_recognize)
        file_menu.addAction(self.recognize_action)

        file_menu.addSeparator()

        self.sign_out_action = QAction("Sign &Out", self)
        self.sign_out_action.triggered.connect(self._on_sign_out)
        self.sign_out_action.setEnabled(self.backend.auth.requires_sign_in)
        file_menu.addAction(self.sign_out_action)

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # Edit menu
        edit_menu = menubar.addMenu("&Edit")

        add_sticker_action = QAction("Add &Sticker...", self)
        add_sticker_action.setShortcut("Ctrl+Shift+S")
        add_sticker_action.triggered.connect(self._on_add_sticker)
        edit_menu.addAction(add_sticker_action)

        delete_sticker_action = QAction("&Delete Active Sticker", self)
        delete_sticker_action.setShortcut(QKeySequence.StandardKey.Delete)
        delete_sticker_action.triggered.connect(self._on_delete_active_sticker)
        edit_menu.addAction(delete_sticker_action)

        edit_menu.addSeparator()

        settings_action = QAction("Se&ttings...", self)
        settings_action.setShortcut(QKeySequence.StandardKey.Preferences)
        settings_action.triggered.connect(self._on_settings)
        edit_menu.addAction(settings_action)

        # View menu
        view_menu = menubar.addMenu("&View")

        theme_menu = view_menu.addMenu("&Theme")
        self._theme_group = QActionGroup(self)
        for name in THEMES:
            action = QAction(name.capitalize(), self)
            action.setCheckable(True)
            action.setData(name)
            action.setChecked(name == self.settings_manager.theme)
            action.triggered.connect(lambda checked, n=name: self._on_theme_selected(n))
            self._theme_group.addAction(action)
            theme_menu.addAction(action)

        self.dark_mode_action = QAction("&Dark Mode", self)
        self.dark_mode_action.setCheckable(True)
        self.dark_mode_action.setChecked(self.settings_manager.dark_mode)
        self.dark_mode_action.toggled.connect(self._on_dark_mode_toggled)
        view_menu.addAction(self.dark_mode_action)

    def _setup_central_widget(self):
        """Create main content area."""
        central = QWidget()
        central.setObjectName("centralArea")
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(12)

        self.header = StatsHeader()
        layout.addWidget(self.header)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        self.task_panel = TaskPanel(self.task_service)
        ui = self.settings_manager.settings.ui
        self.task_panel.set_view_options(ui.status_filter, ui.sort_by)
        splitter.addWidget(self.task_panel)

        self.canvas = StickerCanvas(self.board)
        splitter.addWidget(self.canvas)

        splitter.setSizes([560, 640])
        layout.addWidget(splitter, 1)

        self.setCentralWidget(central)

    def _setup_status_bar(self):
        """Create status bar."""
        self.statusBar().showMessage("Ready")

    def _connect_signals(self):
        """Connect component signals."""
        self.task_panel.tasksChanged.connect(self._update_stats)
        self.task_panel.statusMessage.connect(
            lambda message: self.statusBar().showMessage(message, 3000)
        )
        self.task_panel.viewOptionsChanged.connect(self._on_view_options_changed)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def reload_data(self):
        """Load tasks and stickers from the backend."""
        self.header.user_label.setText(self.backend.auth.user_label)
        task_count = self.task_service.load()
        sticker_count = self.board.load()
        self.task_panel.refresh()
        self._update_stats()
        self.statusBar().showMessage(
            f"Loaded {task_count} tasks and {sticker_count} stickers", 3000
        )

    def _update_stats(self):
        self.header.set_stats(self.task_service.stats())

    def _on_view_options_changed(self, status_filter: str, sort_by: str):
        ui = self.settings_manager.settings.ui
        ui.status_filter = status_filter
        ui.sort_by = sort_by
        self.settings_manager.save()

    # ------------------------------------------------------------------
    # Stickers
    # ------------------------------------------------------------------

    def _on_add_sticker(self):
        dialog = StickerDialog(self)
        if dialog.exec() != QDialog.DialogCode.Accepted or dialog.image is None:
            return
        image = dialog.image
        try:
            sticker = self.board.add_sticker(image.url, image.width, image.height)
        except StoreError as e:
            logger.error(f"Adding sticker failed: {e}")
            QMessageBox.warning(self, "Add Sticker", f"The sticker could not be saved.\n\n{e}")
            return
        if image.data:
            self.canvas.register_image(sticker.url, image.data)
        self.statusBar().showMessage("Sticker added", 3000)

    def _on_delete_active_sticker(self):
        active_id = self.board.selection.active_id
        if active_id is not None and self.board.delete_sticker(active_id):
            self.statusBar().showMessage("Sticker deleted", 3000)

    # ------------------------------------------------------------------
    # Recognition
    # ------------------------------------------------------------------

    def _on_recognize(self):
        if self._ocr_worker is not None and self._ocr_worker.isRunning():
            return
        path, _ = QFileDialog.getOpenFileName(self, "Choose Photo of a To-Do List", "", IMAGE_FILTER)
        if not path:
            return

        relay = create_ocr_relay(self.settings_manager)
        self._ocr_worker = OCRWorker(relay, path, self)
        self._ocr_worker.recognized.connect(self._on_recognized)
        self._ocr_worker.failed.connect(self._on_recognition_failed)
        self._ocr_worker.finished.connect(lambda: self.recognize_action.setEnabled(True))
        self.recognize_action.setEnabled(False)
        self.statusBar().showMessage("Recognizing to-do list...")
        self._ocr_worker.start()

    def _on_recognized(self, lines: List[str]):
        created = self.task_service.add_recognized("\n".join(lines))
        self.task_panel.refresh()
        self._update_stats()
        self.statusBar().showMessage(f"Added {len(created)} tasks from the image", 5000)
        if len(created) < len(lines):
            QMessageBox.warning(
                self, "Recognize List",
                f"{len(lines) - len(created)} of {len(lines)} recognized tasks could not be saved."
            )

    def _on_recognition_failed(self, message: str):
        self.statusBar().showMessage("Recognition failed", 5000)
        QMessageBox.warning(self, "Recognize List", message)

    # ------------------------------------------------------------------
    # Appearance
    # ------------------------------------------------------------------

    def _apply_theme(self):
        dark_mode = self.settings_manager.dark_mode
        app = QApplication.instance()
        if app is not None:
            app.setPalette(build_palette(dark_mode))
        self.setStyleSheet(window_stylesheet(get_theme(self.settings_manager.theme, dark_mode)))

    def _on_theme_selected(self, name: str):
        self.settings_manager.theme = name
        self._apply_theme()

    def _on_dark_mode_toggled(self, checked: bool):
        self.settings_manager.dark_mode = checked
        self._apply_theme()

    def _on_settings(self):
        dialog = SettingsDialog(self)
        dialog.settingsChanged.connect(self._on_settings_changed)
        dialog.exec()

    def _on_settings_changed(self):
        """Handle settings changes from dialog."""
        self.board.commit_mode = self._commit_mode_from_settings()
        self.dark_mode_action.blockSignals(True)
        self.dark_mode_action.setChecked(self.settings_manager.dark_mode)
        self.dark_mode_action.blockSignals(False)
        for action in self._theme_group.actions():
            action.setChecked(action.data() == self.settings_manager.theme)
        self._apply_theme()
        self.statusBar().showMessage("Settings updated", 2000)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def _on_sign_out(self):
        reply = QMessageBox.question(
            self, "Sign Out", "Sign out of Sticky Tasks?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.backend.auth.sign_out()

    def _on_session_changed(self, signed_in: bool):
        if signed_in:
            return
        self.hide()
        if request_sign_in(self.backend, self.settings_manager):
            self.reload_data()
            self.show()
        else:
            self.close()


def request_sign_in(backend: Backend, settings_manager, parent=None) -> bool:
    """
    Show the sign-in dialog until the user is signed in or gives up.

    Returns:
        True when a session is present afterwards
    """
    auth = backend.auth
    if auth.signed_in:
        return True
    dialog = AuthDialog(auth, settings_manager.settings.backend.last_email, parent)
    if dialog.exec() != QDialog.DialogCode.Accepted:
        return False
    settings_manager.settings.backend.last_email = dialog.email
    settings_manager.save()
    return auth.signed_in
