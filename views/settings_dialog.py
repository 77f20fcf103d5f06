"""
Settings Dialog.

Provides UI for viewing and editing application settings.
"""

import os
from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QTabWidget,
    QWidget, QFormLayout, QLineEdit, QPushButton,
    QDoubleSpinBox, QCheckBox, QComboBox,
    QGroupBox, QLabel, QFileDialog, QDialogButtonBox,
    QMessageBox, QFrame
)

from services.settings_manager import get_settings, BACKEND_LOCAL, BACKEND_SUPABASE, THEMES
from services.gesture_engine import CommitMode


class SettingsDialog(QDialog):
    """
    Settings dialog with tabbed interface.

    Tabs:
    - Storage (local folder or Supabase project)
    - Recognition (OCR model and key)
    - Interface (theme, stickers)

    Storage changes take effect on the next start.
    """

    settingsChanged = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._settings = get_settings()
        self._setup_ui()
        self._load_current_settings()

    def _setup_ui(self):
        self.setWindowTitle("Settings")
        self.setMinimumWidth(500)
        self.setMinimumHeight(420)

        layout = QVBoxLayout(self)

        self._tabs = QTabWidget()
        self._tabs.addTab(self._create_storage_tab(), "Storage")
        self._tabs.addTab(self._create_ocr_tab(), "Recognition")
        self._tabs.addTab(self._create_ui_tab(), "Interface")
        layout.addWidget(self._tabs)

        # Settings file location info
        info_frame = QFrame()
        info_frame.setObjectName("settingsInfo")
        info_layout = QHBoxLayout(info_frame)
        info_layout.setContentsMargins(8, 4, 8, 4)

        path_label = QLabel(f"Settings file: {self._settings.settings_path}")
        path_label.setWordWrap(True)
        info_layout.addWidget(path_label, 1)

        open_btn = QPushButton("Open Folder")
        open_btn.setFixedWidth(100)
        open_btn.clicked.connect(self._open_settings_folder)
        info_layout.addWidget(open_btn)

        layout.addWidget(info_frame)

        # Buttons
        button_layout = QHBoxLayout()

        reset_btn = QPushButton("Reset to Defaults")
        reset_btn.clicked.connect(self._reset_to_defaults)
        button_layout.addWidget(reset_btn)

        button_layout.addStretch()

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok |
            QDialogButtonBox.StandardButton.Cancel |
            QDialogButtonBox.StandardButton.Apply
        )
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        buttons.button(QDialogButtonBox.StandardButton.Apply).clicked.connect(self._apply_settings)
        button_layout.addWidget(buttons)

        layout.addLayout(button_layout)

    def _create_storage_tab(self) -> QWidget:
        """Create backend selection tab."""
        widget = QWidget()
        layout = QVBoxLayout(widget)

        backend_group = QGroupBox("Backend")
        backend_layout = QFormLayout(backend_group)

        self._backend_combo = QComboBox()
        self._backend_combo.addItem("Local folder", BACKEND_LOCAL)
        self._backend_combo.addItem("Supabase", BACKEND_SUPABASE)
        self._backend_combo.currentIndexChanged.connect(self._update_backend_fields)
        backend_layout.addRow("Store data in:", self._backend_combo)

        layout.addWidget(backend_group)

        # Local folder
        self._local_group = QGroupBox("Local Folder")
        local_layout = QHBoxLayout(self._local_group)

        self._data_dir_edit = QLineEdit()
        self._data_dir_edit.setPlaceholderText("Default location")
        local_layout.addWidget(self._data_dir_edit, 1)

        browse_btn = QPushButton("Browse...")
        browse_btn.clicked.connect(self._browse_data_dir)
        local_layout.addWidget(browse_btn)

        layout.addWidget(self._local_group)

        # Supabase project
        self._supabase_group = QGroupBox("Supabase Project")
        supabase_layout = QFormLayout(self._supabase_group)

        self._supabase_url_edit = QLineEdit()
        self._supabase_url_edit.setPlaceholderText("https://<project>.supabase.co")
        supabase_layout.addRow("Project URL:", self._supabase_url_edit)

        self._supabase_key_edit = QLineEdit()
        self._supabase_key_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self._supabase_key_edit.setPlaceholderText("anon key (or SUPABASE_KEY)")
        supabase_layout.addRow("API Key:", self._supabase_key_edit)

        layout.addWidget(self._supabase_group)

        note = QLabel("Storage changes take effect after restarting the application.")
        note.setWordWrap(True)
        note.setObjectName("hintLabel")
        layout.addWidget(note)

        layout.addStretch()
        return widget

    def _create_ocr_tab(self) -> QWidget:
        """Create recognition settings tab."""
        widget = QWidget()
        layout = QVBoxLayout(widget)

        group = QGroupBox("Mistral")
        form = QFormLayout(group)

        self._ocr_key_edit = QLineEdit()
        self._ocr_key_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self._ocr_key_edit.setPlaceholderText("API key (or MISTRAL_API_KEY)")
        form.addRow("API Key:", self._ocr_key_edit)

        self._ocr_model_edit = QLineEdit()
        form.addRow("Model:", self._ocr_model_edit)

        self._ocr_endpoint_edit = QLineEdit()
        form.addRow("Endpoint:", self._ocr_endpoint_edit)

        self._ocr_timeout_spin = QDoubleSpinBox()
        self._ocr_timeout_spin.setRange(5.0, 600.0)
        self._ocr_timeout_spin.setSuffix(" s")
        form.addRow("Timeout:", self._ocr_timeout_spin)

        layout.addWidget(group)
        layout.addStretch()
        return widget

    def _create_ui_tab(self) -> QWidget:
        """Create UI settings tab."""
        widget = QWidget()
        layout = QVBoxLayout(widget)

        # Appearance group
        appearance_group = QGroupBox("Appearance")
        appearance_layout = QFormLayout(appearance_group)

        self._theme_combo = QComboBox()
        for theme in THEMES:
            self._theme_combo.addItem(theme.capitalize(), theme)
        appearance_layout.addRow("Theme:", self._theme_combo)

        self._dark_mode_check = QCheckBox("Dark mode")
        appearance_layout.addRow("", self._dark_mode_check)

        layout.addWidget(appearance_group)

        # Stickers group
        stickers_group = QGroupBox("Stickers")
        stickers_layout = QFormLayout(stickers_group)

        self._commit_combo = QComboBox()
        self._commit_combo.addItem("While moving", CommitMode.EVERY_UPDATE.value)
        self._commit_combo.addItem("When released", CommitMode.ON_END.value)
        stickers_layout.addRow("Save changes:", self._commit_combo)

        layout.addWidget(stickers_group)

        layout.addStretch()
        return widget

    def _load_current_settings(self):
        """Load current settings into form fields."""
        s = self._settings.settings

        # Storage tab
        self._select_data(self._backend_combo, s.backend.kind)
        self._data_dir_edit.setText(s.paths.data_dir)
        self._supabase_url_edit.setText(s.backend.supabase_url)
        self._supabase_key_edit.setText(s.backend.supabase_key)
        self._update_backend_fields()

        # Recognition tab
        self._ocr_key_edit.setText(s.ocr.api_key)
        self._ocr_model_edit.setText(s.ocr.model)
        self._ocr_endpoint_edit.setText(s.ocr.endpoint)
        self._ocr_timeout_spin.setValue(s.ocr.timeout)

        # UI tab
        self._select_data(self._theme_combo, self._settings.theme)
        self._dark_mode_check.setChecked(s.ui.dark_mode)
        self._select_data(self._commit_combo, s.stickers.commit_mode)

    def _apply_settings(self):
        """Apply settings from form to settings manager."""
        s = self._settings.settings

        # Storage tab
        s.backend.kind = self._backend_combo.currentData()
        s.paths.data_dir = self._data_dir_edit.text().strip()
        s.backend.supabase_url = self._supabase_url_edit.text().strip()
        s.backend.supabase_key = self._supabase_key_edit.text().strip()

        # Recognition tab
        s.ocr.api_key = self._ocr_key_edit.text().strip()
        s.ocr.model = self._ocr_model_edit.text().strip() or s.ocr.model
        s.ocr.endpoint = self._ocr_endpoint_edit.text().strip() or s.ocr.endpoint
        s.ocr.timeout = self._ocr_timeout_spin.value()

        # UI tab
        s.ui.theme = self._theme_combo.currentData()
        s.ui.dark_mode = self._dark_mode_check.isChecked()
        s.stickers.commit_mode = self._commit_combo.currentData()

        # Save
        self._settings.save()
        self.settingsChanged.emit()

    def _on_accept(self):
        """Handle OK button."""
        self._apply_settings()
        self.accept()

    @staticmethod
    def _select_data(combo: QComboBox, value):
        idx = combo.findData(value)
        if idx >= 0:
            combo.setCurrentIndex(idx)

    def _update_backend_fields(self):
        is_local = self._backend_combo.currentData() == BACKEND_LOCAL
        self._local_group.setVisible(is_local)
        self._supabase_group.setVisible(not is_local)

    def _browse_data_dir(self):
        """Browse for the local data directory."""
        path = QFileDialog.getExistingDirectory(
            self, "Select Data Folder",
            self._data_dir_edit.text()
        )
        if path:
            self._data_dir_edit.setText(path)

    def _open_settings_folder(self):
        """Open the settings folder in file explorer."""
        import subprocess
        import platform

        folder = os.path.dirname(self._settings.settings_path)

        if platform.system() == "Windows":
            os.startfile(folder)
        elif platform.system() == "Darwin":
            subprocess.run(["open", folder])
        else:
            subprocess.run(["xdg-open", folder])

    def _reset_to_defaults(self):
        """Reset all settings to defaults."""
        reply = QMessageBox.question(
            self,
            "Reset Settings",
            "Are you sure you want to reset all settings to defaults?\n\n"
            "This will clear your storage choice, API keys and preferences.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )

        if reply == QMessageBox.StandardButton.Yes:
            self._settings.reset()
            self._load_current_settings()
            self.settingsChanged.emit()
