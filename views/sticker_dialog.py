"""
Add-sticker dialog.

Picks a sticker image from a local file or a web URL and probes its
intrinsic size. An image that cannot be loaded keeps the dialog open
with an error message.
"""

import logging
from typing import Optional

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLineEdit, QPushButton,
    QLabel, QFileDialog, QApplication
)

from services.image_probe import (
    ProbedImage, ImageLoadError, load_image_file, load_image_url
)

logger = logging.getLogger(__name__)


INVALID_URL_MESSAGE = "Invalid image URL. Please try again."
IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.webp *.bmp)"


class StickerDialog(QDialog):
    """
    Choose an image for a new sticker.

    After ``exec()`` returns Accepted, ``image`` holds the probed image.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.image: Optional[ProbedImage] = None
        self._setup_ui()

    def _setup_ui(self):
        self.setWindowTitle("Add Sticker")
        self.setMinimumWidth(420)

        layout = QVBoxLayout(self)

        file_btn = QPushButton("Choose Image File...")
        file_btn.clicked.connect(self._on_choose_file)
        layout.addWidget(file_btn)

        layout.addWidget(QLabel("or paste an image URL:"))

        url_layout = QHBoxLayout()
        self.url_edit = QLineEdit()
        self.url_edit.setPlaceholderText("https://example.com/sticker.png")
        self.url_edit.returnPressed.connect(self._on_add_url)
        url_layout.addWidget(self.url_edit, 1)

        self.add_url_btn = QPushButton("Add")
        self.add_url_btn.setObjectName("primaryButton")
        self.add_url_btn.clicked.connect(self._on_add_url)
        url_layout.addWidget(self.add_url_btn)
        layout.addLayout(url_layout)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #DC2626;")
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        layout.addWidget(cancel_btn)

    def _show_error(self, message: str):
        self.error_label.setText(message)
        self.error_label.setVisible(True)

    def _on_choose_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Choose Sticker Image", "", IMAGE_FILTER)
        if not path:
            return
        try:
            self.image = load_image_file(path)
        except ImageLoadError as e:
            logger.warning(f"Sticker file rejected: {e}")
            self._show_error(str(e))
            return
        self.accept()

    def _on_add_url(self):
        url = self.url_edit.text().strip()
        if not url:
            return
        self.add_url_btn.setEnabled(False)
        QApplication.processEvents()
        try:
            self.image = load_image_url(url)
        except ImageLoadError as e:
            logger.warning(f"Sticker URL rejected: {e}")
            self._show_error(INVALID_URL_MESSAGE)
            return
        finally:
            self.add_url_btn.setEnabled(True)
        self.accept()
