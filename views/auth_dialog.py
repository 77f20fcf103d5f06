"""
Sign-in dialog.

Email and password sign-in or sign-up against the auth gate. The dialog
stays open until sign-in succeeds or the user cancels.
"""

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QLineEdit,
    QPushButton, QLabel, QApplication
)

from services.auth_gate import AuthGate
from services.supabase_client import AuthError


class AuthDialog(QDialog):
    """Email/password sign-in."""

    def __init__(self, auth: AuthGate, last_email: str = "", parent=None):
        super().__init__(parent)
        self._auth = auth
        self._setup_ui()
        self.email_edit.setText(last_email)
        if last_email:
            self.password_edit.setFocus()

    def _setup_ui(self):
        self.setWindowTitle("Sign In")
        self.setMinimumWidth(360)

        layout = QVBoxLayout(self)

        title = QLabel("Sticky Tasks")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet("font-size: 20px; font-weight: 700; padding: 8px;")
        layout.addWidget(title)

        form = QFormLayout()
        self.email_edit = QLineEdit()
        self.email_edit.setPlaceholderText("you@example.com")
        form.addRow("Email:", self.email_edit)

        self.password_edit = QLineEdit()
        self.password_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self.password_edit.returnPressed.connect(self._on_sign_in)
        form.addRow("Password:", self.password_edit)
        layout.addLayout(form)

        self.message_label = QLabel()
        self.message_label.setWordWrap(True)
        self.message_label.setVisible(False)
        layout.addWidget(self.message_label)

        button_layout = QHBoxLayout()
        self.sign_up_btn = QPushButton("Create Account")
        self.sign_up_btn.clicked.connect(self._on_sign_up)
        button_layout.addWidget(self.sign_up_btn)

        button_layout.addStretch()

        cancel_btn = QPushButton("Quit")
        cancel_btn.clicked.connect(self.reject)
        button_layout.addWidget(cancel_btn)

        self.sign_in_btn = QPushButton("Sign In")
        self.sign_in_btn.setObjectName("primaryButton")
        self.sign_in_btn.setDefault(True)
        self.sign_in_btn.clicked.connect(self._on_sign_in)
        button_layout.addWidget(self.sign_in_btn)

        layout.addLayout(button_layout)

    @property
    def email(self) -> str:
        return self.email_edit.text().strip()

    def _credentials(self):
        email = self.email
        password = self.password_edit.text()
        if not email or not password:
            self._show_message("Enter your email and password.", error=True)
            return None
        return email, password

    def _show_message(self, text: str, error: bool = False):
        color = "#DC2626" if error else "#059669"
        self.message_label.setStyleSheet(f"color: {color};")
        self.message_label.setText(text)
        self.message_label.setVisible(True)

    def _set_busy(self, busy: bool):
        self.sign_in_btn.setEnabled(not busy)
        self.sign_up_btn.setEnabled(not busy)
        QApplication.processEvents()

    def _on_sign_in(self):
        credentials = self._credentials()
        if credentials is None:
            return
        self._set_busy(True)
        try:
            self._auth.sign_in(*credentials)
        except AuthError as e:
            self._show_message(f"Sign-in failed: {e}", error=True)
            return
        finally:
            self._set_busy(False)
        self.accept()

    def _on_sign_up(self):
        credentials = self._credentials()
        if credentials is None:
            return
        self._set_busy(True)
        try:
            self._auth.sign_up(*credentials)
        except AuthError as e:
            self._show_message(f"Sign-up failed: {e}", error=True)
            return
        finally:
            self._set_busy(False)
        self._show_message("Account created. Check your email to confirm it, then sign in.")
