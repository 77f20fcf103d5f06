"""
Task panel.

Input form for new tasks, the search/filter/sort bar and the task list
with per-task status toggle, edit, photo and delete actions.
"""

import logging
from datetime import datetime
from typing import Optional

from PyQt6.QtCore import Qt, QDate, pyqtSignal
from PyQt6.QtGui import QPixmap
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QPushButton,
    QLabel, QComboBox, QDateEdit, QCheckBox, QFrame, QScrollArea,
    QDialog, QFormLayout, QDialogButtonBox, QFileDialog, QMessageBox
)

from models import Task, StatusFilter, SortOrder, DeadlineUrgency
from services.task_service import TaskService, days_remaining_label, deadline_urgency
from services.image_probe import load_image_file, decode_data_url, ImageLoadError
from .theme import COMPLETED_COLOR, PENDING_COLOR, SOON_COLOR, OVERDUE_COLOR

logger = logging.getLogger(__name__)


IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.webp *.bmp)"

URGENCY_COLORS = {
    DeadlineUrgency.NORMAL: PENDING_COLOR,
    DeadlineUrgency.SOON: SOON_COLOR,
    DeadlineUrgency.OVERDUE: OVERDUE_COLOR,
}


def _to_datetime(qdate: QDate) -> datetime:
    return datetime(qdate.year(), qdate.month(), qdate.day())


class DeadlineEdit(QWidget):
    """Optional date: a checkbox enables the date field."""

    def __init__(self, deadline: Optional[datetime] = None, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._enabled = QCheckBox("Deadline")
        layout.addWidget(self._enabled)

        self._date = QDateEdit()
        self._date.setCalendarPopup(True)
        self._date.setDisplayFormat("MMM d, yyyy")
        layout.addWidget(self._date, 1)

        self._enabled.toggled.connect(self._date.setEnabled)
        self.set_deadline(deadline)

    def deadline(self) -> Optional[datetime]:
        if not self._enabled.isChecked():
            return None
        return _to_datetime(self._date.date())

    def set_deadline(self, deadline: Optional[datetime]):
        if deadline is None:
            self._enabled.setChecked(False)
            self._date.setDate(QDate.currentDate())
            self._date.setEnabled(False)
        else:
            self._enabled.setChecked(True)
            self._date.setDate(QDate(deadline.year, deadline.month, deadline.day))
            self._date.setEnabled(True)


class TaskEditDialog(QDialog):
    """Edit a task's description and deadline."""

    def __init__(self, task: Task, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Task")
        self.setMinimumWidth(380)

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.description_edit = QLineEdit(task.description)
        form.addRow("Task:", self.description_edit)

        self.deadline_edit = DeadlineEdit(task.deadline)
        form.addRow("", self.deadline_edit)
        layout.addLayout(form)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save |
            QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _on_accept(self):
        if not self.description_edit.text().strip():
            self.description_edit.setFocus()
            return
        self.accept()


class PhotoDialog(QDialog):
    """Shows a task photo."""

    def __init__(self, photo: str, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Photo")
        layout = QVBoxLayout(self)

        label = QLabel()
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        pixmap = QPixmap()
        try:
            pixmap.loadFromData(decode_data_url(photo))
        except ImageLoadError as e:
            logger.warning(f"Could not show photo: {e}")
        if pixmap.isNull():
            label.setText("Photo could not be displayed.")
        else:
            label.setPixmap(pixmap.scaled(
                600, 600,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            ))
        layout.addWidget(label)


class TaskRow(QFrame):
    """One task in the list."""

    toggleRequested = pyqtSignal(str)
    editRequested = pyqtSignal(str)
    deleteRequested = pyqtSignal(str)
    photoRequested = pyqtSignal(str)

    def __init__(self, task: Task, parent=None):
        super().__init__(parent)
        self.task_id = task.id
        self.setObjectName("taskRow")
        self.setFrameShape(QFrame.Shape.StyledPanel)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 8, 10, 8)

        self.status_btn = QPushButton("✓" if task.is_completed else "")
        self.status_btn.setFixedSize(26, 26)
        self.status_btn.setToolTip(f"Mark as {task.status.toggled().label}")
        self.status_btn.setStyleSheet(
            f"border: 2px solid {COMPLETED_COLOR if task.is_completed else '#D1D5DB'};"
            f"border-radius: 13px; color: {COMPLETED_COLOR}; font-weight: bold;"
        )
        self.status_btn.clicked.connect(lambda: self.toggleRequested.emit(self.task_id))
        layout.addWidget(self.status_btn)

        text_layout = QVBoxLayout()
        text_layout.setSpacing(2)

        self.description_label = QLabel(task.description)
        self.description_label.setWordWrap(True)
        if task.is_completed:
            self.description_label.setStyleSheet(
                f"text-decoration: line-through; color: {PENDING_COLOR};"
            )
        text_layout.addWidget(self.description_label)

        meta = [task.status.label]
        self.deadline_label = QLabel()
        if task.deadline is not None:
            remaining = days_remaining_label(task.deadline)
            color = URGENCY_COLORS[deadline_urgency(task.deadline)]
            if task.is_completed:
                color = PENDING_COLOR
            meta.append(f"{task.deadline:%b %d, %Y} · {remaining}")
            self.deadline_label.setStyleSheet(f"color: {color}; font-size: 11px;")
        else:
            self.deadline_label.setStyleSheet(f"color: {PENDING_COLOR}; font-size: 11px;")
        self.deadline_label.setText(" · ".join(meta))
        text_layout.addWidget(self.deadline_label)

        layout.addLayout(text_layout, 1)

        if task.has_photo:
            photo_btn = QPushButton("Photo")
            photo_btn.clicked.connect(lambda: self.photoRequested.emit(self.task_id))
            layout.addWidget(photo_btn)

        edit_btn = QPushButton("Edit")
        edit_btn.clicked.connect(lambda: self.editRequested.emit(self.task_id))
        layout.addWidget(edit_btn)

        delete_btn = QPushButton("Delete")
        delete_btn.setStyleSheet(f"color: {OVERDUE_COLOR};")
        delete_btn.clicked.connect(lambda: self.deleteRequested.emit(self.task_id))
        layout.addWidget(delete_btn)


class TaskPanel(QWidget):
    """
    Task entry and list.

    Signals:
        tasksChanged: Emitted after tasks were added, changed or removed
        statusMessage(str): Short message for the status bar
        viewOptionsChanged(str, str): Status filter and sort order values
    """

    tasksChanged = pyqtSignal()
    statusMessage = pyqtSignal(str)
    viewOptionsChanged = pyqtSignal(str, str)

    def __init__(self, service: TaskService, parent=None):
        super().__init__(parent)
        self._service = service
        self._photo: Optional[str] = None
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(10)

        # New task form
        form_frame = QFrame()
        form_frame.setObjectName("taskForm")
        form_layout = QVBoxLayout(form_frame)

        self.task_edit = QLineEdit()
        self.task_edit.setPlaceholderText("What needs to be done?")
        self.task_edit.returnPressed.connect(self._on_add)
        form_layout.addWidget(self.task_edit)

        options_layout = QHBoxLayout()
        self.deadline_edit = DeadlineEdit()
        options_layout.addWidget(self.deadline_edit, 1)

        self.photo_btn = QPushButton("Add Photo")
        self.photo_btn.clicked.connect(self._on_choose_photo)
        options_layout.addWidget(self.photo_btn)

        self.clear_photo_btn = QPushButton("Remove Photo")
        self.clear_photo_btn.clicked.connect(self._clear_photo)
        self.clear_photo_btn.setVisible(False)
        options_layout.addWidget(self.clear_photo_btn)
        form_layout.addLayout(options_layout)

        self.add_btn = QPushButton("Add Task")
        self.add_btn.setObjectName("primaryButton")
        self.add_btn.clicked.connect(self._on_add)
        form_layout.addWidget(self.add_btn)

        layout.addWidget(form_frame)

        # Search, filter and sort
        bar_layout = QHBoxLayout()
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search tasks...")
        self.search_edit.textChanged.connect(self.refresh)
        bar_layout.addWidget(self.search_edit, 1)

        self.filter_combo = QComboBox()
        self.filter_combo.addItem("All Tasks", StatusFilter.ALL.value)
        self.filter_combo.addItem("Not Completed", StatusFilter.NOT_COMPLETED.value)
        self.filter_combo.addItem("Completed", StatusFilter.COMPLETED.value)
        self.filter_combo.currentIndexChanged.connect(self._on_view_options_changed)
        bar_layout.addWidget(self.filter_combo)

        self.sort_combo = QComboBox()
        self.sort_combo.addItem("No Sorting", SortOrder.NONE.value)
        self.sort_combo.addItem("By Deadline", SortOrder.DEADLINE.value)
        self.sort_combo.addItem("By Status", SortOrder.STATUS.value)
        self.sort_combo.currentIndexChanged.connect(self._on_view_options_changed)
        bar_layout.addWidget(self.sort_combo)

        layout.addLayout(bar_layout)

        # Task list
        self._list_widget = QWidget()
        self._list_layout = QVBoxLayout(self._list_widget)
        self._list_layout.setContentsMargins(0, 0, 0, 0)
        self._list_layout.setSpacing(6)
        self._list_layout.addStretch()

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setWidget(self._list_widget)
        layout.addWidget(scroll, 1)

        self.empty_label = QLabel("No tasks yet. Add one above!")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setObjectName("hintLabel")
        layout.addWidget(self.empty_label)

    # ------------------------------------------------------------------
    # View options
    # ------------------------------------------------------------------

    @property
    def status_filter(self) -> StatusFilter:
        return StatusFilter(self.filter_combo.currentData())

    @property
    def sort_order(self) -> SortOrder:
        return SortOrder(self.sort_combo.currentData())

    def set_view_options(self, status_filter: str, sort_order: str):
        """Restore saved filter and sort values. Unknown values are ignored."""
        for combo, value in ((self.filter_combo, status_filter), (self.sort_combo, sort_order)):
            idx = combo.findData(value)
            if idx >= 0:
                combo.setCurrentIndex(idx)

    def _on_view_options_changed(self):
        self.viewOptionsChanged.emit(self.status_filter.value, self.sort_order.value)
        self.refresh()

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def refresh(self):
        """Rebuild the visible task rows."""
        while self._list_layout.count() > 1:
            item = self._list_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        tasks = self._service.visible_tasks(
            self.search_edit.text(), self.status_filter, self.sort_order
        )
        for index, task in enumerate(tasks):
            row = TaskRow(task)
            row.toggleRequested.connect(self._on_toggle)
            row.editRequested.connect(self._on_edit)
            row.deleteRequested.connect(self._on_delete)
            row.photoRequested.connect(self._on_show_photo)
            self._list_layout.insertWidget(index, row)

        if not self._service.tasks:
            self.empty_label.setText("No tasks yet. Add one above!")
        else:
            self.empty_label.setText("No tasks match your search.")
        self.empty_label.setVisible(not tasks)

    def _changed(self, message: str = ""):
        self.refresh()
        self.tasksChanged.emit()
        if message:
            self.statusMessage.emit(message)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _on_add(self):
        description = self.task_edit.text().strip()
        if not description:
            return
        task = self._service.add_task(description, self.deadline_edit.deadline(), self._photo)
        if task is None:
            QMessageBox.warning(self, "Add Task", "The task could not be saved.")
            return
        self.task_edit.clear()
        self.deadline_edit.set_deadline(None)
        self._clear_photo()
        self._changed("Task added")

    def _on_choose_photo(self):
        path, _ = QFileDialog.getOpenFileName(self, "Choose Photo", "", IMAGE_FILTER)
        if not path:
            return
        try:
            self._photo = load_image_file(path).url
        except ImageLoadError as e:
            QMessageBox.warning(self, "Add Photo", str(e))
            return
        self.photo_btn.setText("Photo ✓")
        self.clear_photo_btn.setVisible(True)

    def _clear_photo(self):
        self._photo = None
        self.photo_btn.setText("Add Photo")
        self.clear_photo_btn.setVisible(False)

    def _on_toggle(self, task_id: str):
        task = self._service.toggle_status(task_id)
        if task is None:
            self.statusMessage.emit("Could not update the task")
            return
        self._changed(f"Marked as {task.status.label.lower()}")

    def _on_edit(self, task_id: str):
        task = self._service.get(task_id)
        if task is None:
            return
        dialog = TaskEditDialog(task, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        updated = self._service.edit_task(
            task_id, dialog.description_edit.text().strip(), dialog.deadline_edit.deadline()
        )
        if updated is None:
            QMessageBox.warning(self, "Edit Task", "The task could not be saved.")
            return
        self._changed("Task updated")

    def _on_delete(self, task_id: str):
        if self._service.delete_task(task_id):
            self._changed("Task deleted")
        else:
            self.statusMessage.emit("Could not delete the task")

    def _on_show_photo(self, task_id: str):
        task = self._service.get(task_id)
        if task is not None and task.photo:
            PhotoDialog(task.photo, self).exec()
