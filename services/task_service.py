"""
Task list service.

Keeps the in-memory task list in step with the task store and provides
the list view helpers: search, status filter, sorting, statistics and
deadline labels.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from models import Task, TaskStatus, StatusFilter, SortOrder, DeadlineUrgency
from .stores import StoreError, TaskStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskStats:
    """Summary counts shown in the header."""
    total: int
    completed: int
    remaining: int
    completion_percentage: int


def _local_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()


def days_until(deadline: datetime, today: Optional[date] = None) -> int:
    """Whole calendar days from today to the deadline (negative when past)."""
    today = today or date.today()
    return (_local_date(deadline) - today).days


def days_remaining_label(deadline: datetime, today: Optional[date] = None) -> str:
    days = days_until(deadline, today)
    if days < 0:
        return "Overdue"
    if days == 0:
        return "Due today"
    if days == 1:
        return "Tomorrow"
    return f"{days} days left"


def deadline_urgency(deadline: datetime, today: Optional[date] = None) -> DeadlineUrgency:
    days = days_until(deadline, today)
    if days < 0:
        return DeadlineUrgency.OVERDUE
    if days <= 2:
        return DeadlineUrgency.SOON
    return DeadlineUrgency.NORMAL


def filter_tasks(tasks: Iterable[Task], query: str = "",
                 status_filter: StatusFilter = StatusFilter.ALL) -> List[Task]:
    """Tasks whose description contains ``query`` (any case) and match the status filter."""
    needle = query.lower()
    result = []
    for task in tasks:
        if needle not in task.description.lower():
            continue
        if status_filter is not StatusFilter.ALL and task.status.value != status_filter.value:
            continue
        result.append(task)
    return result


def sort_tasks(tasks: Iterable[Task], order: SortOrder = SortOrder.NONE) -> List[Task]:
    """
    Order tasks for display. Sorting is stable.

    By deadline: earliest first, tasks without a deadline last.
    By status: not completed first.
    """
    tasks = list(tasks)
    if order is SortOrder.DEADLINE:
        return sorted(tasks, key=lambda task: (
            task.deadline is None,
            _sortable(task.deadline) if task.deadline else 0.0,
        ))
    if order is SortOrder.STATUS:
        return sorted(tasks, key=lambda task: task.is_completed)
    return tasks


def _sortable(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.timestamp()


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    tasks = list(tasks)
    total = len(tasks)
    completed = sum(1 for task in tasks if task.is_completed)
    percentage = int(completed * 100 / total + 0.5) if total else 0
    return TaskStats(total, completed, total - completed, percentage)


def split_task_lines(text: str) -> List[str]:
    """Non-empty, stripped lines of a block of text."""
    return [line.strip() for line in text.splitlines() if line.strip()]


class TaskService:
    """
    In-memory task list backed by a task store.

    Local state only changes after the store accepted the change; a
    failed write is logged and the call reports failure.
    """

    def __init__(self, store: TaskStore):
        self._store = store
        self._tasks: List[Task] = []

    @property
    def tasks(self) -> List[Task]:
        """All tasks in insertion order."""
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def load(self) -> int:
        try:
            self._tasks = self._store.load_all()
        except StoreError as e:
            logger.warning(f"Could not load tasks: {e}")
            self._tasks = []
        logger.info(f"Loaded {len(self._tasks)} tasks")
        return len(self._tasks)

    def add_task(self, description: str, deadline: Optional[datetime] = None,
                 photo: Optional[str] = None) -> Optional[Task]:
        """Create a task. Blank descriptions are ignored."""
        if not description.strip():
            return None
        task = Task(description=description, deadline=deadline, photo=photo)
        try:
            stored = self._store.insert(task)
        except StoreError as e:
            logger.error(f"Could not add task: {e}")
            return None
        self._tasks.append(stored)
        return stored

    def add_recognized(self, text: str) -> List[Task]:
        """Create one task per non-empty line of recognized text."""
        created = []
        for line in split_task_lines(text):
            task = self.add_task(line)
            if task is not None:
                created.append(task)
        logger.info(f"Created {len(created)} tasks from recognized text")
        return created

    def set_status(self, task_id: str, status: TaskStatus) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        return self._update(task.with_status(status))

    def toggle_status(self, task_id: str) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        return self._update(task.with_status(task.status.toggled()))

    def edit_task(self, task_id: str, description: str,
                  deadline: Optional[datetime]) -> Optional[Task]:
        task = self.get(task_id)
        if task is None or not description.strip():
            return None
        return self._update(task.edited(description, deadline))

    def delete_task(self, task_id: str) -> bool:
        if self.get(task_id) is None:
            return False
        try:
            self._store.delete(task_id)
        except StoreError as e:
            logger.error(f"Could not delete task {task_id}: {e}")
            return False
        self._tasks = [task for task in self._tasks if task.id != task_id]
        return True

    def visible_tasks(self, query: str = "", status_filter: StatusFilter = StatusFilter.ALL,
                      order: SortOrder = SortOrder.NONE) -> List[Task]:
        return sort_tasks(filter_tasks(self._tasks, query, status_filter), order)

    def stats(self) -> TaskStats:
        return compute_stats(self._tasks)

    def _update(self, task: Task) -> Optional[Task]:
        try:
            stored = self._store.update(task)
        except StoreError as e:
            logger.error(f"Could not update task {task.id}: {e}")
            return None
        self._tasks = [stored if t.id == stored.id else t for t in self._tasks]
        return stored
