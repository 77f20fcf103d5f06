"""
Unit tests for the task service and list helpers.

Tests:
- Deadline labels and urgency
- Search, filter and sort
- Statistics
- Task CRUD against a store, including store failures
"""

import pytest
from datetime import date, datetime, timedelta

from models import Task, TaskStatus, StatusFilter, SortOrder, DeadlineUrgency
from services.task_service import (
    TaskService, days_until, days_remaining_label, deadline_urgency,
    filter_tasks, sort_tasks, compute_stats, split_task_lines,
)


TODAY = date(2026, 3, 10)


def at(days: int) -> datetime:
    base = datetime(TODAY.year, TODAY.month, TODAY.day, 18, 30)
    return base + timedelta(days=days)


@pytest.fixture
def tasks():
    start = datetime(2026, 1, 1)
    return [
        Task(id="1", description="Buy milk", deadline=at(3), inserted_at=start),
        Task(id="2", description="Walk the dog", status=TaskStatus.COMPLETED,
             inserted_at=start + timedelta(minutes=1)),
        Task(id="3", description="Pay MILKMAN", deadline=at(-1),
             inserted_at=start + timedelta(minutes=2)),
    ]


@pytest.fixture
def service(task_store, tasks) -> TaskService:
    for task in tasks:
        task_store.rows[task.id] = task
    service = TaskService(task_store)
    service.load()
    return service


class TestDeadlines:
    """Tests for deadline labels."""

    def test_days_until_counts_calendar_days(self):
        assert days_until(datetime(2026, 3, 11, 0, 5), TODAY) == 1
        assert days_until(datetime(2026, 3, 10, 23, 59), TODAY) == 0

    @pytest.mark.parametrize("days,label", [
        (-3, "Overdue"),
        (-1, "Overdue"),
        (0, "Due today"),
        (1, "Tomorrow"),
        (5, "5 days left"),
    ])
    def test_labels(self, days, label):
        assert days_remaining_label(at(days), TODAY) == label

    @pytest.mark.parametrize("days,urgency", [
        (-1, DeadlineUrgency.OVERDUE),
        (0, DeadlineUrgency.SOON),
        (2, DeadlineUrgency.SOON),
        (3, DeadlineUrgency.NORMAL),
    ])
    def test_urgency(self, days, urgency):
        assert deadline_urgency(at(days), TODAY) is urgency


class TestListHelpers:
    """Tests for filtering, sorting and stats."""

    def test_search_is_case_insensitive(self, tasks):
        assert [t.id for t in filter_tasks(tasks, "milk")] == ["1", "3"]

    def test_status_filter(self, tasks):
        assert [t.id for t in filter_tasks(tasks, status_filter=StatusFilter.COMPLETED)] == ["2"]
        assert [t.id for t in filter_tasks(tasks, status_filter=StatusFilter.NOT_COMPLETED)] == ["1", "3"]

    def test_sort_by_deadline_puts_missing_last(self, tasks):
        assert [t.id for t in sort_tasks(tasks, SortOrder.DEADLINE)] == ["3", "1", "2"]

    def test_sort_by_status(self, tasks):
        assert [t.id for t in sort_tasks(tasks, SortOrder.STATUS)] == ["1", "3", "2"]

    def test_no_sorting_keeps_order(self, tasks):
        assert [t.id for t in sort_tasks(tasks)] == ["1", "2", "3"]

    def test_stats(self, tasks):
        stats = compute_stats(tasks)
        assert (stats.total, stats.completed, stats.remaining) == (3, 1, 2)
        assert stats.completion_percentage == 33

    def test_stats_rounding(self, tasks):
        done = [t.with_status(TaskStatus.COMPLETED) for t in tasks[:2]] + tasks[2:]
        assert compute_stats(done).completion_percentage == 67

    def test_stats_empty(self):
        assert compute_stats([]).completion_percentage == 0

    def test_split_task_lines(self):
        assert split_task_lines("Buy milk\n\n  Walk dog \r\n") == ["Buy milk", "Walk dog"]


class TestTaskService:
    """Tests for TaskService."""

    def test_load_orders_by_insertion(self, service):
        assert [t.id for t in service.tasks] == ["1", "2", "3"]

    def test_load_failure(self, task_store):
        task_store.fail = True
        service = TaskService(task_store)
        assert service.load() == 0

    def test_add_task(self, service, task_store):
        task = service.add_task("Call mom", deadline=at(1))
        assert task.status is TaskStatus.NOT_COMPLETED
        assert task.id in task_store.rows
        assert service.tasks[-1] == task

    def test_blank_task_ignored(self, service):
        assert service.add_task("   ") is None
        assert len(service.tasks) == 3

    def test_add_failure_keeps_list(self, service, task_store):
        task_store.fail = True
        assert service.add_task("Call mom") is None
        assert len(service.tasks) == 3

    def test_add_recognized(self, task_store):
        service = TaskService(task_store)
        created = service.add_recognized("Buy milk\nWalk dog\n")
        assert [t.description for t in created] == ["Buy milk", "Walk dog"]
        assert all(t.deadline is None for t in created)
        assert all(t.status is TaskStatus.NOT_COMPLETED for t in created)

    def test_toggle_status(self, service, task_store):
        task = service.toggle_status("1")
        assert task.status is TaskStatus.COMPLETED
        assert task_store.rows["1"].status is TaskStatus.COMPLETED
        assert service.toggle_status("1").status is TaskStatus.NOT_COMPLETED

    def test_update_failure_keeps_old_value(self, service, task_store):
        task_store.fail = True
        assert service.set_status("1", TaskStatus.COMPLETED) is None
        assert service.get("1").status is TaskStatus.NOT_COMPLETED

    def test_edit_task(self, service):
        task = service.edit_task("1", "Buy oat milk", None)
        assert task.description == "Buy oat milk"
        assert task.deadline is None

    def test_edit_rejects_blank(self, service):
        assert service.edit_task("1", "", None) is None

    def test_delete_task(self, service, task_store):
        assert service.delete_task("2") is True
        assert "2" not in task_store.rows
        assert service.get("2") is None
        assert service.delete_task("2") is False

    def test_visible_tasks(self, service):
        visible = service.visible_tasks("milk", StatusFilter.ALL, SortOrder.DEADLINE)
        assert [t.id for t in visible] == ["3", "1"]
