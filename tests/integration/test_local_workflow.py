"""
Integration tests for the local workspace.

Tests:
- Build the local backend from settings
- Add, manipulate and reload stickers through pointer events
- Add, complete and reload tasks
- Seed tasks from a recognized to-do list
"""

import pytest
import requests

from models import Point, Size, TaskStatus, StatusFilter, SortOrder
from services import (
    StickerBoard, TaskService, SelectionState, create_backend, create_ocr_relay,
)


@pytest.fixture
def backend(settings_manager, temp_dir):
    settings_manager.settings.paths.data_dir = str(temp_dir / "workspace")
    return create_backend(settings_manager)


def click(board, point):
    board.press(point)
    board.release(point)


class TestStickerWorkflow:
    """Stickers survive a restart with their last transform."""

    def test_manipulate_and_reload(self, backend):
        board = StickerBoard(backend.sticker_store)
        board.load()
        sticker = board.add_sticker("https://example.com/cat.png", 300, 200)

        # Select, drag by (+40, +20), then resize from the SE corner
        click(board, Point(175, 150))
        assert board.state is SelectionState.EDITING
        board.press(Point(175, 150))
        board.move(Point(215, 170))
        board.release(Point(215, 170))

        board.press(Point(290, 220))
        board.move(Point(350, 230))
        board.release(Point(350, 230))

        # Rotate a quarter turn around the new center (245, 190)
        board.press(Point(245, 190 - 70 - 24))
        board.move(Point(345, 190))
        board.release(Point(345, 190))

        restarted = StickerBoard(backend.sticker_store)
        assert restarted.load() == 1
        stored = restarted.stickers.get(sticker.id)
        assert stored.position == Point(140, 120)
        assert stored.size == Size(210, 140)
        assert stored.rotation == 90
        assert stored.aspect_ratio == pytest.approx(1.5)
        assert restarted.state is SelectionState.IDLE

    def test_delete_and_reload(self, backend):
        board = StickerBoard(backend.sticker_store)
        first = board.add_sticker("https://example.com/a.png", 100, 100)
        second = board.add_sticker("https://example.com/b.png", 100, 100)
        board.delete_sticker(first.id)

        restarted = StickerBoard(backend.sticker_store)
        restarted.load()
        assert restarted.stickers.ids == [second.id]


class TestTaskWorkflow:
    """Tasks survive a restart."""

    def test_add_complete_reload(self, backend):
        service = TaskService(backend.task_store)
        service.load()
        milk = service.add_task("Buy milk")
        service.add_task("Walk dog")
        service.toggle_status(milk.id)

        restarted = TaskService(backend.task_store)
        assert restarted.load() == 2
        assert [t.description for t in restarted.tasks] == ["Buy milk", "Walk dog"]
        assert restarted.get(milk.id).status is TaskStatus.COMPLETED
        stats = restarted.stats()
        assert (stats.completed, stats.remaining, stats.completion_percentage) == (1, 1, 50)

        pending = restarted.visible_tasks("", StatusFilter.NOT_COMPLETED, SortOrder.NONE)
        assert [t.description for t in pending] == ["Walk dog"]

    def test_recognized_list_becomes_tasks(self, backend, settings_manager, temp_dir, monkeypatch):
        class Reply:
            status_code = 200

            def json(self):
                return {"choices": [{"message": {"content": "Buy milk\nWalk dog\n"}}]}

        monkeypatch.setattr(requests, "post", lambda *args, **kwargs: Reply())
        settings_manager.settings.ocr.api_key = "test-key"
        image = temp_dir / "list.jpg"
        image.write_bytes(b"jpeg bytes")

        lines = create_ocr_relay(settings_manager).recognize_tasks(image)
        service = TaskService(backend.task_store)
        created = service.add_recognized("\n".join(lines))

        restarted = TaskService(backend.task_store)
        restarted.load()
        assert [t.description for t in restarted.tasks] == ["Buy milk", "Walk dog"]
        assert all(t.deadline is None for t in restarted.tasks)
        assert len(created) == 2
