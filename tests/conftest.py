"""
Pytest configuration and shared fixtures for Sticky Tasks tests.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator, List

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import Point, Size, Transform, Sticker, Task
from services.stores import StoreError, StickerStore, TaskStore
from services.sticker_board import StickerBoard
from services.settings_manager import SettingsManager, reset_settings_manager


# ============== Temporary Directory Fixtures ==============

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="sticky_tasks_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


# ============== In-Memory Stores ==============

class MemoryStickerStore(StickerStore):
    """Sticker store that records every call. Set ``fail`` to make writes raise."""

    def __init__(self, stickers: List[Sticker] = None):
        self.rows = {s.id: s for s in stickers or []}
        self.saved: List[Sticker] = []
        self.deleted: List[str] = []
        self.fail = False

    def _check(self):
        if self.fail:
            raise StoreError("store offline")

    def load_all(self) -> List[Sticker]:
        self._check()
        return list(self.rows.values())

    def insert(self, sticker: Sticker) -> Sticker:
        self._check()
        self.rows[sticker.id] = sticker
        return sticker

    def save(self, sticker: Sticker):
        self._check()
        self.saved.append(sticker)
        self.rows[sticker.id] = sticker

    def delete(self, sticker_id: str):
        self._check()
        self.deleted.append(sticker_id)
        self.rows.pop(sticker_id, None)


class MemoryTaskStore(TaskStore):
    """Task store kept in a dict. Set ``fail`` to make every call raise."""

    def __init__(self):
        self.rows = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise StoreError("store offline")

    def load_all(self) -> List[Task]:
        self._check()
        return sorted(self.rows.values(), key=lambda t: t.inserted_at)

    def insert(self, task: Task) -> Task:
        self._check()
        self.rows[task.id] = task
        return task

    def update(self, task: Task) -> Task:
        self._check()
        self.rows[task.id] = task
        return task

    def delete(self, task_id: str):
        self._check()
        self.rows.pop(task_id, None)


@pytest.fixture
def sticker_store() -> MemoryStickerStore:
    return MemoryStickerStore()


@pytest.fixture
def task_store() -> MemoryTaskStore:
    return MemoryTaskStore()


# ============== Sticker Fixtures ==============

@pytest.fixture
def sample_sticker() -> Sticker:
    """A 150x100 sticker (aspect 1.5) at (100, 100)."""
    return Sticker(
        id="s1",
        url="https://example.com/cat.png",
        transform=Transform(position=Point(100, 100), size=Size(150, 100)),
        aspect_ratio=1.5,
    )


@pytest.fixture
def board(sticker_store, sample_sticker) -> StickerBoard:
    """Board holding the sample sticker, not yet selected."""
    sticker_store.rows[sample_sticker.id] = sample_sticker
    board = StickerBoard(sticker_store)
    board.load()
    return board


@pytest.fixture
def editing_board(board, sample_sticker) -> StickerBoard:
    """Board with the sample sticker in edit mode."""
    board.click_sticker(sample_sticker.id)
    return board


# ============== Settings Fixtures ==============

@pytest.fixture
def settings_manager(temp_dir) -> Generator[SettingsManager, None, None]:
    """Settings manager writing to a temporary file."""
    reset_settings_manager()
    manager = SettingsManager(config_override=str(temp_dir / "config" / "settings.json"))
    yield manager
    reset_settings_manager()
