"""
Supabase-backed stores.

Stickers live in the ``stickers`` table and tasks in ``todos``. Sticker
positions and sizes are stored as integers, so they are rounded on
every write. Tables created with an ``aspect_ratio`` column keep the exact
ratio; for tables without one it is taken from the stored width and
height when rows are loaded.
"""

import logging
from typing import List

from models import Point, Size, Transform, Sticker, Task
from .stores import StoreError, StickerStore, TaskStore
from .supabase_client import SupabaseSession, SupabaseError

logger = logging.getLogger(__name__)


STICKERS_TABLE = "stickers"
TASKS_TABLE = "todos"
RATIO_COLUMN = "aspect_ratio"


def sticker_to_row(sticker: Sticker, with_ratio: bool = False) -> dict:
    """Convert a Sticker to a ``stickers`` row (without id)."""
    transform = sticker.transform
    row = {
        "url": sticker.url,
        "position_x": round(transform.position.x),
        "position_y": round(transform.position.y),
        "rotation": transform.rotation,
        "scale": transform.scale,
        "width": round(transform.size.width),
        "height": round(transform.size.height),
    }
    if with_ratio:
        row[RATIO_COLUMN] = sticker.aspect_ratio
    return row


def sticker_from_row(row: dict) -> Sticker:
    """Create a Sticker from a ``stickers`` row."""
    size = Size(float(row["width"]), float(row["height"]))
    return Sticker(
        id=str(row["id"]),
        url=row["url"],
        transform=Transform(
            position=Point(float(row["position_x"]), float(row["position_y"])),
            size=size,
            rotation=float(row.get("rotation") or 0.0),
            scale=float(row.get("scale") or 1.0),
        ),
        aspect_ratio=float(row.get(RATIO_COLUMN) or size.aspect_ratio),
    )


def task_to_row(task: Task) -> dict:
    """Convert a Task to a ``todos`` row (without id and insertion time)."""
    return {
        "description": task.description,
        "deadline": task.deadline.isoformat() if task.deadline else None,
        "status": task.status.value,
        "photo": task.photo,
    }


class SupabaseStickerStore(StickerStore):
    """
    Sticker store backed by the ``stickers`` table.

    The ratio column is optional. It is written only once a row read back
    from the table shows that the column exists.
    """

    def __init__(self, session: SupabaseSession):
        self._session = session
        self._has_ratio_column = False

    def _learn_columns(self, row: dict):
        if RATIO_COLUMN in row:
            self._has_ratio_column = True

    def load_all(self) -> List[Sticker]:
        try:
            rows = self._session.select(STICKERS_TABLE)
            for row in rows:
                self._learn_columns(row)
            return [sticker_from_row(row) for row in rows]
        except SupabaseError as e:
            raise StoreError(f"Loading stickers failed: {e}") from e
        except (KeyError, TypeError, ValueError, ZeroDivisionError) as e:
            raise StoreError(f"Malformed sticker row: {e}") from e

    def insert(self, sticker: Sticker) -> Sticker:
        try:
            row = self._session.insert(
                STICKERS_TABLE, sticker_to_row(sticker, self._has_ratio_column))
        except SupabaseError as e:
            raise StoreError(f"Adding sticker failed: {e}") from e
        stored = sticker.with_id(str(row["id"]))
        self._learn_columns(row)
        if self._has_ratio_column and row.get(RATIO_COLUMN) is None:
            self.save(stored)
        return stored

    def save(self, sticker: Sticker):
        fields = sticker_to_row(sticker, self._has_ratio_column)
        del fields["url"]
        try:
            self._session.update(STICKERS_TABLE, sticker.id, fields)
        except SupabaseError as e:
            raise StoreError(f"Saving sticker {sticker.id} failed: {e}") from e

    def delete(self, sticker_id: str):
        try:
            self._session.delete(STICKERS_TABLE, sticker_id)
        except SupabaseError as e:
            raise StoreError(f"Deleting sticker {sticker_id} failed: {e}") from e


class SupabaseTaskStore(TaskStore):
    """Task store backed by the ``todos`` table."""

    def __init__(self, session: SupabaseSession):
        self._session = session

    def load_all(self) -> List[Task]:
        try:
            return [Task.from_dict(row) for row in self._session.select(TASKS_TABLE)]
        except SupabaseError as e:
            raise StoreError(f"Loading tasks failed: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed task row: {e}") from e

    def insert(self, task: Task) -> Task:
        try:
            row = self._session.insert(TASKS_TABLE, task_to_row(task))
        except SupabaseError as e:
            raise StoreError(f"Adding task failed: {e}") from e
        return Task.from_dict(row)

    def update(self, task: Task) -> Task:
        try:
            row = self._session.update(TASKS_TABLE, task.id, task_to_row(task))
        except SupabaseError as e:
            raise StoreError(f"Updating task {task.id} failed: {e}") from e
        return Task.from_dict(row)

    def delete(self, task_id: str):
        try:
            self._session.delete(TASKS_TABLE, task_id)
        except SupabaseError as e:
            raise StoreError(f"Deleting task {task_id} failed: {e}") from e
