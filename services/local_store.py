"""
Local JSON stores.

Keeps stickers and tasks in two JSON files inside the data directory.
Each write replaces the file atomically so a crash never leaves a
half-written table behind.
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List

from models import Point, Size, Transform, Sticker, Task
from .stores import StoreError, StickerStore, TaskStore

logger = logging.getLogger(__name__)


# Schema version for future compatibility
SCHEMA_VERSION = "1.0"

STICKERS_FILE = "stickers.json"
TASKS_FILE = "tasks.json"


class JsonTable:
    """A list of JSON rows stored in one file."""

    def __init__(self, path: Path, kind: str):
        self.path = Path(path)
        self.kind = kind

    def read(self) -> List[dict]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"{self.path} is not a {self.kind} table")
        rows = data.get("rows", [])
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise StoreError(f"{self.path} has malformed {self.kind} rows")
        return list(rows)

    def write(self, rows: List[dict]):
        data = {
            "schema": {
                "version": SCHEMA_VERSION,
                "format": f"sticky-tasks-{self.kind}",
            },
            "metadata": {
                "saved": datetime.now().isoformat(),
            },
            "rows": rows,
        }
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp.exists():
                tmp.unlink()
            raise StoreError(f"Could not write {self.path}: {e}") from e

    def upsert(self, row: dict):
        rows = self.read()
        for index, existing in enumerate(rows):
            if existing.get("id") == row["id"]:
                rows[index] = row
                break
        else:
            rows.append(row)
        self.write(rows)

    def remove(self, row_id: str) -> bool:
        rows = self.read()
        kept = [row for row in rows if row.get("id") != row_id]
        if len(kept) == len(rows):
            return False
        self.write(kept)
        return True


def sticker_to_dict(sticker: Sticker) -> dict:
    """Convert a Sticker to a JSON-serializable dictionary."""
    transform = sticker.transform
    return {
        "id": sticker.id,
        "url": sticker.url,
        "position": {"x": transform.position.x, "y": transform.position.y},
        "size": {"width": transform.size.width, "height": transform.size.height},
        "rotation": transform.rotation,
        "scale": transform.scale,
        "aspect_ratio": sticker.aspect_ratio,
    }


def sticker_from_dict(data: dict) -> Sticker:
    """Create a Sticker from a dictionary produced by ``sticker_to_dict``."""
    size = Size(float(data["size"]["width"]), float(data["size"]["height"]))
    transform = Transform(
        position=Point(float(data["position"]["x"]), float(data["position"]["y"])),
        size=size,
        rotation=float(data.get("rotation", 0.0)),
        scale=float(data.get("scale", 1.0)),
    )
    return Sticker(
        id=str(data["id"]),
        url=data["url"],
        transform=transform,
        aspect_ratio=float(data.get("aspect_ratio") or size.aspect_ratio),
    )


class LocalStickerStore(StickerStore):
    """Sticker store backed by ``stickers.json``."""

    def __init__(self, data_dir: Path):
        self._table = JsonTable(Path(data_dir) / STICKERS_FILE, "stickers")

    @property
    def path(self) -> Path:
        return self._table.path

    def load_all(self) -> List[Sticker]:
        try:
            return [sticker_from_dict(row) for row in self._table.read()]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed sticker data in {self.path}: {e}") from e

    def insert(self, sticker: Sticker) -> Sticker:
        self._table.upsert(sticker_to_dict(sticker))
        return sticker

    def save(self, sticker: Sticker):
        self._table.upsert(sticker_to_dict(sticker))

    def delete(self, sticker_id: str):
        if not self._table.remove(sticker_id):
            logger.debug(f"Sticker {sticker_id} was not stored")


class LocalTaskStore(TaskStore):
    """Task store backed by ``tasks.json``."""

    def __init__(self, data_dir: Path):
        self._table = JsonTable(Path(data_dir) / TASKS_FILE, "tasks")

    @property
    def path(self) -> Path:
        return self._table.path

    def load_all(self) -> List[Task]:
        try:
            tasks = [Task.from_dict(row) for row in self._table.read()]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed task data in {self.path}: {e}") from e
        return sorted(tasks, key=lambda task: task.inserted_at)

    def insert(self, task: Task) -> Task:
        self._table.upsert(task.to_dict())
        return task

    def update(self, task: Task) -> Task:
        self._table.upsert(task.to_dict())
        return task

    def delete(self, task_id: str):
        if not self._table.remove(task_id):
            logger.debug(f"Task {task_id} was not stored")
