"""
Persistence interfaces for stickers and tasks.

Two backends implement these: a local JSON workspace
(``services.local_store``) and Supabase (``services.supabase_store``).
Store methods raise ``StoreError`` on failure; callers decide whether a
failure is worth more than a log line.
"""

from typing import List

from models import Sticker, Task


class StoreError(RuntimeError):
    """A read or write against the backing store failed."""


class StickerStore:
    """
    Storage for stickers.

    ``insert`` returns the sticker as stored, which may carry a new id
    assigned by the backend. ``save`` upserts by id.
    """

    def load_all(self) -> List[Sticker]:
        raise NotImplementedError

    def insert(self, sticker: Sticker) -> Sticker:
        raise NotImplementedError

    def save(self, sticker: Sticker):
        raise NotImplementedError

    def delete(self, sticker_id: str):
        raise NotImplementedError


class TaskStore:
    """Storage for tasks, ordered by insertion time."""

    def load_all(self) -> List[Task]:
        raise NotImplementedError

    def insert(self, task: Task) -> Task:
        raise NotImplementedError

    def update(self, task: Task) -> Task:
        raise NotImplementedError

    def delete(self, task_id: str):
        raise NotImplementedError
