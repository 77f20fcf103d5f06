"""
Sticker board.

Owns the sticker collection, the selection controller and the gesture
engine, and routes raw pointer events from the canvas to them. Every
changed sticker is handed to the sticker store; store failures are
logged and the in-memory state stays authoritative.
"""

import logging
from typing import Callable, List, Optional

from models import Point, Sticker, StickerCollection
from .gesture_engine import GestureEngine, CommitMode
from .rendering import Handle, hit_test
from .selection_controller import SelectionController, SelectionState
from .stores import StickerStore, StoreError

logger = logging.getLogger(__name__)


class StickerBoard:
    """
    Interaction controller for the sticker canvas.

    Pointer events come in through ``press``, ``move``, ``release`` and
    ``leave``. A press and release without movement counts as a click on
    whatever the press landed on.
    """

    def __init__(self, store: StickerStore, commit_mode: CommitMode = CommitMode.EVERY_UPDATE):
        self._store = store
        self.stickers = StickerCollection()
        self.selection = SelectionController()
        self.engine = GestureEngine(self.stickers, self.selection, self._persist, commit_mode)
        self._listeners: List[Callable[[], None]] = []

        # Pending click target from the last press: sticker id, "" for background
        self._press_target: Optional[str] = None
        self._moved_since_press = False

    @property
    def state(self) -> SelectionState:
        return self.selection.state

    @property
    def commit_mode(self) -> CommitMode:
        return self.engine.commit_mode

    @commit_mode.setter
    def commit_mode(self, mode: CommitMode):
        self.engine.commit_mode = mode

    def add_listener(self, callback: Callable[[], None]):
        """Register a callback run after any change to stickers or selection."""
        self._listeners.append(callback)

    def _changed(self):
        for callback in self._listeners:
            callback()

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def load(self) -> int:
        """
        Replace the collection with the stickers in the store.

        Returns:
            Number of stickers loaded
        """
        self.engine.end()
        self.selection.clear()
        self.stickers.clear()
        try:
            loaded = self._store.load_all()
        except StoreError as e:
            logger.warning(f"Could not load stickers: {e}")
            loaded = []
        for sticker in loaded:
            self.stickers.add(sticker)
        logger.info(f"Loaded {len(loaded)} stickers")
        self._changed()
        return len(loaded)

    def add_sticker(self, url: str, intrinsic_width: float, intrinsic_height: float) -> Sticker:
        """
        Create a sticker for an image and store it.

        Raises:
            StoreError: If the store rejects the sticker; nothing is added
        """
        sticker = self._store.insert(Sticker.create(url, intrinsic_width, intrinsic_height))
        self.stickers.add(sticker)
        logger.info(f"Added sticker {sticker.id}")
        self._changed()
        return sticker

    def delete_sticker(self, sticker_id: str) -> bool:
        """Remove a sticker. Deleting the active sticker clears the selection."""
        if sticker_id not in self.stickers:
            return False
        session = self.engine.session
        if session is not None and session.sticker_id == sticker_id:
            self.engine.end()
        if self.selection.is_active(sticker_id):
            self.selection.clear()
        self.stickers.remove(sticker_id)
        try:
            self._store.delete(sticker_id)
        except StoreError as e:
            logger.warning(f"Could not delete sticker {sticker_id}: {e}")
        self._changed()
        return True

    def set_scale(self, sticker_id: str, scale: float) -> Optional[Sticker]:
        """Set a sticker's scale multiplier. Gestures never change it."""
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")
        sticker = self.stickers.get(sticker_id)
        if sticker is None:
            return None
        updated = sticker.with_transform(sticker.transform.with_scale(scale))
        self.stickers.replace(updated)
        self._persist(updated)
        self._changed()
        return updated

    def paint_order(self) -> List[Sticker]:
        """Stickers in drawing order; the active sticker is drawn last (on top)."""
        stickers = list(self.stickers)
        active_id = self.selection.active_id
        stickers.sort(key=lambda sticker: sticker.id == active_id)
        return stickers

    def sticker_at(self, point: Point) -> Optional[tuple]:
        """
        Find the topmost sticker under a canvas point.

        Returns:
            (sticker, handle) or None
        """
        for sticker in reversed(self.paint_order()):
            handle = hit_test(sticker.transform, point,
                              self.selection.is_editing(sticker.id))
            if handle is not None:
                return sticker, handle
        return None

    # ------------------------------------------------------------------
    # Clicks
    # ------------------------------------------------------------------

    def click_sticker(self, sticker_id: str) -> SelectionState:
        """Select a sticker or toggle its edit mode."""
        if sticker_id not in self.stickers:
            return self.state
        if self.engine.has_session:
            self.engine.end()
        state = self.selection.click_sticker(sticker_id)
        self._changed()
        return state

    def click_background(self) -> SelectionState:
        """Deselect, unless a gesture is still in progress."""
        if self.engine.has_session:
            return self.state
        state = self.selection.click_background()
        self._changed()
        return state

    # ------------------------------------------------------------------
    # Pointer routing
    # ------------------------------------------------------------------

    def press(self, point: Point):
        """Pointer pressed on the canvas."""
        self._moved_since_press = False
        hit = self.sticker_at(point)
        if hit is None:
            self._press_target = ""
            return

        sticker, handle = hit
        self._press_target = None
        if handle is Handle.DELETE:
            self.delete_sticker(sticker.id)
        elif handle is Handle.ROTATE:
            self.engine.begin_rotate(sticker.id, point)
        elif handle.corner is not None:
            self.engine.begin_resize(sticker.id, point, handle.corner)
        else:
            self._press_target = sticker.id
            self.engine.begin_drag(sticker.id, point)

    def move(self, point: Point) -> Optional[Sticker]:
        """Pointer moved; feeds the open gesture, if any."""
        self._moved_since_press = True
        updated = self.engine.update(point)
        if updated is not None:
            self._changed()
        return updated

    def release(self, point: Point):
        """Pointer released. Ends the gesture, then applies a click if the pointer stayed put."""
        self.engine.end()
        target = self._press_target
        self._press_target = None
        if target is None or self._moved_since_press:
            return
        if target:
            self.click_sticker(target)
        else:
            self.click_background()

    def leave(self):
        """Pointer left the canvas; the open gesture is ended without rollback."""
        self._press_target = None
        self.engine.end()

    def _persist(self, sticker: Sticker):
        try:
            self._store.save(sticker)
        except StoreError as e:
            logger.warning(f"Could not save sticker {sticker.id}: {e}")
