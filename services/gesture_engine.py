"""
Pointer gesture engine.

Turns pointer presses, moves and releases on a sticker's handles into new
sticker transforms. Three gestures are supported, each following
begin -> update* -> end:

- drag: the sticker follows the pointer, keeping the press offset
- resize: a corner handle changes the size, keeping the aspect ratio
- rotate: the rotation follows the pointer angle around the center,
  snapped to 15 degree steps

Every update that changes a sticker is reported to the sink right away.
With ``CommitMode.ON_END`` the sink is called once when the gesture ends.
"""

import logging
import math
from enum import Enum
from typing import Callable, Optional

from models import (
    Point, Size, Transform, Sticker, StickerCollection, ResizeCorner,
    DragSession, ResizeSession, RotateSession, GestureSession,
    MIN_SIDE, MAX_SIDE, ROTATION_STEP,
)
from .selection_controller import SelectionController

logger = logging.getLogger(__name__)


StickerSink = Callable[[Sticker], None]


class CommitMode(Enum):
    """When changed stickers are handed to the sink."""
    EVERY_UPDATE = "every_update"
    ON_END = "on_end"


# Width/height sign per corner: (sign of dx on width, sign of dy on height)
CORNER_SIGNS = {
    ResizeCorner.SE: (1, 1),
    ResizeCorner.SW: (-1, 1),
    ResizeCorner.NE: (1, -1),
    ResizeCorner.NW: (-1, -1),
}


def drag_position(pointer: Point, offset: Point) -> Point:
    """New sticker position for a drag. No bounds are applied."""
    return pointer - offset


def resize_size(corner: ResizeCorner, start_size: Size, dx: float, dy: float,
                aspect_ratio: float) -> Size:
    """
    Compute the size produced by a corner resize.

    The steps run in a fixed order: apply the pointer delta with the
    corner's signs, floor each side at MIN_SIDE, derive the secondary side
    from the aspect ratio (the side whose delta is larger leads), then cap
    each side at MAX_SIDE.

    Args:
        corner: Corner handle being dragged
        start_size: Sticker size when the gesture began
        dx: Pointer x delta since the gesture began
        dy: Pointer y delta since the gesture began
        aspect_ratio: Fixed width / height ratio of the sticker

    Returns:
        The new size
    """
    sign_x, sign_y = CORNER_SIGNS[corner]
    width = max(MIN_SIDE, start_size.width + sign_x * dx)
    height = max(MIN_SIDE, start_size.height + sign_y * dy)

    if abs(dx) > abs(dy):
        height = width / aspect_ratio
    else:
        width = height * aspect_ratio

    return Size(min(MAX_SIDE, width), min(MAX_SIDE, height))


def snap_rotation(degrees: float, step: int = ROTATION_STEP) -> float:
    """
    Snap an angle to the nearest multiple of ``step`` in [0, 360).

    Halves round up, so 7.5 snaps to 15 and -7.5 snaps to 0.
    """
    snapped = math.floor(degrees / step + 0.5) * step
    return float(snapped % 360)


def rotation_from_pointer(center: Point, pointer: Point) -> float:
    """
    Snapped rotation for a pointer position around a center.

    0 degrees means the pointer is straight above the center, where the
    rotate handle sits on an unrotated sticker.
    """
    angle = math.atan2(pointer.y - center.y, pointer.x - center.x)
    return snap_rotation(math.degrees(angle) + 90)


class GestureEngine:
    """
    Runs drag, resize and rotate gestures against a sticker collection.

    A gesture can only begin on the sticker that is being edited. Stray
    updates (no open session of the matching kind) are ignored.
    """

    def __init__(
        self,
        stickers: StickerCollection,
        selection: SelectionController,
        sink: Optional[StickerSink] = None,
        commit_mode: CommitMode = CommitMode.EVERY_UPDATE,
    ):
        self._stickers = stickers
        self._selection = selection
        self._sink = sink
        self.commit_mode = commit_mode
        self._session: Optional[GestureSession] = None
        self._changed_during_session = False

    @property
    def session(self) -> Optional[GestureSession]:
        """The open gesture session, or None."""
        return self._session

    @property
    def has_session(self) -> bool:
        return self._session is not None

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------

    def begin_drag(self, sticker_id: str, pointer: Point) -> bool:
        sticker = self._begin(sticker_id)
        if sticker is None:
            return False
        self._session = DragSession(sticker_id, pointer - sticker.position)
        return True

    def update_drag(self, pointer: Point) -> Optional[Sticker]:
        session = self._session
        if not isinstance(session, DragSession):
            return None
        sticker = self._stickers.get(session.sticker_id)
        if sticker is None:
            return None
        position = drag_position(pointer, session.offset)
        return self._apply(sticker, sticker.transform.with_position(position))

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------

    def begin_resize(self, sticker_id: str, pointer: Point, corner: ResizeCorner) -> bool:
        sticker = self._begin(sticker_id)
        if sticker is None:
            return False
        self._session = ResizeSession(sticker_id, corner, pointer, sticker.size)
        return True

    def update_resize(self, pointer: Point) -> Optional[Sticker]:
        session = self._session
        if not isinstance(session, ResizeSession):
            return None
        sticker = self._stickers.get(session.sticker_id)
        if sticker is None:
            return None
        delta = pointer - session.start_pointer
        size = resize_size(session.corner, session.start_size, delta.x, delta.y,
                           sticker.aspect_ratio)
        return self._apply(sticker, sticker.transform.with_size(size))

    # ------------------------------------------------------------------
    # Rotate
    # ------------------------------------------------------------------

    def begin_rotate(self, sticker_id: str, pointer: Point) -> bool:
        sticker = self._begin(sticker_id)
        if sticker is None:
            return False
        self._session = RotateSession(sticker_id, sticker.transform.center, sticker.rotation)
        return True

    def update_rotate(self, pointer: Point) -> Optional[Sticker]:
        session = self._session
        if not isinstance(session, RotateSession):
            return None
        sticker = self._stickers.get(session.sticker_id)
        if sticker is None:
            return None
        rotation = rotation_from_pointer(session.center, pointer)
        return self._apply(sticker, sticker.transform.with_rotation(rotation))

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    def update(self, pointer: Point) -> Optional[Sticker]:
        """Route a pointer move to whichever gesture is open."""
        if isinstance(self._session, DragSession):
            return self.update_drag(pointer)
        if isinstance(self._session, ResizeSession):
            return self.update_resize(pointer)
        if isinstance(self._session, RotateSession):
            return self.update_rotate(pointer)
        return None

    def end(self) -> Optional[GestureSession]:
        """
        Close the open session, if any.

        The transform is left as the last update made it. In ON_END mode
        this is where the sink hears about the change.

        Returns:
            The session that was closed, or None
        """
        session = self._session
        if session is None:
            return None
        self._session = None
        if self.commit_mode is CommitMode.ON_END and self._changed_during_session:
            sticker = self._stickers.get(session.sticker_id)
            if sticker is not None:
                self._notify(sticker)
        self._changed_during_session = False
        return session

    def _begin(self, sticker_id: str) -> Optional[Sticker]:
        sticker = self._stickers.get(sticker_id)
        if sticker is None:
            logger.debug(f"Ignoring gesture on unknown sticker {sticker_id}")
            return None
        if not self._selection.is_editing(sticker_id):
            logger.debug(f"Ignoring gesture on sticker {sticker_id}: not in edit mode")
            return None
        self.end()
        return sticker

    def _apply(self, sticker: Sticker, transform: Transform) -> Optional[Sticker]:
        if transform == sticker.transform:
            return None
        updated = sticker.with_transform(transform)
        self._stickers.replace(updated)
        if self.commit_mode is CommitMode.EVERY_UPDATE:
            self._notify(updated)
        else:
            self._changed_during_session = True
        return updated

    def _notify(self, sticker: Sticker):
        if self._sink is not None:
            self._sink(sticker)
