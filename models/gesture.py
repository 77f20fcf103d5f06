"""
Gesture session models.

One pointer interaction (press on a handle, moves, release) is tracked by
a single session object. The open session is one of the variants below,
or ``None`` when no gesture is in progress, so states like "dragging and
resizing at once" cannot be expressed.
"""

from dataclasses import dataclass
from typing import Union

from .sticker import ResizeCorner
from .transform import Point, Size


@dataclass(frozen=True)
class DragSession:
    """Moving a sticker. ``offset`` is pointer minus sticker position at press."""
    sticker_id: str
    offset: Point


@dataclass(frozen=True)
class ResizeSession:
    """Resizing a sticker from one corner handle."""
    sticker_id: str
    corner: ResizeCorner
    start_pointer: Point
    start_size: Size


@dataclass(frozen=True)
class RotateSession:
    """Rotating a sticker around its bounding-box center."""
    sticker_id: str
    center: Point
    start_rotation: float


GestureSession = Union[DragSession, ResizeSession, RotateSession]
