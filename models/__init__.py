"""
Models package.

This package contains the data models for the Sticky Tasks application:
- Sticker transforms (Point, Size, Transform)
- Stickers and their collection (Sticker, StickerCollection)
- Gesture sessions (DragSession, ResizeSession, RotateSession)
- Tasks (Task, TaskStatus and list view options)
"""

from .transform import (
    Point,
    Size,
    Transform,
    fit_to_box,
    MIN_SIDE,
    MAX_SIDE,
    ROTATION_STEP,
    CREATION_BOX,
    DEFAULT_STICKER_POSITION,
)

from .sticker import (
    ResizeCorner,
    Sticker,
    StickerCollection,
)

from .gesture import (
    DragSession,
    ResizeSession,
    RotateSession,
    GestureSession,
)

from .task import (
    Task,
    TaskStatus,
    StatusFilter,
    SortOrder,
    DeadlineUrgency,
    parse_timestamp,
)

__all__ = [
    # Transforms
    "Point",
    "Size",
    "Transform",
    "fit_to_box",
    "MIN_SIDE",
    "MAX_SIDE",
    "ROTATION_STEP",
    "CREATION_BOX",
    "DEFAULT_STICKER_POSITION",
    # Stickers
    "ResizeCorner",
    "Sticker",
    "StickerCollection",
    # Gestures
    "DragSession",
    "ResizeSession",
    "RotateSession",
    "GestureSession",
    # Tasks
    "Task",
    "TaskStatus",
    "StatusFilter",
    "SortOrder",
    "DeadlineUrgency",
    "parse_timestamp",
]
