"""
Rendering projection for stickers.

Maps a Transform to the values a painter needs (top-left corner, size,
rotation and scale about the center) and locates the edit handles so
the canvas can tell what a pointer press landed on.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from models import Point, Size, Transform, ResizeCorner


HANDLE_RADIUS = 8.0

# Distance of the rotate handle above the sticker's top edge
ROTATE_HANDLE_OFFSET = 24.0


class Handle(Enum):
    """Parts of a sticker a pointer press can hit."""
    BODY = "body"
    ROTATE = "rotate"
    DELETE = "delete"
    RESIZE_NW = "nw"
    RESIZE_NE = "ne"
    RESIZE_SW = "sw"
    RESIZE_SE = "se"

    @property
    def corner(self) -> Optional[ResizeCorner]:
        """Resize corner for corner handles, None otherwise."""
        try:
            return ResizeCorner(self.value)
        except ValueError:
            return None


@dataclass(frozen=True)
class Placement:
    """
    Painter-ready placement of a sticker.

    ``left``/``top``/``width``/``height`` describe the unrotated box;
    rotation (degrees, clockwise) and scale are applied about its center.
    """
    left: float
    top: float
    width: float
    height: float
    rotation: float
    scale: float

    @property
    def center(self) -> Point:
        return Point(self.left + self.width / 2, self.top + self.height / 2)


def project(transform: Transform) -> Placement:
    """Compute the placement for a transform."""
    return Placement(
        left=transform.position.x,
        top=transform.position.y,
        width=transform.size.width,
        height=transform.size.height,
        rotation=transform.rotation,
        scale=transform.scale,
    )


def to_local(transform: Transform, point: Point) -> Point:
    """
    Map a canvas point into the sticker's own frame.

    The local origin is the sticker center, axes follow the sticker's
    rotation and units are unscaled sticker units.
    """
    center = transform.center
    dx = point.x - center.x
    dy = point.y - center.y
    theta = math.radians(-transform.rotation)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    scale = transform.scale or 1.0
    return Point(
        (dx * cos_t - dy * sin_t) / scale,
        (dx * sin_t + dy * cos_t) / scale,
    )


def handle_positions(size: Size) -> Dict[Handle, Point]:
    """Centers of the edit handles in the sticker's local frame."""
    half_w = size.width / 2
    half_h = size.height / 2
    return {
        Handle.RESIZE_NW: Point(-half_w, -half_h),
        Handle.RESIZE_NE: Point(half_w, -half_h),
        Handle.RESIZE_SW: Point(-half_w, half_h),
        Handle.RESIZE_SE: Point(half_w, half_h),
        Handle.ROTATE: Point(0.0, -half_h - ROTATE_HANDLE_OFFSET),
        Handle.DELETE: Point(half_w + HANDLE_RADIUS * 2, -half_h - HANDLE_RADIUS * 2),
    }


def hit_test(transform: Transform, point: Point, editing: bool) -> Optional[Handle]:
    """
    Find what part of a sticker a canvas point hits.

    Handles are only considered while the sticker is being edited and
    take priority over the body.

    Returns:
        The handle hit, or None if the point misses the sticker
    """
    local = to_local(transform, point)
    if editing:
        for handle, center in handle_positions(transform.size).items():
            if math.hypot(local.x - center.x, local.y - center.y) <= HANDLE_RADIUS:
                return handle
    if abs(local.x) <= transform.size.width / 2 and abs(local.y) <= transform.size.height / 2:
        return Handle.BODY
    return None
