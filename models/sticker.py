"""
Sticker data models.

A sticker is an image overlay on the task canvas. Its transform changes
as the user drags, resizes and rotates it; its id, image URL and aspect
ratio stay fixed for its whole lifetime.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterator, List, Optional
import uuid

from .transform import Point, Size, Transform, fit_to_box, DEFAULT_STICKER_POSITION


class ResizeCorner(Enum):
    """Corner handle used for a resize gesture."""
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"


@dataclass(frozen=True)
class Sticker:
    """
    An image placed on the canvas.

    ``aspect_ratio`` is captured when the sticker is created and every
    resize keeps width / height equal to it.
    """
    url: str
    transform: Transform = field(default_factory=Transform)
    aspect_ratio: float = 1.0
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    @property
    def position(self) -> Point:
        return self.transform.position

    @property
    def size(self) -> Size:
        return self.transform.size

    @property
    def rotation(self) -> float:
        return self.transform.rotation

    @property
    def scale(self) -> float:
        return self.transform.scale

    def with_transform(self, transform: Transform) -> "Sticker":
        return replace(self, transform=transform)

    def with_id(self, sticker_id: str) -> "Sticker":
        return replace(self, id=sticker_id)

    @classmethod
    def create(cls, url: str, intrinsic_width: float, intrinsic_height: float) -> "Sticker":
        """
        Create a sticker for an image of the given intrinsic size.

        The image is fitted into the creation box and dropped at the
        default position with no rotation.
        """
        size = fit_to_box(intrinsic_width, intrinsic_height)
        return cls(
            url=url,
            transform=Transform(position=Point(*DEFAULT_STICKER_POSITION), size=size),
            aspect_ratio=intrinsic_width / intrinsic_height,
        )


class StickerCollection:
    """
    Ordered set of stickers keyed by id.

    Insertion order is the drawing order, later stickers are on top.
    """

    def __init__(self, stickers: Optional[List[Sticker]] = None):
        self._stickers: Dict[str, Sticker] = {}
        for sticker in stickers or []:
            self.add(sticker)

    def __iter__(self) -> Iterator[Sticker]:
        return iter(list(self._stickers.values()))

    def __len__(self) -> int:
        return len(self._stickers)

    def __contains__(self, sticker_id: str) -> bool:
        return sticker_id in self._stickers

    @property
    def ids(self) -> List[str]:
        return list(self._stickers.keys())

    def get(self, sticker_id: str) -> Optional[Sticker]:
        return self._stickers.get(sticker_id)

    def add(self, sticker: Sticker):
        """Append a sticker. An existing sticker with the same id is replaced in place."""
        self._stickers[sticker.id] = sticker

    def replace(self, sticker: Sticker) -> bool:
        """Swap in a new value for an existing sticker id."""
        if sticker.id not in self._stickers:
            return False
        self._stickers[sticker.id] = sticker
        return True

    def remove(self, sticker_id: str) -> Optional[Sticker]:
        return self._stickers.pop(sticker_id, None)

    def clear(self):
        self._stickers.clear()
