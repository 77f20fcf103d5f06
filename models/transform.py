"""
Sticker transform value types.

A transform describes where a sticker sits on the canvas. All types here
are immutable: every change produces a new value, which keeps gesture
handling free of aliasing surprises and makes states easy to compare.
"""

from dataclasses import dataclass, replace


# Size limits applied by resize gestures
MIN_SIDE = 50.0
MAX_SIDE = 300.0

# Rotation snapping step in degrees
ROTATION_STEP = 15

# New stickers are fitted into a square box of this side
CREATION_BOX = 150.0

# Where new stickers are dropped
DEFAULT_STICKER_POSITION = (100.0, 100.0)


@dataclass(frozen=True)
class Point:
    """2D point in canvas coordinates."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> tuple:
        return (self.x, self.y)


@dataclass(frozen=True)
class Size:
    """Width and height in canvas units."""
    width: float = CREATION_BOX
    height: float = CREATION_BOX

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class Transform:
    """
    Placement of a sticker: position, size, rotation and scale.

    Rotation is in degrees. Scale is a plain multiplier that gestures
    never touch.
    """
    position: Point = Point(*DEFAULT_STICKER_POSITION)
    size: Size = Size()
    rotation: float = 0.0
    scale: float = 1.0

    @property
    def center(self) -> Point:
        """Midpoint of the unrotated bounding box."""
        return Point(
            self.position.x + self.size.width / 2,
            self.position.y + self.size.height / 2,
        )

    def with_position(self, position: Point) -> "Transform":
        return replace(self, position=position)

    def with_size(self, size: Size) -> "Transform":
        return replace(self, size=size)

    def with_rotation(self, rotation: float) -> "Transform":
        return replace(self, rotation=rotation)

    def with_scale(self, scale: float) -> "Transform":
        return replace(self, scale=scale)


def fit_to_box(width: float, height: float, box: float = CREATION_BOX) -> Size:
    """
    Fit an image of the given intrinsic size into a square box.

    The wider side ends up equal to ``box`` and the aspect ratio is kept.

    Args:
        width: Intrinsic image width (> 0)
        height: Intrinsic image height (> 0)
        box: Side of the bounding square

    Returns:
        Size of the fitted sticker
    """
    aspect = width / height
    fitted_width = box
    fitted_height = box / aspect
    if fitted_height > box:
        fitted_height = box
        fitted_width = box * aspect
    return Size(fitted_width, fitted_height)
