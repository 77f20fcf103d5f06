"""
Unit tests for sticker transform models.

Tests:
- Point arithmetic
- Transform center and immutable updates
- Fitting new stickers into the creation box
- StickerCollection ordering and replacement
"""

import pytest
from dataclasses import FrozenInstanceError

from models import (
    Point, Size, Transform, Sticker, StickerCollection, fit_to_box,
    CREATION_BOX, DEFAULT_STICKER_POSITION,
)


class TestPoint:
    """Tests for Point."""

    def test_add_and_subtract(self):
        a = Point(10, 20)
        b = Point(3, 5)
        assert a + b == Point(13, 25)
        assert a - b == Point(7, 15)

    def test_to_tuple(self):
        assert Point(1.5, -2).to_tuple() == (1.5, -2)


class TestTransform:
    """Tests for Transform."""

    def test_defaults(self):
        t = Transform()
        assert t.position == Point(*DEFAULT_STICKER_POSITION)
        assert t.size == Size(CREATION_BOX, CREATION_BOX)
        assert t.rotation == 0.0
        assert t.scale == 1.0

    def test_center_is_bounding_box_midpoint(self):
        t = Transform(position=Point(100, 100), size=Size(150, 100))
        assert t.center == Point(175, 150)

    def test_updates_return_new_values(self):
        t = Transform()
        moved = t.with_position(Point(5, 6))
        assert moved.position == Point(5, 6)
        assert t.position == Point(*DEFAULT_STICKER_POSITION)
        assert t.with_rotation(45).rotation == 45
        assert t.with_scale(2.0).scale == 2.0
        assert t.with_size(Size(60, 70)).size == Size(60, 70)

    def test_transform_is_immutable(self):
        t = Transform()
        with pytest.raises(FrozenInstanceError):
            t.rotation = 15

    def test_equal_values_compare_equal(self):
        assert Transform(rotation=30) == Transform(rotation=30)


class TestFitToBox:
    """Tests for fitting images into the creation box."""

    def test_landscape_image(self):
        assert fit_to_box(300, 200) == Size(150, 100)

    def test_portrait_image(self):
        assert fit_to_box(100, 200) == Size(75, 150)

    def test_square_image(self):
        assert fit_to_box(640, 640) == Size(150, 150)

    def test_small_image_is_scaled_up(self):
        assert fit_to_box(30, 15) == Size(150, 75)


class TestStickerCreate:
    """Tests for Sticker.create."""

    def test_create_from_intrinsic_size(self):
        sticker = Sticker.create("https://example.com/a.png", 300, 200)
        assert sticker.position == Point(100, 100)
        assert sticker.size == Size(150, 100)
        assert sticker.aspect_ratio == pytest.approx(1.5)
        assert sticker.rotation == 0.0
        assert sticker.scale == 1.0

    def test_ids_are_unique(self):
        a = Sticker.create("u", 10, 10)
        b = Sticker.create("u", 10, 10)
        assert a.id != b.id

    def test_with_id_keeps_transform(self, sample_sticker):
        renamed = sample_sticker.with_id("42")
        assert renamed.id == "42"
        assert renamed.transform == sample_sticker.transform


class TestStickerCollection:
    """Tests for StickerCollection."""

    def test_insertion_order(self):
        stickers = [Sticker(url="u", id=str(i)) for i in range(3)]
        collection = StickerCollection(stickers)
        assert collection.ids == ["0", "1", "2"]
        assert len(collection) == 3
        assert "1" in collection

    def test_replace_keeps_position_in_order(self):
        collection = StickerCollection([Sticker(url="u", id="a"), Sticker(url="u", id="b")])
        moved = collection.get("a").with_transform(Transform(rotation=90))
        assert collection.replace(moved) is True
        assert collection.ids == ["a", "b"]
        assert collection.get("a").rotation == 90

    def test_replace_unknown_id(self):
        collection = StickerCollection()
        assert collection.replace(Sticker(url="u", id="x")) is False
        assert len(collection) == 0

    def test_remove(self):
        collection = StickerCollection([Sticker(url="u", id="a")])
        assert collection.remove("a").id == "a"
        assert collection.remove("a") is None
        assert len(collection) == 0

    def test_iteration_is_a_snapshot(self):
        collection = StickerCollection([Sticker(url="u", id="a"), Sticker(url="u", id="b")])
        for sticker in collection:
            collection.remove(sticker.id)
        assert len(collection) == 0
