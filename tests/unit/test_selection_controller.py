"""
Unit tests for the selection and edit-mode controller.
"""

import pytest

from services.selection_controller import SelectionController, SelectionState


@pytest.fixture
def controller() -> SelectionController:
    return SelectionController()


class TestSelectionController:
    """Tests for selection state transitions."""

    def test_starts_idle(self, controller):
        assert controller.state is SelectionState.IDLE
        assert controller.active_id is None
        assert controller.edit_mode is False

    def test_first_click_enters_edit_mode(self, controller):
        assert controller.click_sticker("a") is SelectionState.EDITING
        assert controller.active_id == "a"
        assert controller.is_editing("a")

    def test_reclick_toggles_edit_mode(self, controller):
        controller.click_sticker("a")
        assert controller.click_sticker("a") is SelectionState.SELECTED
        assert controller.active_id == "a"
        assert not controller.is_editing("a")
        assert controller.click_sticker("a") is SelectionState.EDITING

    def test_switching_target_enters_edit_mode(self, controller):
        controller.click_sticker("a")
        controller.click_sticker("a")  # selected, not editing
        assert controller.click_sticker("b") is SelectionState.EDITING
        assert controller.active_id == "b"
        assert not controller.is_active("a")

    def test_background_click_from_any_state(self, controller):
        assert controller.click_background() is SelectionState.IDLE
        controller.click_sticker("a")
        assert controller.click_background() is SelectionState.IDLE
        controller.click_sticker("a")
        controller.click_sticker("a")
        assert controller.click_background() is SelectionState.IDLE
        assert controller.active_id is None

    def test_at_most_one_sticker_editing(self, controller):
        for sticker_id in ["a", "b", "c", "b", "b", "a"]:
            controller.click_sticker(sticker_id)
            editing = [s for s in "abc" if controller.is_editing(s)]
            assert len(editing) <= 1

    def test_clear(self, controller):
        controller.click_sticker("a")
        controller.clear()
        assert controller.state is SelectionState.IDLE
        assert controller.edit_mode is False
