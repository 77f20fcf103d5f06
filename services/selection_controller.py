"""
Selection and edit-mode controller.

Tracks which sticker is active and whether its edit handles are shown.
At most one sticker is active at a time, so at most one is editable.
"""

import logging
from enum import Enum, auto
from typing import Optional

logger = logging.getLogger(__name__)


class SelectionState(Enum):
    """Selection states of the sticker canvas."""
    IDLE = auto()       # No active sticker
    SELECTED = auto()   # Active sticker, handles hidden
    EDITING = auto()    # Active sticker, resize/rotate/delete handles visible


class SelectionController:
    """
    State machine for sticker selection.

    Transitions:
    - click on background: any state -> IDLE
    - click on a sticker while IDLE: -> EDITING for it
    - click on the active sticker: toggle between EDITING and SELECTED
    - click on another sticker: -> EDITING for the new one

    The controller knows nothing about gestures; callers make sure no
    gesture is open before a background click or a target switch.
    """

    def __init__(self):
        self._active_id: Optional[str] = None
        self._edit_mode = False

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    @property
    def edit_mode(self) -> bool:
        return self._active_id is not None and self._edit_mode

    @property
    def state(self) -> SelectionState:
        if self._active_id is None:
            return SelectionState.IDLE
        if self._edit_mode:
            return SelectionState.EDITING
        return SelectionState.SELECTED

    def is_active(self, sticker_id: str) -> bool:
        return self._active_id == sticker_id

    def is_editing(self, sticker_id: str) -> bool:
        """True when handles are shown for this sticker."""
        return self.state is SelectionState.EDITING and self._active_id == sticker_id

    def click_sticker(self, sticker_id: str) -> SelectionState:
        """Apply a click on a sticker and return the new state."""
        if self._active_id == sticker_id:
            self._edit_mode = not self._edit_mode
        else:
            self._active_id = sticker_id
            self._edit_mode = True
        logger.debug(f"Sticker {sticker_id} clicked -> {self.state.name}")
        return self.state

    def click_background(self) -> SelectionState:
        """Apply a background click and return the new state."""
        self.clear()
        return self.state

    def clear(self):
        """Drop the active sticker."""
        self._active_id = None
        self._edit_mode = False
