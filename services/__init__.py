"""Services package."""

from .selection_controller import SelectionController, SelectionState
from .gesture_engine import (
    GestureEngine,
    CommitMode,
    drag_position,
    resize_size,
    snap_rotation,
    rotation_from_pointer,
)
from .rendering import (
    Handle,
    Placement,
    project,
    to_local,
    handle_positions,
    hit_test,
)
from .sticker_board import StickerBoard
from .stores import StoreError, StickerStore, TaskStore
from .local_store import LocalStickerStore, LocalTaskStore
from .supabase_client import SupabaseSession, SupabaseError, AuthError
from .supabase_store import SupabaseStickerStore, SupabaseTaskStore
from .auth_gate import AuthGate
from .task_service import (
    TaskService,
    TaskStats,
    days_until,
    days_remaining_label,
    deadline_urgency,
    filter_tasks,
    sort_tasks,
    compute_stats,
)
from .ocr_relay import OCRRelay, OCRError
from .image_probe import (
    ImageLoadError,
    ProbedImage,
    load_image_file,
    load_image_url,
    fetch_image_bytes,
)
from .settings_manager import (
    SettingsManager,
    AppSettings,
    BackendSettings,
    OCRSettings,
    StickerSettings,
    UISettings,
    PathSettings,
    get_settings,
    reset_settings_manager,
)
from .backend import Backend, create_backend, create_ocr_relay

__all__ = [
    # Sticker interaction
    "SelectionController",
    "SelectionState",
    "GestureEngine",
    "CommitMode",
    "drag_position",
    "resize_size",
    "snap_rotation",
    "rotation_from_pointer",
    "Handle",
    "Placement",
    "project",
    "to_local",
    "handle_positions",
    "hit_test",
    "StickerBoard",
    # Persistence
    "StoreError",
    "StickerStore",
    "TaskStore",
    "LocalStickerStore",
    "LocalTaskStore",
    "SupabaseSession",
    "SupabaseError",
    "AuthError",
    "SupabaseStickerStore",
    "SupabaseTaskStore",
    "AuthGate",
    # Tasks
    "TaskService",
    "TaskStats",
    "days_until",
    "days_remaining_label",
    "deadline_urgency",
    "filter_tasks",
    "sort_tasks",
    "compute_stats",
    # Recognition and images
    "OCRRelay",
    "OCRError",
    "ImageLoadError",
    "ProbedImage",
    "load_image_file",
    "load_image_url",
    "fetch_image_bytes",
    # Settings
    "SettingsManager",
    "AppSettings",
    "BackendSettings",
    "OCRSettings",
    "StickerSettings",
    "UISettings",
    "PathSettings",
    "get_settings",
    "reset_settings_manager",
    "Backend",
    "create_backend",
    "create_ocr_relay",
]
