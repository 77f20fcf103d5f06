"""
Backend wiring.

Builds the auth gate and the two stores for the backend selected in the
settings.
"""

import logging
from dataclasses import dataclass

from .auth_gate import AuthGate
from .local_store import LocalStickerStore, LocalTaskStore
from .ocr_relay import OCRRelay
from .settings_manager import SettingsManager, BACKEND_LOCAL, BACKEND_SUPABASE
from .stores import StickerStore, TaskStore
from .supabase_client import SupabaseSession
from .supabase_store import SupabaseStickerStore, SupabaseTaskStore

logger = logging.getLogger(__name__)


@dataclass
class Backend:
    """Everything the window needs to reach persistent data."""
    kind: str
    auth: AuthGate
    sticker_store: StickerStore
    task_store: TaskStore


def create_backend(settings: SettingsManager) -> Backend:
    """
    Create the backend named in the settings.

    Raises:
        ValueError: If the backend kind is unknown or Supabase is selected
            without a project URL and key
    """
    kind = settings.backend_kind
    if kind == BACKEND_LOCAL:
        data_dir = settings.get_data_dir()
        logger.info(f"Using local data directory {data_dir}")
        return Backend(
            kind=kind,
            auth=AuthGate(),
            sticker_store=LocalStickerStore(data_dir),
            task_store=LocalTaskStore(data_dir),
        )

    if kind == BACKEND_SUPABASE:
        if not settings.supabase_url or not settings.supabase_key:
            raise ValueError("Supabase backend needs a project URL and API key.")
        session = SupabaseSession(settings.supabase_url, settings.supabase_key)
        logger.info(f"Using Supabase project {session.supabase_url}")
        return Backend(
            kind=kind,
            auth=AuthGate(session),
            sticker_store=SupabaseStickerStore(session),
            task_store=SupabaseTaskStore(session),
        )

    raise ValueError(f"Unknown backend: {kind}")


def create_ocr_relay(settings: SettingsManager) -> OCRRelay:
    ocr = settings.settings.ocr
    return OCRRelay(settings.ocr_api_key, model=ocr.model,
                    endpoint=ocr.endpoint, timeout=ocr.timeout)
