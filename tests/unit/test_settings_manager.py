"""
Unit tests for the settings manager and backend wiring.
"""

import json
import pytest

from services.settings_manager import (
    SettingsManager, AppSettings, get_settings, reset_settings_manager,
    BACKEND_LOCAL, BACKEND_SUPABASE,
)
from services.backend import create_backend, create_ocr_relay
from services.local_store import LocalStickerStore, LocalTaskStore
from services.supabase_store import SupabaseStickerStore


@pytest.fixture
def no_secret_env(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_KEY", "MISTRAL_API_KEY"):
        monkeypatch.delenv(name, raising=False)


class TestSettingsManager:
    """Tests for loading and saving settings."""

    def test_defaults(self, settings_manager):
        s = settings_manager.settings
        assert s.backend.kind == BACKEND_LOCAL
        assert s.ocr.model == "mistral-small-latest"
        assert s.stickers.commit_mode == "every_update"
        assert settings_manager.theme == "default"
        assert settings_manager.dark_mode is False

    def test_round_trip(self, settings_manager):
        s = settings_manager.settings
        s.backend.kind = BACKEND_SUPABASE
        s.backend.supabase_url = "https://demo.supabase.co"
        s.ui.sort_by = "deadline"
        s.stickers.commit_mode = "on_end"
        settings_manager.save()

        reloaded = SettingsManager(config_override=settings_manager.settings_path)
        assert reloaded.backend_kind == BACKEND_SUPABASE
        assert reloaded.supabase_url == "https://demo.supabase.co"
        assert reloaded.settings.ui.sort_by == "deadline"
        assert reloaded.commit_mode == "on_end"

    def test_setters_save(self, settings_manager):
        settings_manager.theme = "ocean"
        settings_manager.dark_mode = True
        with open(settings_manager.settings_path) as f:
            data = json.load(f)
        assert data["ui"]["theme"] == "ocean"
        assert data["ui"]["dark_mode"] is True

    def test_unknown_keys_ignored(self, temp_dir):
        path = temp_dir / "settings.json"
        path.write_text(json.dumps({"ui": {"theme": "forest", "legacy_option": 1}}))
        manager = SettingsManager(config_override=str(path))
        assert manager.theme == "forest"

    def test_unknown_theme_falls_back(self, settings_manager):
        settings_manager.settings.ui.theme = "neon"
        assert settings_manager.theme == "default"

    def test_corrupt_file_uses_defaults(self, temp_dir):
        path = temp_dir / "settings.json"
        path.write_text("{not json")
        manager = SettingsManager(config_override=str(path))
        assert manager.settings.to_dict() == AppSettings().to_dict()

    @pytest.mark.parametrize("content", [
        {"backend": "x"},
        {"ui": ["dark"]},
        ["not", "settings"],
    ])
    def test_wrong_shape_uses_defaults(self, temp_dir, content):
        path = temp_dir / "settings.json"
        path.write_text(json.dumps(content))
        manager = SettingsManager(config_override=str(path))
        assert manager.settings.to_dict() == AppSettings().to_dict()

    def test_env_fallbacks(self, settings_manager, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "env-key")
        monkeypatch.setenv("MISTRAL_API_KEY", "mistral-env")
        assert settings_manager.supabase_url == "https://env.supabase.co"
        assert settings_manager.supabase_key == "env-key"
        assert settings_manager.ocr_api_key == "mistral-env"

        settings_manager.settings.ocr.api_key = "from-file"
        assert settings_manager.ocr_api_key == "from-file"

    def test_window_geometry(self, settings_manager):
        settings_manager.save_window_geometry(b"\x01\x02", b"\x03")
        assert settings_manager.get_window_geometry() == (b"\x01\x02", b"\x03")

    def test_data_dir_override(self, settings_manager, temp_dir):
        settings_manager.settings.paths.data_dir = str(temp_dir / "data")
        assert settings_manager.get_data_dir() == temp_dir / "data"
        assert (temp_dir / "data").is_dir()

    def test_global_instance(self, temp_dir):
        reset_settings_manager()
        first = get_settings(str(temp_dir / "g.json"))
        assert get_settings() is first
        reset_settings_manager()


class TestBackend:
    """Tests for building stores from settings."""

    def test_local_backend(self, settings_manager, temp_dir):
        settings_manager.settings.paths.data_dir = str(temp_dir / "data")
        backend = create_backend(settings_manager)
        assert isinstance(backend.sticker_store, LocalStickerStore)
        assert isinstance(backend.task_store, LocalTaskStore)
        assert backend.sticker_store.path.parent == temp_dir / "data"
        assert backend.auth.signed_in
        assert not backend.auth.requires_sign_in

    def test_supabase_backend(self, settings_manager, no_secret_env):
        s = settings_manager.settings.backend
        s.kind = BACKEND_SUPABASE
        s.supabase_url = "https://demo.supabase.co"
        s.supabase_key = "anon"
        backend = create_backend(settings_manager)
        assert isinstance(backend.sticker_store, SupabaseStickerStore)
        assert backend.auth.requires_sign_in
        assert not backend.auth.signed_in

    def test_supabase_needs_project(self, settings_manager, no_secret_env):
        settings_manager.settings.backend.kind = BACKEND_SUPABASE
        with pytest.raises(ValueError):
            create_backend(settings_manager)

    def test_unknown_backend(self, settings_manager):
        settings_manager.settings.backend.kind = "ftp"
        with pytest.raises(ValueError):
            create_backend(settings_manager)

    def test_ocr_relay_from_settings(self, settings_manager, no_secret_env):
        settings_manager.settings.ocr.api_key = "k"
        settings_manager.settings.ocr.timeout = 12.0
        relay = create_ocr_relay(settings_manager)
        assert relay.api_key == "k"
        assert relay.timeout == 12.0
