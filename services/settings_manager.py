"""
Settings Manager.

Handles application settings with JSON file storage.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict, fields
from typing import Optional
from pathlib import Path

logger = logging.getLogger(__name__)


BACKEND_LOCAL = "local"
BACKEND_SUPABASE = "supabase"

THEMES = ("default", "ocean", "forest", "sunset")


@dataclass
class BackendSettings:
    """Where stickers and tasks are stored."""
    kind: str = BACKEND_LOCAL
    supabase_url: str = ""
    supabase_key: str = ""
    last_email: str = ""


@dataclass
class OCRSettings:
    """Recognition model settings."""
    api_key: str = ""
    model: str = "mistral-small-latest"
    endpoint: str = "https://api.mistral.ai/v1/chat/completions"
    timeout: float = 60.0


@dataclass
class StickerSettings:
    """Sticker canvas behaviour."""
    # "every_update" saves each gesture frame, "on_end" saves once per gesture
    commit_mode: str = "every_update"


@dataclass
class UISettings:
    """User interface settings."""
    theme: str = "default"
    dark_mode: bool = False
    sort_by: str = "none"
    status_filter: str = "all"


@dataclass
class PathSettings:
    """
    Data directory settings.

    An empty ``data_dir`` means the platform default:
    - Windows: Documents/StickyTasks
    - macOS: ~/Documents/StickyTasks
    - Linux: ~/sticky-tasks
    """
    data_dir: str = ""

    def get_data_dir(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return self._get_default_data_dir()

    def _get_default_data_dir(self) -> Path:
        """Get platform-specific default data directory."""
        import platform
        system = platform.system()

        if system == "Windows":
            docs = Path(os.environ.get("USERPROFILE", "~")) / "Documents"
            return docs.expanduser() / "StickyTasks"
        elif system == "Darwin":  # macOS
            return Path.home() / "Documents" / "StickyTasks"
        else:  # Linux and others
            return Path.home() / "sticky-tasks"

    def ensure_data_dir(self) -> Path:
        data_dir = self.get_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir


def _section(cls, data: dict):
    """Build a settings section, ignoring unknown keys from older files."""
    if not isinstance(data, dict):
        raise TypeError(f"{cls.__name__} must be an object, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class AppSettings:
    """Complete application settings."""
    backend: BackendSettings = field(default_factory=BackendSettings)
    ocr: OCRSettings = field(default_factory=OCRSettings)
    stickers: StickerSettings = field(default_factory=StickerSettings)
    ui: UISettings = field(default_factory=UISettings)
    paths: PathSettings = field(default_factory=PathSettings)
    window_geometry: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "backend": asdict(self.backend),
            "ocr": asdict(self.ocr),
            "stickers": asdict(self.stickers),
            "ui": asdict(self.ui),
            "paths": asdict(self.paths),
            "window_geometry": self.window_geometry,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise TypeError(f"settings must be an object, got {type(data).__name__}")
        settings = cls()

        if "backend" in data:
            settings.backend = _section(BackendSettings, data["backend"])
        if "ocr" in data:
            settings.ocr = _section(OCRSettings, data["ocr"])
        if "stickers" in data:
            settings.stickers = _section(StickerSettings, data["stickers"])
        if "ui" in data:
            settings.ui = _section(UISettings, data["ui"])
        if "paths" in data:
            settings.paths = _section(PathSettings, data["paths"])
        if isinstance(data.get("window_geometry"), dict):
            settings.window_geometry = data["window_geometry"]

        return settings


class SettingsManager:
    """
    Manages application settings with JSON file storage.

    Settings file location:
    - Windows: %APPDATA%/StickyTasks/settings.json
    - Linux: ~/.config/StickyTasks/settings.json
    - macOS: ~/Library/Application Support/StickyTasks/settings.json

    Secrets left empty in the file fall back to the SUPABASE_URL,
    SUPABASE_KEY and MISTRAL_API_KEY environment variables.
    """

    APP_NAME = "StickyTasks"
    SETTINGS_FILE = "settings.json"

    def __init__(self, config_override: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_override: Optional path to override config file location.
                            Useful for testing.
        """
        self._settings = AppSettings()
        self._config_override = config_override
        self._settings_path = self._get_settings_path()
        self._ensure_settings_dir()
        self.load()

    @property
    def settings(self) -> AppSettings:
        """Get current settings."""
        return self._settings

    @property
    def settings_path(self) -> str:
        """Get the settings file path."""
        return str(self._settings_path)

    # Convenience properties for common settings
    @property
    def backend_kind(self) -> str:
        return self._settings.backend.kind

    @backend_kind.setter
    def backend_kind(self, value: str):
        self._settings.backend.kind = value
        self.save()

    @property
    def supabase_url(self) -> str:
        return self._settings.backend.supabase_url or os.environ.get("SUPABASE_URL", "")

    @property
    def supabase_key(self) -> str:
        return self._settings.backend.supabase_key or os.environ.get("SUPABASE_KEY", "")

    @property
    def ocr_api_key(self) -> str:
        return self._settings.ocr.api_key or os.environ.get("MISTRAL_API_KEY", "")

    @property
    def commit_mode(self) -> str:
        return self._settings.stickers.commit_mode

    @commit_mode.setter
    def commit_mode(self, value: str):
        self._settings.stickers.commit_mode = value
        self.save()

    @property
    def theme(self) -> str:
        theme = self._settings.ui.theme
        return theme if theme in THEMES else THEMES[0]

    @theme.setter
    def theme(self, value: str):
        self._settings.ui.theme = value
        self.save()

    @property
    def dark_mode(self) -> bool:
        return self._settings.ui.dark_mode

    @dark_mode.setter
    def dark_mode(self, value: bool):
        self._settings.ui.dark_mode = value
        self.save()

    def get_data_dir(self) -> Path:
        """Get the local store directory, creating it if needed."""
        return self._settings.paths.ensure_data_dir()

    def _get_settings_path(self) -> Path:
        """Get platform-specific settings directory."""
        if self._config_override:
            return Path(self._config_override)

        import platform
        system = platform.system()

        if system == "Windows":
            base = os.environ.get("APPDATA", os.path.expanduser("~"))
            config_dir = Path(base) / self.APP_NAME
        elif system == "Darwin":  # macOS
            config_dir = Path.home() / "Library" / "Application Support" / self.APP_NAME
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
            config_dir = Path(xdg_config) / self.APP_NAME

        return config_dir / self.SETTINGS_FILE

    def _ensure_settings_dir(self):
        """Create settings directory if it doesn't exist."""
        self._settings_path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> bool:
        """Load settings from file."""
        if not self._settings_path.exists():
            return False

        try:
            with open(self._settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._settings = AppSettings.from_dict(data)
            return True
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading settings: {e}")
            return False

    def save(self) -> bool:
        """Save settings to file."""
        try:
            self._ensure_settings_dir()
            with open(self._settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

    def reset(self):
        """Reset settings to defaults."""
        self._settings = AppSettings()
        self.save()

    def save_window_geometry(self, geometry: bytes, state: bytes):
        """Save window geometry and state."""
        import base64
        self._settings.window_geometry = {
            "geometry": base64.b64encode(geometry).decode("ascii"),
            "state": base64.b64encode(state).decode("ascii"),
        }
        self.save()

    def get_window_geometry(self) -> tuple:
        """Get saved window geometry and state."""
        import base64
        geo = self._settings.window_geometry
        if not geo:
            return None, None

        try:
            geometry = base64.b64decode(geo.get("geometry", ""))
            state = base64.b64decode(geo.get("state", ""))
            return geometry, state
        except (ValueError, TypeError):
            return None, None


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings(config_override: Optional[str] = None) -> SettingsManager:
    """
    Get the global settings manager instance.

    Args:
        config_override: Optional path to override config location.
                        Only used on first call to initialize.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager(config_override)
    return _settings_manager


def reset_settings_manager():
    """Reset the global settings manager (useful for testing)."""
    global _settings_manager
    _settings_manager = None
