"""
Paths and user settings for mandopop.

Path defaults live next to the package and can be overridden with
environment variables:
    MANDOPOP_INDEX_PATH     JSON index artifact
    MANDOPOP_CACHE_DIR      local binary cache (default ~/.cache/mandopop)
    MANDOPOP_SETTINGS_PATH  settings file
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# ============================================================================
# Paths
# ============================================================================

PACKAGE_DIR = Path(__file__).parent
DATA_DIR = PACKAGE_DIR / "data"

DEFAULT_LEXICON_PATH = PACKAGE_DIR.parent / "data" / "cedict_ts.u8"
DEFAULT_INDEX_PATH = DATA_DIR / "cedict.json"
DEFAULT_TRIE_PATH = DATA_DIR / "cedict.dic"


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name, "").strip()
    return Path(raw).expanduser() if raw else default


def get_index_path() -> Path:
    """Get the JSON index artifact path."""
    return _env_path("MANDOPOP_INDEX_PATH", DEFAULT_INDEX_PATH)


def get_cache_dir() -> Path:
    """Get the directory holding the local index cache."""
    return _env_path("MANDOPOP_CACHE_DIR", Path.home() / ".cache" / "mandopop")


def get_settings_path() -> Path:
    return _env_path("MANDOPOP_SETTINGS_PATH", get_cache_dir() / "settings.json")


# ============================================================================
# Settings
# ============================================================================

DEFAULT_FONT_SIZE = 24


@dataclass
class Settings:
    """
    User settings.

    Attributes:
        enabled: Whether lookups run at all
        show_audio: Whether consumers offer pronunciation playback
        font_size: Display size for Chinese characters, in pixels
    """
    enabled: bool = True
    show_audio: bool = True
    font_size: int = DEFAULT_FONT_SIZE

    @classmethod
    def from_dict(cls, data: dict) -> 'Settings':
        """Missing or null values fall back to the defaults."""
        defaults = cls()
        font_size = data.get('font_size')
        return cls(
            enabled=data.get('enabled') is not False,
            show_audio=data.get('show_audio') is not False,
            font_size=int(font_size) if font_size else defaults.font_size,
        )

    def to_dict(self) -> dict:
        return asdict(self)


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from a JSON file.

    An absent or unreadable file gives the defaults.
    """
    if path is None:
        path = get_settings_path()

    if not path.exists():
        return Settings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return Settings.from_dict(data if isinstance(data, dict) else {})
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Failed to load settings from {path}: {e}")
        return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> None:
    if path is None:
        path = get_settings_path()

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(settings.to_dict(), f, indent=2)
