"""Application settings management.

Loads/saves the export defaults and last-used directory from
``~/.tmxreview/settings.json``, falling back to bundled defaults.
The directory can be overridden with ``TMXREVIEW_CONFIG_DIR``.
"""

from __future__ import annotations

import importlib.resources
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

_loaded: bool = False
_settings: dict[str, object] = {}

# Used when the bundled defaults file is unavailable
_FALLBACK_DEFAULTS: dict[str, object] = {
    "strip_attributes": False,
    "last_directory": "",
}


def _config_dir() -> Path:
    override = os.environ.get("TMXREVIEW_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".tmxreview"


def _settings_path() -> Path:
    return _config_dir() / "settings.json"


def _load_defaults() -> dict[str, object]:
    """Load the bundled default settings using importlib.resources.

    Works whether the package is run from source or installed as a wheel.
    """
    try:
        ref = importlib.resources.files("tmxreview").joinpath("default_settings.json")
        with importlib.resources.as_file(ref) as p:
            with open(p, encoding="utf-8") as f:
                return json.load(f)
    except (FileNotFoundError, TypeError):
        return dict(_FALLBACK_DEFAULTS)


def _load_user_settings() -> dict[str, object]:
    path = _settings_path()
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        logger.warning("Ignoring unreadable settings file %s", path, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def _load() -> None:
    """Load and merge default + user settings."""
    global _settings, _loaded
    _settings = dict(_FALLBACK_DEFAULTS)
    _settings.update(_load_defaults())
    _settings.update(_load_user_settings())
    _loaded = True


def _get(key: str):
    if not _loaded:
        _load()
    return _settings.get(key, _FALLBACK_DEFAULTS.get(key))


def save_settings() -> bool:
    """Persist current settings to disk.

    Returns False (and keeps the in-memory settings) if the file cannot be
    written.
    """
    if not _loaded:
        _load()
    path = _settings_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(_settings, f, indent=2, ensure_ascii=False)
    except OSError:
        logger.warning("Could not save settings to %s", path, exc_info=True)
        return False
    return True


def reload() -> None:
    """Force re-read of config files."""
    _load()


def get_strip_attributes() -> bool:
    """Return whether exports strip all attributes by default."""
    return bool(_get("strip_attributes"))


def set_strip_attributes(value: bool) -> None:
    if not _loaded:
        _load()
    _settings["strip_attributes"] = bool(value)


def get_last_directory() -> str:
    """Return the directory last used for opening or exporting, or ''."""
    return str(_get("last_directory") or "")


def set_last_directory(directory: str | Path) -> None:
    if not _loaded:
        _load()
    _settings["last_directory"] = str(directory)
