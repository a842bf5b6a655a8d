"""Filesystem locations and session defaults.

Nothing here is read implicitly by the engine: the CLI resolves these values
once and passes them down as explicit arguments.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

DEFAULT_LANGUAGE = "en"
DEFAULT_DURATION_SECONDS = 60
DEFAULT_TEXT_LENGTH = 200


def default_data_dir() -> Path:
    env_override = os.environ.get("KEYRACE_DATA_DIR")
    if env_override:
        return Path(env_override)
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data) / "keyrace"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "keyrace"
    if os.name == "nt":
        local_appdata = os.environ.get("LOCALAPPDATA")
        if local_appdata:
            return Path(local_appdata) / "keyrace" / "Data"
    return Path.home() / ".local" / "share" / "keyrace"


def default_config_dir() -> Path:
    env_override = os.environ.get("KEYRACE_CONFIG_DIR")
    if env_override:
        return Path(env_override)
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "keyrace"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Preferences" / "keyrace"
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "keyrace"
    return Path.home() / ".config" / "keyrace"


def sessions_dir(data_dir: Path | None = None) -> Path:
    return (data_dir or default_data_dir()) / "sessions"


def results_path(data_dir: Path | None = None) -> Path:
    return (data_dir or default_data_dir()) / "results.json"


def preferences_path(config_dir: Path | None = None) -> Path:
    return (config_dir or default_config_dir()) / "preferences.json"
