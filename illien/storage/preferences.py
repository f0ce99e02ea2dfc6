from __future__ import annotations

import logging
from dataclasses import dataclass

from PySide6.QtCore import QSettings

from illien.settings import APP_NAME


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsKeys:
    JOURNAL_DIR: str = "journal/directory"
    DARK_MODE: str = "ui/dark_mode"
    UI_GEOMETRY: str = "ui/geometry"
    UI_SPLITTER: str = "ui/splitter_sizes"
    SHOW_PREVIEW: str = "ui/show_preview"
    FLUSH_BEFORE_SWITCH: str = "editor/flush_before_switch"


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def get_str(settings: QSettings, key: str, default: str | None = None) -> str | None:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        log.exception("Failed to read setting %s", key)
        return default


def get_bool(settings: QSettings, key: str, default: bool | None = None) -> bool | None:
    """INI-backed QSettings hands bools back as "true"/"false" strings."""
    try:
        val = settings.value(key, None)
    except Exception:
        log.exception("Failed to read setting %s", key)
        return default
    if val is None:
        return default
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return default


def safe_set_setting(settings: QSettings, key: str, value) -> None:
    """Best-effort write: preference failures never take the UI down."""
    try:
        settings.setValue(key, value)
    except Exception:
        log.exception("Failed to write setting %s", key)


class PreferenceStore:
    """
    Journal directory + dark-mode flag, persisted across restarts.
    Absent values come back as None so callers can apply their own fallbacks.
    """

    def __init__(self, settings: QSettings | None = None) -> None:
        self.settings = settings if settings is not None else QSettings(APP_NAME, APP_NAME)

    def get_directory(self) -> str | None:
        return get_str(self.settings, SettingsKeys.JOURNAL_DIR) or None

    def set_directory(self, path: str) -> None:
        safe_set_setting(self.settings, SettingsKeys.JOURNAL_DIR, str(path))
        self.sync()

    def get_dark_mode(self) -> bool | None:
        return get_bool(self.settings, SettingsKeys.DARK_MODE)

    def set_dark_mode(self, dark_mode: bool) -> None:
        safe_set_setting(self.settings, SettingsKeys.DARK_MODE, bool(dark_mode))
        self.sync()

    def get_flush_before_switch(self) -> bool:
        return bool(get_bool(self.settings, SettingsKeys.FLUSH_BEFORE_SWITCH, False))

    def set_flush_before_switch(self, enabled: bool) -> None:
        safe_set_setting(self.settings, SettingsKeys.FLUSH_BEFORE_SWITCH, bool(enabled))
        self.sync()

    def get_show_preview(self) -> bool:
        return bool(get_bool(self.settings, SettingsKeys.SHOW_PREVIEW, False))

    def set_show_preview(self, show: bool) -> None:
        safe_set_setting(self.settings, SettingsKeys.SHOW_PREVIEW, bool(show))

    def sync(self) -> None:
        try:
            self.settings.sync()
        except Exception:
            log.exception("Failed to sync settings")
