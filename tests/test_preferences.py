import sys
import os

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtCore import QSettings

from illien.storage.preferences import PreferenceStore, SettingsKeys, get_bool


@pytest.fixture
def ini_path(tmp_path):
    return str(tmp_path / "illien.ini")


def make_store(path) -> PreferenceStore:
    return PreferenceStore(QSettings(path, QSettings.IniFormat))


def test_defaults_are_absent(ini_path):
    store = make_store(ini_path)
    assert store.get_directory() is None
    assert store.get_dark_mode() is None
    assert store.get_flush_before_switch() is False


def test_values_survive_restart(ini_path, tmp_path):
    store = make_store(ini_path)
    store.set_directory(str(tmp_path / "journal"))
    store.set_dark_mode(True)
    store.set_flush_before_switch(True)

    reopened = make_store(ini_path)
    assert reopened.get_directory() == str(tmp_path / "journal")
    assert reopened.get_dark_mode() is True
    assert reopened.get_flush_before_switch() is True


def test_dark_mode_false_is_not_absent(ini_path):
    store = make_store(ini_path)
    store.set_dark_mode(False)
    assert make_store(ini_path).get_dark_mode() is False


@pytest.mark.parametrize("raw, expected", [
    ("true", True), ("false", False), ("1", True), ("0", False), ("maybe", None),
])
def test_get_bool_coerces_strings(ini_path, raw, expected):
    settings = QSettings(ini_path, QSettings.IniFormat)
    settings.setValue(SettingsKeys.DARK_MODE, raw)
    assert get_bool(settings, SettingsKeys.DARK_MODE) is expected
