from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QGuiApplication

from illien.core.themes import ThemeName

_LIGHT = """
QWidget { background: #fdfcf9; color: #1f1f1f; }
QPlainTextEdit, QTextBrowser { background: #fdfcf9; border: none; font-size: 15px; }
QListWidget { background: #f4f2ed; border: none; }
QListWidget::item:selected { background: #e2ddd2; color: #1f1f1f; }
QPushButton { background: #efece5; border: 1px solid #dcd7cc; padding: 4px 10px; border-radius: 4px; }
QPushButton:disabled { color: #a8a39a; }
QLabel#entryHeading { font-size: 20px; font-weight: 600; }
QLabel#sectionLabel { color: #7b766c; font-size: 11px; text-transform: uppercase; }
QLabel#saveStatus[status="saved"] { color: #4f8a4f; }
QLabel#saveStatus[status="saving"] { color: #b08a2e; }
QLabel#saveStatus[status="unsaved"] { color: #b0512e; }
"""

_DARK = """
QWidget { background: #1c1c1e; color: #e6e3dc; }
QPlainTextEdit, QTextBrowser { background: #1c1c1e; border: none; font-size: 15px; }
QListWidget { background: #232326; border: none; }
QListWidget::item:selected { background: #3a3a3f; color: #e6e3dc; }
QPushButton { background: #2c2c30; border: 1px solid #3c3c42; padding: 4px 10px; border-radius: 4px; }
QPushButton:disabled { color: #6b6b70; }
QLabel#entryHeading { font-size: 20px; font-weight: 600; }
QLabel#sectionLabel { color: #8d8a83; font-size: 11px; text-transform: uppercase; }
QLabel#saveStatus[status="saved"] { color: #79b879; }
QLabel#saveStatus[status="saving"] { color: #d9b35a; }
QLabel#saveStatus[status="unsaved"] { color: #e08660; }
"""


def stylesheet_for(theme: ThemeName) -> str:
    return _DARK if theme == "dark" else _LIGHT


def system_prefers_dark() -> bool | None:
    """OS color scheme via Qt (6.5+); None when unknown."""
    hints = QGuiApplication.styleHints()
    if hints is None or not hasattr(hints, "colorScheme"):
        return None
    scheme = hints.colorScheme()
    if scheme == Qt.ColorScheme.Dark:
        return True
    if scheme == Qt.ColorScheme.Light:
        return False
    return None
