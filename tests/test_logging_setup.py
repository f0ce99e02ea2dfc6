import sys
import os
import logging

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtCore import QtMsgType

from illien.logging_setup import QT_LEVELS, SESSION_ID, EnsureSessionFilter


def test_qt_message_types_map_to_log_levels():
    assert QT_LEVELS[QtMsgType.QtDebugMsg] == logging.DEBUG
    assert QT_LEVELS[QtMsgType.QtWarningMsg] == logging.WARNING
    assert QT_LEVELS[QtMsgType.QtCriticalMsg] == logging.ERROR
    assert QT_LEVELS[QtMsgType.QtFatalMsg] == logging.CRITICAL


def test_session_filter_fills_missing_session():
    record = logging.LogRecord("illien", logging.INFO, __file__, 1, "hello", None, None)
    assert EnsureSessionFilter().filter(record)
    assert record.session == SESSION_ID
