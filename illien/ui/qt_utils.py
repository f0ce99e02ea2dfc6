from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable

from PySide6.QtCore import QObject, QTimer


log = logging.getLogger(__name__)


@contextmanager
def blocked_signals(obj):
    """
    Temporarily silence Qt signals of obj (programmatic setText etc.),
    always re-enabling them afterwards.
    """
    if obj is None:
        yield
        return
    try:
        obj.blockSignals(True)
        yield
    finally:
        try:
            obj.blockSignals(False)
        except RuntimeError:
            # the C++ object may already be gone
            pass


class QtTimerHandle:
    def __init__(self, timer: QTimer):
        self._timer: QTimer | None = timer

    def cancel(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None:
            return
        try:
            timer.stop()
            timer.deleteLater()
        except RuntimeError:
            pass


class QtScheduler:
    """
    One-shot cancellable timers on the Qt event loop.
    Every schedule() builds a fresh QTimer; a cancelled handle never fires.
    """

    def __init__(self, parent: QObject):
        self._parent = parent

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(int(delay_ms))
        handle = QtTimerHandle(timer)

        def _fire() -> None:
            handle._timer = None
            timer.deleteLater()
            try:
                callback()
            except Exception:
                log.exception("Timer callback failed")

        timer.timeout.connect(_fire)
        timer.start()
        return handle
