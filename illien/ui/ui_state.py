import logging

from PySide6.QtCore import QTimer, QSettings
from PySide6.QtWidgets import QMainWindow, QSplitter

from illien.storage.preferences import SettingsKeys


log = logging.getLogger(__name__)


class UiStateStore:
    """
    Window geometry + sidebar splitter, persisted in QSettings.
    Saves are debounced so resize/move storms write once.
    """
    def __init__(self, *, owner: QMainWindow, settings: QSettings, debounce_ms: int = 400):
        self._owner = owner
        self._settings = settings
        self._restoring = False
        self._timer = QTimer(owner)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(debounce_ms))
        self._timer.timeout.connect(self.save)

    def schedule_save(self) -> None:
        if self._restoring:
            return
        self._timer.start()

    @staticmethod
    def _coerce_sizes(value) -> list[int] | None:
        if value is None:
            return None
        # INI storage may hand back "220,780"
        if isinstance(value, str):
            value = value.replace(",", " ").split()
        if not isinstance(value, (list, tuple)):
            return None
        out: list[int] = []
        for x in value:
            try:
                out.append(int(x))
            except (TypeError, ValueError):
                pass
        return out or None

    def restore(self, *, splitter: QSplitter) -> None:
        self._restoring = True
        try:
            geo = self._settings.value(SettingsKeys.UI_GEOMETRY)
            if geo:
                self._owner.restoreGeometry(geo)
            else:
                self._owner.resize(980, 680)

            sizes = self._coerce_sizes(self._settings.value(SettingsKeys.UI_SPLITTER))
            if sizes:
                splitter.setSizes(sizes)
        except Exception:
            log.exception("Failed to restore UI state from QSettings")
        finally:
            self._restoring = False

    def save(self) -> None:
        try:
            self._settings.setValue(SettingsKeys.UI_GEOMETRY, self._owner.saveGeometry())
            splitter = getattr(self._owner, "splitter", None)
            if splitter is not None:
                self._settings.setValue(SettingsKeys.UI_SPLITTER, splitter.sizes())
        except Exception:
            log.exception("Failed to save UI state to QSettings")
