from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QStackedWidget,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from illien.core.autosave import EditorState, SaveStatus
from illien.core.entries import Entry, entry_heading, partition_entries
from illien.core.themes import resolve_dark_mode, theme_name
from illien.core.timing import compute_preview_debounce_ms
from illien.services.markdown_renderer import MarkdownRenderer
from illien.session import JournalSession
from illien.settings import APP_NAME
from illien.storage.preferences import PreferenceStore
from illien.ui.dialogs import ask_new_entry_title, choose_directory, confirm_delete
from illien.ui.qt_utils import QtScheduler, blocked_signals
from illien.ui.theme import stylesheet_for, system_prefers_dark
from illien.ui.ui_state import UiStateStore


log = logging.getLogger(__name__)

STATUS_TEXT = {
    SaveStatus.SAVED: "Saved",
    SaveStatus.SAVING: "Saving...",
    SaveStatus.UNSAVED: "Unsaved",
}

_ENTRY_ROLE = Qt.UserRole + 1


class JournalWindow(QMainWindow):
    """
    Presentation only: forwards intents to JournalSession and re-renders
    from its state. No file access happens here.
    """

    def __init__(
        self,
        *,
        prefs: PreferenceStore | None = None,
        directory_override: str | None = None,
        flush_before_switch: bool | None = None,
    ):
        super().__init__()
        self.setWindowTitle("Illien")
        log.info("Main window initializing")

        self._prefs = prefs or PreferenceStore()
        self._ui_state = UiStateStore(owner=self, settings=self._prefs.settings, debounce_ms=400)

        if flush_before_switch is None:
            flush_before_switch = self._prefs.get_flush_before_switch()

        self.session = JournalSession(
            scheduler=QtScheduler(self),
            flush_before_switch=flush_before_switch,
        )
        self._rendered: EditorState | None = None

        # stored > OS > default, decided once here
        self._dark_mode = resolve_dark_mode(self._prefs.get_dark_mode(), system_prefers_dark())
        self._renderer = MarkdownRenderer(theme=theme_name(self._dark_mode))

        self._build_ui()
        self._build_menu()

        self.preview_timer = QTimer(self)
        self.preview_timer.setSingleShot(True)
        self.preview_timer.timeout.connect(self._render_preview)

        self.session.add_listener(self._on_state_changed)

        self._ui_state.restore(splitter=self.splitter)
        self.splitter.splitterMoved.connect(lambda *_: self._ui_state.schedule_save())

        self._apply_theme()
        self._set_preview_visible(self._prefs.get_show_preview(), save=False)

        directory = directory_override or self._prefs.get_directory()
        if directory_override:
            self._prefs.set_directory(directory_override)
        self._open_directory(directory)

    # ───────────────────────── layout ─────────────────────────

    def _build_ui(self) -> None:
        self.pages = QStackedWidget()
        self.pages.addWidget(self._build_welcome_page())
        self.pages.addWidget(self._build_journal_page())
        self.setCentralWidget(self.pages)

    def _build_welcome_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.addStretch(1)
        title = QLabel("Welcome to Illien")
        title.setObjectName("entryHeading")
        title.setAlignment(Qt.AlignCenter)
        hint = QLabel("Please select a directory to store your journal entries.")
        hint.setAlignment(Qt.AlignCenter)
        btn = QPushButton("Select Directory")
        btn.clicked.connect(self.select_directory)
        layout.addWidget(title)
        layout.addWidget(hint)
        layout.addWidget(btn, alignment=Qt.AlignCenter)
        layout.addStretch(2)
        return page

    def _build_journal_page(self) -> QWidget:
        page = QWidget()
        outer = QVBoxLayout(page)
        outer.setContentsMargins(0, 0, 0, 0)

        # header
        header = QWidget()
        hl = QHBoxLayout(header)
        hl.setContentsMargins(16, 10, 12, 6)
        self.heading = QLabel("")
        self.heading.setObjectName("entryHeading")
        self.status_label = QLabel(STATUS_TEXT[SaveStatus.SAVED])
        self.status_label.setObjectName("saveStatus")
        self.theme_button = QPushButton()
        self.theme_button.setFlat(True)
        self.theme_button.clicked.connect(self.toggle_dark_mode)
        self.settings_button = QPushButton("⚙️")
        self.settings_button.setFlat(True)
        self.settings_button.setToolTip("Settings")
        self.settings_button.clicked.connect(self._toggle_settings_panel)
        hl.addWidget(self.heading, 1)
        hl.addWidget(self.status_label)
        hl.addWidget(self.theme_button)
        hl.addWidget(self.settings_button)
        outer.addWidget(header)

        # settings panel
        self.settings_panel = QWidget()
        sl = QHBoxLayout(self.settings_panel)
        sl.setContentsMargins(16, 0, 12, 6)
        sl.addWidget(QLabel("Journal Directory:"))
        self.directory_button = QPushButton("Select directory...")
        self.directory_button.clicked.connect(self.select_directory)
        sl.addWidget(self.directory_button, 1)
        self.settings_panel.setVisible(False)
        outer.addWidget(self.settings_panel)

        # sidebar
        sidebar = QWidget()
        sb = QVBoxLayout(sidebar)
        sb.setContentsMargins(8, 8, 8, 8)
        buttons = QHBoxLayout()
        self.today_button = QPushButton("Today")
        self.today_button.clicked.connect(self.session.go_to_today)
        self.new_button = QPushButton("New entry")
        self.new_button.clicked.connect(self.create_entry_dialog)
        buttons.addWidget(self.today_button)
        buttons.addWidget(self.new_button)
        sb.addLayout(buttons)

        daily_label = QLabel("Daily")
        daily_label.setObjectName("sectionLabel")
        self.daily_list = QListWidget()
        titled_label = QLabel("Entries")
        titled_label.setObjectName("sectionLabel")
        self.titled_list = QListWidget()
        for lw in (self.daily_list, self.titled_list):
            lw.itemClicked.connect(self._on_item_clicked)
        sb.addWidget(daily_label)
        sb.addWidget(self.daily_list, 2)
        sb.addWidget(titled_label)
        sb.addWidget(self.titled_list, 1)

        self.delete_button = QPushButton("Delete entry")
        self.delete_button.setEnabled(False)
        self.delete_button.clicked.connect(self.delete_current_entry)
        sb.addWidget(self.delete_button)

        # editor + optional preview
        self.editor = QPlainTextEdit()
        self.editor.setPlaceholderText("Start writing...")
        self.editor.textChanged.connect(self._on_text_changed)
        self.preview = QTextBrowser()
        self.preview.setOpenExternalLinks(True)

        self.right_splitter = QSplitter(Qt.Horizontal)
        self.right_splitter.addWidget(self.editor)
        self.right_splitter.addWidget(self.preview)

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(sidebar)
        self.splitter.addWidget(self.right_splitter)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 4)
        outer.addWidget(self.splitter, 1)
        return page

    def _build_menu(self) -> None:
        menubar = self.menuBar()

        filem = menubar.addMenu("File")
        act_dir = QAction("Select Journal Directory…", self)
        act_dir.triggered.connect(self.select_directory)
        act_new = QAction("New Entry…", self)
        act_new.setShortcut(QKeySequence.New)
        act_new.triggered.connect(self.create_entry_dialog)
        act_today = QAction("Today", self)
        act_today.setShortcut("Ctrl+T")
        act_today.triggered.connect(self.session.go_to_today)
        self._act_delete = QAction("Delete Entry…", self)
        self._act_delete.setEnabled(False)
        self._act_delete.triggered.connect(self.delete_current_entry)
        act_quit = QAction("Quit", self)
        act_quit.setShortcut(QKeySequence.Quit)
        act_quit.triggered.connect(self.close)
        for act in (act_dir, act_new, act_today, self._act_delete):
            filem.addAction(act)
        filem.addSeparator()
        filem.addAction(act_quit)

        viewm = menubar.addMenu("View")
        self._act_dark = QAction("Dark Mode", self, checkable=True)
        self._act_dark.setShortcut("Ctrl+Shift+D")
        self._act_dark.triggered.connect(lambda _checked: self.toggle_dark_mode())
        self._act_preview = QAction("Markdown Preview", self, checkable=True)
        self._act_preview.setShortcut("Ctrl+E")
        self._act_preview.triggered.connect(lambda checked: self._set_preview_visible(checked))
        viewm.addAction(self._act_dark)
        viewm.addAction(self._act_preview)

        settingsm = menubar.addMenu("Settings")
        self._act_flush = QAction("Save Before Switching Entries", self, checkable=True)
        self._act_flush.setChecked(self.session.flush_before_switch)
        self._act_flush.triggered.connect(self._set_flush_before_switch)
        settingsm.addAction(self._act_flush)

    # ───────────────────────── intents ─────────────────────────

    def _open_directory(self, directory: str | None) -> None:
        self.directory_button.setText(directory or "Select directory...")
        self.pages.setCurrentIndex(1 if directory else 0)
        self.session.set_directory(directory)
        if self._rendered is None:
            self._on_state_changed(self.session.state)

    def select_directory(self) -> None:
        log.info("Directory picker opened")
        path = choose_directory(self, self.session.directory)
        if not path:
            log.info("Directory selection cancelled; keeping %s", self.session.directory)
            return
        if path == self.session.directory:
            log.info("Directory unchanged: %s", path)
            return
        self._prefs.set_directory(path)
        self._open_directory(path)

    def create_entry_dialog(self) -> None:
        if self.session.directory is None:
            return
        title = ask_new_entry_title(self)
        if title:
            self.session.create_titled_entry(title)

    def delete_current_entry(self) -> None:
        self.session.delete_current_entry(confirm=lambda entry: confirm_delete(self, entry))

    def toggle_dark_mode(self) -> None:
        self._dark_mode = not self._dark_mode
        self._prefs.set_dark_mode(self._dark_mode)
        self._apply_theme()

    def _set_flush_before_switch(self, enabled: bool) -> None:
        self.session.flush_before_switch = bool(enabled)
        self._prefs.set_flush_before_switch(bool(enabled))

    def _toggle_settings_panel(self) -> None:
        self.settings_panel.setVisible(not self.settings_panel.isVisible())

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        entry = item.data(_ENTRY_ROLE)
        if isinstance(entry, Entry):
            self.session.select_entry(entry)

    def _on_text_changed(self) -> None:
        text = self.editor.toPlainText()
        self.session.edit(text)
        if self.preview.isVisible():
            self.preview_timer.setInterval(compute_preview_debounce_ms(len(text)))
            self.preview_timer.start()

    # ───────────────────────── rendering ─────────────────────────

    def _on_state_changed(self, state: EditorState) -> None:
        prev = self._rendered
        self._rendered = state

        if state.buffer != self.editor.toPlainText():
            with blocked_signals(self.editor):
                self.editor.setPlainText(state.buffer)
            self._render_preview()

        if prev is None or prev.entry != state.entry:
            self.heading.setText(entry_heading(state.entry) if state.entry else "")
            deletable = state.entry is not None and state.entry.deletable
            self.delete_button.setEnabled(deletable)
            self._act_delete.setEnabled(deletable)
            self.editor.setEnabled(state.entry is not None)

        if prev is None or prev.entries != state.entries:
            self._fill_lists(state.entries)
        if prev is None or prev.entries != state.entries or prev.entry != state.entry:
            self._highlight_current(state.entry)

        if prev is None or prev.status != state.status:
            self._show_status(state.status)

    def _show_status(self, status: SaveStatus) -> None:
        self.status_label.setText(STATUS_TEXT[status])
        self.status_label.setProperty("status", status.value)
        self.status_label.style().unpolish(self.status_label)
        self.status_label.style().polish(self.status_label)
        if status is SaveStatus.SAVING:
            # the write runs on this thread; paint before it blocks
            self.status_label.repaint()

    def _fill_lists(self, entries) -> None:
        daily, titled = partition_entries(entries)
        for lw, group in ((self.daily_list, daily), (self.titled_list, titled)):
            with blocked_signals(lw):
                lw.clear()
                for entry in group:
                    item = QListWidgetItem(entry.title)
                    item.setData(_ENTRY_ROLE, entry)
                    lw.addItem(item)

    def _highlight_current(self, entry: Entry | None) -> None:
        for lw in (self.daily_list, self.titled_list):
            with blocked_signals(lw):
                lw.clearSelection()
                for i in range(lw.count()):
                    item = lw.item(i)
                    if entry is not None and item.data(_ENTRY_ROLE) == entry:
                        lw.setCurrentRow(i)
                        break

    def _apply_theme(self) -> None:
        theme = theme_name(self._dark_mode)
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(stylesheet_for(theme))
        self.theme_button.setText("☀️" if self._dark_mode else "🌙")
        self.theme_button.setToolTip("Light mode" if self._dark_mode else "Dark mode")
        with blocked_signals(self._act_dark):
            self._act_dark.setChecked(self._dark_mode)
        self._renderer.theme = theme
        self._render_preview()
        log.info("Theme applied: %s", theme)

    def _set_preview_visible(self, visible: bool, *, save: bool = True) -> None:
        self.preview.setVisible(bool(visible))
        with blocked_signals(self._act_preview):
            self._act_preview.setChecked(bool(visible))
        if visible:
            self._render_preview()
        if save:
            self._prefs.set_show_preview(bool(visible))

    def _render_preview(self) -> None:
        if not self.preview.isVisibleTo(self):
            return
        try:
            self.preview.setHtml(self._renderer.render_page(self.editor.toPlainText()))
        except Exception:
            log.exception("Failed to render preview")

    # ───────────────────────── window events ─────────────────────────

    def closeEvent(self, event):  # type: ignore[override]
        """Persist the pending edit instead of dropping it with the window."""
        try:
            self.session.close()
        except Exception:
            log.exception("Failed to flush on close")
        self._ui_state.save()
        self._prefs.sync()
        log.info("%s closing", APP_NAME)
        super().closeEvent(event)

    def resizeEvent(self, event):  # type: ignore[override]
        self._ui_state.schedule_save()
        super().resizeEvent(event)

    def moveEvent(self, event):  # type: ignore[override]
        self._ui_state.schedule_save()
        super().moveEvent(event)
