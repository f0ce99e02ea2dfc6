from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Callable, Protocol

from illien.core import autosave as sm
from illien.core.autosave import EditorState, SaveStatus, transition
from illien.core.entries import Entry, daily_entry, is_blank_title, titled_entry
from illien.settings import AUTOSAVE_DEBOUNCE_MS, RECOVERY_DIR
from illien.storage.filesystem import write_recovery_copy
from illien.storage.journal_repo import JournalRepository, StorageError


log = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Creates one-shot cancellable timers on the UI event loop."""
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


StateListener = Callable[[EditorState], None]


class JournalSession:
    """
    Runs the autosave state machine against real collaborators:
      - storage calls go to a JournalRepository for the captured directory
      - timers come from the injected Scheduler (QTimer in the app, manual in tests)
      - listeners are notified after every state change, before effects run,
        so "saving" is visible while the write is in progress.

    All intents are UI-facing and never raise on storage failures.
    """

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        today: Callable[[], date] = date.today,
        flush_before_switch: bool = False,
        delay_ms: int = AUTOSAVE_DEBOUNCE_MS,
        recovery_dir: Path | None = RECOVERY_DIR,
        repo_factory: Callable[[Path], JournalRepository] = JournalRepository,
    ) -> None:
        self._scheduler = scheduler
        self._today = today
        self.flush_before_switch = flush_before_switch
        self._recovery_dir = recovery_dir
        self._repo_factory = repo_factory
        self._timer: TimerHandle | None = None
        self._listeners: list[StateListener] = []
        self._state = EditorState(delay_ms=int(delay_ms))

    # ───────────────────────── observation ─────────────────────────

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def status(self) -> SaveStatus:
        return self._state.status

    @property
    def current_entry(self) -> Entry | None:
        return self._state.entry

    @property
    def buffer(self) -> str:
        return self._state.buffer

    @property
    def directory(self) -> str | None:
        return self._state.directory

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._state.entries

    @property
    def timer_active(self) -> bool:
        return self._timer is not None

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def today_entry(self) -> Entry:
        return daily_entry(self._today())

    # ───────────────────────── intents ─────────────────────────

    def set_directory(self, directory: str | Path | None) -> None:
        """Point the journal at a directory and open today's entry there."""
        path = str(directory) if directory else None
        if path is not None and path == self._state.directory:
            # same directory: keep the open entry and its pending edit
            return
        log.info("Journal directory: %s", path)
        entry = self.today_entry() if path else None
        self.dispatch(sm.ChangeDirectory(directory=path, entry=entry, flush=self.flush_before_switch))

    def edit(self, text: str) -> None:
        self.dispatch(sm.Edit(text=text))

    def select_entry(self, entry: Entry) -> None:
        current = self._state.entry
        if current is not None and current.filename == entry.filename:
            return
        log.info("Open entry: %s", entry.filename)
        self.dispatch(sm.SwitchEntry(entry=entry, flush=self.flush_before_switch))

    def go_to_today(self) -> None:
        self.select_entry(self.today_entry())

    def create_titled_entry(self, title: str) -> bool:
        """
        Open (or create) a titled entry. Nothing is written until the first edit.
        Blank titles are rejected with False.
        """
        if is_blank_title(title):
            return False
        if self._state.directory is None:
            return False
        self.select_entry(titled_entry(title))
        return True

    def delete_current_entry(self, confirm: Callable[[Entry], bool] | None = None) -> bool:
        """
        Delete the current titled entry and fall back to today's entry.
        Daily entries (and a declined confirmation) are a no-op.
        """
        entry = self._state.entry
        if entry is None or not entry.deletable:
            return False
        if confirm is not None and not confirm(entry):
            return False
        self.dispatch(sm.DeleteRequested())
        return self._state.entry is None or self._state.entry.filename != entry.filename

    def refresh_entries(self) -> None:
        if self._state.directory is not None:
            self._perform(sm.CallList(directory=self._state.directory))

    def flush_pending(self) -> bool:
        """Write the pending edit now (window close). Returns True if something was written."""
        pending = self._state.pending
        if pending is None:
            return False
        self._cancel_timer()
        self.dispatch(sm.TimerFired(token=pending.token))
        return True

    def close(self) -> None:
        """Window is going away: persist the last edit rather than drop it."""
        self.flush_pending()
        self._cancel_timer()

    # ───────────────────────── machinery ─────────────────────────

    def dispatch(self, event: sm.Event) -> None:
        old = self._state
        self._state, effects = transition(old, event)
        if self._state != old:
            self._notify()
        for effect in effects:
            self._perform(effect)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                log.exception("State listener failed: %r", listener)

    def _repo(self, directory: str) -> JournalRepository:
        return self._repo_factory(Path(directory))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _perform(self, effect: sm.Effect) -> None:
        if isinstance(effect, sm.CancelTimer):
            self._cancel_timer()
        elif isinstance(effect, sm.StartTimer):
            self._cancel_timer()
            token = effect.token
            self._timer = self._scheduler.schedule(effect.delay_ms, lambda: self._on_timer(token))
        elif isinstance(effect, sm.CallSave):
            self._save(effect)
        elif isinstance(effect, sm.CallLoad):
            self._load(effect)
        elif isinstance(effect, sm.CallList):
            self._list(effect)
        elif isinstance(effect, sm.CallDelete):
            self._delete(effect)
        else:
            raise TypeError(f"Unknown effect: {effect!r}")

    def _on_timer(self, token: int) -> None:
        self._timer = None
        self.dispatch(sm.TimerFired(token=token))

    def _save(self, eff: sm.CallSave) -> None:
        log.info("Saving entry: %s (dir=%s)", eff.filename, eff.directory)
        try:
            self._repo(eff.directory).save(eff.filename, eff.text)
        except StorageError:
            log.exception("Save failed: %s", eff.filename)
            self._write_recovery(eff)
            self.dispatch(sm.SaveFailed(token=eff.token))
            return
        self.dispatch(sm.SaveSucceeded(token=eff.token, text=eff.text))

    def _write_recovery(self, eff: sm.CallSave) -> None:
        if self._recovery_dir is None or not eff.text:
            return
        try:
            rec_path = write_recovery_copy(eff.filename, eff.text, recovery_dir=self._recovery_dir)
            log.critical("Recovery copy written: %s", rec_path)
        except (OSError, ValueError):
            log.exception("Failed to write recovery copy")

    def _load(self, eff: sm.CallLoad) -> None:
        try:
            text = self._repo(eff.directory).load(eff.filename)
        except StorageError:
            # an unreadable entry is treated like one never written
            log.exception("Load failed: %s", eff.filename)
            text = None
        self.dispatch(sm.Loaded(filename=eff.filename, text=text))

    def _list(self, eff: sm.CallList) -> None:
        try:
            entries = self._repo(eff.directory).list_entries()
        except StorageError:
            log.exception("Listing failed: %s", eff.directory)
            return
        if eff.directory != self._state.directory:
            return
        self.dispatch(sm.EntriesListed(entries=tuple(entries)))

    def _delete(self, eff: sm.CallDelete) -> None:
        try:
            self._repo(eff.directory).delete(eff.filename)
        except StorageError:
            log.exception("Delete failed: %s", eff.filename)
            self.dispatch(sm.DeleteFailed(filename=eff.filename))
            return
        self.dispatch(sm.DeleteSucceeded(filename=eff.filename, fallback=self.today_entry()))
