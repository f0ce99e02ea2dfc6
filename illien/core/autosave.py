"""
Autosave / entry-switch state machine.

Everything here is pure: ``transition(state, event)`` returns the next state
and a tuple of effects for the caller to perform, in order (start/cancel the
debounce timer, call the storage backend). No timers, files or Qt objects are
touched, so the debounce/cancel discipline can be tested without an event loop.

Timer tokens: every edit schedules a fresh ``PendingSave`` with a new token.
A ``TimerFired`` whose token does not match the live pending save is stale and
is dropped, so a cancelled timer can never cause a write. The pending save
captures (directory, filename, text) at scheduling time; a save that has been
issued always lands on that file, even if the user has moved on since.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from illien.core.entries import Entry
from illien.settings import AUTOSAVE_DEBOUNCE_MS


class SaveStatus(str, Enum):
    SAVED = "saved"
    SAVING = "saving"
    UNSAVED = "unsaved"


@dataclass(frozen=True)
class PendingSave:
    token: int
    directory: str
    filename: str
    text: str


@dataclass(frozen=True)
class EditorState:
    directory: str | None = None
    entry: Entry | None = None
    buffer: str = ""
    status: SaveStatus = SaveStatus.SAVED
    pending: PendingSave | None = None
    in_flight: PendingSave | None = None
    entries: tuple[Entry, ...] = ()
    last_token: int = 0
    delay_ms: int = AUTOSAVE_DEBOUNCE_MS


# ───────────────────────── events ─────────────────────────

@dataclass(frozen=True)
class Edit:
    text: str


@dataclass(frozen=True)
class TimerFired:
    token: int


@dataclass(frozen=True)
class SaveSucceeded:
    token: int
    text: str


@dataclass(frozen=True)
class SaveFailed:
    token: int


@dataclass(frozen=True)
class SwitchEntry:
    entry: Entry | None
    flush: bool = False


@dataclass(frozen=True)
class ChangeDirectory:
    directory: str | None
    entry: Entry | None
    flush: bool = False


@dataclass(frozen=True)
class Loaded:
    filename: str
    text: str | None


@dataclass(frozen=True)
class EntriesListed:
    entries: tuple[Entry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DeleteRequested:
    pass


@dataclass(frozen=True)
class DeleteSucceeded:
    filename: str
    fallback: Entry


@dataclass(frozen=True)
class DeleteFailed:
    filename: str


Event = Union[
    Edit, TimerFired, SaveSucceeded, SaveFailed, SwitchEntry, ChangeDirectory,
    Loaded, EntriesListed, DeleteRequested, DeleteSucceeded, DeleteFailed,
]


# ───────────────────────── effects ─────────────────────────

@dataclass(frozen=True)
class StartTimer:
    token: int
    delay_ms: int


@dataclass(frozen=True)
class CancelTimer:
    pass


@dataclass(frozen=True)
class CallSave:
    token: int
    directory: str
    filename: str
    text: str


@dataclass(frozen=True)
class CallLoad:
    directory: str
    filename: str


@dataclass(frozen=True)
class CallList:
    directory: str


@dataclass(frozen=True)
class CallDelete:
    directory: str
    filename: str


Effect = Union[StartTimer, CancelTimer, CallSave, CallLoad, CallList, CallDelete]
Transition = tuple[EditorState, tuple[Effect, ...]]


# ───────────────────────── transitions ─────────────────────────

def _on_edit(state: EditorState, ev: Edit) -> Transition:
    if state.entry is None or state.directory is None:
        return state, ()
    token = state.last_token + 1
    pending = PendingSave(
        token=token,
        directory=state.directory,
        filename=state.entry.filename,
        text=ev.text,
    )
    new_state = replace(
        state,
        buffer=ev.text,
        status=SaveStatus.UNSAVED,
        pending=pending,
        last_token=token,
    )
    return new_state, (CancelTimer(), StartTimer(token=token, delay_ms=state.delay_ms))


def _on_timer_fired(state: EditorState, ev: TimerFired) -> Transition:
    pending = state.pending
    if pending is None or pending.token != ev.token or state.status is not SaveStatus.UNSAVED:
        return state, ()
    new_state = replace(state, status=SaveStatus.SAVING, pending=None, in_flight=pending)
    return new_state, (_save_effect(pending),)


def _save_effect(p: PendingSave) -> CallSave:
    return CallSave(token=p.token, directory=p.directory, filename=p.filename, text=p.text)


def _is_current_save(state: EditorState, token: int) -> bool:
    return state.in_flight is not None and state.in_flight.token == token


def _on_save_succeeded(state: EditorState, ev: SaveSucceeded) -> Transition:
    effects: tuple[Effect, ...] = ()
    if ev.text and state.directory is not None:
        # a non-empty save may have created the file: refresh the sidebar
        effects = (CallList(directory=state.directory),)
    if not _is_current_save(state, ev.token):
        # the entry was switched away while this save ran
        return state, effects
    status = SaveStatus.UNSAVED if state.pending is not None else SaveStatus.SAVED
    return replace(state, status=status, in_flight=None), effects


def _on_save_failed(state: EditorState, ev: SaveFailed) -> Transition:
    if not _is_current_save(state, ev.token):
        return state, ()
    return replace(state, status=SaveStatus.UNSAVED, in_flight=None), ()


def _leave_current(state: EditorState, flush: bool) -> list[Effect]:
    effects: list[Effect] = [CancelTimer()]
    if flush and state.pending is not None:
        effects.append(_save_effect(state.pending))
    return effects


def _enter(state: EditorState, entry: Entry | None) -> tuple[EditorState, list[Effect]]:
    effects: list[Effect] = []
    if entry is not None and state.directory is not None:
        effects.append(CallLoad(directory=state.directory, filename=entry.filename))
    else:
        entry = None
    new_state = replace(
        state,
        entry=entry,
        buffer="",
        status=SaveStatus.SAVED,
        pending=None,
        in_flight=None,
    )
    return new_state, effects


def _on_switch(state: EditorState, ev: SwitchEntry) -> Transition:
    effects = _leave_current(state, ev.flush)
    new_state, enter_effects = _enter(state, ev.entry)
    return new_state, tuple(effects + enter_effects)


def _on_change_directory(state: EditorState, ev: ChangeDirectory) -> Transition:
    effects = _leave_current(state, ev.flush)
    state = replace(state, directory=ev.directory, entries=())
    new_state, enter_effects = _enter(state, ev.entry)
    if ev.directory is not None:
        enter_effects.append(CallList(directory=ev.directory))
    return new_state, tuple(effects + enter_effects)


def _on_loaded(state: EditorState, ev: Loaded) -> Transition:
    if state.entry is None or state.entry.filename != ev.filename:
        return state, ()
    return replace(state, buffer=ev.text or "", status=SaveStatus.SAVED), ()


def _on_delete_requested(state: EditorState, ev: DeleteRequested) -> Transition:
    # daily entries are never deleted: silently a no-op
    if state.entry is None or state.directory is None or not state.entry.deletable:
        return state, ()
    return state, (CallDelete(directory=state.directory, filename=state.entry.filename),)


def _on_delete_succeeded(state: EditorState, ev: DeleteSucceeded) -> Transition:
    state = replace(state, entries=tuple(e for e in state.entries if e.filename != ev.filename))
    new_state, effects = _on_switch(state, SwitchEntry(entry=ev.fallback))
    if state.directory is None:
        return new_state, effects
    return new_state, (CallList(directory=state.directory),) + effects


_HANDLERS = {
    Edit: _on_edit,
    TimerFired: _on_timer_fired,
    SaveSucceeded: _on_save_succeeded,
    SaveFailed: _on_save_failed,
    SwitchEntry: _on_switch,
    ChangeDirectory: _on_change_directory,
    Loaded: _on_loaded,
    EntriesListed: lambda state, ev: (replace(state, entries=tuple(ev.entries)), ()),
    DeleteRequested: _on_delete_requested,
    DeleteSucceeded: _on_delete_succeeded,
    DeleteFailed: lambda state, ev: (state, ()),
}


def transition(state: EditorState, event: Event) -> Transition:
    """Apply one event; returns (next_state, effects_to_perform_in_order)."""
    try:
        handler = _HANDLERS[type(event)]
    except KeyError:
        raise TypeError(f"transition(): unknown event {type(event).__name__}") from None
    return handler(state, event)
