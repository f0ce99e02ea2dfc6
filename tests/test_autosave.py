import sys
import os
from dataclasses import replace

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from illien.core import autosave as sm
from illien.core.autosave import EditorState, SaveStatus, transition
from illien.core.entries import entry_from_filename

DAILY = entry_from_filename("2026-01-20.md")
TRIP = entry_from_filename("Trip.md")


def opened(entry=DAILY, **kw) -> EditorState:
    return EditorState(directory="/j", entry=entry, **kw)


def run(state, *events):
    effects = []
    for ev in events:
        state, eff = transition(state, ev)
        effects.extend(eff)
    return state, effects


def test_edit_without_entry_is_ignored():
    state = EditorState(directory="/j")
    new_state, effects = transition(state, sm.Edit("x"))
    assert new_state == state
    assert effects == ()


def test_edit_marks_unsaved_and_restarts_timer():
    state, effects = transition(opened(), sm.Edit("Hello"))
    assert state.status is SaveStatus.UNSAVED
    assert state.buffer == "Hello"
    assert state.pending == sm.PendingSave(1, "/j", "2026-01-20.md", "Hello")
    assert effects == (sm.CancelTimer(), sm.StartTimer(token=1, delay_ms=1000))


def test_rapid_edits_only_latest_timer_saves():
    state, _ = run(opened(), sm.Edit("H"), sm.Edit("He"), sm.Edit("Hel"))
    assert state.pending.token == 3

    for stale in (1, 2):
        same, effects = transition(state, sm.TimerFired(stale))
        assert same == state
        assert effects == ()

    state, effects = transition(state, sm.TimerFired(3))
    assert state.status is SaveStatus.SAVING
    assert effects == (sm.CallSave(3, "/j", "2026-01-20.md", "Hel"),)


def test_save_success_refreshes_list_for_non_empty_text():
    state, _ = run(opened(), sm.Edit("Hi"), sm.TimerFired(1))
    state, effects = transition(state, sm.SaveSucceeded(token=1, text="Hi"))
    assert state.status is SaveStatus.SAVED
    assert state.in_flight is None
    assert effects == (sm.CallList("/j"),)


def test_save_success_of_empty_text_does_not_refresh_list():
    state, _ = run(opened(), sm.Edit(""), sm.TimerFired(1))
    state, effects = transition(state, sm.SaveSucceeded(token=1, text=""))
    assert state.status is SaveStatus.SAVED
    assert effects == ()


def test_edit_during_save_keeps_unsaved():
    state, _ = run(opened(), sm.Edit("a"), sm.TimerFired(1), sm.Edit("ab"))
    state, _ = transition(state, sm.SaveSucceeded(token=1, text="a"))
    assert state.status is SaveStatus.UNSAVED
    assert state.pending.text == "ab"


def test_save_failure_returns_to_unsaved_without_retry():
    state, _ = run(opened(), sm.Edit("a"), sm.TimerFired(1))
    state, effects = transition(state, sm.SaveFailed(token=1))
    assert state.status is SaveStatus.UNSAVED
    assert effects == ()


def test_switch_cancels_timer_and_loads_target():
    state, _ = run(opened(), sm.Edit("draft"))
    state, effects = transition(state, sm.SwitchEntry(TRIP))
    assert state.entry == TRIP
    assert state.status is SaveStatus.SAVED
    assert state.pending is None
    assert effects == (sm.CancelTimer(), sm.CallLoad("/j", "Trip.md"))

    # the abandoned timer can no longer save anything
    same, effects = transition(state, sm.TimerFired(1))
    assert effects == ()


def test_switch_with_flush_saves_pending_first():
    state, _ = run(opened(), sm.Edit("draft"))
    _, effects = transition(state, sm.SwitchEntry(TRIP, flush=True))
    assert effects == (
        sm.CancelTimer(),
        sm.CallSave(1, "/j", "2026-01-20.md", "draft"),
        sm.CallLoad("/j", "Trip.md"),
    )


def test_result_of_abandoned_save_does_not_touch_new_entry():
    state, _ = run(opened(), sm.Edit("old"), sm.TimerFired(1), sm.SwitchEntry(TRIP), sm.Edit("new"))
    state, effects = transition(state, sm.SaveFailed(token=1))
    assert state.status is SaveStatus.UNSAVED  # from the "new" edit, untouched
    assert state.pending.filename == "Trip.md"

    state, effects = transition(state, sm.SaveSucceeded(token=1, text="old"))
    assert state.status is SaveStatus.UNSAVED
    assert effects == (sm.CallList("/j"),)


def test_loaded_absent_is_empty_and_saved():
    state, _ = transition(opened(), sm.SwitchEntry(TRIP))
    state, _ = transition(state, sm.Loaded("Trip.md", None))
    assert state.buffer == ""
    assert state.status is SaveStatus.SAVED


def test_loaded_for_other_entry_ignored():
    state = opened(entry=TRIP)
    same, _ = transition(state, sm.Loaded("2026-01-20.md", "stale"))
    assert same == state


def test_delete_daily_is_noop():
    state = opened()
    same, effects = transition(state, sm.DeleteRequested())
    assert same == state
    assert effects == ()


def test_delete_titled_then_fallback_to_today():
    state = opened(entry=TRIP, entries=(DAILY, TRIP))
    _, effects = transition(state, sm.DeleteRequested())
    assert effects == (sm.CallDelete("/j", "Trip.md"),)

    state, effects = transition(state, sm.DeleteSucceeded("Trip.md", fallback=DAILY))
    assert state.entry == DAILY
    assert state.entries == (DAILY,)
    assert effects == (sm.CallList("/j"), sm.CancelTimer(), sm.CallLoad("/j", "2026-01-20.md"))


def test_delete_failure_keeps_entry():
    state = opened(entry=TRIP)
    same, effects = transition(state, sm.DeleteFailed("Trip.md"))
    assert same == state
    assert effects == ()


def test_change_directory_opens_entry_and_lists():
    state, effects = transition(EditorState(), sm.ChangeDirectory("/j", DAILY))
    assert state.directory == "/j"
    assert state.entry == DAILY
    assert effects == (sm.CancelTimer(), sm.CallLoad("/j", "2026-01-20.md"), sm.CallList("/j"))


def test_clearing_directory_closes_entry():
    state, effects = transition(opened(), sm.ChangeDirectory(None, None))
    assert state.entry is None
    assert effects == (sm.CancelTimer(),)


def test_delay_comes_from_state():
    state, effects = transition(replace(opened(), delay_ms=50), sm.Edit("x"))
    assert effects[-1] == sm.StartTimer(token=1, delay_ms=50)


def test_unknown_event():
    with pytest.raises(TypeError):
        transition(opened(), object())
