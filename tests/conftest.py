import os
import sys
from datetime import date

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from illien.session import JournalSession
from illien.storage.journal_repo import JournalRepository, StorageError


TODAY = date(2026, 1, 20)


class ManualTimer:
    def __init__(self, due: int, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Fake clock: timers fire only when the test advances time."""

    def __init__(self):
        self.now = 0
        self.timers: list[ManualTimer] = []

    def schedule(self, delay_ms, callback):
        t = ManualTimer(self.now + delay_ms, callback)
        self.timers.append(t)
        return t

    @property
    def live(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, ms: int) -> None:
        self.now += ms
        for t in sorted(self.timers, key=lambda t: t.due):
            if not t.cancelled and not t.fired and t.due <= self.now:
                t.fired = True
                t.callback()


class RecordingRepo:
    """Wraps a real repository, records calls, can be told to fail."""

    def __init__(self, inner: JournalRepository, calls: list, failures: set):
        self.inner = inner
        self.calls = calls
        self.failures = failures

    def _call(self, op, *args):
        self.calls.append((op,) + args)
        if op in self.failures:
            raise StorageError(f"{op} failed (test)")

    def load(self, filename):
        self._call("load", filename)
        return self.inner.load(filename)

    def save(self, filename, text):
        self._call("save", filename, text)
        self.inner.save(filename, text)

    def delete(self, filename):
        self._call("delete", filename)
        self.inner.delete(filename)

    def list_entries(self):
        self._call("list")
        return self.inner.list_entries()


@pytest.fixture
def journal_dir(tmp_path):
    d = tmp_path / "journal"
    d.mkdir()
    return d


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def calls():
    return []


@pytest.fixture
def failures():
    return set()


@pytest.fixture
def make_session(tmp_path, scheduler, calls, failures):
    def _make(**kwargs) -> JournalSession:
        kwargs.setdefault("today", lambda: TODAY)
        kwargs.setdefault("recovery_dir", tmp_path / "recovery")
        return JournalSession(
            scheduler=scheduler,
            repo_factory=lambda path: RecordingRepo(JournalRepository(path), calls, failures),
            **kwargs,
        )
    return _make