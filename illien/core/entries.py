from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable


ENTRY_SUFFIX = ".md"

INVALID_CHARS_RE = re.compile(r'[<>:"/\\|?*]')
WHITESPACE_RE = re.compile(r"\s+")


class EntryType(str, Enum):
    DAILY = "daily"
    TITLED = "titled"


@dataclass(frozen=True)
class Entry:
    """
    A journal document. The filename is the identity:
      - daily:  YYYY-MM-DD.md, title == date
      - titled: <sanitized title>.md, date is None
    """
    filename: str
    entry_type: EntryType
    title: str
    date: str | None = None

    @property
    def is_daily(self) -> bool:
        return self.entry_type is EntryType.DAILY

    @property
    def deletable(self) -> bool:
        return self.entry_type is EntryType.TITLED


def sanitize_title(title: str) -> str:
    """
    Turn a user-supplied title into the on-disk stem.

    Each of < > : " / \\ | ? * becomes "-", runs of whitespace collapse to a
    single space. Nothing else changes, leading and trailing spaces included.
    The mapping is part of the file format: existing journal directories
    depend on it, so it must stay stable.
    """
    name = INVALID_CHARS_RE.sub("-", title or "")
    return WHITESPACE_RE.sub(" ", name)


def is_blank_title(title: str) -> bool:
    return not sanitize_title(title).strip()


def daily_filename(day: date) -> str:
    return f"{day.isoformat()}{ENTRY_SUFFIX}"


def titled_filename(title: str) -> str:
    if is_blank_title(title):
        raise ValueError("titled_filename(): title is blank")
    return f"{sanitize_title(title)}{ENTRY_SUFFIX}"


def is_daily_filename(filename: str) -> bool:
    """YYYY-MM-DD.md by shape only; the date itself is not validated."""
    if len(filename) != 13 or not filename.endswith(ENTRY_SUFFIX):
        return False
    if filename[4] != "-" or filename[7] != "-":
        return False
    digits = filename[0:4] + filename[5:7] + filename[8:10]
    return all(ch in "0123456789" for ch in digits)


def entry_from_filename(filename: str) -> Entry | None:
    """Classify a directory listing name; non-markdown files are not entries."""
    if not filename.endswith(ENTRY_SUFFIX):
        return None
    if is_daily_filename(filename):
        day = filename[:10]
        return Entry(filename=filename, entry_type=EntryType.DAILY, title=day, date=day)
    return Entry(
        filename=filename,
        entry_type=EntryType.TITLED,
        title=filename[: -len(ENTRY_SUFFIX)],
    )


def daily_entry(day: date) -> Entry:
    entry = entry_from_filename(daily_filename(day))
    assert entry is not None
    return entry


def titled_entry(title: str) -> Entry:
    filename = titled_filename(title)
    entry = entry_from_filename(filename)
    assert entry is not None
    return entry


def sort_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Daily entries first (newest date first), then titled entries A..Z ignoring case."""
    daily, titled = partition_entries(entries)
    daily.sort(key=lambda e: e.date or "", reverse=True)
    titled.sort(key=lambda e: e.title.lower())
    return daily + titled


def partition_entries(entries: Iterable[Entry]) -> tuple[list[Entry], list[Entry]]:
    daily: list[Entry] = []
    titled: list[Entry] = []
    for e in entries:
        (daily if e.is_daily else titled).append(e)
    return daily, titled


_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def entry_heading(entry: Entry) -> str:
    """Header text: "Tuesday, January 20, 2026" for daily entries, the title otherwise."""
    if not entry.is_daily or not entry.date:
        return entry.title
    try:
        day = date.fromisoformat(entry.date)
    except ValueError:
        # shaped like a date but not a real one (e.g. 2026-13-40.md)
        return entry.title
    return f"{_WEEKDAYS[day.weekday()]}, {_MONTHS[day.month - 1]} {day.day}, {day.year}"
