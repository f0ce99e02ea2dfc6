import sys
import os
from datetime import date

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from illien.core.entries import (
    Entry,
    EntryType,
    daily_entry,
    daily_filename,
    entry_from_filename,
    entry_heading,
    is_blank_title,
    is_daily_filename,
    partition_entries,
    sanitize_title,
    sort_entries,
    titled_entry,
    titled_filename,
)


def test_titled_filename_golden():
    assert titled_filename("My: Trip/Notes?") == "My- Trip-Notes-.md"


def test_every_forbidden_char_replaced_individually():
    assert sanitize_title('a<b>c:d"e/f\\g|h?i*j') == "a-b-c-d-e-f-g-h-i-j"
    assert sanitize_title("??") == "--"


def test_whitespace_runs_collapse():
    assert sanitize_title("Road   trip\t\tday\n2") == "Road trip day 2"
    assert sanitize_title("  padded  ") == " padded "


def test_edge_spaces_stay_in_filename():
    assert titled_filename("Trip ") == "Trip .md"
    assert titled_filename(" Trip") == " Trip.md"


def test_blank_title_rejected():
    with pytest.raises(ValueError):
        titled_filename("   ")
    assert is_blank_title(" \t ")
    assert not is_blank_title(" ? ")


def test_unicode_title_kept():
    assert titled_filename("Café – été") == "Café – été.md"


def test_daily_filename():
    assert daily_filename(date(2026, 1, 20)) == "2026-01-20.md"


@pytest.mark.parametrize("name, expected", [
    ("2026-01-20.md", True),
    ("1999-12-31.md", True),
    ("2026-13-40.md", True),   # shape only
    ("2026-1-20.md", False),
    ("2026_01_20.md", False),
    ("2026-01-20.txt", False),
    ("2026-01-20 notes.md", False),
    ("abcd-ef-gh.md", False),
])
def test_is_daily_filename(name, expected):
    assert is_daily_filename(name) is expected


def test_entry_from_filename():
    daily = entry_from_filename("2026-01-20.md")
    assert daily == Entry("2026-01-20.md", EntryType.DAILY, "2026-01-20", "2026-01-20")
    assert not daily.deletable

    titled = entry_from_filename("Trip notes.md")
    assert titled == Entry("Trip notes.md", EntryType.TITLED, "Trip notes", None)
    assert titled.deletable

    assert entry_from_filename("photo.png") is None


def test_sort_daily_desc_then_titled_alpha():
    names = ["b idea.md", "2026-01-19.md", "Apple.md", "2026-01-20.md", "2025-12-31.md", "c.md"]
    ordered = sort_entries(entry_from_filename(n) for n in names)
    assert [e.filename for e in ordered] == [
        "2026-01-20.md", "2026-01-19.md", "2025-12-31.md",
        "Apple.md", "b idea.md", "c.md",
    ]


def test_partition():
    entries = [entry_from_filename(n) for n in ("x.md", "2026-01-20.md")]
    daily, titled = partition_entries(entries)
    assert [e.filename for e in daily] == ["2026-01-20.md"]
    assert [e.filename for e in titled] == ["x.md"]


def test_heading():
    assert entry_heading(daily_entry(date(2026, 1, 20))) == "Tuesday, January 20, 2026"
    assert entry_heading(titled_entry("Trip")) == "Trip"
    assert entry_heading(entry_from_filename("2026-13-40.md")) == "2026-13-40"
