from .entries import (
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
from .autosave import EditorState, SaveStatus, transition

__all__ = ["Entry",
           "EntryType",
           "daily_entry",
           "daily_filename",
           "entry_from_filename",
           "entry_heading",
           "is_blank_title",
           "is_daily_filename",
           "partition_entries",
           "sanitize_title",
           "sort_entries",
           "titled_entry",
           "titled_filename",
           "EditorState",
           "SaveStatus",
           "transition",
           ]
