from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from illien.core.entries import Entry, entry_from_filename, sort_entries
from illien.storage.filesystem import atomic_write_text


log = logging.getLogger(__name__)


class StorageError(Exception):
    """Any failure of the journal directory (missing, denied, I/O)."""


@dataclass(frozen=True)
class JournalRepository:
    """
    File-system storage for journal entries: one markdown file per entry,
    flat inside journal_dir, keyed by filename.
    """
    journal_dir: Path

    def path_for(self, filename: str) -> Path:
        name = Path(filename).name
        if name != filename or not name:
            raise StorageError(f"Invalid entry filename: {filename!r}")
        return Path(self.journal_dir) / name

    def load(self, filename: str) -> str | None:
        """Entry text, or None if it was never saved."""
        path = self.path_for(filename)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to load journal entry {path}: {e}") from e

    def save(self, filename: str, text: str) -> None:
        path = self.path_for(filename)
        try:
            atomic_write_text(path, text)
        except (OSError, ValueError) as e:
            # ValueError: unencodable text (lone surrogates) or a NUL in the name
            raise StorageError(f"Failed to save journal entry {path}: {e}") from e
        log.debug("Saved entry: %s chars=%d", path, len(text))

    def delete(self, filename: str) -> None:
        path = self.path_for(filename)
        if not path.exists():
            raise StorageError(f"File does not exist: {path}")
        try:
            path.unlink()
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to delete journal entry {path}: {e}") from e
        log.info("Deleted entry: %s", path)

    def list_entries(self) -> list[Entry]:
        try:
            names = [p.name for p in Path(self.journal_dir).iterdir() if p.is_file()]
        except OSError as e:
            raise StorageError(f"Failed to read directory {self.journal_dir}: {e}") from e

        entries = []
        for name in names:
            entry = entry_from_filename(name)
            if entry is not None:
                entries.append(entry)
        return sort_entries(entries)
